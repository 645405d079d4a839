class MazeError(Exception):
    pass


class InvalidArgument(MazeError, ValueError):
    pass


class EndpointUnresolved(MazeError):
    """No valid node lies within one sampling step of the requested pixel."""

    def __init__(self, point, which=None):
        self.point = tuple(point)
        self.which = which
        label = which or "endpoint"
        super().__init__(f"Could not resolve {label} {self.point} to an open node")


class PathNotFound(MazeError):
    def __init__(self, start, end):
        self.start = start
        self.end = end
        super().__init__(f"No path between {start} and {end}")
