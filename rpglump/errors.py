"""Exceptions raised while decoding RPG projects."""


class RpgLumpError(Exception):
    """Base class for all decoder errors."""
    pass


class LumpNotFoundError(RpgLumpError):
    """Raised when a project path or a lump does not exist."""
    pass


class MalformedContainerError(RpgLumpError):
    """Raised when a container header or directory is inconsistent."""
    pass


class MalformedRecordError(RpgLumpError):
    """Raised when a domain blob does not match any known layout."""
    pass


class CursorError(MalformedRecordError):
    """Raised on out-of-bounds reads from a ByteCursor."""
    pass


class DimensionOutOfRangeError(RpgLumpError):
    """Raised when a raster header carries impossible dimensions."""

    def __init__(self, width: int, height: int):
        super().__init__(f"Raster dimensions {width}x{height} out of range")
        self.width = width
        self.height = height
