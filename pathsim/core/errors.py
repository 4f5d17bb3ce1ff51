"""Exceptions raised by the search core and its callers."""
from typing import Optional


class PathSimError(Exception):
    """Base exception class for pathsim."""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[dict] = None):
        """Initialize exception.

        Args:
            message: Human-readable error message
            error_code: Optional error code for programmatic handling
            details: Optional additional error details
        """
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        base_msg = super().__str__()
        if self.error_code:
            return f"[{self.error_code}] {base_msg}"
        return base_msg


class InvalidDimension(PathSimError, ValueError):
    """Grid width or height is not positive."""

    def __init__(self, width: int, height: int):
        super().__init__(f"grid dimensions must be positive, got {width}x{height}",
                         error_code="INVALID_DIMENSION",
                         details={"width": width, "height": height})


class OutOfBounds(PathSimError, IndexError):
    """A cell identity lies outside [0, W) x [0, H)."""

    def __init__(self, cell, width: int, height: int):
        super().__init__(f"cell {cell!r} outside {width}x{height} grid",
                         error_code="OUT_OF_BOUNDS",
                         details={"width": width, "height": height})
        self.cell = cell


class InternalInvariantViolation(PathSimError, RuntimeError):
    """The predecessor links do not form a tree rooted at the start cell."""

    def __init__(self, message: str, **details):
        super().__init__(message, error_code="INVARIANT", details=details)


class MapFormatError(PathSimError, ValueError):
    """A map file is missing fields or has inconsistent sizes."""

    def __init__(self, message: str, path=None):
        super().__init__(message, error_code="MAP_FORMAT",
                         details={"path": str(path)} if path is not None else None)
        self.path = path


class ConfigError(PathSimError, ValueError):
    """A viewer setting could not be parsed."""

    def __init__(self, message: str, key: Optional[str] = None, value=None):
        super().__init__(message, error_code="CONFIG", details={"key": key, "value": value})
        self.key = key
        self.value = value
