"""
exceptions.py
-------------
Error taxonomy for grid conversions.

Every error derives from `GridConversionError` (itself a `ValueError`), so
callers can catch the whole family at once. I/O failures are not wrapped:
the built-in `OSError` family reaches the caller untouched.
"""

from pathlib import Path
from typing import Optional, Union


class GridConversionError(ValueError):
    """Base class for all input errors raised during a conversion."""


class InvalidDirection(GridConversionError):
    def __init__(self, direction) -> None:
        self.direction = direction
        super().__init__(f'The input direction can either be "x" or "y", got {direction!r}')


class InvalidStride(GridConversionError):
    def __init__(self, stride) -> None:
        self.stride = stride
        super().__init__(f"The stride (excerpt) must be a positive integer, got {stride!r}")


class SectionOutOfRange(GridConversionError):
    """
    Raised when a section index falls outside ``lower..upper``.

    ``upper`` is None when only the lower bound was violated.
    """

    def __init__(self, section, lower: int = 1, upper: Optional[int] = None, axis: str = "") -> None:
        self.section = section
        self.lower = lower
        self.upper = upper
        self.axis = axis
        if upper is None:
            message = f"The value for section must be at least {lower}, got {section!r}"
        elif axis:
            message = f"Section value ({section!r}) exceeds {axis}-dimension ({upper})"
        else:
            message = f"The value for section must be between {lower} and {upper}, got {section!r}"
        super().__init__(message)


class InvalidDimensions(GridConversionError):
    def __init__(self, nx, ny, reason: str = "Dimensions nx and ny must be positive integers") -> None:
        self.nx = nx
        self.ny = ny
        super().__init__(f"{reason} (nx={nx!r}, ny={ny!r})")


class DimensionMismatch(GridConversionError):
    def __init__(self, nx: int, ny: int, n_records: int) -> None:
        self.nx = nx
        self.ny = ny
        self.n_records = n_records
        super().__init__(
            f"Specified dimensions (nx={nx}, ny={ny}) don't match data length ({n_records}): "
            f"expected {nx * ny} records"
        )


class MalformedRecord(GridConversionError):
    """
    A source record could not be decoded into an (x, y, z) triple.

    Attributes:
        path: Source file.
        line_number: 1-based line number, or None for binary (LAS/LAZ) sources.
        line: The offending text, if any.
        reason: Short description of what was wrong.
    """

    def __init__(
        self,
        path: Union[str, Path],
        line_number: Optional[int],
        line: Optional[str],
        reason: str,
    ) -> None:
        self.path = Path(path)
        self.line_number = line_number
        self.line = line
        self.reason = reason
        where = f"{self.path}, line {line_number}" if line_number is not None else f"{self.path}"
        message = f"Malformed record in {where}: {reason}"
        if line is not None:
            message += f" ({line!r})"
        super().__init__(message)


class GridOrderError(GridConversionError):
    def __init__(self, record_index: int, reason: str) -> None:
        self.record_index = record_index
        super().__init__(f"Records are not ordered x fastest, then y (record {record_index}): {reason}")


class ShapeInferenceWarning(UserWarning):
    """Record count of a square tile is not a perfect square; trailing records are ignored."""
