"""
validators.py
-------------
Functions for validating conversion arguments (direction, stride, section,
grid dimensions) before any data is read.
"""

from numbers import Integral
from typing import Optional

from ..core.exceptions import (
    InvalidDimensions,
    InvalidDirection,
    InvalidStride,
    SectionOutOfRange,
)
from .constants import VALID_DIRECTIONS


def _is_int(value) -> bool:
    return isinstance(value, Integral) and not isinstance(value, bool)


def validate_direction(direction: str) -> str:
    """
    Check that `direction` is one of "x" or "y".

    Returns:
        The direction, unchanged.
    """
    if direction not in VALID_DIRECTIONS:
        raise InvalidDirection(direction)
    return direction


def validate_stride(stride: int) -> int:
    """
    Check that the stride (excerpt) is a positive integer.

    Returns:
        The stride as a plain int.
    """
    if not _is_int(stride) or stride < 1:
        raise InvalidStride(stride)
    return int(stride)


def validate_section(section: int, upper: Optional[int] = None, axis: str = "") -> int:
    """
    Check that `section` lies within 1..upper.

    Args:
        section: 1-based section index.
        upper: Inclusive upper bound, or None if only the lower bound is known.
        axis: Name of the dimension the bound comes from ("x" or "y"), used in
            the error message. Leave empty for fixed bounds.

    Returns:
        The section as a plain int.
    """
    if not _is_int(section) or section < 1:
        raise SectionOutOfRange(section)
    if upper is not None and section > upper:
        raise SectionOutOfRange(section, 1, upper, axis)
    return int(section)


def validate_dimensions(nx: int, ny: int) -> None:
    """Check that both grid dimensions are positive integers."""
    if not (_is_int(nx) and _is_int(ny)) or nx <= 0 or ny <= 0:
        raise InvalidDimensions(nx, ny)
