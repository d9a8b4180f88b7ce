"""
xyz_grid
--------
Convert line-oriented (x, y, z) elevation point clouds sampled on a regular
grid into sectioned text files holding a 1D cross-section or the full 2D
surface, optionally strided.

This top-level package defines the version and re-exports the conversion
entry points.
"""

__version__ = "0.1.0"

from .core import (
    DimensionMismatch,
    GridConversionError,
    GridOrderError,
    InvalidDimensions,
    InvalidDirection,
    InvalidStride,
    MalformedRecord,
    SectionOutOfRange,
    ShapeInferenceWarning,
    convert_rect_1d,
    convert_rect_2d,
    convert_square_1d,
    convert_square_2d,
    inspect_point_cloud,
)
