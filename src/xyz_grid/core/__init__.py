"""
Core modules for xyz_grid.
--------------------------
This package contains the essential functionality:
- Grid shape resolution and assembly
- File I/O operations
- Conversion pipelines
"""

from .exceptions import (
    DimensionMismatch,
    GridConversionError,
    GridOrderError,
    InvalidDimensions,
    InvalidDirection,
    InvalidStride,
    MalformedRecord,
    SectionOutOfRange,
    ShapeInferenceWarning,
)

from .grid import (
    Grid,
    GridShape,
    Section1D,
    Section2D,
    assemble_grid,
    check_grid_ordering,
    resolve_rect_shape,
    resolve_square_shape,
)

from .file_operations import (
    inspect_point_cloud,
    read_las_records,
    read_point_cloud,
    read_xyz_records,
    validate_las_file,
    write_section_1d,
    write_section_2d,
)

from .processing import (
    convert_rect_1d,
    convert_rect_2d,
    convert_square_1d,
    convert_square_2d,
    extract_section_1d,
    extract_section_2d,
)
