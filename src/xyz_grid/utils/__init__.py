"""
Utility modules for xyz_grid.
-----------------------------
This package includes the argument validators and the constants shared by
the core modules and the command line.
"""

from .validators import (
    validate_dimensions,
    validate_direction,
    validate_section,
    validate_stride,
)

from .constants import (
    DEFAULT_STRIDE,
    LEGACY_SQUARE_SECTION_BOUND,
    VALID_DIRECTIONS,
)
