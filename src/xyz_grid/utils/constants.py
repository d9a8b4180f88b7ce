"""
constants.py
------------
Global defaults and fixed labels shared by the core modules and the CLI.
"""

DEFAULT_STRIDE = 1
DEFAULT_DIRECTION = "x"
DEFAULT_SECTION = 1
VALID_DIRECTIONS = ("x", "y")

# Fixed upper section bound of the square (DGM) 1D conversion. Rectangular
# conversions check against the real grid dimension instead.
LEGACY_SQUARE_SECTION_BOUND = 1000

LAS_SUFFIXES = (".las", ".laz")
LAS_CHUNK_SIZE = 1_000_000

# Starting row count of the XYZ parse buffer; doubled whenever it fills up.
XYZ_INITIAL_CAPACITY = 4096

HEADER_COUNT_X = "# Number of x values"
HEADER_COUNT_Y = "# Number of y values"
HEADER_X_VALUES = "# x values"
HEADER_Y_VALUES = "# y values"
HEADER_Z_VALUES = "# z values"

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
