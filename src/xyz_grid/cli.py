"""
cli.py
------
Command line entry point (`xyz-grid`).

USAGE
  xyz-grid square-1d tile.xyz section.txt --stride 10 --direction y --section 5
  xyz-grid square-2d tile.xyz surface.txt --stride 10
  xyz-grid rect-1d model.xyz section.txt --nx 200 --ny 150 --section 75
  xyz-grid rect-2d model.xyz surface.txt --nx 200 --ny 150
  xyz-grid inspect tile.xyz
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .core.exceptions import GridConversionError
from .core.file_operations import inspect_point_cloud
from .core.processing import (
    convert_rect_1d,
    convert_rect_2d,
    convert_square_1d,
    convert_square_2d,
)
from .utils.constants import (
    DEFAULT_DIRECTION,
    DEFAULT_SECTION,
    DEFAULT_STRIDE,
    LOG_FORMAT,
    VALID_DIRECTIONS,
)


def setup_logging(verbose: bool = False) -> None:
    """Route log records to stderr with timestamps."""
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger().addHandler(handler)
    logging.getLogger().setLevel(logging.INFO if verbose else logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="xyz-grid",
        description="Convert gridded (x, y, z) point clouds into 1D cross-section or 2D grid text files.",
    )
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log progress at INFO level")
    sub = ap.add_subparsers(dest="command", required=True)

    def add_io(p: argparse.ArgumentParser) -> None:
        p.add_argument("source", help="Source file (XYZ text, or .las/.laz)")
        p.add_argument("dest", help="Output file (overwritten)")
        p.add_argument("--stride", "--excerpt", dest="stride", type=int, default=DEFAULT_STRIDE,
                       help=f"Keep every n-th value (default: {DEFAULT_STRIDE})")
        p.add_argument("--verify-ordering", action="store_true",
                       help="Check that records are sorted x fastest, then y")

    def add_section(p: argparse.ArgumentParser, section_help: str) -> None:
        p.add_argument("--direction", choices=VALID_DIRECTIONS, default=DEFAULT_DIRECTION,
                       help=f"Axis to walk (default: {DEFAULT_DIRECTION})")
        p.add_argument("--section", type=int, default=DEFAULT_SECTION, help=section_help)

    def add_dims(p: argparse.ArgumentParser) -> None:
        p.add_argument("--nx", type=int, required=True, help="Number of distinct x values")
        p.add_argument("--ny", type=int, required=True, help="Number of distinct y values")

    p = sub.add_parser("square-1d", help="Cross-section of a square tile")
    add_io(p)
    add_section(p, "1-based line of the other axis, 1..1000 (default: 1)")

    p = sub.add_parser("square-2d", help="Full surface of a square tile")
    add_io(p)

    p = sub.add_parser("rect-1d", help="Cross-section of a rectangular grid")
    add_io(p)
    add_dims(p)
    add_section(p, "1-based line of the other axis, 1..ny for x, 1..nx for y (default: 1)")

    p = sub.add_parser("rect-2d", help="Full surface of a rectangular grid")
    add_io(p)
    add_dims(p)

    p = sub.add_parser("inspect", help="Report record count, ranges and possible grid shapes")
    p.add_argument("source", help="Source file (XYZ text, or .las/.laz)")

    return ap


def run(args: argparse.Namespace) -> None:
    if args.command == "inspect":
        print(inspect_point_cloud(args.source))
    elif args.command == "square-1d":
        convert_square_1d(args.source, args.dest, args.stride, args.direction, args.section,
                          verify_ordering=args.verify_ordering)
    elif args.command == "square-2d":
        convert_square_2d(args.source, args.dest, args.stride, verify_ordering=args.verify_ordering)
    elif args.command == "rect-1d":
        convert_rect_1d(args.source, args.dest, args.nx, args.ny, args.stride, args.direction, args.section,
                        verify_ordering=args.verify_ordering)
    elif args.command == "rect-2d":
        convert_rect_2d(args.source, args.dest, args.nx, args.ny, args.stride,
                        verify_ordering=args.verify_ordering)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        run(args)
    except GridConversionError as exc:
        logging.error(f"Conversion failed: {exc}")
        return 1
    except OSError as exc:
        logging.error(f"I/O error: {exc}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
