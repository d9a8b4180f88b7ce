"""
processing.py
-------------
Core logic for grid conversions:
- Extracting strided 1D cross-sections and 2D sub-grids from a Grid
- Square (DGM) conversions with the side length inferred from the record count
- Rectangular (geo) conversions with caller-supplied dimensions

Every conversion validates its arguments before reading, reads and validates
the whole source before opening the destination, and writes nothing on error.
"""

import logging
import time
from pathlib import Path
from typing import Tuple, Union

import numpy as np

from .exceptions import SectionOutOfRange
from .file_operations import read_point_cloud, write_section_1d, write_section_2d
from .grid import (
    Grid,
    GridShape,
    Section1D,
    Section2D,
    assemble_grid,
    resolve_rect_shape,
    resolve_square_shape,
)
from ..utils.constants import (
    DEFAULT_DIRECTION,
    DEFAULT_SECTION,
    DEFAULT_STRIDE,
    LEGACY_SQUARE_SECTION_BOUND,
)
from ..utils.validators import (
    validate_dimensions,
    validate_direction,
    validate_section,
    validate_stride,
)

PathLike = Union[str, Path]


def check_section_in_grid(shape: GridShape, direction: str, section: int) -> None:
    """Raise SectionOutOfRange if `section` lies beyond ny (direction "x") or nx (direction "y")."""
    if direction == "x" and section > shape.ny:
        raise SectionOutOfRange(section, 1, shape.ny, axis="y")
    if direction == "y" and section > shape.nx:
        raise SectionOutOfRange(section, 1, shape.nx, axis="x")


def extract_section_1d(grid: Grid, direction: str, stride: int, section: int) -> Section1D:
    """
    Extract a cross-section from a grid.

    For direction "x" the walked axis is x and the elevations are taken at the
    `section`-th y value; for "y" it is the other way round. Both series keep
    every `stride`-th value starting with the first.

    Args:
        grid: The assembled grid.
        direction: "x" or "y".
        stride: Sampling interval along the walked axis.
        section: 1-based index along the other axis.

    Returns:
        The Section1D, with count = floor(dimension / stride).
    """
    nx, ny = grid.shape.nx, grid.shape.ny
    check_section_in_grid(grid.shape, direction, section)
    if direction == "x":
        independent = grid.x_axis[::stride]
        dependent = grid.z_matrix[::stride, section - 1]
        count = nx // stride
    else:
        independent = grid.y_axis[::stride]
        dependent = grid.z_matrix[section - 1, ::stride]
        count = ny // stride
    return Section1D(independent=independent.copy(), dependent=dependent.copy(), count=count)


def extract_section_2d(grid: Grid, stride: int) -> Section2D:
    """Keep every `stride`-th x and y value and the elevations at their crossings."""
    nx, ny = grid.shape.nx, grid.shape.ny
    return Section2D(
        xs=grid.x_axis[::stride].copy(),
        ys=grid.y_axis[::stride].copy(),
        z=np.ascontiguousarray(grid.z_matrix[::stride, ::stride]),
        count_x=nx // stride,
        count_y=ny // stride,
    )


def _load_points(source_path: Path, shape_resolver) -> Tuple[np.ndarray, GridShape]:
    points = read_point_cloud(source_path)
    shape: GridShape = shape_resolver(points.shape[0])
    logging.info(f"Grid shape: nx={shape.nx}, ny={shape.ny} ({shape.size:,} of {points.shape[0]:,} records)")
    return points, shape


def _log_header(title: str, source_path: Path, dest_path: Path) -> None:
    message = f"\n{title}: {source_path.name} -> {dest_path}"
    logging.info("=" * len(message))
    logging.info(message)
    logging.info("=" * len(message))


def _convert_1d(
    source_path: PathLike,
    dest_path: PathLike,
    shape_resolver,
    stride: int,
    direction: str,
    section: int,
    verify_ordering: bool,
) -> None:
    source_path, dest_path = Path(source_path), Path(dest_path)
    start_time = time.time()

    points, shape = _load_points(source_path, shape_resolver)
    check_section_in_grid(shape, direction, section)
    grid = assemble_grid(points, shape, verify_ordering=verify_ordering)
    result = extract_section_1d(grid, direction, stride, section)
    write_section_1d(dest_path, result)

    logging.info(
        f"Cross-section along {direction} at section {section}: {len(result.independent):,} values "
        f"(declared {result.count}) in {time.time() - start_time:.2f}s"
    )


def _convert_2d(
    source_path: PathLike,
    dest_path: PathLike,
    shape_resolver,
    stride: int,
    verify_ordering: bool,
) -> None:
    source_path, dest_path = Path(source_path), Path(dest_path)
    start_time = time.time()

    points, shape = _load_points(source_path, shape_resolver)
    grid = assemble_grid(points, shape, verify_ordering=verify_ordering)
    result = extract_section_2d(grid, stride)
    write_section_2d(dest_path, result)

    logging.info(
        f"Sub-grid {result.z.shape[0]} x {result.z.shape[1]} "
        f"(declared {result.count_x} x {result.count_y}) in {time.time() - start_time:.2f}s"
    )


def convert_square_1d(
    source_path: PathLike,
    dest_path: PathLike,
    stride: int = DEFAULT_STRIDE,
    direction: str = DEFAULT_DIRECTION,
    section: int = DEFAULT_SECTION,
    verify_ordering: bool = False,
) -> None:
    """
    Convert a square tile into a one dimensional cross-section file.

    Args:
        source_path: XYZ text (or LAS/LAZ) file holding a square grid.
        dest_path: Output file; overwritten if it exists.
        stride: Keep every `stride`-th value (the "excerpt"). 1 keeps all.
        direction: Walk the "x" or the "y" axis.
        section: Which line of the other axis to take, between 1 and 1000.
            It must also lie within the tile.
        verify_ordering: Check that records are x fastest, then y before
            reshaping.
    """
    validate_section(section, LEGACY_SQUARE_SECTION_BOUND)
    validate_direction(direction)
    validate_stride(stride)

    _log_header("Square 1D conversion", Path(source_path), Path(dest_path))
    _convert_1d(source_path, dest_path, resolve_square_shape, stride, direction, section, verify_ordering)


def convert_square_2d(
    source_path: PathLike,
    dest_path: PathLike,
    stride: int = DEFAULT_STRIDE,
    verify_ordering: bool = False,
) -> None:
    """
    Convert a square tile into a two dimensional grid file.

    Args:
        source_path: XYZ text (or LAS/LAZ) file holding a square grid.
        dest_path: Output file; overwritten if it exists.
        stride: Keep every `stride`-th x and y value. 1 keeps all.
        verify_ordering: Check that records are x fastest, then y before
            reshaping.
    """
    validate_stride(stride)

    _log_header("Square 2D conversion", Path(source_path), Path(dest_path))
    _convert_2d(source_path, dest_path, resolve_square_shape, stride, verify_ordering)


def convert_rect_1d(
    source_path: PathLike,
    dest_path: PathLike,
    nx: int,
    ny: int,
    stride: int = DEFAULT_STRIDE,
    direction: str = DEFAULT_DIRECTION,
    section: int = DEFAULT_SECTION,
    verify_ordering: bool = False,
) -> None:
    """
    Convert a rectangular grid into a one dimensional cross-section file.

    `section` is bounded by ny when walking x and by nx when walking y.
    The source must hold exactly nx * ny records.
    """
    validate_dimensions(nx, ny)
    validate_direction(direction)
    if direction == "x":
        validate_section(section, ny, axis="y")
    else:
        validate_section(section, nx, axis="x")
    validate_stride(stride)

    _log_header("Rectangular 1D conversion", Path(source_path), Path(dest_path))
    _convert_1d(
        source_path,
        dest_path,
        lambda n_records: resolve_rect_shape(n_records, nx, ny),
        stride,
        direction,
        section,
        verify_ordering,
    )


def convert_rect_2d(
    source_path: PathLike,
    dest_path: PathLike,
    nx: int,
    ny: int,
    stride: int = DEFAULT_STRIDE,
    verify_ordering: bool = False,
) -> None:
    """Convert a rectangular grid of exactly nx * ny records into a two dimensional grid file."""
    validate_dimensions(nx, ny)
    validate_stride(stride)

    _log_header("Rectangular 2D conversion", Path(source_path), Path(dest_path))
    _convert_2d(
        source_path,
        dest_path,
        lambda n_records: resolve_rect_shape(n_records, nx, ny),
        stride,
        verify_ordering,
    )
