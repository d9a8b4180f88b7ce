"""
grid.py
-------
Grid shape resolution and reshaping of a flat point cloud into a regular grid.

Records are expected x fastest, then y. Nothing here sorts: a file in a
different order reshapes without error into a wrong grid, unless the opt-in
ordering check is used.
"""

import logging
import math
import warnings
from dataclasses import dataclass

import numpy as np

from .exceptions import (
    DimensionMismatch,
    GridOrderError,
    InvalidDimensions,
    ShapeInferenceWarning,
)
from ..utils.validators import validate_dimensions


@dataclass(frozen=True)
class GridShape:
    """Number of distinct x values (`nx`) and y values (`ny`) of a grid."""

    nx: int
    ny: int

    @property
    def size(self) -> int:
        return self.nx * self.ny


@dataclass
class Grid:
    """
    A point cloud reshaped onto its regular grid.

    Attributes:
        x_axis: The `nx` x values of the first row of records.
        y_axis: The `ny` y values, one per row of records.
        z_matrix: Elevations of shape (nx, ny), indexed [ix, iy].
    """

    x_axis: np.ndarray
    y_axis: np.ndarray
    z_matrix: np.ndarray

    @property
    def shape(self) -> GridShape:
        return GridShape(len(self.x_axis), len(self.y_axis))


@dataclass
class Section1D:
    """
    A cross-section: `independent` is the walked axis, `dependent` the elevations.

    `count` is the declared value count, floor(dimension / stride), which can
    be smaller than the actual series length when the stride does not divide
    the dimension.
    """

    independent: np.ndarray
    dependent: np.ndarray
    count: int


@dataclass
class Section2D:
    """A strided sub-grid; `z` has shape (len(xs), len(ys))."""

    xs: np.ndarray
    ys: np.ndarray
    z: np.ndarray
    count_x: int
    count_y: int


def resolve_square_shape(n_records: int) -> GridShape:
    """
    Infer the side length of a square tile from its record count.

    The side is floor(sqrt(N)). When N is not a perfect square the trailing
    records cannot be placed on the grid; this emits a ShapeInferenceWarning
    and they are ignored by `assemble_grid`.

    Args:
        n_records: Number of records read from the source.

    Returns:
        A GridShape with nx == ny.
    """
    if n_records <= 0:
        raise InvalidDimensions(0, 0, reason="Source holds no records, cannot infer a square grid")

    side = math.isqrt(n_records)
    if side * side != n_records:
        ignored = n_records - side * side
        message = (
            f"Record count {n_records} is not a perfect square; using a {side}x{side} grid "
            f"and ignoring the last {ignored} record(s)"
        )
        logging.warning(message)
        warnings.warn(message, ShapeInferenceWarning, stacklevel=2)
    return GridShape(side, side)


def resolve_rect_shape(n_records: int, nx: int, ny: int) -> GridShape:
    """
    Validate caller-supplied grid dimensions against the record count.

    Args:
        n_records: Number of records read from the source.
        nx: Number of distinct x values.
        ny: Number of distinct y values.

    Returns:
        The GridShape (nx, ny).
    """
    validate_dimensions(nx, ny)
    if nx * ny != n_records:
        raise DimensionMismatch(nx, ny, n_records)
    return GridShape(int(nx), int(ny))


def check_grid_ordering(points: np.ndarray, shape: GridShape) -> None:
    """
    Verify that records are laid out x fastest, then y.

    Every row of `nx` records must repeat the x values of the first row and
    carry a single y value, and both axes must be strictly monotonic.

    Raises:
        GridOrderError: naming the first record (0-based) that breaks the layout.
    """
    nx, ny = shape.nx, shape.ny
    flat = points[: shape.size]
    x_axis = flat[:nx, 0]
    y_axis = flat[::nx, 1]

    _check_monotonic(x_axis, "x", step=1)
    _check_monotonic(y_axis, "y", step=nx)

    bad_x = np.flatnonzero(flat[:, 0] != np.tile(x_axis, ny))
    if bad_x.size:
        idx = int(bad_x[0])
        raise GridOrderError(idx, f"x value {flat[idx, 0]!r} does not repeat the first row ({x_axis[idx % nx]!r})")

    bad_y = np.flatnonzero(flat[:, 1] != np.repeat(y_axis, nx))
    if bad_y.size:
        idx = int(bad_y[0])
        raise GridOrderError(idx, f"y value {flat[idx, 1]!r} changes within row {idx // nx}")


def _check_monotonic(axis: np.ndarray, name: str, step: int) -> None:
    if len(axis) < 2:
        return
    diffs = np.diff(axis)
    sign = np.sign(diffs[0])
    bad = np.flatnonzero(np.sign(diffs) != sign) if sign != 0 else np.array([0])
    if bad.size:
        idx = int(bad[0]) + 1
        raise GridOrderError(idx * step, f"{name} axis is not strictly monotonic at value {axis[idx]!r}")


def assemble_grid(points: np.ndarray, shape: GridShape, verify_ordering: bool = False) -> Grid:
    """
    Reshape a flat (N, 3) point cloud into a Grid.

    Record i lands at z_matrix[i % nx, i // nx]. Only the first nx*ny records
    are used.

    Args:
        points: Array of x, y, z columns in file order.
        shape: Resolved grid shape.
        verify_ordering: Run `check_grid_ordering` first.

    Returns:
        The assembled Grid.
    """
    if points.shape[0] < shape.size:
        raise DimensionMismatch(shape.nx, shape.ny, points.shape[0])
    if verify_ordering:
        check_grid_ordering(points, shape)

    nx, ny = shape.nx, shape.ny
    flat = points[: shape.size]
    x_axis = flat[:nx, 0].copy()
    y_axis = flat[::nx, 1].copy()
    z_matrix = flat[:, 2].reshape((nx, ny), order="F").copy()
    return Grid(x_axis=x_axis, y_axis=y_axis, z_matrix=z_matrix)
