"""
file_operations.py
------------------
File handling for grid conversions, including:
- Parsing XYZ text sources into point clouds
- Validating and reading LAS/LAZ sources
- Inspecting a source before conversion
- Writing 1D and 2D sections in the sectioned text format
"""

import errno
import math
import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, TextIO, Tuple, Union

import laspy
import numpy as np

from .exceptions import MalformedRecord
from .grid import Section1D, Section2D
from ..utils.constants import (
    HEADER_COUNT_X,
    HEADER_COUNT_Y,
    HEADER_X_VALUES,
    HEADER_Y_VALUES,
    HEADER_Z_VALUES,
    LAS_CHUNK_SIZE,
    LAS_SUFFIXES,
    XYZ_INITIAL_CAPACITY,
)

PathLike = Union[str, Path]


def parse_xyz_line(line: str, line_number: int, path: PathLike) -> Tuple[float, float, float]:
    """
    Decode one source line into an (x, y, z) triple.

    Fields are separated by whitespace; anything after the third field is
    ignored.
    """
    fields = line.split()
    if len(fields) < 3:
        raise MalformedRecord(path, line_number, line.rstrip("\n"), f"expected 3 fields, found {len(fields)}")
    try:
        return float(fields[0]), float(fields[1]), float(fields[2])
    except ValueError:
        raise MalformedRecord(path, line_number, line.rstrip("\n"), "field is not a floating-point number") from None


def read_xyz_records(file_path: PathLike) -> np.ndarray:
    """
    Read an XYZ text file into an (N, 3) float64 array.

    Args:
        file_path: Path to a file with one "<x> <y> <z>" record per line.

    Returns:
        Array of x, y, z columns in file order.

    Raises:
        MalformedRecord: on the first line that is not a valid triple.
    """
    file_path = Path(file_path)
    records = np.empty((XYZ_INITIAL_CAPACITY, 3), dtype=np.float64)
    n_records = 0
    with file_path.open("rb") as infile:
        for line_number, raw_line in enumerate(infile, start=1):
            try:
                line = raw_line.decode("utf-8")
            except UnicodeDecodeError:
                raise MalformedRecord(file_path, line_number, None, "line is not valid UTF-8") from None
            if n_records == records.shape[0]:
                records = np.resize(records, (2 * records.shape[0], 3))
            records[n_records] = parse_xyz_line(line, line_number, file_path)
            n_records += 1

    logging.info(f"Read {n_records:,} records from {file_path.name}")
    return records[:n_records].copy()


def validate_las_file(file_path: Path) -> Tuple[bool, Optional[str], Optional[dict]]:
    """
    Validate a LAS file, ensuring it exists, is non-empty, and has points.

    Args:
        file_path: The LAS file path.

    Returns:
        (valid, error_message, header_info)
        valid: True if valid, False if invalid.
        error_message: Error message if invalid.
        header_info: Dictionary of file header info if valid.
    """
    if not file_path.exists():
        return False, f"File not found: {file_path}", None

    file_size = file_path.stat().st_size
    if file_size == 0:
        return False, f"File is empty: {file_path}", None

    try:
        with laspy.open(file_path) as las:
            header = las.header
            if header.point_count == 0:
                return False, f"No points in file: {file_path}", None

            header_info = {
                "point_count": header.point_count,
                "version": f"{header.version.major}.{header.version.minor}",
                "point_format": header.point_format.id,
                "file_size_mb": file_size / (1024**2),
                "filepath": file_path,
            }
        return True, None, header_info
    except Exception as exc:
        return False, f"Validation error for {file_path}: {str(exc)}", None


def read_las_records(file_path: PathLike) -> np.ndarray:
    """
    Read the scaled x, y, z coordinates of a LAS/LAZ file into an (N, 3) array.

    Points keep their storage order, which must already be x fastest, then y.
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(errno.ENOENT, "Source file not found", str(file_path))

    valid, error_message, header_info = validate_las_file(file_path)
    if not valid:
        raise MalformedRecord(file_path, None, None, error_message)

    logging.info(
        f"Reading {header_info['point_count']:,} points from {file_path.name} "
        f"(LAS {header_info['version']}, point format {header_info['point_format']})"
    )
    chunks = []
    with laspy.open(file_path) as las:
        for points_chunk in las.chunk_iterator(LAS_CHUNK_SIZE):
            chunks.append(
                np.column_stack(
                    (
                        np.asarray(points_chunk.x, dtype=np.float64),
                        np.asarray(points_chunk.y, dtype=np.float64),
                        np.asarray(points_chunk.z, dtype=np.float64),
                    )
                )
            )
    return np.concatenate(chunks) if chunks else np.empty((0, 3), dtype=np.float64)


def read_point_cloud(file_path: PathLike) -> np.ndarray:
    """Read a source file, choosing the LAS reader for .las/.laz and the XYZ text reader otherwise."""
    file_path = Path(file_path)
    if file_path.suffix.lower() in LAS_SUFFIXES:
        return read_las_records(file_path)
    return read_xyz_records(file_path)


def inspect_point_cloud(file_path: PathLike) -> str:
    """
    Generate a textual report about a source file: record count, coordinate
    ranges and the grid shapes the records are consistent with.

    Args:
        file_path: Path to an XYZ text or LAS/LAZ source.

    Returns:
        A formatted string report.
    """
    file_path = Path(file_path)
    points = read_point_cloud(file_path)
    n_records = points.shape[0]

    report = [
        f"\nInspecting source file: {file_path}",
        f"Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        "-" * 80,
        "FILE INFORMATION:",
        f"Record Count: {n_records:,}",
    ]

    file_size_bytes = file_path.stat().st_size
    if file_size_bytes > 1024**3:
        report.append(f"File Size: {file_size_bytes / (1024 ** 3):.2f} GB")
    else:
        report.append(f"File Size: {file_size_bytes / (1024 ** 2):.2f} MB")

    if n_records == 0:
        report.append("\nNo records found, no grid can be built.")
        return "\n".join(report)

    report.append("\nCOORDINATES:")
    for label, column in zip("XYZ", points.T):
        report.append(f"{label} range: {column.min():.3f} to {column.max():.3f}")

    report.append("\nGRID SHAPE:")
    side = math.isqrt(n_records)
    if side * side == n_records:
        report.append(f"Square grid: {side} x {side}")
    else:
        report.append(
            f"Not a perfect square: a square conversion would use {side} x {side} "
            f"and ignore {n_records - side * side} record(s)"
        )

    # Length of the first run of constant y gives the row length. NaN equals NaN here.
    ys = points[:, 1]
    same_y = (ys == ys[0]) | (np.isnan(ys) & np.isnan(ys[0]))
    row_breaks = np.flatnonzero(~same_y)
    nx_hint = int(row_breaks[0]) if row_breaks.size else n_records
    if n_records % nx_hint == 0:
        report.append(f"First row suggests a rectangular grid: nx={nx_hint}, ny={n_records // nx_hint}")
    else:
        report.append(f"First row holds {nx_hint} records, which does not divide the record count")

    return "\n".join(report)


def _write_values(outfile: TextIO, header: str, values: Iterable[float]) -> None:
    outfile.write(f"{header}\n")
    for value in values:
        outfile.write(f"{float(value)!r}\n")


def write_section_1d(file_path: PathLike, section: Section1D) -> None:
    """
    Write a cross-section. The file has the following form:

        # Number of x values
        <count>
        # x values
        x_1 ... x_n
        # y values
        y_1 ... y_n

    "x values" holds the walked axis and "y values" the elevations, whichever
    direction was extracted.
    """
    file_path = Path(file_path)
    with file_path.open("w", encoding="utf-8") as outfile:
        outfile.write(f"{HEADER_COUNT_X}\n{section.count}\n")
        _write_values(outfile, HEADER_X_VALUES, section.independent)
        _write_values(outfile, HEADER_Y_VALUES, section.dependent)
    logging.info(f"Wrote {len(section.independent):,} values to {file_path}")


def write_section_2d(file_path: PathLike, section: Section2D) -> None:
    """
    Write a strided sub-grid. The file has the following form:

        # Number of x values
        <count_x>
        # Number of y values
        <count_y>
        # x values
        x_1 ... x_n
        # y values
        y_1 ... y_m
        # z values
        z_11 z_21 ... z_nm   (x fastest)
    """
    file_path = Path(file_path)
    with file_path.open("w", encoding="utf-8") as outfile:
        outfile.write(f"{HEADER_COUNT_X}\n{section.count_x}\n")
        outfile.write(f"{HEADER_COUNT_Y}\n{section.count_y}\n")
        _write_values(outfile, HEADER_X_VALUES, section.xs)
        _write_values(outfile, HEADER_Y_VALUES, section.ys)
        _write_values(outfile, HEADER_Z_VALUES, section.z.ravel(order="F"))
    logging.info(f"Wrote {section.z.size:,} z values ({section.z.shape[0]} x {section.z.shape[1]}) to {file_path}")
