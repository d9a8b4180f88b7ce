import numpy as np
import pytest

from conftest import read_sections, write_xyz
from xyz_grid import (
    DimensionMismatch,
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
)
from xyz_grid.core.grid import GridShape, assemble_grid
from xyz_grid.core.processing import extract_section_1d, extract_section_2d


def symmetric_grid(n):
    axis = np.arange(n, dtype=np.float64)
    points = np.array(
        [(axis[ix], axis[iy], ix * iy + ix + iy) for iy in range(n) for ix in range(n)],
        dtype=np.float64,
    )
    return assemble_grid(points, GridShape(n, n))


# Extraction


def test_stride_one_keeps_everything():
    grid = symmetric_grid(5)
    section = extract_section_1d(grid, "x", 1, 3)
    np.testing.assert_array_equal(section.independent, grid.x_axis)
    np.testing.assert_array_equal(section.dependent, grid.z_matrix[:, 2])
    assert section.count == 5

    full = extract_section_2d(grid, 1)
    np.testing.assert_array_equal(full.z, grid.z_matrix)
    assert (full.count_x, full.count_y) == (5, 5)


@pytest.mark.parametrize("section", [1, 2, 3, 4])
def test_direction_symmetry(section):
    grid = symmetric_grid(4)
    along_x = extract_section_1d(grid, "x", 1, section)
    along_y = extract_section_1d(grid, "y", 1, section)
    np.testing.assert_array_equal(along_x.independent, along_y.independent)
    np.testing.assert_array_equal(along_x.dependent, along_y.dependent)


def test_count_is_floor_of_dimension_over_stride():
    grid = symmetric_grid(5)
    section = extract_section_1d(grid, "y", 2, 1)
    assert section.count == 2
    assert len(section.independent) == 3
    np.testing.assert_array_equal(section.independent, [0, 2, 4])

    sub = extract_section_2d(grid, 3)
    assert (sub.count_x, sub.count_y) == (1, 1)
    assert sub.z.shape == (2, 2)


def test_extract_section_beyond_grid():
    grid = symmetric_grid(3)
    with pytest.raises(SectionOutOfRange):
        extract_section_1d(grid, "x", 1, 4)
    with pytest.raises(SectionOutOfRange):
        extract_section_1d(grid, "y", 1, 4)


# Square conversions


def test_square_2d_three_by_three(square_3x3, tmp_path):
    dest = tmp_path / "out.txt"
    convert_square_2d(square_3x3, dest)
    sections = read_sections(dest)
    assert sections["# Number of x values"] == [3]
    assert sections["# Number of y values"] == [3]
    assert sections["# x values"] == [0, 1, 2]
    assert sections["# y values"] == [0, 1, 2]
    assert sections["# z values"] == [0, 1, 2, 1, 2, 3, 2, 3, 4]


def test_square_1d_direction_x_section_two(square_3x3, tmp_path):
    dest = tmp_path / "out.txt"
    convert_square_1d(square_3x3, dest, direction="x", section=2)
    sections = read_sections(dest)
    assert sections["# Number of x values"] == [3]
    assert sections["# x values"] == [0, 1, 2]
    assert sections["# y values"] == [1, 2, 3]


def test_square_1d_direction_y_walks_rows(tmp_path):
    source = write_xyz(tmp_path / "tile.xyz", [0, 1, 2], [5, 6, 7], lambda ix, iy: 10 * ix + iy)
    dest = tmp_path / "out.txt"
    convert_square_1d(source, dest, direction="y", section=3)
    sections = read_sections(dest)
    assert sections["# x values"] == [5, 6, 7]
    assert sections["# y values"] == [20, 21, 22]


def test_square_2d_counts_match_record_count(tmp_path):
    n = 6
    source = write_xyz(tmp_path / "tile.xyz", range(n), range(n), lambda ix, iy: ix * iy)
    dest = tmp_path / "out.txt"
    convert_square_2d(source, dest)
    sections = read_sections(dest)
    assert len(sections["# z values"]) == n * n
    assert len(sections["# x values"]) == n
    assert len(sections["# y values"]) == n


def test_square_2d_with_stride(tmp_path):
    source = write_xyz(tmp_path / "tile.xyz", range(5), range(5), lambda ix, iy: 10 * ix + iy)
    dest = tmp_path / "out.txt"
    convert_square_2d(source, dest, stride=2)
    sections = read_sections(dest)
    assert sections["# Number of x values"] == [2]
    assert sections["# x values"] == [0, 2, 4]
    assert sections["# y values"] == [0, 2, 4]
    assert sections["# z values"] == [0, 20, 40, 2, 22, 42, 4, 24, 44]


def test_square_non_perfect_count_warns(tmp_path):
    source = write_xyz(tmp_path / "tile.xyz", [0, 1, 2], [0, 1, 2], lambda ix, iy: ix + iy)
    with source.open("a") as f:
        f.write("9 9 99\n")
    dest = tmp_path / "out.txt"
    with pytest.warns(ShapeInferenceWarning):
        convert_square_2d(source, dest)
    sections = read_sections(dest)
    assert 99.0 not in sections["# z values"]
    assert len(sections["# z values"]) == 9


def test_square_1d_legacy_section_bound_checked_before_reading(tmp_path):
    dest = tmp_path / "out.txt"
    with pytest.raises(SectionOutOfRange) as excinfo:
        convert_square_1d(tmp_path / "missing.xyz", dest, section=1001)
    assert excinfo.value.upper == 1000
    with pytest.raises(SectionOutOfRange):
        convert_square_1d(tmp_path / "missing.xyz", dest, section=0)
    assert not dest.exists()


def test_square_1d_section_beyond_tile(square_3x3, tmp_path):
    dest = tmp_path / "out.txt"
    with pytest.raises(SectionOutOfRange):
        convert_square_1d(square_3x3, dest, section=4)
    assert not dest.exists()


def test_square_1d_section_checked_before_assembly(square_3x3, tmp_path, monkeypatch):
    def fail_assembly(*args, **kwargs):
        raise AssertionError("grid assembled for an out-of-range section")

    monkeypatch.setattr("xyz_grid.core.processing.assemble_grid", fail_assembly)
    with pytest.raises(SectionOutOfRange) as excinfo:
        convert_square_1d(square_3x3, tmp_path / "out.txt", direction="y", section=4)
    assert excinfo.value.upper == 3


def test_square_1d_last_section(square_3x3, tmp_path):
    dest = tmp_path / "out.txt"
    convert_square_1d(square_3x3, dest, section=3)
    assert read_sections(dest)["# y values"] == [2, 3, 4]


def test_invalid_direction_before_reading(tmp_path):
    with pytest.raises(InvalidDirection):
        convert_square_1d(tmp_path / "missing.xyz", tmp_path / "out.txt", direction="z")
    with pytest.raises(InvalidDirection):
        convert_rect_1d(tmp_path / "missing.xyz", tmp_path / "out.txt", 2, 2, direction="z")


def test_invalid_stride(square_3x3, tmp_path):
    with pytest.raises(InvalidStride):
        convert_square_2d(square_3x3, tmp_path / "out.txt", stride=0)


def test_malformed_third_line_writes_nothing(tmp_path):
    source = tmp_path / "bad.xyz"
    source.write_text("0 0 0\n1 0 1\n2 0\n0 1 1\n")
    dest = tmp_path / "out.txt"
    with pytest.raises(MalformedRecord) as excinfo:
        convert_square_2d(source, dest)
    assert excinfo.value.line_number == 3
    assert not dest.exists()


def test_missing_source(tmp_path):
    with pytest.raises(FileNotFoundError):
        convert_square_2d(tmp_path / "missing.xyz", tmp_path / "out.txt")


def test_unwritable_destination(square_3x3, tmp_path):
    with pytest.raises(OSError):
        convert_square_2d(square_3x3, tmp_path / "no_such_dir" / "out.txt")


def test_verify_ordering(tmp_path):
    source = tmp_path / "tile.xyz"
    # y varies fastest
    source.write_text("".join(f"{x} {y} {x + y}\n" for x in range(3) for y in range(3)))
    dest = tmp_path / "out.txt"
    with pytest.raises(GridOrderError):
        convert_square_2d(source, dest, verify_ordering=True)
    assert not dest.exists()

    convert_square_2d(source, dest)
    assert dest.exists()


# Rectangular conversions


def test_rect_2d(rect_4x3, tmp_path):
    dest = tmp_path / "out.txt"
    convert_rect_2d(rect_4x3, dest, nx=4, ny=3)
    sections = read_sections(dest)
    assert sections["# Number of x values"] == [4]
    assert sections["# Number of y values"] == [3]
    assert sections["# x values"] == [0, 10, 20, 30]
    assert sections["# y values"] == [100, 200, 300]
    assert sections["# z values"] == [0, 10, 20, 30, 1, 11, 21, 31, 2, 12, 22, 32]


def test_rect_2d_stride_header_is_floor(rect_4x3, tmp_path):
    dest = tmp_path / "out.txt"
    convert_rect_2d(rect_4x3, dest, nx=4, ny=3, stride=2)
    sections = read_sections(dest)
    assert sections["# Number of x values"] == [2]
    assert sections["# Number of y values"] == [1]
    assert sections["# x values"] == [0, 20]
    assert sections["# y values"] == [100, 300]
    assert sections["# z values"] == [0, 20, 2, 22]


def test_rect_1d_direction_x(rect_4x3, tmp_path):
    dest = tmp_path / "out.txt"
    convert_rect_1d(rect_4x3, dest, nx=4, ny=3, direction="x", section=2)
    sections = read_sections(dest)
    assert sections["# Number of x values"] == [4]
    assert sections["# x values"] == [0, 10, 20, 30]
    assert sections["# y values"] == [1, 11, 21, 31]


def test_rect_1d_direction_y(rect_4x3, tmp_path):
    dest = tmp_path / "out.txt"
    convert_rect_1d(rect_4x3, dest, nx=4, ny=3, direction="y", section=3)
    sections = read_sections(dest)
    assert sections["# Number of x values"] == [3]
    assert sections["# x values"] == [100, 200, 300]
    assert sections["# y values"] == [20, 21, 22]


def test_rect_1d_section_bounds(rect_4x3, tmp_path):
    dest = tmp_path / "out.txt"
    convert_rect_1d(rect_4x3, dest, nx=4, ny=3, direction="x", section=3)
    assert read_sections(dest)["# y values"] == [2, 12, 22, 32]

    convert_rect_1d(rect_4x3, dest, nx=4, ny=3, direction="y", section=4)
    assert read_sections(dest)["# y values"] == [30, 31, 32]

    dest.unlink()
    with pytest.raises(SectionOutOfRange) as excinfo:
        convert_rect_1d(rect_4x3, dest, nx=4, ny=3, direction="x", section=4)
    assert excinfo.value.upper == 3
    with pytest.raises(SectionOutOfRange) as excinfo:
        convert_rect_1d(rect_4x3, dest, nx=4, ny=3, direction="y", section=5)
    assert excinfo.value.upper == 4
    assert not dest.exists()


def test_rect_dimension_mismatch_writes_nothing(rect_4x3, tmp_path):
    dest = tmp_path / "out.txt"
    with pytest.raises(DimensionMismatch):
        convert_rect_2d(rect_4x3, dest, nx=3, ny=3)
    with pytest.raises(DimensionMismatch):
        convert_rect_1d(rect_4x3, dest, nx=5, ny=2)
    assert not dest.exists()


@pytest.mark.parametrize("nx, ny", [(0, 3), (4, -1)])
def test_rect_invalid_dimensions(rect_4x3, tmp_path, nx, ny):
    with pytest.raises(InvalidDimensions):
        convert_rect_2d(rect_4x3, tmp_path / "out.txt", nx=nx, ny=ny)
    with pytest.raises(InvalidDimensions):
        convert_rect_1d(rect_4x3, tmp_path / "out.txt", nx=nx, ny=ny)
