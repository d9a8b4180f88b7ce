from pathlib import Path
from typing import Callable, Dict, List, Sequence

import pytest


def write_xyz(path: Path, xs: Sequence[float], ys: Sequence[float], z_of: Callable[[int, int], float]) -> Path:
    """Write a grid x fastest, then y, with z = z_of(ix, iy)."""
    lines = []
    for iy, y in enumerate(ys):
        for ix, x in enumerate(xs):
            lines.append(f"{x} {y} {z_of(ix, iy)}")
    path.write_text("\n".join(lines) + "\n")
    return path


def read_sections(path: Path) -> Dict[str, List[float]]:
    """Parse an output file into {header: values}."""
    sections: Dict[str, List[float]] = {}
    current = None
    for line in path.read_text().splitlines():
        if line.startswith("#"):
            current = line
            sections[current] = []
        else:
            sections[current].append(float(line))
    return sections


@pytest.fixture
def square_3x3(tmp_path):
    """3x3 tile with x, y in {0, 1, 2} and z = x + y."""
    return write_xyz(tmp_path / "square.xyz", [0, 1, 2], [0, 1, 2], lambda ix, iy: ix + iy)


@pytest.fixture
def rect_4x3(tmp_path):
    """nx=4, ny=3 grid with x in {0, 10, 20, 30}, y in {100, 200, 300} and z = 10*ix + iy."""
    return write_xyz(tmp_path / "rect.xyz", [0, 10, 20, 30], [100, 200, 300], lambda ix, iy: 10 * ix + iy)
