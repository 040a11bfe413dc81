"""Shared pytest fixtures for tilewfc tests."""

from pathlib import Path

import numpy as np
import pytest

from tilewfc.directions import Direction
from tilewfc.rules import RuleTable, parse_sample

CHECKERBOARD = "0 1\n1 0\n"

STRIPES = """\
0 0 0 0
1 1 1 1
0 0 0 0
1 1 1 1
"""


@pytest.fixture
def data_dir():
    return Path(__file__).parent.parent / "data"


@pytest.fixture
def terrain_sample_path(data_dir):
    """Small terrain sample shipped with the package."""
    return data_dir / "input.txt"


@pytest.fixture
def checkerboard_sample():
    return parse_sample(CHECKERBOARD)


@pytest.fixture
def checkerboard_table(checkerboard_sample):
    return RuleTable.from_sample(checkerboard_sample)


@pytest.fixture
def stripes_sample():
    return parse_sample(STRIPES)


@pytest.fixture
def sample_file(tmp_path):
    """Write sample text to a file and return its path."""
    def _write(text, name="sample.txt"):
        path = tmp_path / name
        path.write_text(text)
        return path
    return _write


@pytest.fixture
def rng():
    return np.random.RandomState(1234)


def assert_follows_rules(grid, rules):
    """Every adjacent pair in a collapsed grid must be allowed from both sides."""
    height, width = grid.shape
    for row in range(height):
        for col in range(width):
            tile = int(grid[row, col])
            for direction in Direction:
                d_row, d_col = direction.offset
                n_row, n_col = row + d_row, col + d_col
                if 0 <= n_row < height and 0 <= n_col < width:
                    neighbor = int(grid[n_row, n_col])
                    assert rules[tile].allows(direction, neighbor), (
                        f"{neighbor} not allowed {direction.name} of {tile} at ({row}, {col})"
                    )


@pytest.fixture
def follows_rules():
    return assert_follows_rules
