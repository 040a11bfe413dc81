from enum import IntEnum
from typing import Tuple

import numpy as np


class Direction(IntEnum):
    """Cardinal directions, ordered clockwise so that opposite = (d + 2) % 4"""

    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3

    @property
    def opposite(self) -> "Direction":
        return get_opposite_direction(self)

    @property
    def offset(self) -> Tuple[int, int]:
        """(row, col) step towards this direction"""
        return int(DIRECTIONS_ROW[self]), int(DIRECTIONS_COL[self])


# Row/col steps indexed by Direction: north, east, south, west
DIRECTIONS_ROW = np.array([-1, 0, 1, 0])
DIRECTIONS_COL = np.array([0, 1, 0, -1])


def get_opposite_direction(direction: int) -> Direction:
    """Get the opposite direction (0-3)"""
    return Direction((direction + 2) % 4)
