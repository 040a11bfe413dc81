import logging
from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from .directions import Direction
from .errors import InvalidSeedError, UnsolvableError
from .rules import RuleTable

logger = logging.getLogger(__name__)

Position = Tuple[int, int]
Seed = Tuple[int, Position]


@dataclass(frozen=True)
class Cell:
    """
    Snapshot of one grid cell, in tile types (not indices).

    A collapsed cell has a value and no candidates. A cell with neither is
    a contradiction.
    """
    row: int
    col: int
    value: Optional[int] = None
    candidates: Tuple[int, ...] = ()

    @property
    def is_collapsed(self) -> bool:
        return self.value is not None

    @property
    def is_contradictory(self) -> bool:
        return self.value is None and not self.candidates

    @property
    def entropy(self) -> float:
        return float("inf") if self.is_collapsed else float(len(self.candidates))


class Neighbor(NamedTuple):
    direction: Direction
    anti_direction: Direction
    row: int
    col: int


class Grid:
    """
    Board of cells being collapsed.

    Storage mirrors the wave of classic WFC implementations:
    values[row, col] is the collapsed tile index or -1, and
    candidates[row, col, tile] is True while that tile is still possible.
    """
    def __init__(self, height: int, width: int, rule_table: RuleTable) -> None:
        if height <= 0 or width <= 0:
            raise ValueError(f"grid dimensions must be positive, got {height}x{width}")

        self.height = height
        self.width = width
        self.rule_table = rule_table

        self.values = np.full((height, width), -1, dtype=np.int64)
        self.candidates = np.ones((height, width, rule_table.num_tiles), dtype=bool)

    @classmethod
    def initialize(
        cls,
        height: int,
        width: int,
        rule_table: RuleTable,
        seeds: Optional[Sequence[Seed]] = None,
        strict_seeds: bool = False,
    ) -> "Grid":
        """
        Create a fresh grid, every cell in full superposition, then place seeds.

        Seeds are not checked against the rules. Seeds outside the grid are
        skipped unless strict_seeds is set.

        Raises:
            InvalidSeedError: For an in bounds seed whose tile type was never
                learned, or an out of bounds seed when strict_seeds is True
        """
        grid = cls(height, width, rule_table)
        for tile, (row, col) in seeds or ():
            if not grid.in_bounds(row, col):
                if strict_seeds:
                    raise InvalidSeedError(f"seed ({row}, {col}) is outside the {height}x{width} grid")
                logger.warning("Ignoring seed %d at (%d, %d): outside the %dx%d grid", tile, row, col, height, width)
                continue
            if tile not in rule_table:
                raise InvalidSeedError(f"seed tile type {tile} does not appear in the sample")
            grid.collapse_cell(row, col, rule_table.index_of(tile))
        return grid

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def _check_bounds(self, row: int, col: int) -> None:
        if not self.in_bounds(row, col):
            raise IndexError(f"cell ({row}, {col}) is outside the {self.height}x{self.width} grid")

    def get(self, row: int, col: int) -> Cell:
        self._check_bounds(row, col)
        tile_types = self.rule_table.tile_types
        idx = self.values[row, col]
        if idx >= 0:
            return Cell(row, col, int(tile_types[idx]))
        possible = tile_types[self.candidates[row, col]]
        return Cell(row, col, None, tuple(int(t) for t in possible))

    def set(self, row: int, col: int, cell: Cell) -> None:
        """Overwrite the cell at (row, col); candidates are ignored for collapsed cells"""
        self._check_bounds(row, col)
        table = self.rule_table
        if cell.value is not None:
            self.collapse_cell(row, col, table.index_of(cell.value))
            return
        self.values[row, col] = -1
        self.candidates[row, col] = False
        for tile in cell.candidates:
            self.candidates[row, col, table.index_of(tile)] = True

    def collapse_cell(self, row: int, col: int, tile_idx: int) -> None:
        self.values[row, col] = tile_idx
        self.candidates[row, col] = False

    def neighbors(self, row: int, col: int) -> List[Neighbor]:
        """In-bounds neighbours of (row, col); no wraparound"""
        result = []
        for direction in Direction:
            d_row, d_col = direction.offset
            n_row, n_col = row + d_row, col + d_col
            if self.in_bounds(n_row, n_col):
                result.append(Neighbor(direction, direction.opposite, n_row, n_col))
        return result

    def entropy(self) -> np.ndarray:
        """Candidate counts per cell, inf for collapsed cells"""
        counts = self.candidates.sum(axis=2).astype(np.float64)
        counts[self.values >= 0] = np.inf
        return counts

    def select_next(self) -> Optional[Position]:
        """
        Position of the lowest entropy cell, first in row-major order on ties.

        Returns None when every cell is collapsed. A contradictory cell has
        entropy 0, so callers only use this on a valid grid.
        """
        if self.all_collapsed():
            return None
        row, col = np.unravel_index(np.argmin(self.entropy()), self.values.shape)
        return int(row), int(col)

    def all_collapsed(self) -> bool:
        return bool(np.all(self.values >= 0))

    def has_contradiction(self) -> bool:
        open_cells = self.values < 0
        return bool(np.any(open_cells & ~self.candidates.any(axis=2)))

    def is_valid(self) -> bool:
        """
        Check that no cell is contradictory and no two adjacent collapsed
        cells break the rules.

        For each collapsed cell, every collapsed neighbour's rule looking back
        (the anti-direction) must list the cell's tile. Scanning the whole
        board means both tiles of an adjacent pair are checked this way.
        """
        if self.has_contradiction():
            return False

        adjacency = self.rule_table.adjacency

        # Vertical pairs: top sits NORTH of bottom
        top, bottom = self.values[:-1, :], self.values[1:, :]
        both = (top >= 0) & (bottom >= 0)
        t, b = top[both], bottom[both]
        if not (adjacency[b, Direction.NORTH, t].all() and adjacency[t, Direction.SOUTH, b].all()):
            return False

        # Horizontal pairs: left sits WEST of right
        left, right = self.values[:, :-1], self.values[:, 1:]
        both = (left >= 0) & (right >= 0)
        w, e = left[both], right[both]
        if not (adjacency[e, Direction.WEST, w].all() and adjacency[w, Direction.EAST, e].all()):
            return False

        return True

    def is_solved(self) -> bool:
        return self.is_valid() and self.all_collapsed()

    def to_array(self) -> np.ndarray:
        """
        Collapsed grid as tile types.

        Raises:
            UnsolvableError: If any cell has not been collapsed
        """
        if not self.all_collapsed():
            raise UnsolvableError("grid still has cells that are not collapsed")
        return self.rule_table.tile_types[self.values]
