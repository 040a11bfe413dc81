from typing import List

from .grid import Cell, Grid


class Propagator:
    """
    Narrows the superpositions around a freshly collapsed cell.

    Only the four direct neighbours are touched; constraints are not carried
    any further.
    """
    def __init__(self, grid: Grid) -> None:
        self.grid = grid

    def snapshot(self, row: int, col: int) -> List[Cell]:
        """Copy of the neighbours of (row, col), for restore()"""
        return [self.grid.get(n.row, n.col) for n in self.grid.neighbors(row, col)]

    def restore(self, cells: List[Cell]) -> None:
        for cell in cells:
            self.grid.set(cell.row, cell.col, cell)

    def propagate(self, row: int, col: int, tile_idx: int) -> None:
        """
        Keep only the neighbour candidates the collapsed tile allows.

        Collapsed neighbours have no candidates and are left as they are.
        """
        grid = self.grid
        allowed = grid.rule_table.adjacency[tile_idx]
        for n in grid.neighbors(row, col):
            grid.candidates[n.row, n.col] &= allowed[n.direction]
