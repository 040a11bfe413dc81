import logging
from dataclasses import dataclass
from enum import Enum
from timeit import default_timer as timer
from typing import Callable, Iterator, List, Optional, Union

import numpy as np

from .grid import Cell, Grid, Position
from .propagator import Propagator
from .sampler import RandomSource, make_rng, weighted_order

logger = logging.getLogger(__name__)


class Status(Enum):
    SOLVED = "solved"
    UNSOLVABLE = "unsolvable"
    CANCELLED = "cancelled"


@dataclass
class SolveStats:
    attempts: int = 0
    backtracks: int = 0
    max_depth: int = 0
    elapsed: float = 0.0


class Frame:
    """One tentatively collapsed cell on the search stack"""
    __slots__ = ("row", "col", "backup", "order", "snapshot")

    def __init__(self, row: int, col: int, backup: np.ndarray, order: Iterator[int]) -> None:
        self.row = row
        self.col = col
        # Candidates the cell had before it was opened
        self.backup = backup
        # Remaining tile indices, drawn lazily by weight
        self.order = order
        # Neighbours as they were before the current attempt propagated
        self.snapshot: List[Cell] = []


class WFC:
    """
    Backtracking collapse of a grid.

    Each step takes the lowest entropy cell, tries its candidates in
    frequency-weighted random order, narrows the four neighbours and checks
    the whole board. A dead end undoes the attempt and tries the next
    candidate; a cell that runs out of candidates is reset and the search
    backs up to the previous cell. Pending cells live on an explicit stack,
    so grid size is not limited by the interpreter recursion limit.
    """
    def __init__(
        self,
        grid: Grid,
        rng: Optional[Union[int, RandomSource]] = None,
        cancel: Optional[Callable[[], bool]] = None,
        time_limit: Optional[float] = None,
    ) -> None:
        """
        Args:
            grid: Grid to collapse in place
            rng: Seed or numpy random source used for candidate order
            cancel: Callable returning True to stop, or an object with is_set()
                such as threading.Event
            time_limit: Seconds after which the search is cancelled
        """
        self.grid = grid
        self.rng = make_rng(rng)
        self.propagator = Propagator(grid)
        self.cancel = cancel
        self.time_limit = time_limit
        self.stats = SolveStats()
        self._start = 0.0

    def _open_frame(self, position: Position) -> Frame:
        row, col = position
        grid = self.grid
        backup = grid.candidates[row, col].copy()
        grid.candidates[row, col] = False

        tile_indices = np.flatnonzero(backup)
        weights = grid.rule_table.frequencies[tile_indices]
        order = weighted_order(tile_indices.tolist(), weights, self.rng)
        return Frame(row, col, backup, order)

    def _close_frame(self, frame: Frame) -> None:
        self.grid.values[frame.row, frame.col] = -1
        self.grid.candidates[frame.row, frame.col] = frame.backup

    def _cancelled(self) -> bool:
        if self.cancel is not None:
            is_set = getattr(self.cancel, "is_set", None)
            if is_set() if is_set is not None else self.cancel():
                return True
        if self.time_limit is not None and timer() - self._start > self.time_limit:
            return True
        return False

    def collapse(self, position: Optional[Position]) -> Status:
        """
        Collapse the grid starting from position.

        Returns:
            Status: SOLVED with every cell collapsed, UNSOLVABLE when the
                starting cell ran out of candidates, CANCELLED when stopped
        """
        self.stats = SolveStats()
        self._start = timer()
        status = self._search(position)
        self.stats.elapsed = timer() - self._start

        logger.info(
            "Collapse %s after %d attempts, %d backtracks, depth %d (%.3fs)",
            status.value, self.stats.attempts, self.stats.backtracks,
            self.stats.max_depth, self.stats.elapsed,
        )
        return status

    def _search(self, position: Optional[Position]) -> Status:
        grid = self.grid
        propagator = self.propagator

        if grid.is_solved():
            return Status.SOLVED
        if not grid.is_valid():
            logger.debug("Grid breaks the rules before any collapse")
            return Status.UNSOLVABLE
        if position is None:
            return Status.UNSOLVABLE

        stack = [self._open_frame(position)]
        self.stats.max_depth = 1

        while stack:
            if self._cancelled():
                return Status.CANCELLED

            frame = stack[-1]
            tile_idx = next(frame.order, None)

            if tile_idx is None:
                # Out of candidates: reset the cell and back up
                self._close_frame(frame)
                stack.pop()
                self.stats.backtracks += 1
                logger.debug("Backtracking from (%d, %d) at depth %d", frame.row, frame.col, len(stack) + 1)
                if stack:
                    propagator.restore(stack[-1].snapshot)
                continue

            self.stats.attempts += 1
            grid.values[frame.row, frame.col] = tile_idx
            frame.snapshot = propagator.snapshot(frame.row, frame.col)
            propagator.propagate(frame.row, frame.col, tile_idx)

            if not grid.is_valid():
                propagator.restore(frame.snapshot)
                continue

            if grid.all_collapsed():
                return Status.SOLVED

            stack.append(self._open_frame(grid.select_next()))
            self.stats.max_depth = max(self.stats.max_depth, len(stack))

        return Status.UNSOLVABLE

    def run(self) -> Optional[np.ndarray]:
        """
        Run the full collapse from the lowest entropy cell.

        Returns:
            Optional[np.ndarray]: 2D array of tile types, or None if the grid
                could not be solved or the run was cancelled
        """
        status = self.collapse(self.grid.select_next())
        if status is not Status.SOLVED:
            return None
        return self.grid.to_array()
