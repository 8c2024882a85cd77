"""Cardinal sightline scans from a single cell."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np
from numpy.typing import NDArray

from treeline.data.grid import HeightGrid


class Direction(Enum):
    """Cardinal scan direction, valued by its (row, col) step."""

    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)

    @property
    def step(self) -> tuple[int, int]:
        return self.value

    @property
    def transposed(self) -> "Direction":
        """Direction that covers the same cells once rows and columns are swapped."""
        d_row, d_col = self.value
        return Direction((d_col, d_row))


@dataclass(frozen=True)
class SightlineResult:
    """Outcome of scanning from one cell toward the grid edge."""

    direction: Direction
    is_blocked: bool
    view_distance: int

    @property
    def is_visible(self) -> bool:
        """True when nothing between the cell and the edge is as tall as the cell."""
        return not self.is_blocked


def sightline(grid: HeightGrid, row: int, col: int, direction: Direction) -> NDArray[np.int64]:
    """
    Return heights strictly between a cell and the edge, nearest first.

    The result is a view into the grid; walking toward lower indices uses the
    reversed row or column view.
    """
    grid.check_bounds(row, col)
    d_row, d_col = direction.step
    if d_row:
        line = grid.col_sequence(col, reverse=d_row < 0)
        position, length = row, grid.rows
    else:
        line = grid.row_sequence(row, reverse=d_col < 0)
        position, length = col, grid.cols
    if d_row < 0 or d_col < 0:
        position = length - 1 - position
    return line[position + 1 :]


def scan_sightline(grid: HeightGrid, row: int, col: int, direction: Direction) -> SightlineResult:
    """
    Scan outward from ``(row, col)`` and stop at the first cell at least as tall.

    The view distance counts the blocking cell; an unblocked scan sees the whole line.
    """
    origin = grid.height(row, col)
    heights = sightline(grid, row, col, direction)
    blockers = (
        distance for distance, value in enumerate(heights.tolist(), start=1) if value >= origin
    )
    first_blocker = next(blockers, None)
    if first_blocker is None:
        return SightlineResult(direction=direction, is_blocked=False, view_distance=len(heights))
    return SightlineResult(direction=direction, is_blocked=True, view_distance=first_blocker)


def scan_all(grid: HeightGrid, row: int, col: int) -> dict[Direction, SightlineResult]:
    return {direction: scan_sightline(grid, row, col, direction) for direction in Direction}


def is_visible_from_outside(grid: HeightGrid, row: int, col: int) -> bool:
    """Return True when at least one direction is unblocked."""
    return any(scan_sightline(grid, row, col, direction).is_visible for direction in Direction)
