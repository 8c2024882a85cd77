"""Grid-wide visibility counts and scenic scores."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

import numpy as np
from numpy.typing import NDArray

from treeline.analysis.sightline import Direction, is_visible_from_outside, scan_all
from treeline.data.grid import HeightGrid

LOG = logging.getLogger(__name__)

T = TypeVar("T")


class ScoreConvention(str, Enum):
    """How zero-length sightlines contribute to the scenic score product."""

    NATURAL = "natural"
    FLOORED = "floored"


@dataclass(frozen=True)
class CellVisibility:
    """Per-cell sightline evaluation."""

    row: int
    col: int
    height: int
    visible: bool
    distances: dict[Direction, int]
    scenic_score: int


@dataclass(frozen=True)
class VisibilitySummary:
    """The two grid-wide answers plus context for reporting."""

    visible_count: int
    max_scenic_score: int
    best_cell: tuple[int, int] | None
    total_cells: int
    boundary_cells: int
    convention: ScoreConvention


@dataclass(frozen=True, eq=False)
class GridEvaluation:
    """
    Per-cell results of a single pass over the grid.

    ``distances`` has shape ``(rows, cols, 4)`` with the last axis in ``Direction`` order.
    """

    grid: HeightGrid
    convention: ScoreConvention
    visible: NDArray[np.bool_]
    distances: NDArray[np.int64]
    scores: NDArray[np.int64]

    @property
    def visible_count(self) -> int:
        return int(self.visible.sum())

    @property
    def max_scenic_score(self) -> int:
        return int(self.scores.max())

    @property
    def best_cell(self) -> tuple[int, int]:
        """First cell in row-major order reaching the maximum score."""
        row, col = np.unravel_index(int(self.scores.argmax()), self.scores.shape)
        return int(row), int(col)

    def cell(self, row: int, col: int) -> CellVisibility:
        self.grid.check_bounds(row, col)
        return CellVisibility(
            row=row,
            col=col,
            height=self.grid.height(row, col),
            visible=bool(self.visible[row, col]),
            distances={
                direction: int(self.distances[row, col, index])
                for index, direction in enumerate(Direction)
            },
            scenic_score=int(self.scores[row, col]),
        )

    def iter_cells(self) -> Iterator[CellVisibility]:
        for row, col in self.grid.cells():
            yield self.cell(row, col)

    def top_cells(self, count: int) -> list[CellVisibility]:
        """Highest-scoring cells, ties in row-major order."""
        order = np.argsort(-self.scores, axis=None, kind="stable")[:count]
        rows, cols = np.unravel_index(order, self.scores.shape)
        return [self.cell(int(row), int(col)) for row, col in zip(rows, cols)]

    def summarize(self) -> VisibilitySummary:
        summary = VisibilitySummary(
            visible_count=self.visible_count,
            max_scenic_score=self.max_scenic_score,
            best_cell=self.best_cell,
            total_cells=self.grid.rows * self.grid.cols,
            boundary_cells=self.grid.boundary_cell_count(),
            convention=self.convention,
        )
        LOG.debug(
            "Summary: %d/%d visible, max scenic score %d at %s",
            summary.visible_count,
            summary.total_cells,
            summary.max_scenic_score,
            summary.best_cell,
        )
        return summary


def combine_distances(distances: dict[Direction, int], convention: ScoreConvention) -> int:
    """
    Multiply four view distances into a scenic score.

    Under ``FLOORED`` each distance counts as at least 1, so edge cells keep a non-zero score.
    """
    if convention is ScoreConvention.FLOORED:
        return math.prod(max(distance, 1) for distance in distances.values())
    return math.prod(distances.values())


class VisibilityEngine:
    """Evaluate every cell of a grid against its four cardinal sightlines."""

    def __init__(
        self,
        grid: HeightGrid,
        convention: ScoreConvention | str = ScoreConvention.NATURAL,
        workers: int = 1,
    ) -> None:
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self.grid = grid
        self.convention = ScoreConvention(convention)
        self.workers = workers

    def is_visible(self, row: int, col: int) -> bool:
        return is_visible_from_outside(self.grid, row, col)

    def scenic_score(self, row: int, col: int) -> int:
        distances = {
            direction: result.view_distance
            for direction, result in scan_all(self.grid, row, col).items()
        }
        return combine_distances(distances, self.convention)

    def evaluate_cell(self, row: int, col: int) -> CellVisibility:
        results = scan_all(self.grid, row, col)
        distances = {direction: result.view_distance for direction, result in results.items()}
        return CellVisibility(
            row=row,
            col=col,
            height=self.grid.height(row, col),
            visible=any(result.is_visible for result in results.values()),
            distances=distances,
            scenic_score=combine_distances(distances, self.convention),
        )

    def iter_cells(self) -> Iterator[CellVisibility]:
        for row, col in self.grid.cells():
            yield self.evaluate_cell(row, col)

    def count_visible(self) -> int:
        """Number of cells visible from outside along at least one direction."""
        return sum(self._map_rows(self._count_visible_in_row))

    def max_scenic_score(self) -> int:
        """Largest scenic score over every cell."""
        return max(self._map_rows(self._best_in_row))

    def evaluate(self) -> GridEvaluation:
        """Scan every cell exactly once and keep the per-cell arrays."""
        row_results = self._map_rows(self._evaluate_row)
        visible = np.array([flags for flags, _ in row_results], dtype=bool)
        distances = np.array([row for _, row in row_results], dtype=np.int64)
        if self.convention is ScoreConvention.FLOORED:
            scores = np.maximum(distances, 1).prod(axis=2)
        else:
            scores = distances.prod(axis=2)
        return GridEvaluation(
            grid=self.grid,
            convention=self.convention,
            visible=visible,
            distances=distances,
            scores=scores,
        )

    def visibility_mask(self) -> NDArray[np.bool_]:
        return self.evaluate().visible

    def scenic_score_map(self) -> NDArray[np.int64]:
        return self.evaluate().scores

    def summarize(self) -> VisibilitySummary:
        return self.evaluate().summarize()

    def _count_visible_in_row(self, row: int) -> int:
        return sum(1 for col in range(self.grid.cols) if self.is_visible(row, col))

    def _best_in_row(self, row: int) -> int:
        return max(self.scenic_score(row, col) for col in range(self.grid.cols))

    def _evaluate_row(self, row: int) -> tuple[list[bool], list[list[int]]]:
        flags: list[bool] = []
        distances: list[list[int]] = []
        for col in range(self.grid.cols):
            results = scan_all(self.grid, row, col)
            flags.append(any(result.is_visible for result in results.values()))
            distances.append([results[direction].view_distance for direction in Direction])
        return flags, distances

    def _map_rows(self, func: Callable[[int], T]) -> list[T]:
        """Apply ``func`` to every row index, on a thread pool when configured."""
        rows = range(self.grid.rows)
        if self.workers == 1 or self.grid.rows == 1:
            return [func(row) for row in rows]
        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            return list(pool.map(func, rows))


def count_visible(grid: HeightGrid, workers: int = 1) -> int:
    return VisibilityEngine(grid, workers=workers).count_visible()


def max_scenic_score(
    grid: HeightGrid,
    convention: ScoreConvention | str = ScoreConvention.NATURAL,
    workers: int = 1,
) -> int:
    return VisibilityEngine(grid, convention=convention, workers=workers).max_scenic_score()
