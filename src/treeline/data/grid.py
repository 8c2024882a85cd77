"""Height-map grid model and convenience constructors."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Tuple

import numpy as np
from numpy.typing import NDArray


class GridConstructionError(ValueError):
    """Raised when rows cannot form a rectangular grid of non-negative heights."""


class OutOfBoundsError(IndexError):
    """Raised when a cell coordinate falls outside the grid."""

    def __init__(self, row: int, col: int, shape: Tuple[int, int]) -> None:
        self.row = row
        self.col = col
        self.shape = shape
        super().__init__(f"Cell ({row}, {col}) outside grid of shape {shape[0]}x{shape[1]}")


@dataclass(frozen=True, eq=False)
class HeightGrid:
    """Immutable rectangular grid of integer heights."""

    heights: NDArray[np.int64]

    def __post_init__(self) -> None:
        try:
            raw = np.asarray(self.heights)
        except ValueError as exc:
            raise GridConstructionError(f"Rows do not form a rectangular grid: {exc}") from exc
        if raw.ndim != 2 or raw.shape[0] == 0 or raw.shape[1] == 0:
            raise GridConstructionError(
                f"Grid must have at least one row and one column, got shape {raw.shape}",
            )
        if raw.dtype.kind not in "iu":
            raise GridConstructionError(f"Grid heights must be integers, got dtype {raw.dtype}")
        heights = np.array(raw, dtype=np.int64)
        object.__setattr__(self, "heights", heights)
        if (heights < 0).any():
            raise GridConstructionError("Grid heights must be non-negative")
        heights.setflags(write=False)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "HeightGrid":
        """
        Build a grid from row sequences.

        Every row must have the same length as the first; nothing is padded or truncated.
        """
        if not rows:
            raise GridConstructionError("Grid must have at least one row")
        width = len(rows[0])
        for index, row in enumerate(rows):
            if len(row) != width:
                raise GridConstructionError(
                    f"Row {index} has {len(row)} cells, expected {width}",
                )
        return cls(heights=np.array(rows).reshape(len(rows), width))

    @property
    def shape(self) -> Tuple[int, int]:
        return self.heights.shape[0], self.heights.shape[1]

    @property
    def rows(self) -> int:
        return self.heights.shape[0]

    @property
    def cols(self) -> int:
        return self.heights.shape[1]

    def row_count(self) -> int:
        return self.rows

    def col_count(self) -> int:
        return self.cols

    def check_bounds(self, row: int, col: int) -> None:
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise OutOfBoundsError(row, col, self.shape)

    def height(self, row: int, col: int) -> int:
        self.check_bounds(row, col)
        return int(self.heights[row, col])

    def row_sequence(self, row: int, reverse: bool = False) -> NDArray[np.int64]:
        """Return a read-only view of one row, left-to-right or right-to-left."""
        self.check_bounds(row, 0)
        view = self.heights[row, :]
        return view[::-1] if reverse else view

    def col_sequence(self, col: int, reverse: bool = False) -> NDArray[np.int64]:
        """Return a read-only view of one column, top-to-bottom or bottom-to-top."""
        self.check_bounds(0, col)
        view = self.heights[:, col]
        return view[::-1] if reverse else view

    def cells(self) -> Iterator[Tuple[int, int]]:
        """Yield every (row, col) coordinate in row-major order."""
        for row in range(self.rows):
            for col in range(self.cols):
                yield row, col

    def is_boundary(self, row: int, col: int) -> bool:
        self.check_bounds(row, col)
        return row == 0 or col == 0 or row == self.rows - 1 or col == self.cols - 1

    def boundary_cell_count(self) -> int:
        if self.rows < 2 or self.cols < 2:
            return self.rows * self.cols
        return 2 * self.rows + 2 * self.cols - 4

    def transpose(self) -> "HeightGrid":
        return HeightGrid(heights=np.ascontiguousarray(self.heights.T))


def generate_synthetic_grid(
    size: Tuple[int, int] = (40, 40),
    max_height: int = 9,
    seed: int | None = 0,
) -> HeightGrid:
    """
    Create a reproducible random height grid for demos and tests.

    Heights are drawn uniformly from ``[0, max_height]``.
    """
    rows, cols = size
    rng = np.random.default_rng(seed)
    heights = rng.integers(0, max_height + 1, size=(rows, cols), dtype=np.int64)
    return HeightGrid(heights=heights)
