"""Tests for grid-wide visible counts and scenic scores."""

from __future__ import annotations

import numpy as np
import pytest

from treeline.analysis.sightline import Direction
from treeline.analysis.visibility import (
    ScoreConvention,
    VisibilityEngine,
    combine_distances,
    count_visible,
    max_scenic_score,
)
from treeline.data.grid import HeightGrid, generate_synthetic_grid


def _reference_answers(grid: HeightGrid, floored: bool) -> tuple[int, int]:
    """Straightforward nested-loop version used as an oracle."""
    heights = grid.heights.tolist()
    rows, cols = grid.shape
    visible = 0
    best = 0
    for row in range(rows):
        for col in range(cols):
            tree = heights[row][col]
            lines = [
                [heights[r][col] for r in range(row - 1, -1, -1)],
                [heights[r][col] for r in range(row + 1, rows)],
                [heights[row][c] for c in range(col - 1, -1, -1)],
                [heights[row][c] for c in range(col + 1, cols)],
            ]
            if any(all(other < tree for other in line) for line in lines):
                visible += 1
            score = 1
            for line in lines:
                seen = 0
                for other in line:
                    seen += 1
                    if other >= tree:
                        break
                score *= max(seen, 1) if floored else seen
            best = max(best, score)
    return visible, best


def test_canonical_grid__natural_convention(canopy_grid: HeightGrid) -> None:
    engine = VisibilityEngine(canopy_grid)

    assert engine.count_visible() == 21
    assert engine.max_scenic_score() == 8
    assert engine.scenic_score(3, 2) == 8
    assert engine.scenic_score(1, 2) == 4


def test_canonical_grid__floored_convention(canopy_grid: HeightGrid) -> None:
    engine = VisibilityEngine(canopy_grid, convention=ScoreConvention.FLOORED)

    assert engine.count_visible() == 21
    assert engine.max_scenic_score() == 16
    assert engine.scenic_score(2, 0) == 16
    assert engine.scenic_score(3, 2) == 8


def test_summary__reports_first_best_cell(canopy_grid: HeightGrid) -> None:
    natural = VisibilityEngine(canopy_grid).summarize()
    floored = VisibilityEngine(canopy_grid, convention="floored").summarize()

    assert natural.visible_count == 21
    assert natural.max_scenic_score == 8
    assert natural.best_cell == (3, 2)
    assert natural.total_cells == 25
    assert natural.boundary_cells == 16
    assert floored.best_cell == (2, 0)
    assert floored.convention is ScoreConvention.FLOORED


def test_evaluate_cell__collects_all_directions(canopy_grid: HeightGrid) -> None:
    cell = VisibilityEngine(canopy_grid).evaluate_cell(3, 2)

    assert cell.height == 5
    assert cell.visible
    assert cell.distances == {
        Direction.UP: 2,
        Direction.DOWN: 1,
        Direction.LEFT: 2,
        Direction.RIGHT: 2,
    }
    assert cell.scenic_score == 8


def test_visibility_mask__interior_pattern(canopy_grid: HeightGrid) -> None:
    mask = VisibilityEngine(canopy_grid).visibility_mask()

    assert mask.sum() == 21
    assert mask[0, :].all() and mask[-1, :].all() and mask[:, 0].all() and mask[:, -1].all()
    assert mask[1:4, 1:4].tolist() == [
        [True, True, False],
        [True, False, True],
        [False, True, False],
    ]


def test_scenic_score_map__boundary_zero_under_natural(canopy_grid: HeightGrid) -> None:
    scores = VisibilityEngine(canopy_grid).scenic_score_map()

    assert scores.max() == 8
    assert scores[0, :].sum() == 0 and scores[:, 0].sum() == 0
    assert scores[-1, :].sum() == 0 and scores[:, -1].sum() == 0


def test_uniform_grid__only_boundary_visible() -> None:
    grid = HeightGrid.from_rows([[1, 1, 1], [1, 1, 1], [1, 1, 1]])
    engine = VisibilityEngine(grid)

    assert engine.count_visible() == 8
    assert not engine.is_visible(1, 1)
    assert engine.scenic_score(1, 1) == 1
    assert engine.max_scenic_score() == 1
    assert max_scenic_score(grid, ScoreConvention.FLOORED) == 1


def test_single_row__every_cell_on_boundary() -> None:
    grid = HeightGrid.from_rows([[1, 2, 3, 4, 5]])

    assert count_visible(grid) == 5
    assert max_scenic_score(grid) == 0
    assert max_scenic_score(grid, ScoreConvention.FLOORED) == 4


def test_single_cell_grid() -> None:
    grid = HeightGrid.from_rows([[7]])

    assert count_visible(grid) == 1
    assert max_scenic_score(grid) == 0
    assert max_scenic_score(grid, "floored") == 1


def test_combine_distances__conventions() -> None:
    distances = {Direction.UP: 0, Direction.DOWN: 3, Direction.LEFT: 2, Direction.RIGHT: 1}

    assert combine_distances(distances, ScoreConvention.NATURAL) == 0
    assert combine_distances(distances, ScoreConvention.FLOORED) == 6


def test_engine_rejects_zero_workers(canopy_grid: HeightGrid) -> None:
    with pytest.raises(ValueError):
        VisibilityEngine(canopy_grid, workers=0)


@pytest.mark.parametrize("seed", [0, 7, 21])
@pytest.mark.parametrize("convention", list(ScoreConvention))
def test_matches_reference_loops(seed: int, convention: ScoreConvention) -> None:
    grid = generate_synthetic_grid(size=(9, 13), seed=seed)
    expected_visible, expected_best = _reference_answers(
        grid, floored=convention is ScoreConvention.FLOORED
    )

    engine = VisibilityEngine(grid, convention=convention)

    assert engine.count_visible() == expected_visible
    assert engine.max_scenic_score() == expected_best


@pytest.mark.parametrize("seed", [4, 5])
def test_properties_on_random_grids(seed: int) -> None:
    grid = generate_synthetic_grid(size=(10, 8), max_height=5, seed=seed)
    engine = VisibilityEngine(grid)
    mask = engine.visibility_mask()

    for row, col in grid.cells():
        if grid.is_boundary(row, col):
            assert mask[row, col]
    assert engine.count_visible() >= 2 * grid.rows + 2 * grid.cols - 4

    transposed = VisibilityEngine(grid.transpose())
    assert transposed.count_visible() == engine.count_visible()
    assert transposed.max_scenic_score() == engine.max_scenic_score()

    first = (engine.count_visible(), engine.max_scenic_score())
    second = (engine.count_visible(), engine.max_scenic_score())
    assert first == second


def test_threaded_scan_matches_serial() -> None:
    grid = generate_synthetic_grid(size=(25, 30), seed=11)
    serial = VisibilityEngine(grid, workers=1)
    threaded = VisibilityEngine(grid, workers=4)

    assert threaded.count_visible() == serial.count_visible()
    assert threaded.max_scenic_score() == serial.max_scenic_score()
    assert threaded.summarize() == serial.summarize()
    assert np.array_equal(threaded.scenic_score_map(), serial.scenic_score_map())


def test_evaluation__single_pass_answers(canopy_grid: HeightGrid) -> None:
    evaluation = VisibilityEngine(canopy_grid).evaluate()

    assert evaluation.visible_count == 21
    assert evaluation.max_scenic_score == 8
    assert evaluation.best_cell == (3, 2)
    assert evaluation.distances.shape == (5, 5, 4)
    assert evaluation.cell(3, 2) == VisibilityEngine(canopy_grid).evaluate_cell(3, 2)
    assert len(list(evaluation.iter_cells())) == 25


def test_evaluation__top_cells_break_ties_row_major() -> None:
    grid = HeightGrid.from_rows([[1, 1, 1], [1, 1, 1], [1, 1, 1]])
    evaluation = VisibilityEngine(grid, convention=ScoreConvention.FLOORED).evaluate()

    top = evaluation.top_cells(3)

    assert [cell.scenic_score for cell in top] == [1, 1, 1]
    assert [(cell.row, cell.col) for cell in top] == [(0, 0), (0, 1), (0, 2)]
    assert evaluation.best_cell == (0, 0)


def test_evaluation__top_cells_ranked_by_score(canopy_grid: HeightGrid) -> None:
    top = VisibilityEngine(canopy_grid).evaluate().top_cells(3)

    assert [(cell.row, cell.col, cell.scenic_score) for cell in top] == [
        (3, 2, 8),
        (2, 1, 6),
        (1, 2, 4),
    ]
