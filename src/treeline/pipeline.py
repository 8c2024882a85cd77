"""High-level orchestration for a Treeline run."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from treeline.analysis.visibility import (
    CellVisibility,
    GridEvaluation,
    VisibilityEngine,
    VisibilitySummary,
)
from treeline.config import AppConfig
from treeline.data.grid import HeightGrid
from treeline.data.parsing import GridFileNotFoundError, load_grid

LOG = logging.getLogger(__name__)


@dataclass
class PipelineOutput:
    """Artifacts produced by the pipeline."""

    grid: HeightGrid
    evaluation: GridEvaluation
    summary: VisibilitySummary
    top_cells: list[CellVisibility]


def run_pipeline(config: AppConfig, grid: HeightGrid | None = None) -> PipelineOutput:
    """Load the grid (unless one is supplied) and compute both visibility answers."""
    if grid is None:
        LOG.info("Loading height grid...")
        grid = _load_grid(config)
    LOG.info("Loaded %dx%d grid", grid.rows, grid.cols)

    engine = VisibilityEngine(
        grid,
        convention=config.scan.convention,
        workers=config.scan.workers,
    )
    LOG.info(
        "Scanning %d cells (%s convention, %d worker(s))...",
        grid.rows * grid.cols,
        engine.convention.value,
        engine.workers,
    )
    evaluation = engine.evaluate()
    summary = evaluation.summarize()
    LOG.info(
        "Visible cells: %d, max scenic score: %d",
        summary.visible_count,
        summary.max_scenic_score,
    )

    return PipelineOutput(
        grid=grid,
        evaluation=evaluation,
        summary=summary,
        top_cells=evaluation.top_cells(config.output.top_cells),
    )


def _load_grid(config: AppConfig) -> HeightGrid:
    grid_path = config.input.grid_path
    if grid_path is None:
        raise GridFileNotFoundError(None, "No grid file configured. Pass a path or set input.grid_path.")
    return load_grid(Path(grid_path))
