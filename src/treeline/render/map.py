"""Simple matplotlib rendering for Treeline results."""

from __future__ import annotations

import logging
from pathlib import Path

import matplotlib.pyplot as plt

from treeline.pipeline import PipelineOutput

LOG = logging.getLogger(__name__)


def render_map(output: PipelineOutput, output_path: Path) -> None:
    """Render heights with visible cells and the best scenic cell marked."""
    grid = output.grid
    mask = output.evaluation.visible

    fig, ax = plt.subplots(figsize=(6, 6), dpi=150)
    image = ax.imshow(grid.heights, cmap="Greens", interpolation="nearest", origin="upper")
    fig.colorbar(image, ax=ax, label="Height")

    visible_rows, visible_cols = mask.nonzero()
    ax.scatter(visible_cols, visible_rows, marker=".", s=12, color="gold", label="Visible")

    if output.summary.best_cell is not None:
        best_row, best_col = output.summary.best_cell
        ax.scatter(
            [best_col],
            [best_row],
            marker="*",
            s=120,
            color="crimson",
            label=f"Best score ({output.summary.max_scenic_score})",
        )

    ax.set_xlabel("Column")
    ax.set_ylabel("Row")
    ax.set_title("Treeline Visibility Overview")
    ax.legend(loc="upper right")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    plt.tight_layout()
    fig.savefig(output_path)
    plt.close(fig)
    LOG.info("Rendered map saved to %s", output_path)
