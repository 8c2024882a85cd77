"""Result presentation utilities."""

from __future__ import annotations

import csv
import json
import logging
from collections.abc import Iterable
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from treeline.analysis.sightline import Direction
from treeline.analysis.visibility import CellVisibility
from treeline.config import AppConfig
from treeline.pipeline import PipelineOutput

LOG = logging.getLogger(__name__)


def emit_report(output: PipelineOutput, config: AppConfig, console: Console | None = None) -> None:
    """Format and emit results based on configuration."""
    if config.output.rich_table:
        _render_rich(output, console or Console())
    else:
        _render_plain(output)

    if config.output.export_csv:
        _export_csv(output.evaluation.iter_cells(), config.output.export_csv)
    if config.output.export_json:
        _export_json(output, config.output.export_json)


def _render_rich(output: PipelineOutput, console: Console) -> None:
    summary = output.summary
    best = _format_cell(summary.best_cell)
    lines = [
        f"Grid: {output.grid.rows} x {output.grid.cols} ({summary.total_cells} cells)",
        f"Visible from outside: {summary.visible_count} (boundary {summary.boundary_cells})",
        f"Max scenic score: {summary.max_scenic_score} at {best} [{summary.convention.value}]",
    ]
    console.print(Panel(Text("\n".join(lines)), title="Treeline", border_style="cyan", expand=False))

    if not output.top_cells:
        console.print(Text("No cells evaluated.", style="yellow"))
        return

    table = Table(title="Top scenic cells")
    table.add_column("Rank", justify="right")
    table.add_column("Cell")
    table.add_column("Height", justify="right")
    for direction in Direction:
        table.add_column(direction.name.title(), justify="right")
    table.add_column("Score", justify="right", style="bold green")
    table.add_column("Visible")
    for idx, cell in enumerate(output.top_cells, start=1):
        table.add_row(
            str(idx),
            _format_cell((cell.row, cell.col)),
            str(cell.height),
            *(str(cell.distances[direction]) for direction in Direction),
            str(cell.scenic_score),
            "yes" if cell.visible else "no",
        )
    console.print(table)


def _render_plain(output: PipelineOutput) -> None:
    summary = output.summary
    LOG.info(
        "visible=%d max_scenic_score=%d best=%s convention=%s",
        summary.visible_count,
        summary.max_scenic_score,
        _format_cell(summary.best_cell),
        summary.convention.value,
    )
    for idx, cell in enumerate(output.top_cells, start=1):
        LOG.info(
            "[%d] cell=%s height=%d score=%d visible=%s",
            idx,
            _format_cell((cell.row, cell.col)),
            cell.height,
            cell.scenic_score,
            cell.visible,
        )


def _export_csv(cells: Iterable[CellVisibility], path: Path) -> None:
    fieldnames = [
        "row",
        "col",
        "height",
        "visible",
        *(f"distance_{direction.name.lower()}" for direction in Direction),
        "scenic_score",
    ]
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=fieldnames)
        writer.writeheader()
        for cell in cells:
            row = {
                "row": cell.row,
                "col": cell.col,
                "height": cell.height,
                "visible": int(cell.visible),
                "scenic_score": cell.scenic_score,
            }
            for direction in Direction:
                row[f"distance_{direction.name.lower()}"] = cell.distances[direction]
            writer.writerow(row)
    LOG.info("CSV exported to %s", path)


def _export_json(output: PipelineOutput, path: Path) -> None:
    summary = output.summary
    document = {
        "rows": output.grid.rows,
        "cols": output.grid.cols,
        "visible_count": summary.visible_count,
        "max_scenic_score": summary.max_scenic_score,
        "best_cell": list(summary.best_cell) if summary.best_cell else None,
        "boundary_cells": summary.boundary_cells,
        "convention": summary.convention.value,
        "top_cells": [
            {
                "row": cell.row,
                "col": cell.col,
                "height": cell.height,
                "visible": cell.visible,
                "distances": {
                    direction.name.lower(): cell.distances[direction] for direction in Direction
                },
                "scenic_score": cell.scenic_score,
            }
            for cell in output.top_cells
        ],
    }
    with path.open("w", encoding="utf-8") as handle:
        json.dump(document, handle, indent=2)
    LOG.info("JSON exported to %s", path)


def _format_cell(cell: tuple[int, int] | None) -> str:
    if cell is None:
        return "n/a"
    return f"({cell[0]}, {cell[1]})"
