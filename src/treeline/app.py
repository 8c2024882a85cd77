"""Command-line entry point for Treeline."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from treeline.analysis.visibility import ScoreConvention
from treeline.config import load_config
from treeline.data.grid import GridConstructionError
from treeline.data.parsing import GridFileNotFoundError, ParseError
from treeline.pipeline import run_pipeline
from treeline.render.map import render_map
from treeline.reporting.report import emit_report

app = typer.Typer(help="Treeline: count visible cells and find the best scenic score in a height map.")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s :: %(message)s",
    )


@app.command()
def main(
    grid_file: Path | None = typer.Argument(None, help="Text file of equal-length digit rows."),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Optional OmegaConf YAML configuration to load before applying CLI overrides.",
    ),
    convention: ScoreConvention | None = typer.Option(
        None,
        "--convention",
        help="Scenic score convention: 'natural' (edges score 0) or 'floored' (distances >= 1).",
    ),
    workers: int | None = typer.Option(
        None,
        "--workers",
        "-w",
        help="Threads used to scan grid rows.",
    ),
    top: int | None = typer.Option(
        None,
        "--top",
        "-n",
        help="Number of top scenic cells to list.",
    ),
    plain: bool = typer.Option(False, "--plain", help="Log plain text instead of rich panels."),
    export_csv: Path | None = typer.Option(None, "--export-csv", help="Optional per-cell CSV path."),
    export_json: Path | None = typer.Option(None, "--export-json", help="Optional summary JSON path."),
    render_png: Path | None = typer.Option(
        None,
        "--render-png",
        help="Optional overview PNG path.",
    ),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level (DEBUG, INFO, ...)."),
) -> None:
    """Compute visible cell count and maximum scenic score."""
    _configure_logging(log_level)

    overrides_raw = {
        "input.grid_path": grid_file,
        "scan.convention": convention.value if convention is not None else None,
        "scan.workers": workers,
        "output.top_cells": top,
        "output.rich_table": False if plain else None,
        "output.export_csv": export_csv,
        "output.export_json": export_json,
        "output.render_png": render_png,
    }
    overrides = {
        key: (str(value) if isinstance(value, Path) else value)
        for key, value in overrides_raw.items()
        if value is not None
    }

    config = load_config(
        config_path=config_file,
        overrides=overrides,
    )

    logging.getLogger(__name__).info("Starting Treeline scan")
    try:
        output = run_pipeline(config)
    except (GridFileNotFoundError, ParseError, GridConstructionError) as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc
    emit_report(output, config)

    if config.output.render_png:
        render_map(output, output_path=config.output.render_png)

    typer.echo(f"Visible: {output.summary.visible_count}")
    typer.echo(f"Max scenic score: {output.summary.max_scenic_score}")


if __name__ == "__main__":  # pragma: no cover
    app()
