"""Generate a synthetic digit height map for demos without real survey data."""

from __future__ import annotations

from pathlib import Path

import typer

from treeline.data.grid import generate_synthetic_grid
from treeline.data.parsing import format_grid

PROJECT_ROOT = Path(__file__).resolve().parent.parent

app = typer.Typer(help="Create synthetic height-map assets for tests or demos.")


@app.command()
def main(
    output: Path = typer.Argument(
        PROJECT_ROOT / "data" / "toy" / "grid_synthetic.txt",
        help="Output text file path.",
    ),
    rows: int = typer.Option(99, "--rows", min=1, help="Number of grid rows."),
    cols: int = typer.Option(99, "--cols", min=1, help="Number of grid columns."),
    seed: int = typer.Option(0, "--seed", help="Random seed."),
) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    grid = generate_synthetic_grid(size=(rows, cols), seed=seed)
    output.write_text(format_grid(grid), encoding="utf-8")
    typer.echo(f"Synthetic {rows}x{cols} grid written to {output}")


if __name__ == "__main__":
    app()
