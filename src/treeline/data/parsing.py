"""Text parsing for digit height maps."""

from __future__ import annotations

import logging
from pathlib import Path

from treeline.data.grid import HeightGrid

LOG = logging.getLogger(__name__)


class ParseError(ValueError):
    """Raised when text does not describe a rectangular block of digits."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None) -> None:
        self.line = line
        self.column = column
        if line is not None:
            location = f"line {line}" if column is None else f"line {line}, column {column}"
            message = f"{message} ({location})"
        super().__init__(message)


class GridFileNotFoundError(RuntimeError):
    """Raised when a grid input file cannot be located."""

    def __init__(self, path: Path | None, message: str) -> None:
        self.path = path
        super().__init__(message)


def parse_grid(text: str) -> HeightGrid:
    """
    Parse equal-length lines of decimal digits into a grid.

    Leading and trailing blank lines are ignored, as is trailing whitespace on each line.
    Line and column numbers in errors are 1-based.
    """
    lines = [line.rstrip() for line in text.splitlines()]
    start = 0
    while start < len(lines) and not lines[start]:
        start += 1
    stop = len(lines)
    while stop > start and not lines[stop - 1]:
        stop -= 1
    if start == stop:
        raise ParseError("Input contains no grid rows")

    width = len(lines[start])
    rows: list[list[int]] = []
    for offset, line in enumerate(lines[start:stop]):
        line_no = start + offset + 1
        if len(line) != width:
            raise ParseError(f"Expected {width} digits but found {len(line)}", line=line_no)
        row: list[int] = []
        for col_no, char in enumerate(line, start=1):
            if not ("0" <= char <= "9"):
                raise ParseError(f"Invalid height character {char!r}", line=line_no, column=col_no)
            row.append(ord(char) - ord("0"))
        rows.append(row)
    return HeightGrid.from_rows(rows)


def format_grid(grid: HeightGrid) -> str:
    """Render a single-digit grid back to its text form."""
    if int(grid.heights.max()) > 9:
        raise ValueError("Only grids with heights 0-9 can be written as digit text")
    return "\n".join("".join(str(int(value)) for value in row) for row in grid.heights) + "\n"


def load_grid(path: Path | str) -> HeightGrid:
    """Read and parse a grid file."""
    path_obj = Path(path)
    if not path_obj.is_file():
        raise GridFileNotFoundError(path_obj, f"Grid file {path_obj} does not exist.")
    data = path_obj.read_bytes()
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        line_start = data.rfind(b"\n", 0, exc.start) + 1
        raise ParseError(
            "File is not valid UTF-8 text",
            line=data.count(b"\n", 0, exc.start) + 1,
            column=exc.start - line_start + 1,
        ) from exc
    grid = parse_grid(text)
    LOG.debug("Parsed %dx%d grid from %s", grid.rows, grid.cols, path_obj)
    return grid
