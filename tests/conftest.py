from __future__ import annotations

import sys
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parent.parent
ROOT_STR = str(ROOT)
if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)

SRC = ROOT / "src"
SRC_STR = str(SRC)
if SRC_STR not in sys.path:
    sys.path.insert(0, SRC_STR)

CANOPY_TEXT = "30373\n25512\n65332\n33549\n35390\n"


@pytest.fixture
def canopy_text() -> str:
    return CANOPY_TEXT


@pytest.fixture
def canopy_grid():
    from treeline.data.parsing import parse_grid

    return parse_grid(CANOPY_TEXT)
