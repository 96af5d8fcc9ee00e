from __future__ import annotations

import sys
from pathlib import Path

import pytest

_SRC = (Path(__file__).resolve().parents[1] / "src").as_posix()
if _SRC not in sys.path:
    sys.path.insert(0, _SRC)

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"

# Roughly 100 m x 100 m cocoa plot near Gbarnga, Liberia, as (lat, lon).
LIBERIA_SQUARE = [
    (6.4281, -9.4295),
    (6.4281, -9.4286),
    (6.4290, -9.4286),
    (6.4290, -9.4295),
]


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def liberia_square() -> list[dict[str, float]]:
    return [{"latitude": lat, "longitude": lon} for lat, lon in LIBERIA_SQUARE]
