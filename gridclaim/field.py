# gridclaim/field.py
from __future__ import annotations
from typing import Tuple

Coord = Tuple[int, int]  # (row, col)

GRID_SIZE = 10
PALETTE = ("Red", "Orange", "Yellow", "Green", "Blue", "Purple")

_PALETTE_BY_NAME = {name.lower(): name for name in PALETTE}


def _validate_coord(pos: Coord) -> None:
    r, c = pos
    if not (0 <= r < GRID_SIZE and 0 <= c < GRID_SIZE):
        raise ValueError(f"invalid coordinate {r} {c}")


def cell_key(row: int, col: int) -> str:
    """Canonical key for a cell: row and column joined by one space."""
    _validate_coord((row, col))
    return f"{row} {col}"


def parse_key(key: str) -> Coord:
    parts = str(key).split()
    if len(parts) != 2:
        raise ValueError(f"invalid cell {key!r}")
    try:
        r, c = int(parts[0]), int(parts[1])
    except ValueError:
        raise ValueError(f"invalid cell {key!r}") from None
    _validate_coord((r, c))
    return (r, c)


def normalize_color(color: str) -> str:
    name = _PALETTE_BY_NAME.get(str(color).strip().lower())
    if name is None:
        raise ValueError(f"unknown color {color!r}; choose one of {', '.join(PALETTE)}")
    return name
