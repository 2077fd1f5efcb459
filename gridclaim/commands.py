# gridclaim/commands.py
from __future__ import annotations
import logging
from typing import Dict, Iterable, List, Optional, Union

from .field import GRID_SIZE, PALETTE, Coord, cell_key, normalize_color, parse_key
from .ledger import Claim, Ledger

log = logging.getLogger(__name__)

CellRef = Union[str, Coord, List[int]]

CONFLICT_MESSAGE = "Some cells are already occupied"


def _to_key(cell: CellRef) -> str:
    if isinstance(cell, str):
        return cell_key(*parse_key(cell))
    try:
        r, c = cell
    except (TypeError, ValueError):
        raise ValueError(f"invalid cell {cell!r}") from None
    # bool is an int subclass; floats would be truncated
    if type(r) is not int or type(c) is not int:
        raise ValueError(f"invalid cell {cell!r}")
    return cell_key(r, c)


def claim_cells(ledger: Ledger, owner: str, color: str, cells: Iterable[CellRef]) -> Dict:
    """
    Validate a claim request and submit it to the ledger as one batch.
    Return a JSON-serializable dict for API response.
    """
    if owner is not None and not isinstance(owner, str):
        raise ValueError("owner must be text")
    owner = (owner or "").strip()
    if not owner:
        raise ValueError("owner must not be empty")
    color = normalize_color(color or "")
    keys = [_to_key(cell) for cell in (cells or [])]
    if not keys:
        raise ValueError("select at least one cell")

    batch = [Claim(coordinates=k, owner=owner, color=color) for k in keys]
    occupied = ledger.claim_batch(batch)
    if not occupied:
        return {"status": "ok", "claimed": keys, "owner": owner, "color": color}
    return {"status": "conflict", "message": CONFLICT_MESSAGE, "occupied": occupied}


def field_view(ledger: Ledger) -> Dict:
    claims = []
    for claim in ledger.snapshot():
        r, c = parse_key(claim.coordinates)
        claims.append({
            "coordinates": claim.coordinates,
            "row": r,
            "col": c,
            "owner": claim.owner,
            "color": claim.color,
        })
    claims.sort(key=lambda d: (d["row"], d["col"]))
    return {"size": GRID_SIZE, "palette": list(PALETTE), "claims": claims}


def grid_rows(ledger: Ledger) -> List[List[Optional[Claim]]]:
    """Rows x cols matrix of claims (None for free cells), from one snapshot."""
    rows: List[List[Optional[Claim]]] = [[None] * GRID_SIZE for _ in range(GRID_SIZE)]
    for claim in ledger.snapshot():
        r, c = parse_key(claim.coordinates)
        rows[r][c] = claim
    return rows
