# gridclaim/ledger.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from threading import RLock
from typing import Dict, List, Optional, Sequence

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Claim:
    coordinates: str
    owner: str
    color: str


class Ledger:
    """
    Mutable occupancy ledger ADT.

    Rep:
      - claims maps a coordinate key to the Claim stored for that cell
      - every key equals its claim's coordinates
    Safety:
      - guarded by an internal lock to be safe under concurrent HTTP requests;
        snapshot and try_claim both run under it, so a batch is never seen
        half-applied
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._claims: Dict[str, Claim] = {}
        self._check_rep()

    def _check_rep(self) -> None:
        for key, claim in self._claims.items():
            assert isinstance(claim, Claim)
            assert key == claim.coordinates

    def __len__(self) -> int:
        with self._lock:
            return len(self._claims)

    def snapshot(self) -> List[Claim]:
        """Return a copy of every stored claim, in no guaranteed order."""
        with self._lock:
            return list(self._claims.values())

    def owner_of(self, coordinates: str) -> Optional[Claim]:
        with self._lock:
            return self._claims.get(coordinates)

    def try_claim(self, requested: Sequence[Claim]) -> bool:
        """
        Claim every cell in `requested`, or none of them.

        Returns False if any coordinate is already stored or appears twice in
        the batch. An empty batch succeeds without changing anything.
        """
        return not self.claim_batch(requested)

    def claim_batch(self, requested: Sequence[Claim]) -> List[str]:
        """
        Same as try_claim, but returns the coordinates that blocked the batch
        (already stored, or repeated within it), in batch order. An empty list
        means every claim was stored.
        """
        if requested is None:
            raise TypeError("requested must be a sequence of claims, not None")
        batch = list(requested)

        with self._lock:
            seen = set()
            conflicts: List[str] = []
            for claim in batch:
                key = claim.coordinates
                if (key in self._claims or key in seen) and key not in conflicts:
                    conflicts.append(key)
                seen.add(key)
            if conflicts:
                log.info("rejected batch of %d: %s already occupied", len(batch), ", ".join(conflicts))
                return conflicts

            for claim in batch:
                self._claims[claim.coordinates] = claim
            self._check_rep()

        if batch:
            log.info("accepted batch of %d for %s", len(batch), batch[0].owner)
        return []
