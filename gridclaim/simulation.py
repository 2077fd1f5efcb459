# gridclaim/simulation.py
# Concurrent claim simulation: several players race for cells on one ledger.

from __future__ import annotations

import argparse
import asyncio
import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional, Set

from .commands import grid_rows
from .field import GRID_SIZE, PALETTE, cell_key
from .ledger import Claim, Ledger


@dataclass
class Stats:
    accepted: int = 0
    rejected: int = 0
    cells_claimed: int = 0
    accepted_batches: List[List[Claim]] = field(default_factory=list)


# ----- tiny helpers -----

def random_batch(rng: random.Random, owner: str, color: str, size: int) -> List[Claim]:
    cells = set()
    while len(cells) < size:
        cells.add(cell_key(rng.randrange(GRID_SIZE), rng.randrange(GRID_SIZE)))
    return [Claim(coordinates=k, owner=owner, color=color) for k in sorted(cells)]

async def timeout_ms(milliseconds: float) -> None:
    await asyncio.sleep(milliseconds / 1000.0)

def ledger_to_string(ledger: Ledger) -> str:
    lines = []
    for row in grid_rows(ledger):
        lines.append(" ".join(claim.owner[:1] if claim else "." for claim in row))
    return "\n".join(lines)


def verify(ledger: Ledger, stats: Stats) -> None:
    """Ledger must hold exactly the union of accepted batches, each cell once."""
    stored = ledger.snapshot()
    keys = [c.coordinates for c in stored]
    if len(keys) != len(set(keys)):
        raise RuntimeError("a cell is claimed more than once")

    expected: Set[Claim] = set()
    seen: Set[str] = set()
    for batch in stats.accepted_batches:
        for claim in batch:
            if claim.coordinates in seen:
                raise RuntimeError(f"two accepted batches share {claim.coordinates}")
            seen.add(claim.coordinates)
            expected.add(claim)
    if expected != set(stored):
        raise RuntimeError("ledger contents differ from accepted batches")


# ----- main concurrent simulation -----

async def simulate(
    players: int = 4,
    tries: int = 25,
    batch: int = 3,
    min_delay_ms: float = 0.1,
    max_delay_ms: float = 2.0,
    seed: Optional[int] = None,
    ledger: Optional[Ledger] = None,
) -> Stats:
    if batch < 1 or batch > GRID_SIZE * GRID_SIZE:
        raise ValueError("batch must be between 1 and the number of cells")
    ledger = ledger if ledger is not None else Ledger()
    rng = random.Random(seed)
    stats = Stats()

    async def player(player_number: int) -> None:
        owner = f"player{player_number}"
        color = PALETTE[player_number % len(PALETTE)]
        for _ in range(tries):
            await timeout_ms(min_delay_ms + rng.random() * (max_delay_ms - min_delay_ms))
            claims = random_batch(rng, owner, color, batch)
            # try_claim blocks on the ledger lock, so run it off the event loop
            ok = await asyncio.to_thread(ledger.try_claim, claims)
            if ok:
                stats.accepted += 1
                stats.cells_claimed += len(claims)
                stats.accepted_batches.append(claims)
            else:
                stats.rejected += 1

    await asyncio.gather(*(player(i) for i in range(players)))
    verify(ledger, stats)
    return stats


def run_simulation(**kwargs) -> Stats:
    return asyncio.run(simulate(**kwargs))


def main() -> None:
    ap = argparse.ArgumentParser(description="Race several players for cells on one ledger")
    ap.add_argument("--players", type=int, default=4)
    ap.add_argument("--tries", type=int, default=25)
    ap.add_argument("--batch", type=int, default=3)
    ap.add_argument("--seed", type=int, default=None)
    a = ap.parse_args()
    logging.basicConfig(level=logging.WARNING)

    ledger = Ledger()
    print(f"Starting simulation with {a.players} players, {a.tries} attempts each, {a.batch} cells per batch")
    stats = run_simulation(players=a.players, tries=a.tries, batch=a.batch, seed=a.seed, ledger=ledger)

    print("SIMULATION COMPLETE")
    print(f"Accepted batches: {stats.accepted}")
    print(f"Rejected batches: {stats.rejected}")
    print(f"Cells claimed: {stats.cells_claimed}")
    print("\nFinal field:")
    print(ledger_to_string(ledger))


if __name__ == "__main__":
    main()
