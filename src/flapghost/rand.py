from __future__ import annotations

"""Seeded LCG helpers.

Every function is pure over an explicit seed. Callers must carry the returned
`next_seed` forward (into the next `State`) so a run is reproducible from its
initial seed alone.
"""

from typing import NamedTuple

LCG_MODULUS = 0x80000000  # 2**31
LCG_MULTIPLIER = 1103515245
LCG_INCREMENT = 12345

SEED_LIMIT = 0x7FFFFFFF


class RandDraw(NamedTuple):
    next_seed: int
    value: float


def lcg_hash(seed: int) -> int:
    """Advance the generator one step.

    Matches:
      seed = (1103515245 * seed + 12345) mod 2**31
    """
    return (LCG_MULTIPLIER * int(seed) + LCG_INCREMENT) % LCG_MODULUS


def lcg_scale(value: int) -> float:
    """Map a hash in `[0, m)` onto `[-1, 1]`."""
    return (2.0 * float(value)) / float(LCG_MODULUS - 1) - 1.0


def rand01(seed: int) -> RandDraw:
    h = lcg_hash(seed)
    return RandDraw(next_seed=h, value=(lcg_scale(h) + 1.0) / 2.0)


def rand_in_range(seed: int, lo: float, hi: float) -> RandDraw:
    draw = rand01(seed)
    lo = float(lo)
    return RandDraw(next_seed=draw.next_seed, value=lo + draw.value * (float(hi) - lo))
