"""
sim/rng.py
==========
Caller-side uniform random sources for :meth:`sim.world.World.issue_command`.

The simulation never owns randomness: callers pass any zero-argument
callable returning floats in ``[0, 1)``.  These factories cover the two
controls shipped with the project.
"""

from __future__ import annotations

import random
from typing import Optional

from sim.casualties import RandomSource

_LCG_A = 1664525
_LCG_C = 1013904223
_LCG_M = 2 ** 32


def lcg_source(seed: Optional[int] = None) -> RandomSource:
    """Linear congruential source; a random seed is picked when *seed* is None."""
    state = random.randrange(_LCG_M) if seed is None else int(seed) % _LCG_M

    def draw() -> float:
        nonlocal state
        state = (state * _LCG_A + _LCG_C) % _LCG_M
        return state / _LCG_M

    return draw


def constant_source(value: float = 0.5) -> RandomSource:
    """Source that always returns *value*; 0.0 always hits, 1.0 never does."""
    return lambda: value
