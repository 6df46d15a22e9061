#!/usr/bin/env python3
"""
sim/physics.py
==============
Low-level numeric and geometry helpers used by :mod:`sim.train` and
:mod:`sim.world`.

Keeping these in a separate module avoids circular imports and makes unit
testing straightforward.
"""

from __future__ import annotations

import math
from typing import Tuple

Point = Tuple[float, float]


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp *x* into ``[lo, hi]``."""
    return max(lo, min(hi, x))


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(b[0] - a[0], b[1] - a[1])


def point_along(start: Point, end: Point, s: float, length: float) -> Point:
    """Point at arc-length *s* on the straight segment *start* → *end*.

    Parameters
    ----------
    start, end : Point
        Segment endpoints in world units.
    s : float
        Arc-length offset from *start*; expected in ``[0, length]``.
    length : float
        Segment length.  A zero-length segment always yields *start*.
    """
    t = 0.0 if length == 0 else s / length
    return (lerp(start[0], end[0], t), lerp(start[1], end[1], t))


def linear_fraction(x: float, lo: float, hi: float) -> float:
    """Where *x* sits between *lo* and *hi*, clamped to ``[0, 1]``."""
    if hi <= lo:
        return 1.0 if x >= hi else 0.0
    return clamp((x - lo) / (hi - lo), 0.0, 1.0)
