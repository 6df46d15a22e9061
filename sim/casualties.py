#!/usr/bin/env python3
"""
sim/casualties.py
=================
Pure fatality rules operating on an alive/dead :class:`Headcount`.

Two independent paths can fire for one train in the same tick and compose
by plain sequential subtraction:

* :func:`toggle_shock_casualties`: stochastic braking shock when the
  toggle-stop control halts a fast train.
* :func:`braking_casualties`: deterministic injuries from harsh realised
  deceleration.

:func:`collision_casualties` is the crossing collision: everyone aboard dies.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Tuple

from sim.physics import clamp, linear_fraction
from sim.rail_policy import RailPolicy

RandomSource = Callable[[], float]


@dataclass(frozen=True)
class Headcount:
    """Alive/dead passenger pair; ``alive + dead`` never changes."""

    alive: int
    dead: int = 0

    @property
    def total(self) -> int:
        return self.alive + self.dead

    def kill_fraction(self, frac: float) -> Tuple["Headcount", int]:
        """Kill ``floor(alive * frac)`` passengers, *frac* clamped to [0, 1]."""
        if self.alive <= 0:
            return self, 0
        killed = int(math.floor(self.alive * clamp(frac, 0.0, 1.0)))
        return Headcount(self.alive - killed, self.dead + killed), killed

    def kill_all(self) -> Tuple["Headcount", int]:
        return Headcount(0, self.dead + self.alive), self.alive


def toggle_accident_probability(speed: float, policy: RailPolicy) -> float:
    """Chance that a toggle-stop at *speed* causes a braking shock.

    Zero at or below ``toggle_risk_speed``, rising linearly to
    ``toggle_max_probability`` at ``toggle_risk_vmax`` and capped there.
    """
    if speed <= policy.toggle_risk_speed:
        return 0.0
    frac = linear_fraction(speed, policy.toggle_risk_speed, policy.toggle_risk_vmax)
    return frac * policy.toggle_max_probability


def toggle_shock_casualties(
    headcount: Headcount,
    speed: float,
    rng01: RandomSource,
    policy: RailPolicy,
) -> Tuple[Headcount, int, bool]:
    """Apply the toggle-stop braking shock.

    *rng01* is drawn exactly once, and only when the speed is above the
    risk threshold, so a deterministic source gives reproducible outcomes.

    Returns
    -------
    tuple
        ``(headcount, killed, accident)``; *accident* is True when the
        draw hit, even if nobody was left alive to kill.
    """
    p = toggle_accident_probability(speed, policy)
    if p <= 0.0:
        return headcount, 0, False
    if rng01() >= p:
        return headcount, 0, False
    headcount, killed = headcount.kill_fraction(policy.toggle_kill_fraction)
    return headcount, killed, True


def braking_kill_fraction(decel: float, policy: RailPolicy) -> float:
    """Share of living passengers killed by realised deceleration *decel*."""
    if decel <= policy.safe_decel:
        return 0.0
    severity = linear_fraction(decel, policy.safe_decel, policy.max_decel)
    return severity * policy.brake_max_kill_fraction


def braking_casualties(
    headcount: Headcount,
    prev_speed: float,
    new_speed: float,
    dt: float,
    policy: RailPolicy,
) -> Tuple[Headcount, int]:
    """Apply harsh-braking injuries for one tick.

    Realised deceleration is ``(prev_speed - new_speed) / dt``; a zero
    *dt* is treated as one microsecond.
    """
    decel = max(0.0, (prev_speed - new_speed) / max(dt, 1e-6))
    frac = braking_kill_fraction(decel, policy)
    if frac <= 0.0:
        return headcount, 0
    return headcount.kill_fraction(frac)


def collision_casualties(headcount: Headcount) -> Tuple[Headcount, int]:
    return headcount.kill_all()
