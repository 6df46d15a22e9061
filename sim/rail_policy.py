#!/usr/bin/env python3
"""
sim/rail_policy.py
==================
Tunable kinematic, casualty and scoring parameters for the level-crossing
simulation.  Every constant lives in the frozen :class:`RailPolicy`
dataclass so that experiments can swap policies without touching code.

Units are world units (pixels of the reference layout) and seconds.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SeverityMode(str, Enum):
    """Braking-rate profile applied uniformly to both trains for a tick."""

    HARSH = "harsh"
    GENTLE = "gentle"


@dataclass(frozen=True)
class RailPolicy:
    """Immutable bag of every tunable simulation parameter.

    Groups: kinematics, operator controls, toggle-stop hazard,
    harsh-braking casualties, derived queries, crossing rules.
    """

    # ── Kinematics ────────────────────────────────────────────────────────
    initial_speed: float = 80.0
    """Speed, cruise target and cruise memory of a freshly built train."""

    accel_rate: float = 170.0
    """Acceleration toward a higher cruise target (units/s²)."""

    brake_rate_harsh: float = 420.0
    """Deceleration toward a lower cruise target in ``harsh`` mode."""

    brake_rate_gentle: float = 180.0
    """Deceleration toward a lower cruise target in ``gentle`` mode."""

    max_speed: float = 320.0
    """Hard ceiling on integrated speed."""

    max_cruise: float = 300.0
    """Hard ceiling on the cruise target."""

    finish_epsilon: float = 1e-4
    """A train within this distance of its track end is finished."""

    # ── Operator controls ─────────────────────────────────────────────────
    cruise_at_zero: float = 120.0
    """Cruise target for ``SetCruise(0.0)``."""

    cruise_at_one: float = 50.0
    """Cruise target for ``SetCruise(1.0)`` (the scale is inverted)."""

    accel_step: float = 4.0
    """Cruise increment per ``Accelerate`` command."""

    accel_floor: float = 60.0
    """``Accelerate`` never leaves the cruise target below this."""

    brake_step: float = 5.0
    """Cruise decrement per ``Brake`` command."""

    resume_floor: float = 80.0
    """Minimum cruise target restored by a resuming ``ToggleStop``."""

    # ── Toggle-stop hazard ────────────────────────────────────────────────
    toggle_risk_speed: float = 190.0
    """Stopping at or below this speed never causes an accident."""

    toggle_risk_vmax: float = 300.0
    """Speed at which the accident probability reaches its maximum."""

    toggle_max_probability: float = 0.85
    """Accident probability at ``toggle_risk_vmax`` and above."""

    toggle_kill_fraction: float = 0.35
    """Share of living passengers killed by a braking shock."""

    # ── Harsh-braking casualties ──────────────────────────────────────────
    safe_decel: float = 220.0
    """Realised deceleration (units/s²) that injures nobody."""

    max_decel: float = 650.0
    """Deceleration at which braking casualties saturate."""

    brake_max_kill_fraction: float = 0.18
    """Share of living passengers killed at or above ``max_decel``."""

    # ── Derived queries ───────────────────────────────────────────────────
    converge_min_speed: float = 5.0
    """Below this speed a train has no time-to-intersection."""

    trend_epsilon: float = 0.2
    """Speed changes smaller than this read as *steady*."""

    # ── Crossing rules ────────────────────────────────────────────────────
    collision_radius: float = 54.0
    """Both trains inside this radius of the crossing means a collision."""

    time_horizon: float = 75.0
    """The run ends with reason ``time`` once the clock exceeds this."""

    risk_red_s: float = 1.2
    """Arrival-time gap below which risk is ``red``."""

    risk_yellow_s: float = 2.7
    """Arrival-time gap below which risk is ``yellow``."""

    def brake_rate(self, mode: SeverityMode) -> float:
        """Deceleration rate for *mode*; anything but ``harsh`` is gentle."""
        if mode == SeverityMode.HARSH:
            return self.brake_rate_harsh
        return self.brake_rate_gentle
