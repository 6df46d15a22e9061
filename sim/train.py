"""
sim/train.py
============
A single rail vehicle on a straight track.  Each train:
  - owns its arc-length position, speed and cruise target
  - interprets operator commands (cruise slider, accelerate, brake,
    soft stop, toggle stop)
  - tracks its own passenger headcount and both casualty paths

Position is a scalar offset ``s`` along the track; the Cartesian
``x``/``y`` are derived from it on every read.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union

from sim.casualties import (
    Headcount,
    RandomSource,
    braking_casualties,
    toggle_shock_casualties,
)
from sim.physics import Point, clamp, distance, lerp, point_along
from sim.rail_policy import RailPolicy, SeverityMode

log = logging.getLogger("train")

AccidentCallback = Callable[[str], None]


class TrainId(str, Enum):
    A = "A"
    B = "B"


class ToggleState(str, Enum):
    """Phase of the toggle-stop control: the next toggle stops or resumes."""

    RUNNING = "running"
    TOGGLE_STOPPED = "toggle_stopped"


class SpeedTrend(str, Enum):
    RISING = "rising"
    FALLING = "falling"
    STEADY = "steady"


# ── Commands ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SetCruise:
    """Cruise slider; ``0.0`` is fastest, ``1.0`` slowest."""

    value: float


@dataclass(frozen=True)
class Accelerate:
    pass


@dataclass(frozen=True)
class Brake:
    pass


@dataclass(frozen=True)
class SoftStop:
    """Reliable stop.  Never triggers a braking shock."""


@dataclass(frozen=True)
class ToggleStop:
    """Bistable stop/resume with a speed-dependent braking-shock hazard."""


Command = Union[SetCruise, Accelerate, Brake, SoftStop, ToggleStop]


class Train:
    """
    One rail vehicle.

    Parameters
    ----------
    train_id : TrainId
        ``A`` or ``B``.
    start, end : Point
        Track endpoints; the train starts at *start*.
    intersection : Point
        Crossing point shared with the other track.
    passenger_count : int
        Passengers aboard at creation (negative values count as zero).
    policy : RailPolicy or None
        Tunable constants; uses defaults when *None*.
    """

    def __init__(
        self,
        train_id: TrainId,
        start: Point,
        end: Point,
        intersection: Point,
        passenger_count: int,
        policy: Optional[RailPolicy] = None,
    ) -> None:
        self.id = TrainId(train_id)
        self.policy = policy or RailPolicy()

        # track geometry
        self.start = start
        self.end = end
        self.intersection = intersection
        self.track_len = distance(start, end)

        self.s = 0.0
        self.is_finished = False

        # kinematics
        self.speed = self.policy.initial_speed
        self.prev_speed = self.speed
        self.cruise_speed = self.speed
        self.last_cruise_speed = self.speed

        self.toggle_state = ToggleState.RUNNING
        self.toggle_count = 0

        self.passenger_count = max(0, int(passenger_count))
        self._headcount = Headcount(self.passenger_count)
        self.last_brake_killed = 0

        self._set_s(0.0)

    # ── Position ──────────────────────────────────────────────────────────────

    @property
    def position(self) -> Point:
        return point_along(self.start, self.end, self.s, self.track_len)

    @property
    def x(self) -> float:
        return self.position[0]

    @property
    def y(self) -> float:
        return self.position[1]

    def _set_s(self, s: float) -> None:
        self.s = clamp(s, 0.0, self.track_len)
        if self.s >= self.track_len - self.policy.finish_epsilon:
            self.is_finished = True

    # ── Passengers ────────────────────────────────────────────────────────────

    @property
    def alive_passengers(self) -> int:
        return self._headcount.alive

    @property
    def dead_passengers(self) -> int:
        return self._headcount.dead

    @property
    def headcount(self) -> Headcount:
        return self._headcount

    def apply_headcount(self, headcount: Headcount) -> None:
        """Replace the headcount; used by the world for cross-train fatalities."""
        if headcount.total != self.passenger_count:
            raise ValueError(
                f"train {self.id.value}: headcount total {headcount.total} "
                f"!= passenger count {self.passenger_count}"
            )
        self._headcount = headcount

    # ── Commands ──────────────────────────────────────────────────────────────

    def command(
        self,
        cmd: Command,
        rng01: RandomSource,
        on_accident: Optional[AccidentCallback] = None,
    ) -> Optional[str]:
        """Apply one operator command.

        Finished trains ignore every command.  Numeric inputs are clamped,
        never rejected.

        Returns
        -------
        str or None
            Accident description when the toggle-stop braking shock fired.
        """
        if self.is_finished:
            return None

        p = self.policy
        if isinstance(cmd, SetCruise):
            self.cruise_speed = lerp(p.cruise_at_zero, p.cruise_at_one, clamp(cmd.value, 0.0, 1.0))
            if self.toggle_state is ToggleState.RUNNING:
                self.last_cruise_speed = self.cruise_speed
        elif isinstance(cmd, Accelerate):
            self.cruise_speed = clamp(self.cruise_speed + p.accel_step, p.accel_floor, p.max_cruise)
            self.last_cruise_speed = self.cruise_speed
        elif isinstance(cmd, Brake):
            self.cruise_speed = clamp(self.cruise_speed - p.brake_step, 0.0, p.max_cruise)
            if self.cruise_speed > 0:
                self.last_cruise_speed = self.cruise_speed
        elif isinstance(cmd, SoftStop):
            self.cruise_speed = 0.0
        elif isinstance(cmd, ToggleStop):
            return self._toggle_stop(rng01, on_accident)
        else:
            raise TypeError(f"not a train command: {cmd!r}")
        return None

    def _toggle_stop(
        self,
        rng01: RandomSource,
        on_accident: Optional[AccidentCallback],
    ) -> Optional[str]:
        self.toggle_count += 1

        if self.toggle_state is ToggleState.TOGGLE_STOPPED:
            self.toggle_state = ToggleState.RUNNING
            self.cruise_speed = max(self.policy.resume_floor, self.last_cruise_speed)
            log.debug("%s resumes at cruise %.1f", self.id.value, self.cruise_speed)
            return None

        self.toggle_state = ToggleState.TOGGLE_STOPPED
        self._headcount, killed, accident = toggle_shock_casualties(
            self._headcount, self.speed, rng01, self.policy,
        )
        self.cruise_speed = 0.0

        if not accident:
            return None
        info = f"Braking shock on train {self.id.value}! {killed} passengers dead."
        log.warning("%s (speed %.1f)", info, self.speed)
        if on_accident is not None:
            on_accident(info)
        return info

    # ── Physics ───────────────────────────────────────────────────────────────

    def update(self, dt: float, mode: SeverityMode) -> None:
        """Integrate one tick toward the cruise target, then apply braking injuries."""
        self.last_brake_killed = 0
        if self.is_finished:
            return

        p = self.policy
        dt = max(0.0, dt)
        dv = self.cruise_speed - self.speed
        rate = p.accel_rate if dv >= 0 else p.brake_rate(mode)
        max_step = rate * dt

        self.prev_speed = self.speed
        self.speed = clamp(self.speed + clamp(dv, -max_step, max_step), 0.0, p.max_speed)

        self._set_s(self.s + self.speed * dt)

        self._headcount, killed = braking_casualties(
            self._headcount, self.prev_speed, self.speed, dt, p,
        )
        if killed:
            self.last_brake_killed = killed
            log.warning(
                "%s harsh braking %.1f -> %.1f: %d passengers dead",
                self.id.value, self.prev_speed, self.speed, killed,
            )

    # ── Derived queries ───────────────────────────────────────────────────────

    def distance_to_intersection(self) -> float:
        return distance(self.position, self.intersection)

    def time_to_intersection(self) -> Optional[float]:
        """Seconds to the crossing at current speed, or None when not converging."""
        if self.speed < self.policy.converge_min_speed:
            return None
        return self.distance_to_intersection() / self.speed

    def speed_trend(self) -> SpeedTrend:
        diff = self.speed - self.prev_speed
        if abs(diff) < self.policy.trend_epsilon:
            return SpeedTrend.STEADY
        return SpeedTrend.RISING if diff > 0 else SpeedTrend.FALLING
