#!/usr/bin/env python3
"""
sim/world.py
============
Two-train level-crossing world.

The :class:`World` class owns both :class:`~sim.train.Train` instances,
the global clock, accident and termination bookkeeping, the collision
check at the crossing, and the arrival-time risk classification.  It is
advanced only through explicit :meth:`World.step` calls.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Optional

from sim.casualties import RandomSource, collision_casualties
from sim.rail_policy import RailPolicy, SeverityMode
from sim.snapshot import SimSnapshot, TrainSnapshot
from sim.tracks import CrossingLayout, default_layout
from sim.train import AccidentCallback, Command, Train, TrainId

log = logging.getLogger("world")


class EndReason(str, Enum):
    COMPLETED = "completed"
    COLLISION = "collision"
    TIME = "time"


class RiskLevel(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


def classify_risk(
    tta: Optional[float],
    ttb: Optional[float],
    policy: RailPolicy,
) -> RiskLevel:
    """Risk from the two trains' times-to-intersection.

    A train that is not converging (``None``) cannot collide by this
    heuristic, so the result is green.  Otherwise the gap between the two
    arrival times picks the band, whatever the absolute arrival time.
    """
    if tta is None or ttb is None:
        return RiskLevel.GREEN
    delta = abs(tta - ttb)
    if delta < policy.risk_red_s:
        return RiskLevel.RED
    if delta < policy.risk_yellow_s:
        return RiskLevel.YELLOW
    return RiskLevel.GREEN


class World:
    """Level crossing with one horizontal and one vertical train.

    Parameters
    ----------
    policy : RailPolicy or None
        Tunable constants; uses defaults when *None*.
    layout : CrossingLayout or None
        Track geometry and passenger counts.  Uses
        :func:`~sim.tracks.default_layout` when *None*.
    """

    def __init__(
        self,
        policy: Optional[RailPolicy] = None,
        layout: Optional[CrossingLayout] = None,
    ) -> None:
        self.policy = policy or RailPolicy()
        self.layout = layout or default_layout()
        self.intersection = self.layout.intersection
        self._init_run()

    # ── initialisation / reset ────────────────────────────────────────────

    def _init_run(self) -> None:
        tracks = self.layout.tracks()
        self.trains: Dict[TrainId, Train] = {
            tid: Train(
                tid,
                start=tracks[tid.value].start,
                end=tracks[tid.value].end,
                intersection=self.intersection,
                passenger_count=tracks[tid.value].passengers,
                policy=self.policy,
            )
            for tid in TrainId
        }
        self.t = 0.0
        self.accidents = 0
        self.ended = False
        self.end_reason: Optional[EndReason] = None
        self.total_passenger_time = 0.0

    def reset(self) -> None:
        """Rebuild both trains and clear run state so the scenario can be replayed."""
        self._init_run()

    # ── queries ───────────────────────────────────────────────────────────

    @property
    def train_a(self) -> Train:
        return self.trains[TrainId.A]

    @property
    def train_b(self) -> Train:
        return self.trains[TrainId.B]

    def train(self, train_id: TrainId) -> Train:
        return self.trains[TrainId(train_id)]

    # ── commands ──────────────────────────────────────────────────────────

    def issue_command(
        self,
        train_id: TrainId,
        cmd: Command,
        rng01: RandomSource,
        on_casualty: Optional[AccidentCallback] = None,
    ) -> Optional[str]:
        """Route *cmd* to one train.

        Commands after the run has ended are ignored.  A toggle-stop
        braking shock counts as an accident.

        Returns
        -------
        str or None
            The accident description, when the braking shock fired.
        """
        if self.ended:
            return None
        info = self.train(train_id).command(cmd, rng01, on_casualty)
        if info is not None:
            self.accidents += 1
        return info

    # ── physics tick ──────────────────────────────────────────────────────

    def step(self, dt: float, mode: SeverityMode = SeverityMode.GENTLE) -> None:
        """Advance the clock, both trains, and the crossing rules by *dt* seconds.

        A no-op once the run has ended.  Negative *dt* is treated as zero.
        """
        if self.ended:
            return
        dt = max(0.0, dt)

        self.t += dt

        for train in self.trains.values():
            if not train.is_finished:
                self.total_passenger_time += train.alive_passengers * dt

        for train in self.trains.values():
            train.update(dt, mode)

        if log.isEnabledFor(logging.DEBUG):
            a, b = self.train_a, self.train_b
            log.debug(
                "t=%.2f A s=%.1f v=%.1f alive=%d | B s=%.1f v=%.1f alive=%d",
                self.t, a.s, a.speed, a.alive_passengers,
                b.s, b.speed, b.alive_passengers,
            )

        if self._check_collision():
            return

        if self.t > self.policy.time_horizon:
            self._end(EndReason.TIME)
        elif all(train.is_finished for train in self.trains.values()):
            self._end(EndReason.COMPLETED)

    def _check_collision(self) -> bool:
        radius = self.policy.collision_radius
        a, b = self.train_a, self.train_b
        near = (
            a.distance_to_intersection() < radius
            and b.distance_to_intersection() < radius
        )
        if not (near and a.alive_passengers > 0 and b.alive_passengers > 0):
            return False

        self.accidents += 1
        killed = 0
        for train in (a, b):
            headcount, n = collision_casualties(train.headcount)
            train.apply_headcount(headcount)
            killed += n
        log.info(
            "collision at t=%.2f: A at %.1f, B at %.1f from crossing, %d passengers dead",
            self.t, a.distance_to_intersection(), b.distance_to_intersection(), killed,
        )
        self._end(EndReason.COLLISION)
        return True

    def _end(self, reason: EndReason) -> None:
        self.ended = True
        self.end_reason = reason
        log.info("run ended at t=%.2f: %s", self.t, reason.value)

    # ── risk / snapshot ───────────────────────────────────────────────────

    def compute_risk(self) -> RiskLevel:
        return classify_risk(
            self.train_a.time_to_intersection(),
            self.train_b.time_to_intersection(),
            self.policy,
        )

    @staticmethod
    def _train_snapshot(train: Train) -> TrainSnapshot:
        x, y = train.position
        return TrainSnapshot(
            id=train.id.value,
            x=x,
            y=y,
            speed=train.speed,
            speed_trend=train.speed_trend().value,
            dist_to_intersection=train.distance_to_intersection(),
            time_to_intersection=train.time_to_intersection(),
            is_finished=train.is_finished,
            alive_passengers=train.alive_passengers,
            dead_passengers=train.dead_passengers,
        )

    def snapshot(self) -> SimSnapshot:
        """Immutable view of the whole run; never mutates state."""
        return SimSnapshot(
            t=self.t,
            accidents=self.accidents,
            total_dead=sum(train.dead_passengers for train in self.trains.values()),
            total_passenger_time=self.total_passenger_time,
            ended=self.ended,
            end_reason=self.end_reason.value if self.end_reason else None,
            train_a=self._train_snapshot(self.train_a),
            train_b=self._train_snapshot(self.train_b),
            intersection=tuple(self.intersection),
            risk=self.compute_risk().value,
        )
