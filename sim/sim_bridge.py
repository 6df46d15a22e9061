"""
sim/sim_bridge.py
=================
Synchronous frame driver tying :mod:`sim.world` and the
:class:`bus.event_bus.EventBus` together.  A presentation loop calls
:meth:`SimBridge.tick` once per frame with the raw frame delta and reads
back the latest snapshot; notable events are published on the bus.

Public API consumed by presentation layers
------------------------------------------
* ``tick(delta_s)``              → ``SimSnapshot``
* ``command(train_id, cmd)``     → ``Optional[str]``
* ``snapshot()``                 → ``SimSnapshot``
* ``poll_events(topic)``         → ``List[BusMessage]``
* ``reset()``                    → ``None``
* ``status()``                   → ``dict``

Bus topics
----------
``train.casualty``   toggle-stop braking shock (payload: train, message, alive, dead)
``train.braking``    harsh-braking injuries in a tick (payload: train, killed, alive)
``sim.collision``    crossing collision (payload: accidents, total_dead)
``sim.ended``        run ended (payload: the full snapshot dict)
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from bus.event_bus import EventBus
from bus.message import BusMessage
from sim.casualties import RandomSource
from sim.rail_policy import RailPolicy, SeverityMode
from sim.rng import lcg_source
from sim.snapshot import SimSnapshot
from sim.tracks import CrossingLayout
from sim.train import Command, TrainId
from sim.world import EndReason, World

log = logging.getLogger("sim_bridge")

TOPIC_CASUALTY = "train.casualty"
TOPIC_BRAKING = "train.braking"
TOPIC_COLLISION = "sim.collision"
TOPIC_ENDED = "sim.ended"


class SimBridge:
    """Frame-driven orchestrator around one :class:`~sim.world.World`.

    Parameters
    ----------
    mode : SeverityMode
        Braking profile passed to every step.
    max_frame_dt : float
        Upper clamp on a single step; large frame gaps are truncated
        rather than integrated in one destabilising step.
    seed : int or None
        Seed for the command random source.
    rng01 : callable or None
        Explicit random source; overrides *seed*.  It is reused as is by
        :meth:`reset`, so a stateful source is not rewound.
    rng_factory : callable or None
        Zero-argument factory building a fresh random source; called at
        construction and again on every :meth:`reset`.  Overrides *rng01*.
    policy : RailPolicy or None
        Tunable constants.
    layout : CrossingLayout or None
        Track geometry.
    bus : EventBus or None
        Event transport; a private bus is created when *None*.
    """

    def __init__(
        self,
        mode: SeverityMode = SeverityMode.GENTLE,
        max_frame_dt: float = 0.05,
        seed: Optional[int] = None,
        rng01: Optional[RandomSource] = None,
        rng_factory: Optional[Callable[[], RandomSource]] = None,
        policy: Optional[RailPolicy] = None,
        layout: Optional[CrossingLayout] = None,
        bus: Optional[EventBus] = None,
    ) -> None:
        self.mode = SeverityMode(mode)
        self.max_frame_dt = max(0.0, max_frame_dt)
        self._seed = seed
        self._rng_override = rng01
        self._rng_factory = rng_factory
        self._rng = self._new_rng()
        self._world = World(policy=policy, layout=layout)
        self._bus = bus or EventBus()
        self._frames = 0

    @property
    def world(self) -> World:
        return self._world

    @property
    def bus(self) -> EventBus:
        return self._bus

    # ── Commands ──────────────────────────────────────────────────────────────

    def command(self, train_id: TrainId, cmd: Command) -> Optional[str]:
        """Issue *cmd* to one train with the bridge's random source."""
        train = self._world.train(train_id)

        def on_casualty(info: str) -> None:
            self._bus.publish(
                topic=TOPIC_CASUALTY,
                sender=f"train_{train.id.value}",
                payload={
                    "train": train.id.value,
                    "message": info,
                    "alive": train.alive_passengers,
                    "dead": train.dead_passengers,
                },
                sim_time=self._world.t,
            )

        return self._world.issue_command(train_id, cmd, self._rng, on_casualty)

    # ── Frame loop ────────────────────────────────────────────────────────────

    def tick(self, delta_s: float) -> SimSnapshot:
        """Advance one frame of *delta_s* seconds (clamped) and return the snapshot."""
        world = self._world
        if not world.ended:
            dt = min(self.max_frame_dt, max(0.0, delta_s))
            world.step(dt, self.mode)
            self._frames += 1
            self._publish_tick_events()
        return world.snapshot()

    def tick_ms(self, delta_ms: float) -> SimSnapshot:
        return self.tick(delta_ms / 1000.0)

    def snapshot(self) -> SimSnapshot:
        return self._world.snapshot()

    def poll_events(self, topic: Optional[str] = None) -> List[BusMessage]:
        """Consume pending events for *topic*, or all of them when *None*."""
        if topic is None:
            return self._bus.drain()
        return self._bus.poll(topic)

    def _publish_tick_events(self) -> None:
        world = self._world
        for train in world.trains.values():
            if train.last_brake_killed:
                self._bus.publish(
                    topic=TOPIC_BRAKING,
                    sender=f"train_{train.id.value}",
                    payload={
                        "train": train.id.value,
                        "killed": train.last_brake_killed,
                        "alive": train.alive_passengers,
                    },
                    sim_time=world.t,
                )

        if not world.ended:
            return
        snap = world.snapshot()
        if world.end_reason is EndReason.COLLISION:
            self._bus.publish(
                topic=TOPIC_COLLISION,
                sender="world",
                payload={"accidents": snap.accidents, "total_dead": snap.total_dead},
                sim_time=world.t,
            )
        self._bus.publish(
            topic=TOPIC_ENDED,
            sender="world",
            payload=snap.as_dict(),
            sim_time=world.t,
        )
        log.info(
            "run over after %d frames: %s, %d dead",
            self._frames, snap.end_reason, snap.total_dead,
        )

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def _new_rng(self) -> RandomSource:
        if self._rng_factory is not None:
            return self._rng_factory()
        return self._rng_override or lcg_source(self._seed)

    def reset(self) -> None:
        """Re-initialise the world so the scenario replays."""
        self._world.reset()
        self._rng = self._new_rng()
        self._frames = 0
        log.info("SimBridge reset")

    def status(self) -> Dict[str, Any]:
        return {
            "frames": self._frames,
            "mode": self.mode.value,
            "ended": self._world.ended,
            "bus_metrics": self._bus.metrics.report(),
        }
