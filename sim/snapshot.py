"""
sim/snapshot.py
===============
Immutable read-only views of the simulation, produced by
:meth:`sim.world.World.snapshot` once per frame for presentation layers.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class TrainSnapshot:
    """Derived per-train fields at one instant."""

    id: str
    x: float
    y: float
    speed: float
    speed_trend: str
    dist_to_intersection: float
    time_to_intersection: Optional[float]
    is_finished: bool
    alive_passengers: int
    dead_passengers: int

    @property
    def passenger_count(self) -> int:
        return self.alive_passengers + self.dead_passengers


@dataclass(frozen=True)
class SimSnapshot:
    """Whole-run view: clock, counters, termination, both trains and risk."""

    t: float
    accidents: int
    total_dead: int
    total_passenger_time: float
    ended: bool
    end_reason: Optional[str]
    train_a: TrainSnapshot
    train_b: TrainSnapshot
    intersection: Tuple[float, float]
    risk: str

    def as_dict(self) -> Dict[str, Any]:
        """Plain-dict form for event payloads and tabular export."""
        return asdict(self)
