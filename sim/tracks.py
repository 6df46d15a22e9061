"""
sim/tracks.py
=============
Track topology for the level-crossing simulation.

Defines :class:`TrackSegment` and :class:`CrossingLayout`: two straight
tracks sharing one intersection point.

:func:`default_layout` builds the reference crossing: train A runs
horizontally, train B vertically, and both tracks pass through
``(490, 300)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from sim.physics import Point, distance


# ── Track segment ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TrackSegment:
    """A straight track a single train runs along.

    Parameters
    ----------
    start, end : Point
        Endpoints in world units; the train enters at *start*.
    passengers : int
        Passengers aboard the train that runs this track.
    """

    start: Point
    end: Point
    passengers: int

    @property
    def length(self) -> float:
        return distance(self.start, self.end)


# ── Crossing layout ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class CrossingLayout:
    """Two tracks keyed by train id, sharing one intersection point."""

    intersection: Point
    track_a: TrackSegment
    track_b: TrackSegment

    def tracks(self) -> Dict[str, TrackSegment]:
        return {"A": self.track_a, "B": self.track_b}


def default_layout() -> CrossingLayout:
    """Build the fixed reference crossing (A: 120 passengers, B: 100)."""
    return CrossingLayout(
        intersection=(490.0, 300.0),
        track_a=TrackSegment(start=(240.0, 300.0), end=(900.0, 300.0), passengers=120),
        track_b=TrackSegment(start=(490.0, 70.0), end=(490.0, 560.0), passengers=100),
    )
