"""
ui/console.py
=============
Pure formatting functions turning a :class:`~sim.snapshot.SimSnapshot`
into console text: a one-line HUD, a per-train panel and the
end-of-run report.  Nothing here reads or mutates the simulation.
"""

from __future__ import annotations

from typing import Dict, Optional

from sim.snapshot import SimSnapshot, TrainSnapshot

# ── Symbols ──────────────────────────────────────────────────────────────────

_TREND_ARROWS: Dict[str, str] = {
    "rising": "↑",
    "falling": "↓",
    "steady": "→",
}

_RISK_LABELS: Dict[str, str] = {
    "green": "LOW",
    "yellow": "ELEVATED",
    "red": "HIGH",
}

_END_LABELS: Dict[str, str] = {
    "completed": "both trains reached their destination",
    "collision": "collision at the crossing (everyone aboard died)",
    "time": "time limit reached",
}


def format_seconds(value: Optional[float]) -> str:
    """One decimal, or ``--`` when there is no value."""
    if value is None:
        return "--"
    return f"{value:.1f}"


def trend_arrow(trend: str) -> str:
    return _TREND_ARROWS.get(trend, "→")


def risk_label(risk: str) -> str:
    return f"{risk} ({_RISK_LABELS.get(risk, '?')})"


def train_panel(train: TrainSnapshot) -> str:
    """Two-line panel: speed with trend, then time to the crossing."""
    return (
        f"Train {train.id}: v = {train.speed:.1f} {trend_arrow(train.speed_trend)}"
        f"  alive {train.alive_passengers}/{train.passenger_count}\n"
        f"  time to crossing: {format_seconds(train.time_to_intersection)} s"
    )


def hud_line(snap: SimSnapshot) -> str:
    passenger_min = snap.total_passenger_time / 60.0
    return (
        f"t={snap.t:5.1f}s  risk={risk_label(snap.risk):<15}  "
        f"A {snap.train_a.speed:5.1f}{trend_arrow(snap.train_a.speed_trend)} "
        f"B {snap.train_b.speed:5.1f}{trend_arrow(snap.train_b.speed_trend)}  "
        f"accidents={snap.accidents}  dead={snap.total_dead}  "
        f"passenger-min={passenger_min:.1f}"
    )


def end_report(snap: SimSnapshot) -> str:
    """Multi-line result summary shown once the run has ended."""
    reason = _END_LABELS.get(snap.end_reason or "", "still running")
    a, b = snap.train_a, snap.train_b
    lines = [
        "Result",
        "======",
        f"End reason: {reason}",
        "",
        f"Dead passengers total: {snap.total_dead}",
        f"- Train A: {a.dead_passengers} (of {a.passenger_count})",
        f"- Train B: {b.dead_passengers} (of {b.passenger_count})",
        "",
        f"Accidents: {snap.accidents}",
        "",
        f"Transit time (living passengers): {snap.total_passenger_time / 60.0:.1f} passenger-min",
    ]
    return "\n".join(lines)
