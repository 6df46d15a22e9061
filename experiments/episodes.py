"""
experiments/episodes.py
=======================
Batch episode generator for the level-crossing simulation.

Each episode builds a fresh :class:`~sim.world.World` and lets a scripted
random operator issue one command every ``decision_interval`` seconds.
A per-episode :class:`numpy.random.Generator` drives both the operator's
choices and the toggle-stop hazard draws, so every row can be replayed
from its seed.

Usage::

    python main.py batch --episodes 500 --csv generated/episodes.csv
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from sim.rail_policy import RailPolicy, SeverityMode
from sim.tracks import CrossingLayout
from sim.train import (
    Accelerate,
    Brake,
    Command,
    SetCruise,
    SoftStop,
    Train,
    TrainId,
    ToggleStop,
)
from sim.casualties import toggle_accident_probability
from sim.world import World

log = logging.getLogger("experiments")

ACTIONS = ("none", "set_cruise", "accelerate", "brake", "soft_stop", "toggle_stop")

EPISODE_COLUMNS = [
    "episode", "seed", "mode", "end_reason", "t", "accidents",
    "dead_a", "dead_b", "total_dead", "passenger_time", "commands",
]


@dataclass
class OperatorProfile:
    """Relative weights of each operator action per decision."""

    weights: Dict[str, float] = field(default_factory=lambda: {
        "none": 4.0,
        "set_cruise": 1.0,
        "accelerate": 3.0,
        "brake": 2.0,
        "soft_stop": 0.5,
        "toggle_stop": 1.0,
    })

    def probabilities(self) -> np.ndarray:
        w = np.array([max(0.0, float(self.weights.get(a, 0.0))) for a in ACTIONS])
        if w.sum() <= 0:
            w = np.zeros(len(ACTIONS))
            w[0] = 1.0
        return w / w.sum()


def _make_command(action: str, rng: np.random.Generator) -> Optional[Command]:
    if action == "set_cruise":
        return SetCruise(float(rng.random()))
    if action == "accelerate":
        return Accelerate()
    if action == "brake":
        return Brake()
    if action == "soft_stop":
        return SoftStop()
    if action == "toggle_stop":
        return ToggleStop()
    return None


class EpisodeRunner:
    """Run many independent episodes and collect one row per episode.

    Parameters
    ----------
    episodes : int
        Episodes per severity mode.
    modes : sequence of SeverityMode
        Braking profiles to sweep.
    base_seed : int
        Episode *i* uses seed ``base_seed + i``.
    dt : float
        Fixed step length.
    decision_interval : float
        Seconds between operator decisions.
    profile : OperatorProfile or None
        Action weights; defaults when *None*.
    policy : RailPolicy or None
        Tunable constants.
    layout : CrossingLayout or None
        Track geometry.
    """

    def __init__(
        self,
        episodes: int = 100,
        modes: Sequence[SeverityMode] = (SeverityMode.GENTLE, SeverityMode.HARSH),
        base_seed: int = 0,
        dt: float = 0.05,
        decision_interval: float = 1.0,
        profile: Optional[OperatorProfile] = None,
        policy: Optional[RailPolicy] = None,
        layout: Optional[CrossingLayout] = None,
    ) -> None:
        self.episodes = max(0, int(episodes))
        self.modes = [SeverityMode(m) for m in modes]
        self.base_seed = int(base_seed)
        self.dt = max(1e-3, dt)
        self.decision_interval = max(self.dt, decision_interval)
        self.profile = profile or OperatorProfile()
        self.policy = policy or RailPolicy()
        self.layout = layout

    def run_episode(self, seed: int, mode: SeverityMode) -> Dict[str, object]:
        """Play one episode to its end and return its summary row."""
        rng = np.random.default_rng(seed)
        probs = self.profile.probabilities()
        world = World(policy=self.policy, layout=self.layout)

        def rng01() -> float:
            return float(rng.random())

        commands = 0
        next_decision = self.decision_interval
        while not world.ended:
            if world.t >= next_decision:
                action = ACTIONS[int(rng.choice(len(ACTIONS), p=probs))]
                train_id = TrainId.A if rng.random() < 0.5 else TrainId.B
                cmd = _make_command(action, rng)
                if cmd is not None:
                    world.issue_command(train_id, cmd, rng01)
                    commands += 1
                next_decision += self.decision_interval
            world.step(self.dt, mode)

        snap = world.snapshot()
        return {
            "seed": seed,
            "mode": SeverityMode(mode).value,
            "end_reason": snap.end_reason,
            "t": snap.t,
            "accidents": snap.accidents,
            "dead_a": snap.train_a.dead_passengers,
            "dead_b": snap.train_b.dead_passengers,
            "total_dead": snap.total_dead,
            "passenger_time": snap.total_passenger_time,
            "commands": commands,
        }

    def run(self) -> pd.DataFrame:
        """Run every episode for every mode; one row per episode."""
        rows: List[Dict[str, object]] = []
        episode = 0
        for mode in self.modes:
            for i in range(self.episodes):
                row = self.run_episode(self.base_seed + i, mode)
                row["episode"] = episode
                rows.append(row)
                episode += 1
        log.info("ran %d episodes over %d modes", episode, len(self.modes))
        return pd.DataFrame(rows, columns=EPISODE_COLUMNS)

    @staticmethod
    def to_csv(df: pd.DataFrame, file_path: str) -> None:
        folder = os.path.dirname(file_path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        df.to_csv(file_path, index=False)
        log.info("saved %d rows to '%s'", len(df), file_path)


def hazard_curve(
    speeds: Sequence[float],
    trials: int = 1000,
    seed: int = 0,
    policy: Optional[RailPolicy] = None,
) -> pd.DataFrame:
    """Empirical vs. analytic toggle-stop accident rate per speed.

    For every speed a fresh train is set to that speed and toggled once,
    *trials* times, drawing from one seeded generator.
    """
    policy = policy or RailPolicy()
    rng = np.random.default_rng(seed)
    rows = []
    for speed in speeds:
        hits = 0
        killed = 0
        for _ in range(max(1, int(trials))):
            train = Train(TrainId.A, (0.0, 0.0), (1000.0, 0.0), (500.0, 0.0), 100, policy=policy)
            train.speed = float(speed)
            if train.command(ToggleStop(), lambda: float(rng.random())) is not None:
                hits += 1
                killed += train.dead_passengers
        n = max(1, int(trials))
        rows.append({
            "speed": float(speed),
            "trials": n,
            "accident_rate": hits / n,
            "expected_rate": toggle_accident_probability(float(speed), policy),
            "mean_killed": killed / hits if hits else 0.0,
        })
    return pd.DataFrame(rows)
