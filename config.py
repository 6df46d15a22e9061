#!/usr/bin/env python3
"""
config.py
=========
Application-wide configuration constants.

Values can be overridden via ``RAILSIM_*`` environment variables through
:func:`from_env` (see :mod:`main`).  This module is a thin, import-safe
leaf and never imports from other project packages.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

# ── Frame driver defaults ────────────────────────────────────────────────────
DEFAULT_MAX_FRAME_DT: float = 0.05
DEFAULT_FPS: float = 60.0
DEFAULT_SEVERITY: str = "gentle"
DEFAULT_SEED: Optional[int] = None

# ── Batch experiment defaults ────────────────────────────────────────────────
DEFAULT_EPISODES: int = 200
DEFAULT_DECISION_INTERVAL_S: float = 1.0

# ── Logging ──────────────────────────────────────────────────────────────────
LOG_FILE: str = "railsim.log"
WORLD_DEBUG_LOG_FILE: str = "world_debug.log"
DEFAULT_LOG_LEVEL: str = "INFO"

ENV_PREFIX: str = "RAILSIM_"


@dataclass
class AppConfig:
    """Resolved runtime settings."""

    max_frame_dt: float = DEFAULT_MAX_FRAME_DT
    fps: float = DEFAULT_FPS
    severity: str = DEFAULT_SEVERITY
    seed: Optional[int] = DEFAULT_SEED
    episodes: int = DEFAULT_EPISODES
    decision_interval_s: float = DEFAULT_DECISION_INTERVAL_S
    log_file: str = LOG_FILE
    log_level: str = DEFAULT_LOG_LEVEL


def _get(env: Mapping[str, str], name: str) -> Optional[str]:
    value = env.get(ENV_PREFIX + name)
    if value is None or value.strip() == "":
        return None
    return value.strip()


def from_env(env: Optional[Mapping[str, str]] = None) -> AppConfig:
    """Overlay ``RAILSIM_*`` variables from *env* (default ``os.environ``).

    Malformed numbers raise :class:`ValueError` naming the variable.
    """
    env = os.environ if env is None else env
    cfg = AppConfig()

    def number(name: str, cast):
        raw = _get(env, name)
        if raw is None:
            return None
        try:
            return cast(raw)
        except ValueError:
            raise ValueError(f"{ENV_PREFIX}{name}={raw!r} is not a valid {cast.__name__}") from None

    max_dt = number("MAX_FRAME_DT", float)
    if max_dt is not None:
        if max_dt <= 0:
            raise ValueError(f"{ENV_PREFIX}MAX_FRAME_DT={max_dt!r} is not a valid frame cap (must be > 0)")
        cfg.max_frame_dt = max_dt
    fps = number("FPS", float)
    if fps is not None:
        cfg.fps = fps
    seed = number("SEED", int)
    if seed is not None:
        cfg.seed = seed
    episodes = number("EPISODES", int)
    if episodes is not None:
        cfg.episodes = episodes
    interval = number("DECISION_INTERVAL_S", float)
    if interval is not None:
        cfg.decision_interval_s = interval

    severity = _get(env, "SEVERITY")
    if severity is not None:
        cfg.severity = severity.lower()
    log_file = _get(env, "LOG_FILE")
    if log_file is not None:
        cfg.log_file = log_file
    log_level = _get(env, "LOG_LEVEL")
    if log_level is not None:
        cfg.log_level = log_level.upper()
    return cfg
