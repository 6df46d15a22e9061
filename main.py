#!/usr/bin/env python3
"""
Headless driver for the level-crossing simulation.

Usage:
    python main.py run --mode harsh --seed 7
    python main.py run --script commands.txt
    python main.py batch --episodes 500 --csv generated/episodes.csv --report generated/report.txt

A script file holds one command per line: ``<time> <train> <command> [value]``,
e.g. ``1.5 A toggle_stop`` or ``0 B set_cruise 0.8``.  Blank lines and lines
starting with ``#`` are ignored.
"""

import argparse
import logging
import sys
from typing import List, Optional, Tuple

import config
from logging_setup import setup_logging
from sim.rail_policy import SeverityMode
from sim.sim_bridge import SimBridge
from sim.train import Accelerate, Brake, Command, SetCruise, SoftStop, ToggleStop, TrainId
from ui.console import end_report, hud_line

ScriptEntry = Tuple[float, TrainId, Command]

_COMMANDS = {
    "accelerate": Accelerate,
    "brake": Brake,
    "soft_stop": SoftStop,
    "toggle_stop": ToggleStop,
}


def parse_script_line(line: str) -> Optional[ScriptEntry]:
    """Parse one script line; returns None for blanks and comments.

    Raises ValueError on a malformed line.
    """
    text = line.split("#", 1)[0].strip()
    if not text:
        return None
    parts = text.split()
    if len(parts) < 3:
        raise ValueError(f"expected '<time> <train> <command> [value]', got {line.strip()!r}")
    at = float(parts[0])
    train_id = TrainId(parts[1].upper())
    name = parts[2].lower()
    if name == "set_cruise":
        if len(parts) < 4:
            raise ValueError(f"set_cruise needs a value: {line.strip()!r}")
        return at, train_id, SetCruise(float(parts[3]))
    if name not in _COMMANDS:
        raise ValueError(f"unknown command {parts[2]!r}")
    return at, train_id, _COMMANDS[name]()


def load_script(path: str) -> List[ScriptEntry]:
    entries = []
    with open(path, encoding="utf-8") as fh:
        for line in fh:
            entry = parse_script_line(line)
            if entry is not None:
                entries.append(entry)
    return sorted(entries, key=lambda e: e[0])


def run_episode(args, cfg: config.AppConfig) -> int:
    log = logging.getLogger("main")
    script = load_script(args.script) if args.script else []
    bridge = SimBridge(mode=args.mode, max_frame_dt=cfg.max_frame_dt, seed=args.seed)
    frame_dt = 1.0 / max(1.0, args.fps)

    log.info("Starting headless run: mode=%s fps=%.0f seed=%s", args.mode, args.fps, args.seed)
    next_hud = 0.0
    snap = bridge.snapshot()
    while not snap.ended:
        while script and script[0][0] <= snap.t:
            _, train_id, cmd = script.pop(0)
            bridge.command(train_id, cmd)
        snap = bridge.tick(frame_dt)
        if snap.t >= next_hud:
            print(hud_line(snap))
            next_hud += 1.0

    for msg in bridge.poll_events():
        log.debug("event %s from %s at t=%.2f", msg.topic, msg.sender, msg.sim_time)
    print()
    print(end_report(snap))
    return 0


def run_batch(args, cfg: config.AppConfig) -> int:
    from experiments.episodes import EpisodeRunner
    from experiments.report import summarize, write_report

    modes = [SeverityMode(args.mode)] if args.mode else list(SeverityMode)
    runner = EpisodeRunner(
        episodes=args.episodes,
        modes=modes,
        base_seed=args.seed or 0,
        dt=cfg.max_frame_dt,
        decision_interval=cfg.decision_interval_s,
    )
    df = runner.run()
    print(summarize(df).to_string(index=False))
    if args.csv:
        runner.to_csv(df, args.csv)
    if args.report:
        write_report(df, args.report)
    return 0


def build_parser(cfg: config.AppConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Two-train level-crossing simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python main.py run --mode harsh --seed 7
    python main.py batch --episodes 200 --csv generated/episodes.csv
        """,
    )
    parser.add_argument(
        "--log-level",
        default=cfg.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: %(default)s)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run one headless episode")
    run.add_argument(
        "--mode",
        choices=[m.value for m in SeverityMode],
        default=cfg.severity,
        help="Braking profile (default: %(default)s)",
    )
    run.add_argument("--fps", type=float, default=cfg.fps, help="Synthetic frame rate")
    run.add_argument("--seed", type=int, default=cfg.seed, help="Seed for the command random source")
    run.add_argument("--script", help="Timed command script file")

    batch = sub.add_parser("batch", help="Run many scripted-operator episodes")
    batch.add_argument(
        "--mode",
        choices=[m.value for m in SeverityMode],
        default=None,
        help="Only this braking profile (default: both)",
    )
    batch.add_argument("--episodes", type=int, default=cfg.episodes, help="Episodes per mode")
    batch.add_argument("--seed", type=int, default=cfg.seed, help="Base seed")
    batch.add_argument("--csv", help="Write the episode table to this CSV file")
    batch.add_argument("--report", help="Write a text report to this file")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    try:
        cfg = config.from_env()
    except ValueError as exc:
        print(f"configuration error: {exc}", file=sys.stderr)
        return 2

    args = build_parser(cfg).parse_args(argv)
    setup_logging(
        getattr(logging, args.log_level),
        log_file=cfg.log_file,
        world_debug_file="" if args.command == "batch" else config.WORLD_DEBUG_LOG_FILE,
    )

    try:
        if args.command == "run":
            return run_episode(args, cfg)
        return run_batch(args, cfg)
    except (OSError, ValueError) as exc:
        logging.getLogger("main").error("%s", exc)
        return 1
    except KeyboardInterrupt:
        logging.getLogger("main").info("Shutting down...")
        return 130


if __name__ == "__main__":
    sys.exit(main())
