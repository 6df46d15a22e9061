"""
experiments/report.py
=====================
Summaries of an :class:`~experiments.episodes.EpisodeRunner` table and a
human-readable report writer.
"""

from __future__ import annotations

import pandas as pd


def summarize(df: pd.DataFrame) -> pd.DataFrame:
    """Group episodes by severity mode and end reason.

    Columns: ``mode``, ``end_reason``, ``episodes``, ``share``,
    ``mean_dead``, ``mean_accidents``, ``mean_passenger_min``.
    """
    if df.empty:
        return pd.DataFrame(columns=[
            "mode", "end_reason", "episodes", "share",
            "mean_dead", "mean_accidents", "mean_passenger_min",
        ])
    work = df.assign(passenger_min=df["passenger_time"] / 60.0)
    out = (
        work.groupby(["mode", "end_reason"])
        .agg(
            episodes=("episode", "count"),
            mean_dead=("total_dead", "mean"),
            mean_accidents=("accidents", "mean"),
            mean_passenger_min=("passenger_min", "mean"),
        )
        .reset_index()
    )
    per_mode = out.groupby("mode")["episodes"].transform("sum")
    out.insert(3, "share", out["episodes"] / per_mode)
    return out


def write_report(df: pd.DataFrame, output_file: str) -> None:
    """Write a plain-text report of *df* to *output_file*."""
    summary = summarize(df)
    with open(output_file, "w", encoding="utf-8") as fh:
        fh.write("=" * 50 + "\n")
        fh.write("       LEVEL-CROSSING BATCH REPORT\n")
        fh.write("=" * 50 + "\n\n")
        fh.write(f"Episodes: {len(df)}\n")
        if not df.empty:
            fh.write(f"Mean dead per episode: {df['total_dead'].mean():.2f}\n")
            fh.write(f"Collision share: {(df['end_reason'] == 'collision').mean() * 100:.1f}%\n")
        fh.write("\n--- By mode and end reason ---\n")
        fh.write(summary.to_string(index=False))
        fh.write("\n")
