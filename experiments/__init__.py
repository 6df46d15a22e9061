"""
experiments — Headless batch runs
=================================

Modules
-------
episodes
    :class:`EpisodeRunner` scripted-operator episodes and the toggle-stop
    hazard curve, collected into :mod:`pandas` tables.
report
    Grouped summaries and a plain-text report.
"""
