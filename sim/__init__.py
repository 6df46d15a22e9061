"""
sim — Simulation core
=====================

Modules
-------
world
    :class:`World` crossing orchestrator: clock, collision, termination, risk.
train
    :class:`Train` kinematics, operator commands and toggle-stop state.
casualties
    Pure fatality rules on an alive/dead :class:`Headcount`.
rail_policy
    :class:`RailPolicy` tunable constants and :class:`SeverityMode`.
tracks
    :class:`CrossingLayout` geometry and the default crossing.
snapshot
    Frozen read-only views handed to presentation layers.
sim_bridge
    :class:`SimBridge` synchronous frame driver and event publisher.
rng
    Caller-side random sources.
physics
    Low-level numeric and geometry helpers.
"""
