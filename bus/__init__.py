"""
bus — In-memory simulation event infrastructure
=================================================

Provides a lightweight topic pub/poll transport that carries casualty,
collision and end-of-run notifications from the frame driver to
presentation layers without coupling them to the simulation core.

Modules
-------
message
    :class:`BusMessage` dataclass.
event_bus
    :class:`EventBus` publish / poll / drain transport.
metrics
    :class:`BusMetrics` counter snapshot.
"""

from .message import BusMessage
from .event_bus import EventBus
from .metrics import BusMetrics

__all__ = [
    "BusMessage",
    "EventBus",
    "BusMetrics",
]
