"""
EventBus: In-memory pub/poll system for simulation notifications.

Supports:
    - Topic-based messaging
    - Polling a single topic or draining every topic in publish order
    - Logging of events

Intended usage:
    - The frame driver publishes 'train.casualty', 'train.braking',
      'sim.collision' and 'sim.ended' events
    - Presentation layers poll the topics they care about once per frame
"""

import uuid
import logging
from typing import Dict, List

from .message import BusMessage
from .metrics import BusMetrics

log = logging.getLogger(__name__)


class EventBus:
    """
    Transport layer for simulation events.

    Attributes:
        metrics (BusMetrics): Publish / poll counters.
    """

    def __init__(self):
        """
        Initialize an empty EventBus.
        """
        self._topics: Dict[str, List[BusMessage]] = {}
        self._seq = 0
        self.metrics = BusMetrics()

    def publish(
        self,
        topic: str,
        sender: str,
        payload: dict,
        sim_time: float = 0.0,
    ) -> str:
        """
        Publish a message to a specific topic.

        Args:
            topic (str): The topic name (e.g., 'train.casualty', 'sim.ended').
            sender (str): ID of the sender (e.g., 'train_A', 'world').
            payload (dict): Arbitrary data dictionary representing the message contents.
            sim_time (float): Simulation clock at the time of the event.

        Returns:
            str: The unique message ID.
        """
        msg_id = str(uuid.uuid4())
        msg = BusMessage(
            id=msg_id,
            topic=topic,
            sender=sender,
            payload=payload,
            sim_time=sim_time,
            seq=self._seq,
        )
        self._seq += 1
        self._topics.setdefault(topic, []).append(msg)
        self.metrics.record_publish(topic)

        log.info("publish topic=%s sender=%s id=%s", topic, sender, msg_id)
        return msg_id

    def poll(self, topic: str) -> List[BusMessage]:
        """
        Retrieve and clear all messages from a given topic.

        Args:
            topic (str): The topic name to poll messages from.

        Returns:
            List[BusMessage]: Messages published to the topic since the last poll.
        """
        msgs = self._topics.get(topic, [])
        self._topics[topic] = []
        self.metrics.polled += len(msgs)
        return msgs

    def drain(self) -> List[BusMessage]:
        """
        Retrieve and clear every pending message, oldest first.

        Returns:
            List[BusMessage]: All pending messages across topics in publish order.
        """
        msgs = [m for topic in list(self._topics) for m in self.poll(topic)]
        return sorted(msgs, key=lambda m: m.seq)

    def pending(self, topic: str) -> int:
        """
        Count messages waiting on a topic without consuming them.
        """
        return len(self._topics.get(topic, []))
