"""
BusMetrics: Tracks simple statistics for EventBus message flow.
"""

from typing import Dict


class BusMetrics:
    """
    Tracks counts of published and polled messages.

    Attributes:
        published (int): Total number of messages published.
        polled (int): Number of messages handed out by poll().
        by_topic (Dict[str, int]): Published messages per topic.
    """

    def __init__(self):
        """Initialize all counters to zero."""
        self.published = 0
        self.polled = 0
        self.by_topic: Dict[str, int] = {}

    def record_publish(self, topic: str) -> None:
        self.published += 1
        self.by_topic[topic] = self.by_topic.get(topic, 0) + 1

    def report(self) -> dict:
        """
        Return a snapshot of current metrics.

        Returns:
            dict: Dictionary containing 'published', 'polled' and 'by_topic' counters.
        """
        return {
            "published": self.published,
            "polled": self.polled,
            "by_topic": dict(self.by_topic),
        }
