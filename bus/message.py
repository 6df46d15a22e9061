"""
BusMessage: Data structure representing one event carried by the EventBus.
"""

from dataclasses import dataclass, field


@dataclass
class BusMessage:
    """
    Represents a single event published on the EventBus.

    Attributes:
        id (str): Unique identifier for the message.
        topic (str): The topic of the message (e.g., 'train.casualty', 'sim.collision', 'sim.ended').
        sender (str): ID of the sender (e.g., 'train_A', 'world').
        payload (dict): Arbitrary dictionary containing message contents.
        sim_time (float): Simulation clock (seconds) when the event happened.
        seq (int): Publish order on the bus that carried it.
    """
    id: str
    topic: str
    sender: str
    payload: dict = field(default_factory=dict)
    sim_time: float = 0.0
    seq: int = 0
