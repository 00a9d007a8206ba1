"""Packet class for network simulation.

This module defines the Packet class, which represents a unit of traffic
waiting in a node's queue.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Packet:
    """Represents a network packet.

    Attributes:
        id: Unique identifier for the packet within one simulator.
        source: Node ID where the packet was generated.
        destination: Destination node ID, never equal to ``source``.
        creation_tick: Tick during which the packet was generated.
    """

    id: int
    source: str
    destination: str
    creation_tick: int = 0

    def __post_init__(self):
        if self.source == self.destination:
            raise ValueError(
                f"Packet {self.id} has the same source and destination ({self.source})"
            )
