"""Node class for network simulation.

This module defines the Node class, which represents a traffic source with a
bounded FIFO queue of packets awaiting routing.
"""

from collections import deque
from typing import Deque, Optional

from netload_sim.core.packet import Packet

DEFAULT_MAX_QUEUE_SIZE = 50


class Node:
    """Represents a network node.

    Attributes:
        id: Unique identifier for the node.
        max_queue_size: Maximum number of packets held in the queue.
        queue: Packets awaiting routing, head first.
        packets_generated: Number of packets ever queued at this node.
        packets_dropped: Number of packets discarded because the queue was full.
    """

    def __init__(self, node_id: str, max_queue_size: int = DEFAULT_MAX_QUEUE_SIZE) -> None:
        """Initialize a network node.

        Args:
            node_id: Unique identifier for the node.
            max_queue_size: Maximum queue length (default: 50).
        """
        if max_queue_size < 1:
            raise ValueError("max_queue_size must be at least 1")
        self.id = node_id
        self.max_queue_size = max_queue_size
        self.queue: Deque[Packet] = deque()
        self.packets_generated = 0
        self.packets_dropped = 0

    def can_queue_packet(self) -> bool:
        """Check if there's room in the queue for another packet.

        Returns:
            True if the queue holds fewer than ``max_queue_size`` packets.
        """
        return len(self.queue) < self.max_queue_size

    def add_packet_to_queue(self, packet: Packet) -> None:
        """Append a packet to the tail of the queue.

        Args:
            packet: The packet to add.

        Raises:
            OverflowError: If the queue is already full.
        """
        if not self.can_queue_packet():
            raise OverflowError(f"Queue at node {self.id} is full")
        self.queue.append(packet)
        self.packets_generated += 1

    def packet_dropped(self) -> None:
        """Record a packet discarded at generation time."""
        self.packets_dropped += 1

    def head(self) -> Optional[Packet]:
        """Return the packet at the head of the queue without removing it."""
        return self.queue[0] if self.queue else None

    def pop_head(self) -> Packet:
        """Remove and return the packet at the head of the queue."""
        return self.queue.popleft()

    @property
    def queue_length(self) -> int:
        return len(self.queue)

    def __repr__(self) -> str:
        """Return string representation of the node.

        Returns:
            String representation of the node.
        """
        return f"Node({self.id})"
