"""Enumerations for network simulation.

This module defines the outcomes reported by the traffic generator and the
router for each node they process.
"""

from enum import Enum


class GenerationOutcome(Enum):
    """Result of generating a packet at a node.

    Attributes:
        QUEUED: The packet was appended to the node's queue.
        QUEUE_FULL: The queue was full and the packet was discarded.
    """

    QUEUED = 1
    QUEUE_FULL = 2


class RoutingOutcome(Enum):
    """Result of one routing step at a node.

    Attributes:
        IDLE: The node's queue was empty.
        ADMITTED: The head packet was admitted onto its next link.
        LINK_AT_CAPACITY: The next link was full and the packet stays queued.
    """

    IDLE = 1
    ADMITTED = 2
    LINK_AT_CAPACITY = 3
