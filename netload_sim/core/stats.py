"""Read-only snapshots of the simulation state.

A snapshot copies the counters it reports, so it stays valid after later
ticks mutate the live nodes and links.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class NodeStats:
    """Counters of a single node at snapshot time."""

    id: str
    packets_generated: int
    queue_length: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "packetsGenerated": self.packets_generated,
            "queueLength": self.queue_length,
        }


@dataclass(frozen=True)
class LinkStats:
    """Counters of a single link at snapshot time."""

    source: str
    target: str
    load: int
    capacity: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": self.source,
            "to": self.target,
            "load": self.load,
            "capacity": self.capacity,
        }


@dataclass(frozen=True)
class NetworkStats:
    """Snapshot of every node and link, in topology definition order.

    Attributes:
        tick: Number of ticks completed when the snapshot was taken.
        nodes: Per-node counters.
        links: Per-link counters.
    """

    tick: int
    nodes: Tuple[NodeStats, ...]
    links: Tuple[LinkStats, ...]

    def to_dict(self) -> Dict[str, Any]:
        """Render the ``/network-stats`` JSON document."""
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "links": [link.to_dict() for link in self.links],
        }
