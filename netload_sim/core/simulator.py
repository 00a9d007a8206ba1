"""Network simulator class for network simulation.

This module defines the NetworkSimulator class, the single owner of the live
simulation state. A tick resets every link load, generates traffic at every
node and routes the head packet of every node, in that order.
"""

import itertools
import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np

from netload_sim.core.link import Link
from netload_sim.core.node import DEFAULT_MAX_QUEUE_SIZE, Node
from netload_sim.core.router import Router
from netload_sim.core.stats import LinkStats, NetworkStats, NodeStats
from netload_sim.core.topology import Topology
from netload_sim.traffic.generators import UniformTrafficGenerator
from netload_sim.utils.rng import make_rng

logger = logging.getLogger(__name__)


class NetworkSimulator:
    """Tick-driven network simulation engine.

    Attributes:
        topology: Static topology and routing table.
        nodes: Node objects keyed by node ID, in topology order.
        links: Link objects keyed by (source, target), in topology order.
        rng: Random generator used for destination selection.
        generator: Per-tick traffic generator.
        router: Per-tick capacity-aware router.
        tick_count: Number of completed ticks.
        lock: Guards the state; held for a whole tick and for snapshots.
    """

    def __init__(
        self,
        topology: Topology,
        max_queue_size: int = DEFAULT_MAX_QUEUE_SIZE,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ) -> None:
        """Initialize the network simulator.

        Args:
            topology: A validated topology.
            max_queue_size: Maximum queue length at every node.
            rng: Random generator; created from ``seed`` when omitted.
            seed: Random seed for reproducibility, used only without ``rng``.
        """
        self.topology = topology
        self.max_queue_size = max_queue_size
        self.rng = rng if rng is not None else make_rng(seed)

        self.nodes: Dict[str, Node] = {
            node_id: Node(node_id, max_queue_size) for node_id in topology.node_ids
        }
        self.links: Dict[Tuple[str, str], Link] = {
            (link.source, link.target): Link(link.source, link.target, link.capacity)
            for link in topology.links
        }

        self.tick_count = 0
        self.lock = threading.RLock()
        self._packet_ids = itertools.count(1)

        self.hooks: Dict[str, List[Callable[..., Any]]] = {
            "packet_generated": [],  # packet queued at its origin
            "packet_dropped": [],  # packet discarded, queue full
            "packet_routed": [],  # packet admitted onto a link
            "link_at_capacity": [],  # head packet held back
            "tick_end": [],  # a tick completed
        }

        self.generator = UniformTrafficGenerator(self, self.rng)
        self.router = Router(self)

    @property
    def node_ids(self) -> Tuple[str, ...]:
        return self.topology.node_ids

    def next_packet_id(self) -> int:
        """Return a packet ID never handed out before by this simulator."""
        return next(self._packet_ids)

    def find_link(self, source: str, target: str) -> Optional[Link]:
        """Return the live link from ``source`` to ``target``, or None."""
        return self.links.get((source, target))

    def reset_link_loads(self) -> None:
        """Reset the per-tick load of every link to zero."""
        for link in self.links.values():
            link.reset_load()

    def generate_traffic(self):
        """Generate one packet at every node."""
        return self.generator.generate_all(list(self.nodes.values()))

    def route_packets(self):
        """Try to advance the head packet of every node by one hop."""
        return self.router.route_all(list(self.nodes.values()))

    def tick(self) -> NetworkStats:
        """Run one full tick: reset, generate, route.

        The lock is held for the whole tick so readers never observe a partly
        updated state. Topology errors propagate and abort the tick.

        Returns:
            Snapshot of the state after the tick.
        """
        with self.lock:
            self.reset_link_loads()
            self.generate_traffic()
            self.route_packets()
            self.tick_count += 1
            logger.debug("Tick %d complete", self.tick_count)
            stats = self.snapshot()
            self.call_hooks("tick_end", self.tick_count, stats)
        return stats

    def run(self, ticks: int) -> NetworkStats:
        """Run ``ticks`` ticks back to back, without a clock.

        Returns:
            Snapshot after the last tick.
        """
        if ticks < 0:
            raise ValueError("ticks must be non-negative")
        for _ in range(ticks):
            self.tick()
        return self.snapshot()

    def snapshot(self) -> NetworkStats:
        """Take a consistent, immutable snapshot of all nodes and links."""
        with self.lock:
            return NetworkStats(
                tick=self.tick_count,
                nodes=tuple(
                    NodeStats(node.id, node.packets_generated, node.queue_length)
                    for node in self.nodes.values()
                ),
                links=tuple(
                    LinkStats(link.source, link.target, link.load, link.capacity)
                    for link in self.links.values()
                ),
            )

    def register_hook(self, event_type: str, callback: Callable[..., Any]) -> None:
        """Register a callback function for a specific event type.

        Args:
            event_type: The type of event to register for.
            callback: The function to call when the event occurs.
        """
        if event_type not in self.hooks:
            raise ValueError(f"Unknown hook type: {event_type}")
        self.hooks[event_type].append(callback)

    def call_hooks(self, event_type: str, *args: Any, **kwargs: Any) -> None:
        """Call all registered callbacks for the given event type.

        Args:
            event_type: The type of event that occurred.
            *args, **kwargs: Arguments to pass to the callback functions.
        """
        if event_type in self.hooks:
            for callback in self.hooks[event_type]:
                callback(*args, **kwargs)

    def __repr__(self) -> str:
        return f"NetworkSimulator({self.topology!r}, tick={self.tick_count})"
