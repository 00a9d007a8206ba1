"""Capacity-aware router for network simulation.

Once per tick the router looks at the head packet of every node, resolves its
next hop from the static routing table and admits it onto the matching link
if that link still has capacity in the current tick. A packet that cannot be
admitted stays at the head of its queue and is retried on the next tick.
"""

import logging
from typing import TYPE_CHECKING, Dict, Sequence

from netload_sim.core.enums import RoutingOutcome
from netload_sim.core.exceptions import MissingLinkError
from netload_sim.core.node import Node

if TYPE_CHECKING:
    from netload_sim.core.simulator import NetworkSimulator

logger = logging.getLogger(__name__)


class Router:
    """Routes head-of-queue packets along precomputed shortest paths."""

    def __init__(self, simulator: "NetworkSimulator") -> None:
        """
        Initialize the router.

        Args:
            simulator: The simulator owning the routing table and the links.
        """
        self.name = "ShortestPath"
        self.simulator = simulator

    def route_node(self, node: Node) -> RoutingOutcome:
        """
        Try to admit the head packet of ``node`` onto its next link.

        Only the head of the queue is examined; packets behind it are never
        looked at or reordered.

        Args:
            node: The node whose queue is processed.

        Returns:
            The outcome of the routing step.

        Raises:
            RouteNotFoundError: If the routing table has no path for the packet.
            MissingLinkError: If the next hop is not connected by a link.
        """
        packet = node.head()
        if packet is None:
            return RoutingOutcome.IDLE

        next_hop = self.simulator.topology.routing_table.next_hop(node.id, packet.destination)
        link = self.simulator.find_link(node.id, next_hop)
        if link is None:
            raise MissingLinkError(node.id, next_hop)

        if not link.has_capacity():
            logger.debug(
                "Link from %s to %s is at capacity. Packet queued.", node.id, next_hop
            )
            self.simulator.call_hooks("link_at_capacity", packet, node, link)
            return RoutingOutcome.LINK_AT_CAPACITY

        node.pop_head()
        link.admit()
        logger.debug("Packet %d routed from %s to %s.", packet.id, node.id, next_hop)
        self.simulator.call_hooks("packet_routed", packet, node, link)
        return RoutingOutcome.ADMITTED

    def route_all(self, nodes: Sequence[Node]) -> Dict[str, RoutingOutcome]:
        """Run one routing step for every node, in order."""
        return {node.id: self.route_node(node) for node in nodes}

    def __repr__(self) -> str:
        return self.name
