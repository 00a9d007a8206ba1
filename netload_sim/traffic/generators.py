"""Traffic generators for network simulation.

This module provides the generator that injects new load once per tick: one
packet per node, addressed to a uniformly random other node.
"""

import logging
from typing import TYPE_CHECKING, Dict, List, Sequence

import numpy as np

from netload_sim.core.enums import GenerationOutcome
from netload_sim.core.node import Node
from netload_sim.core.packet import Packet
from netload_sim.utils.rng import choice

if TYPE_CHECKING:
    from netload_sim.core.simulator import NetworkSimulator

logger = logging.getLogger(__name__)


class UniformTrafficGenerator:
    """Generates one packet per node per tick with a uniform destination.

    Attributes:
        simulator: The simulator that owns the nodes and the packet ID sequence.
        rng: Random generator used to pick destinations.
    """

    def __init__(self, simulator: "NetworkSimulator", rng: np.random.Generator) -> None:
        self.simulator = simulator
        self.rng = rng
        # Candidate destinations per origin, in topology order.
        self._destinations: Dict[str, List[str]] = {
            node_id: [other for other in simulator.node_ids if other != node_id]
            for node_id in simulator.node_ids
        }

    def random_destination(self, source: str) -> str:
        """Pick a destination uniformly from every node except ``source``."""
        return choice(self.rng, self._destinations[source])

    def generate(self, node: Node) -> GenerationOutcome:
        """Create one packet at ``node`` and queue it if there is room.

        Args:
            node: The node generating the packet.

        Returns:
            QUEUED if the packet was appended, QUEUE_FULL if it was discarded.
        """
        packet = Packet(
            id=self.simulator.next_packet_id(),
            source=node.id,
            destination=self.random_destination(node.id),
            creation_tick=self.simulator.tick_count,
        )

        if node.can_queue_packet():
            node.add_packet_to_queue(packet)
            self.simulator.call_hooks("packet_generated", packet, node)
            return GenerationOutcome.QUEUED

        node.packet_dropped()
        logger.warning("Queue full at node %s. Dropping packet.", node.id)
        self.simulator.call_hooks("packet_dropped", packet, node, "Queue full")
        return GenerationOutcome.QUEUE_FULL

    def generate_all(self, nodes: Sequence[Node]) -> Dict[str, GenerationOutcome]:
        """Run :meth:`generate` for every node, in order."""
        return {node.id: self.generate(node) for node in nodes}
