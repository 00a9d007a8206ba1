import sys
from pathlib import Path

# Ensure package import for tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import matplotlib

matplotlib.use("Agg")

import pytest

from netload_sim.core.packet import Packet
from netload_sim.core.simulator import NetworkSimulator
from netload_sim.core.topology import LinkSpec, Topology, reference_topology


@pytest.fixture
def topology() -> Topology:
    return reference_topology()


@pytest.fixture
def simulator(topology) -> NetworkSimulator:
    return NetworkSimulator(topology, seed=1234)


@pytest.fixture
def line_topology() -> Topology:
    """X <-> Y <-> Z with routes computed from the graph."""
    return Topology(
        ["X", "Y", "Z"],
        [
            LinkSpec("X", "Y", 2),
            LinkSpec("Y", "X", 2),
            LinkSpec("Y", "Z", 1),
            LinkSpec("Z", "Y", 1),
        ],
    )


def enqueue(simulator: NetworkSimulator, source: str, destination: str) -> Packet:
    """Put a packet straight into a node's queue, bypassing the generator."""
    packet = Packet(simulator.next_packet_id(), source, destination, simulator.tick_count)
    simulator.nodes[source].add_packet_to_queue(packet)
    return packet
