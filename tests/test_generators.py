from collections import Counter

from conftest import enqueue
from netload_sim.core.enums import GenerationOutcome
from netload_sim.core.simulator import NetworkSimulator
from netload_sim.core.topology import reference_topology


def test_generates_one_packet_per_node(simulator):
    outcomes = simulator.generate_traffic()

    assert outcomes == {node_id: GenerationOutcome.QUEUED for node_id in simulator.node_ids}
    for node in simulator.nodes.values():
        assert node.queue_length == 1
        assert node.packets_generated == 1
        assert node.head().source == node.id


def test_generation_does_not_touch_links(simulator):
    simulator.links[("A", "B")].load = 7
    simulator.generate_traffic()
    assert simulator.links[("A", "B")].load == 7
    assert all(link.packets_sent == 0 for link in simulator.links.values())


def test_destination_is_never_the_origin_and_covers_all_others(simulator):
    seen = Counter()
    for _ in range(400):
        destination = simulator.generator.random_destination("C")
        assert destination != "C"
        seen[destination] += 1
    assert set(seen) == {"A", "B", "D", "E"}
    # roughly uniform
    assert min(seen.values()) > 60


def test_seeded_generators_agree():
    first = NetworkSimulator(reference_topology(), seed=99)
    second = NetworkSimulator(reference_topology(), seed=99)
    draws = [first.generator.random_destination("A") for _ in range(50)]
    assert draws == [second.generator.random_destination("A") for _ in range(50)]


def test_packet_ids_are_unique(simulator):
    for _ in range(3):
        simulator.generate_traffic()
    ids = [packet.id for node in simulator.nodes.values() for packet in node.queue]
    assert len(ids) == len(set(ids)) == 15


def test_full_queue_drops_packet_without_counting_it(simulator):
    node = simulator.nodes["B"]
    for _ in range(node.max_queue_size):
        enqueue(simulator, "B", "D")
    before = list(node.queue)
    assert node.packets_generated == 50

    dropped = []
    simulator.register_hook("packet_dropped", lambda packet, n, reason: dropped.append(reason))

    outcome = simulator.generator.generate(node)

    assert outcome is GenerationOutcome.QUEUE_FULL
    assert node.queue_length == 50
    assert list(node.queue) == before
    assert node.packets_generated == 50
    assert node.packets_dropped == 1
    assert dropped == ["Queue full"]


def test_queue_full_is_logged(simulator, caplog):
    node = simulator.nodes["A"]
    for _ in range(node.max_queue_size):
        enqueue(simulator, "A", "B")
    with caplog.at_level("WARNING"):
        simulator.generator.generate(node)
    assert "Queue full at node A" in caplog.text


def test_generated_hook_receives_packet(simulator):
    generated = []
    simulator.register_hook("packet_generated", lambda packet, node: generated.append(packet))
    simulator.generate_traffic()
    assert [packet.source for packet in generated] == list(simulator.node_ids)
