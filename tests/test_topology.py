import networkx as nx
import pytest

from netload_sim.core.exceptions import MissingLinkError, RouteNotFoundError, TopologyError
from netload_sim.core.topology import LinkSpec, RoutingTable, Topology, reference_topology


def test_reference_topology_layout(topology):
    assert topology.node_ids == ("A", "B", "C", "D", "E")
    assert len(topology.links) == 12
    assert topology.links[0] == LinkSpec("A", "B", 100)
    assert topology.links[5] == LinkSpec("D", "E", 60)
    assert topology.find_link("E", "C") == LinkSpec("E", "C", 100)
    assert isinstance(topology.graph, nx.DiGraph)
    assert topology.graph["A"]["C"]["capacity"] == 80


def test_reference_routes_are_asymmetric(topology):
    assert topology.lookup("A", "D") == ("A", "B", "D")
    assert topology.lookup("E", "A") == ("E", "C", "A")
    assert topology.lookup("B", "C") == ("B", "A", "C")
    assert topology.lookup("C", "B") == ("C", "A", "B")
    assert topology.lookup("E", "B") == ("E", "D", "B")
    assert topology.lookup("B", "E") == ("B", "D", "E")


def test_every_pair_has_a_route(topology):
    for source in topology.node_ids:
        for destination in topology.node_ids:
            if source == destination:
                continue
            path = topology.lookup(source, destination)
            assert path[0] == source
            assert path[-1] == destination
            for hop_from, hop_to in zip(path, path[1:]):
                assert topology.find_link(hop_from, hop_to) is not None


def test_lookup_unknown_pair_raises(topology):
    with pytest.raises(RouteNotFoundError):
        topology.lookup("A", "A")
    with pytest.raises(RouteNotFoundError):
        topology.lookup("A", "Z")


def test_find_link_absent(topology):
    assert topology.find_link("E", "A") is None
    assert topology.find_link("A", "E") is None


def test_shortest_paths_computed_when_routes_omitted(line_topology):
    assert line_topology.lookup("X", "Z") == ("X", "Y", "Z")
    assert line_topology.lookup("Z", "X") == ("Z", "Y", "X")
    assert len(line_topology.routing_table) == 6


def test_route_hop_without_link_is_rejected():
    routes = RoutingTable.from_nested({"A": {"B": ["A", "B"]}, "B": {"A": ["B", "A"]}})
    with pytest.raises(MissingLinkError) as excinfo:
        Topology(["A", "B"], [LinkSpec("A", "B", 5)], routes)
    assert (excinfo.value.source, excinfo.value.target) == ("B", "A")


def test_missing_pair_is_rejected():
    routes = RoutingTable.from_nested({"A": {"B": ["A", "B"]}})
    with pytest.raises(RouteNotFoundError):
        Topology(["A", "B"], [LinkSpec("A", "B", 5), LinkSpec("B", "A", 5)], routes)


def test_unreachable_node_is_rejected():
    with pytest.raises(RouteNotFoundError):
        Topology(["A", "B"], [LinkSpec("A", "B", 5)])


def test_path_must_start_and_end_at_its_keys():
    routes = RoutingTable.from_nested({"A": {"B": ["B", "A"]}, "B": {"A": ["B", "A"]}})
    with pytest.raises(TopologyError):
        Topology(["A", "B"], [LinkSpec("A", "B", 5), LinkSpec("B", "A", 5)], routes)


@pytest.mark.parametrize(
    "nodes, links",
    [
        (["A", "A", "B"], [("A", "B", 1), ("B", "A", 1)]),
        (["A", "B"], [("A", "C", 1), ("B", "A", 1)]),
        (["A", "B"], [("A", "A", 1), ("A", "B", 1), ("B", "A", 1)]),
        (["A", "B"], [("A", "B", 1), ("A", "B", 2), ("B", "A", 1)]),
        (["A", "B"], [("A", "B", 0), ("B", "A", 1)]),
        (["A", "B"], [("A", "B", 1.5), ("B", "A", 1)]),
        (["A"], []),
    ],
)
def test_invalid_graphs_are_rejected(nodes, links):
    with pytest.raises(TopologyError):
        Topology(nodes, [LinkSpec(*link) for link in links])


def test_from_dict_round_trip(topology):
    rebuilt = Topology.from_dict(topology.to_dict())
    assert rebuilt.node_ids == topology.node_ids
    assert rebuilt.links == topology.links
    assert rebuilt.lookup("D", "A") == ("D", "B", "A")


_TWO_WAY = [{"from": "A", "to": "B", "capacity": 1}, {"from": "B", "to": "A", "capacity": 1}]


@pytest.mark.parametrize(
    "data",
    [
        {"nodes": ["A", "B"], "links": [{"from": "A"}]},
        {"nodes": ["A", "B"], "links": _TWO_WAY, "routes": {"A": ["A", "B"]}},
        {"nodes": ["A", "B"], "links": _TWO_WAY, "routes": {"A": {"B": None}, "B": {"A": ["B", "A"]}}},
        {"nodes": ["A", "B"], "links": _TWO_WAY, "routes": {"A": {"B": "AB"}, "B": {"A": ["B", "A"]}}},
        {"nodes": ["A", "B"], "links": _TWO_WAY, "routes": [["A", "B"]]},
    ],
)
def test_from_dict_malformed(data):
    with pytest.raises(TopologyError):
        Topology.from_dict(data)


def test_next_hop(topology):
    assert topology.routing_table.next_hop("E", "A") == "C"
    assert topology.routing_table.next_hop("A", "B") == "B"


def test_reference_topology_returns_fresh_instances():
    assert reference_topology() is not reference_topology()
