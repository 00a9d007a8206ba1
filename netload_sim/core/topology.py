"""Static topology and routing table for network simulation.

A Topology is the immutable description of the network: the node IDs, the
directed links with their capacities and the precomputed routing table. It is
validated once at construction. Live state (queues, link loads) lives in the
simulator, which builds fresh Node and Link objects from a Topology.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Tuple

import networkx as nx

from netload_sim.core.exceptions import MissingLinkError, RouteNotFoundError, TopologyError

logger = logging.getLogger(__name__)

Path = Tuple[str, ...]


class LinkSpec(NamedTuple):
    """Static definition of a directed link."""

    source: str
    target: str
    capacity: int


class RoutingTable:
    """Precomputed paths keyed by (source, destination).

    Paths are ordered node sequences that begin with the source and end with
    the destination. The table may be asymmetric.
    """

    def __init__(self, routes: Mapping[Tuple[str, str], Sequence[str]]) -> None:
        self._routes: Dict[Tuple[str, str], Path] = {
            pair: tuple(path) for pair, path in routes.items()
        }

    @classmethod
    def from_nested(cls, table: Mapping[str, Mapping[str, Sequence[str]]]) -> "RoutingTable":
        """Build a table from ``{source: {destination: path}}``.

        Raises:
            TopologyError: If a path is not a list of node IDs.
        """
        routes: Dict[Tuple[str, str], Sequence[str]] = {}
        for source, paths in table.items():
            for destination, path in paths.items():
                if not isinstance(path, (list, tuple)):
                    raise TopologyError(
                        f"Route {source}->{destination} must be a list of node IDs, got {path!r}"
                    )
                routes[(source, destination)] = path
        return cls(routes)

    @classmethod
    def shortest_paths(cls, graph: nx.DiGraph) -> "RoutingTable":
        """Compute hop-count shortest paths between all reachable pairs."""
        routes: Dict[Tuple[str, str], Sequence[str]] = {}
        for source, paths in nx.all_pairs_shortest_path(graph):
            for destination, path in paths.items():
                if source != destination and len(path) > 1:
                    routes[(source, destination)] = path
        return cls(routes)

    def lookup(self, source: str, destination: str) -> Path:
        """Return the path from ``source`` to ``destination``.

        Raises:
            RouteNotFoundError: If the table has no entry for the pair.
        """
        try:
            return self._routes[(source, destination)]
        except KeyError:
            raise RouteNotFoundError(source, destination) from None

    def next_hop(self, source: str, destination: str) -> str:
        """Return the second entry of the path, i.e. the neighbour to forward to."""
        return self.lookup(source, destination)[1]

    def items(self):
        return self._routes.items()

    def to_nested(self) -> Dict[str, Dict[str, List[str]]]:
        nested: Dict[str, Dict[str, List[str]]] = {}
        for (source, destination), path in self._routes.items():
            nested.setdefault(source, {})[destination] = list(path)
        return nested

    def __contains__(self, pair) -> bool:
        return pair in self._routes

    def __len__(self) -> int:
        return len(self._routes)


class Topology:
    """Static directed graph plus routing table.

    Attributes:
        node_ids: Node identifiers in definition order.
        links: Link definitions in definition order.
        routing_table: Precomputed paths for every ordered node pair.
        graph: NetworkX directed graph with a ``capacity`` attribute per edge.
    """

    def __init__(
        self,
        node_ids: Iterable[str],
        links: Iterable[LinkSpec],
        routing_table: Optional[RoutingTable] = None,
    ) -> None:
        """Build and validate a topology.

        Args:
            node_ids: Unique node identifiers.
            links: Directed link definitions.
            routing_table: Precomputed paths; computed from the graph when omitted.

        Raises:
            TopologyError: If the topology is inconsistent.
        """
        self.node_ids: Tuple[str, ...] = tuple(node_ids)
        self.links: Tuple[LinkSpec, ...] = tuple(LinkSpec(*link) for link in links)

        self.graph = nx.DiGraph()
        self.graph.add_nodes_from(self.node_ids)
        for link in self.links:
            self.graph.add_edge(link.source, link.target, capacity=link.capacity)

        self._link_index: Dict[Tuple[str, str], LinkSpec] = {
            (link.source, link.target): link for link in self.links
        }

        if routing_table is None:
            self._check_nodes_and_links()
            logger.info("Computing shortest paths for %d nodes", len(self.node_ids))
            routing_table = RoutingTable.shortest_paths(self.graph)
        self.routing_table = routing_table

        self.validate()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Topology":
        """Build a topology from its JSON representation.

        The expected layout is::

            {
                "nodes": ["A", "B"],
                "links": [{"from": "A", "to": "B", "capacity": 100}],
                "routes": {"A": {"B": ["A", "B"]}}
            }

        ``routes`` is optional.
        """
        try:
            node_ids = [str(node) for node in data["nodes"]]
            links = [
                LinkSpec(str(link["from"]), str(link["to"]), link["capacity"])
                for link in data["links"]
            ]
            routes = data.get("routes")
            routing_table = RoutingTable.from_nested(routes) if routes is not None else None
        except (AttributeError, KeyError, TypeError) as e:
            raise TopologyError(f"Malformed topology definition: {e}") from e
        return cls(node_ids, links, routing_table)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": list(self.node_ids),
            "links": [
                {"from": link.source, "to": link.target, "capacity": link.capacity}
                for link in self.links
            ],
            "routes": self.routing_table.to_nested(),
        }

    def lookup(self, source: str, destination: str) -> Path:
        """Return the precomputed path from ``source`` to ``destination``."""
        return self.routing_table.lookup(source, destination)

    def find_link(self, source: str, target: str) -> Optional[LinkSpec]:
        """Return the link definition from ``source`` to ``target``, if any."""
        return self._link_index.get((source, target))

    def _check_nodes_and_links(self) -> None:
        if len(set(self.node_ids)) != len(self.node_ids):
            raise TopologyError(f"Duplicate node IDs in {self.node_ids}")
        if len(self.node_ids) < 2:
            raise TopologyError("A topology needs at least two nodes")

        known = set(self.node_ids)
        seen = set()
        for link in self.links:
            if link.source not in known or link.target not in known:
                raise TopologyError(f"Link {link.source}->{link.target} references an unknown node")
            if link.source == link.target:
                raise TopologyError(f"Self link at node {link.source}")
            if (link.source, link.target) in seen:
                raise TopologyError(f"Duplicate link {link.source}->{link.target}")
            if not isinstance(link.capacity, int) or isinstance(link.capacity, bool) or link.capacity < 1:
                raise TopologyError(
                    f"Link {link.source}->{link.target} needs a positive integer capacity, got {link.capacity!r}"
                )
            seen.add((link.source, link.target))

    def validate(self) -> None:
        """Check that the routing table only uses existing links.

        Every ordered pair of distinct nodes must have a path which starts at
        the source, ends at the destination and only follows directed links.

        Raises:
            TopologyError: On any inconsistency.
        """
        self._check_nodes_and_links()
        known = set(self.node_ids)

        for (source, destination), path in self.routing_table.items():
            if source not in known or destination not in known:
                raise TopologyError(f"Route {source}->{destination} references an unknown node")
            if len(path) < 2 or path[0] != source or path[-1] != destination:
                raise TopologyError(
                    f"Route {source}->{destination} has an invalid path {list(path)}"
                )
            for hop_from, hop_to in zip(path, path[1:]):
                if (hop_from, hop_to) not in self._link_index:
                    raise MissingLinkError(hop_from, hop_to)

        for source in self.node_ids:
            for destination in self.node_ids:
                if source != destination and (source, destination) not in self.routing_table:
                    raise RouteNotFoundError(source, destination)

    def __repr__(self) -> str:
        return f"Topology({len(self.node_ids)} nodes, {len(self.links)} links)"


_REFERENCE_LINKS = [
    ("A", "B", 100),
    ("A", "C", 80),
    ("B", "D", 70),
    ("C", "D", 90),
    ("C", "E", 100),
    ("D", "E", 60),
]

_REFERENCE_ROUTES = {
    "A": {"B": ["A", "B"], "C": ["A", "C"], "D": ["A", "B", "D"], "E": ["A", "C", "E"]},
    "B": {"A": ["B", "A"], "C": ["B", "A", "C"], "D": ["B", "D"], "E": ["B", "D", "E"]},
    "C": {"A": ["C", "A"], "B": ["C", "A", "B"], "D": ["C", "D"], "E": ["C", "E"]},
    "D": {"A": ["D", "B", "A"], "B": ["D", "B"], "C": ["D", "C"], "E": ["D", "E"]},
    "E": {"A": ["E", "C", "A"], "B": ["E", "D", "B"], "C": ["E", "C"], "D": ["E", "D"]},
}


def reference_topology() -> Topology:
    """Return the five-node reference network.

    The six forward links are followed by their reverse directions with the
    same capacity, since the routing table also forwards in the reverse
    direction (e.g. E->C->A).
    """
    forward = [LinkSpec(*link) for link in _REFERENCE_LINKS]
    reverse = [LinkSpec(link.target, link.source, link.capacity) for link in forward]
    return Topology(
        ["A", "B", "C", "D", "E"],
        forward + reverse,
        RoutingTable.from_nested(_REFERENCE_ROUTES),
    )
