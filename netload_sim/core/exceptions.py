"""Exceptions raised by the network simulation.

Only integrity violations are raised. Queue overflow and saturated links are
expected conditions and are reported through outcomes, hooks and logging.
"""


class NetworkSimError(Exception):
    """Base class for all simulation errors."""


class ConfigError(NetworkSimError):
    """Raised when a configuration file is malformed."""


class TopologyError(NetworkSimError):
    """Raised when the topology and routing table are inconsistent."""


class RouteNotFoundError(TopologyError):
    """Raised when the routing table has no path for a node pair."""

    def __init__(self, source: str, destination: str) -> None:
        super().__init__(f"No route from {source} to {destination}")
        self.source = source
        self.destination = destination


class MissingLinkError(TopologyError):
    """Raised when a routing-table hop has no matching directed link."""

    def __init__(self, source: str, target: str) -> None:
        super().__init__(f"No link from {source} to {target}")
        self.source = source
        self.target = target
