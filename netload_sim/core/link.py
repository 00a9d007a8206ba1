"""Link class for network simulation.

This module defines the Link class, which represents a directed,
capacity-bounded connection between two nodes in the simulated network.
"""


class Link:
    """Represents a directed network link between nodes.

    Attributes:
        source: Source node ID.
        target: Target node ID.
        capacity: Maximum number of packets admitted per tick.
        load: Packets admitted since the last reset.
        packets_sent: Packets admitted over the whole run.
    """

    def __init__(self, source: str, target: str, capacity: int) -> None:
        """Initialize a network link.

        Args:
            source: Source node ID.
            target: Target node ID.
            capacity: Link capacity in packets per tick.
        """
        self.source = source
        self.target = target
        self.capacity = capacity
        self.load = 0
        self.packets_sent = 0

    @property
    def key(self):
        return (self.source, self.target)

    def has_capacity(self) -> bool:
        """Check whether another packet can be admitted during this tick.

        Returns:
            True if the current load is strictly below capacity.
        """
        return self.load < self.capacity

    def admit(self) -> None:
        """Account for one packet admitted onto the link."""
        if not self.has_capacity():
            raise RuntimeError(f"{self!r} is already at capacity")
        self.load += 1
        self.packets_sent += 1

    def reset_load(self) -> None:
        """Reset the per-tick load counter."""
        self.load = 0

    def __repr__(self) -> str:
        """Return string representation of the link.

        Returns:
            String representation of the link.
        """
        return f"Link({self.source}->{self.target}, {self.load}/{self.capacity})"
