"""Discrete-time packet network simulation.

The package models a small packet-switched network where nodes generate
traffic once per tick and a router admits queued packets onto
capacity-bounded links.
"""

__version__ = "0.1.0"
