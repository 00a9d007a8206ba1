"""Core components for network simulation.

This module contains the fundamental classes for the tick-driven simulation,
including Packet, Link, Node, Topology, Router and NetworkSimulator.
"""
