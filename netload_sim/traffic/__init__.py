"""Traffic generation for network simulation.

This module provides the per-tick traffic generator that injects one packet
per node with a uniformly random destination.
"""
