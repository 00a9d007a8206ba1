"""Metrics utilities for network simulation.

This module records per-tick snapshots and provides functions for computing
and exporting simulation metrics, including drops, routed packets and link
utilization.
"""

import csv
import json
import os
from typing import Any, Dict, List

import numpy as np

from netload_sim.core.simulator import NetworkSimulator
from netload_sim.core.stats import NetworkStats


class StatsRecorder:
    """Keeps the snapshot taken at the end of every tick.

    Attributes:
        history: Snapshots in tick order.
    """

    def __init__(self, simulator: NetworkSimulator) -> None:
        self.history: List[NetworkStats] = []
        simulator.register_hook("tick_end", self._on_tick_end)

    def _on_tick_end(self, tick: int, stats: NetworkStats) -> None:
        self.history.append(stats)

    def link_loads(self) -> Dict[str, List[int]]:
        """Load of every link per recorded tick, keyed ``"src->dst"``."""
        loads: Dict[str, List[int]] = {}
        for stats in self.history:
            for link in stats.links:
                loads.setdefault(f"{link.source}->{link.target}", []).append(link.load)
        return loads

    def queue_lengths(self) -> Dict[str, List[int]]:
        """Queue length of every node per recorded tick."""
        lengths: Dict[str, List[int]] = {}
        for stats in self.history:
            for node in stats.nodes:
                lengths.setdefault(node.id, []).append(node.queue_length)
        return lengths

    def __len__(self) -> int:
        return len(self.history)


def calculate_metrics(simulator: NetworkSimulator) -> Dict[str, Any]:
    """Calculate performance metrics over the whole run.

    Args:
        simulator: NetworkSimulator instance.

    Returns:
        Dictionary of calculated metrics.
    """
    with simulator.lock:
        ticks = simulator.tick_count
        nodes = list(simulator.nodes.values())
        links = list(simulator.links.values())

        generated = sum(node.packets_generated for node in nodes)
        dropped = sum(node.packets_dropped for node in nodes)
        routed = sum(link.packets_sent for link in links)
        queued = sum(node.queue_length for node in nodes)

        link_utilization: Dict[str, float] = {}
        for link in links:
            max_packets = link.capacity * ticks
            link_utilization[f"{link.source}->{link.target}"] = (
                link.packets_sent / max_packets if max_packets else 0.0
            )

        packet_drops = {node.id: node.packets_dropped for node in nodes}
        queue_lengths = [node.queue_length for node in nodes]

    attempted = generated + dropped
    return {
        "ticks": ticks,
        "packets_generated": generated,
        "packets_dropped": dropped,
        "packets_routed": routed,
        "packets_queued": queued,
        "packet_loss_rate": dropped / attempted if attempted else 0.0,
        "throughput": routed / ticks if ticks else 0.0,
        "average_queue_length": float(np.mean(queue_lengths)) if queue_lengths else 0.0,
        "link_utilization": link_utilization,
        "packet_drops": packet_drops,
    }


def save_stats_to_json(stats: NetworkStats, filename: str = "results/network_stats.json") -> None:
    """Save a snapshot in the ``/network-stats`` layout.

    Args:
        stats: The snapshot to save.
        filename: Output filename.
    """
    _ensure_parent(filename)
    with open(filename, "w") as f:
        json.dump(stats.to_dict(), f, indent=2)


def save_metrics_to_json(metrics: Dict[str, Any], filename: str = "results/metrics.json") -> None:
    """Save metrics to a JSON file.

    Args:
        metrics: Dictionary of metrics to save.
        filename: Output filename.
    """
    _ensure_parent(filename)
    with open(filename, "w") as f:
        json.dump(metrics, f, indent=2)


def save_history_to_csv(history: List[NetworkStats], filename: str = "results/history.csv") -> None:
    """Save recorded snapshots as one CSV row per tick and element.

    Args:
        history: Snapshots in tick order.
        filename: Output filename.
    """
    _ensure_parent(filename)

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)

        writer.writerow(["tick", "kind", "id", "packets_generated", "queue_length", "load", "capacity"])

        for stats in history:
            for node in stats.nodes:
                writer.writerow(
                    [stats.tick, "node", node.id, node.packets_generated, node.queue_length, "", ""]
                )
            for link in stats.links:
                writer.writerow(
                    [stats.tick, "link", f"{link.source}->{link.target}", "", "", link.load, link.capacity]
                )


def _ensure_parent(filename: str) -> None:
    directory = os.path.dirname(filename)
    if directory:
        os.makedirs(directory, exist_ok=True)
