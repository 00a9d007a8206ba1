"""Visualization utilities for network simulation.

This module provides functions for visualizing the topology and the recorded
link load and queue length history.
"""

import os
from typing import List, Optional, Tuple

import matplotlib.pyplot as plt
import networkx as nx
import numpy as np

from netload_sim.core.stats import NetworkStats
from netload_sim.core.topology import Topology


def save_network_visualization(
    topology: Topology,
    filename: Optional[str] = None,
    figsize: Tuple[int, int] = (8, 6),
    seed: int = 42,
    show: bool = True,
) -> None:
    """Draw the topology with link capacities.

    Args:
        topology: The topology to draw.
        filename: Output filename, or None to show it immediately.
        figsize: Figure size as (width, height) in inches.
        seed: Seed for the layout so repeated drawings match.
        show: Whether to display the figure when no filename is given.
    """
    fig = plt.figure(figsize=figsize)

    graph = topology.graph
    pos = nx.spring_layout(graph, seed=seed)

    nx.draw_networkx_nodes(graph, pos, node_size=700, node_color="lightblue")
    nx.draw_networkx_edges(
        graph,
        pos,
        edge_color="gray",
        arrows=True,
        arrowsize=20,
        connectionstyle="arc3,rad=0.15",
    )
    nx.draw_networkx_labels(graph, pos, font_size=16)

    edge_labels = {(u, v): str(data["capacity"]) for u, v, data in graph.edges(data=True)}
    nx.draw_networkx_edge_labels(
        graph,
        pos,
        edge_labels=edge_labels,
        font_size=10,
        label_pos=0.3,
        bbox=dict(facecolor="white", edgecolor="none", alpha=0.7),
    )

    plt.axis("off")
    plt.tight_layout()

    if filename:
        _ensure_parent(filename)
        fig.savefig(filename)
        plt.close(fig)
    elif show:
        plt.show()
    else:
        plt.close(fig)


def plot_link_loads(
    history: List[NetworkStats],
    output_dir: Optional[str] = None,
    filename: str = "link_loads",
    show: bool = True,
) -> None:
    """Plot the load of every link as a fraction of its capacity per tick.

    Args:
        history: Snapshots in tick order.
        output_dir: Directory to save the plot, or None to show it.
        filename: Name of the PNG file, without extension.
        show: Whether to display the figure when no output_dir is given.
    """
    if not history:
        return

    ticks = np.array([stats.tick for stats in history])
    fig, ax = plt.subplots(figsize=(12, 5))

    for index, link in enumerate(history[0].links):
        utilization = np.array([stats.links[index].load for stats in history]) / link.capacity
        ax.plot(ticks, utilization, label=f"{link.source}->{link.target}")

    ax.set_title("Link Load per Tick")
    ax.set_xlabel("Tick")
    ax.set_ylabel("Load / Capacity")
    ax.set_ylim(0, 1.05)
    ax.legend(loc="upper right", ncol=2, fontsize=8)

    _finish(fig, output_dir, filename, show)


def plot_queue_lengths(
    history: List[NetworkStats],
    output_dir: Optional[str] = None,
    filename: str = "queue_lengths",
    max_queue_size: Optional[int] = None,
    show: bool = True,
) -> None:
    """Plot the queue length of every node per tick.

    Args:
        history: Snapshots in tick order.
        output_dir: Directory to save the plot, or None to show it.
        filename: Name of the PNG file, without extension.
        max_queue_size: Draw the queue limit as a dashed line when given.
        show: Whether to display the figure when no output_dir is given.
    """
    if not history:
        return

    ticks = [stats.tick for stats in history]
    fig, ax = plt.subplots(figsize=(12, 5))

    for index, node in enumerate(history[0].nodes):
        ax.plot(ticks, [stats.nodes[index].queue_length for stats in history], label=node.id)

    if max_queue_size is not None:
        ax.axhline(max_queue_size, color="red", linestyle="--", alpha=0.6, label="limit")

    ax.set_title("Queue Length per Tick")
    ax.set_xlabel("Tick")
    ax.set_ylabel("Packets")
    ax.legend(loc="upper left")

    _finish(fig, output_dir, filename, show)


def _finish(fig, output_dir: Optional[str], filename: str, show: bool) -> None:
    plt.tight_layout()
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
        fig.savefig(os.path.join(output_dir, f"{filename}.png"))
        plt.close(fig)
    elif show:
        plt.show()
    else:
        plt.close(fig)


def _ensure_parent(filename: str) -> None:
    directory = os.path.dirname(filename)
    if directory:
        os.makedirs(directory, exist_ok=True)
