"""Configuration for the simulation and the stats server.

Settings come from an optional JSON file; command line flags override them.
The topology lives in a separate JSON file so the same network can be reused
across runs.
"""

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Optional

from netload_sim.core.exceptions import ConfigError, TopologyError
from netload_sim.core.topology import Topology, reference_topology

logger = logging.getLogger(__name__)


@dataclass
class SimulationConfig:
    """Settings for a simulation run.

    Attributes:
        tick_interval: Seconds between ticks.
        max_queue_size: Maximum queue length at every node.
        seed: Random seed, or None for a fresh one.
        host: Interface the stats server binds to.
        port: Port the stats server listens on.
        static_dir: Directory served as the companion UI.
        topology_file: Topology JSON file, or None for the reference network.
        log_level: Name of the logging level.
    """

    tick_interval: float = 1.0
    max_queue_size: int = 50
    seed: Optional[int] = None
    host: str = "127.0.0.1"
    port: int = 3500
    static_dir: str = "public"
    topology_file: Optional[str] = None
    log_level: str = "INFO"

    def __post_init__(self):
        if self.tick_interval <= 0:
            raise ConfigError("tick_interval must be positive")
        if self.max_queue_size < 1:
            raise ConfigError("max_queue_size must be at least 1")
        if not 0 < self.port < 65536:
            raise ConfigError(f"Invalid port {self.port}")

    def updated(self, **overrides: Any) -> "SimulationConfig":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def load_config(filename: Optional[str] = None) -> SimulationConfig:
    """Load settings from a JSON file.

    Args:
        filename: Path to the JSON file, or None for defaults.

    Returns:
        The loaded configuration.

    Raises:
        ConfigError: If the file is missing, unreadable or has unknown keys.
    """
    if filename is None:
        return SimulationConfig()

    data = _read_json(filename)
    if not isinstance(data, dict):
        raise ConfigError(f"{filename} must contain a JSON object")

    known = {f.name for f in fields(SimulationConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys in {filename}: {', '.join(unknown)}")

    logger.info("Loaded configuration from %s", filename)
    try:
        return SimulationConfig(**data)
    except TypeError as e:
        raise ConfigError(f"Invalid configuration in {filename}: {e}") from e


def load_topology(filename: Optional[str] = None) -> Topology:
    """Load a topology JSON file, or the reference network when None.

    Raises:
        ConfigError: If the file cannot be read.
        TopologyError: If the topology is inconsistent.
    """
    if filename is None:
        return reference_topology()

    data = _read_json(filename)
    if not isinstance(data, dict):
        raise TopologyError(f"{filename} must contain a JSON object")
    topology = Topology.from_dict(data)
    logger.info("Loaded %r from %s", topology, filename)
    return topology


def save_topology(topology: Topology, filename: str) -> None:
    """Write a topology, including its routing table, to a JSON file."""
    directory = os.path.dirname(filename)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(filename, "w") as f:
        json.dump(topology.to_dict(), f, indent=2)


def _read_json(filename: str) -> Any:
    try:
        with open(filename) as f:
            return json.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read {filename}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {filename}: {e}") from e
