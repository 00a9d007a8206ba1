import argparse
import logging
import os
import sys

from netload_sim.config import SimulationConfig, load_config, load_topology
from netload_sim.core.clock import SimulationClock
from netload_sim.core.exceptions import NetworkSimError
from netload_sim.core.simulator import NetworkSimulator
from netload_sim.server import create_app, serve
from netload_sim.utils.metrics import (
    StatsRecorder,
    calculate_metrics,
    save_history_to_csv,
    save_metrics_to_json,
    save_stats_to_json,
)

logger = logging.getLogger("netload_sim")


def _configure_logging(level: str) -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_config(args: argparse.Namespace) -> SimulationConfig:
    """Load the config file and apply command line overrides"""
    config = load_config(args.config)
    return config.updated(
        tick_interval=args.interval,
        max_queue_size=args.max_queue_size,
        seed=args.seed,
        topology_file=args.topology,
        log_level=args.log_level,
        host=getattr(args, "host", None),
        port=getattr(args, "port", None),
        static_dir=getattr(args, "static_dir", None),
    )


def build_simulator(config: SimulationConfig) -> NetworkSimulator:
    topology = load_topology(config.topology_file)
    return NetworkSimulator(topology, max_queue_size=config.max_queue_size, seed=config.seed)


def run_server(config: SimulationConfig) -> None:
    """Tick in real time and serve the stats over HTTP"""
    simulator = build_simulator(config)
    clock = SimulationClock(simulator, interval=config.tick_interval, realtime=True)
    app = create_app(simulator, static_dir=config.static_dir)

    clock.run_in_background()
    try:
        serve(app, host=config.host, port=config.port)
    finally:
        clock.stop()


def run_headless(config: SimulationConfig, ticks: int, output_dir: str, plot: bool) -> dict:
    """
    Run a fixed number of ticks in virtual time and save the results

    Args:
        config: Simulation settings
        ticks: Number of ticks to run
        output_dir: Directory for JSON, CSV and plots
        plot: Whether to save plots

    Returns:
        The calculated metrics
    """
    simulator = build_simulator(config)
    recorder = StatsRecorder(simulator)
    clock = SimulationClock(simulator, interval=config.tick_interval)

    clock.start()
    stats = clock.advance(ticks)
    clock.stop()

    metrics = calculate_metrics(simulator)
    save_stats_to_json(stats, os.path.join(output_dir, "network_stats.json"))
    save_metrics_to_json(metrics, os.path.join(output_dir, "metrics.json"))
    save_history_to_csv(recorder.history, os.path.join(output_dir, "history.csv"))

    if plot:
        from netload_sim.utils.visualization import plot_link_loads, plot_queue_lengths

        plot_link_loads(recorder.history, output_dir=output_dir)
        plot_queue_lengths(
            recorder.history, output_dir=output_dir, max_queue_size=config.max_queue_size
        )

    print(f"Ran {metrics['ticks']} ticks: "
          f"{metrics['packets_generated']} generated, "
          f"{metrics['packets_routed']} routed, "
          f"{metrics['packets_dropped']} dropped")
    return metrics


def show_topology(config: SimulationConfig, output: str | None) -> None:
    from netload_sim.utils.visualization import save_network_visualization

    save_network_visualization(load_topology(config.topology_file), filename=output)


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Discrete-time packet network simulation")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", help="JSON settings file")
    common.add_argument("--topology", help="JSON topology file (default: reference network)")
    common.add_argument("--interval", type=float, help="Seconds between ticks")
    common.add_argument("--max-queue-size", type=int, help="Queue limit per node")
    common.add_argument("--seed", type=int, help="Random seed")
    common.add_argument("--log-level", help="Logging level, e.g. DEBUG")

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", parents=[common], help="Serve /network-stats")
    serve_parser.add_argument("--host", help="Interface to bind")
    serve_parser.add_argument("--port", type=int, help="Port to listen on (default: 3500)")
    serve_parser.add_argument("--static-dir", help="Directory with the companion UI")

    run_parser = subparsers.add_parser("run", parents=[common], help="Run headless")
    run_parser.add_argument("--ticks", type=int, default=60, help="Number of ticks")
    run_parser.add_argument("--output-dir", default="results", help="Output directory")
    run_parser.add_argument("--plot", action="store_true", help="Save plots")

    topo_parser = subparsers.add_parser("show-topology", parents=[common], help="Draw the topology")
    topo_parser.add_argument("--output", help="Image file, or show a window when omitted")

    return parser


def main(argv=None) -> int:
    """Main function to run the simulation"""
    args = make_parser().parse_args(argv)

    try:
        config = build_config(args)
        _configure_logging(config.log_level)

        if args.command == "serve":
            run_server(config)
        elif args.command == "run":
            run_headless(config, args.ticks, args.output_dir, args.plot)
        elif args.command == "show-topology":
            show_topology(config, args.output)
    except NetworkSimError as e:
        logging.basicConfig()
        logger.error("%s", e)
        return 1
    except KeyboardInterrupt:
        return 0

    return 0


if __name__ == "__main__":
    sys.exit(main())
