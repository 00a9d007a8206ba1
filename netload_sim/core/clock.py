"""Simulation clock driving one tick per fixed interval.

The clock is a SimPy process that waits one interval and then runs a full
simulator tick, forever, until it is stopped. With a plain
``simpy.Environment`` time is virtual and tests drive ticks synchronously via
:meth:`SimulationClock.advance`. With ``realtime=True`` a
``simpy.rt.RealtimeEnvironment`` paces ticks against the wall clock and runs on
a background thread.
"""

import logging
import threading
from typing import Any, Generator, Optional

import simpy
import simpy.rt

from netload_sim.core.simulator import NetworkSimulator
from netload_sim.core.stats import NetworkStats

logger = logging.getLogger(__name__)

DEFAULT_TICK_INTERVAL = 1.0


class SimulationClock:
    """Fixed-period scheduler with a start/stop lifecycle.

    Attributes:
        simulator: The simulator to tick.
        interval: Seconds (virtual or real) between ticks.
        realtime: Whether ticks are paced against the wall clock.
        env: The SimPy environment running the tick process.
    """

    def __init__(
        self,
        simulator: NetworkSimulator,
        interval: float = DEFAULT_TICK_INTERVAL,
        realtime: bool = False,
    ) -> None:
        """Initialize the clock.

        Args:
            simulator: The simulator to tick.
            interval: Time between ticks in seconds (default: 1.0).
            realtime: Pace ticks against the wall clock.
        """
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.simulator = simulator
        self.interval = interval
        self.realtime = realtime
        if realtime:
            self.env = simpy.rt.RealtimeEnvironment(factor=1.0, strict=False)
        else:
            self.env = simpy.Environment()

        self._running = False
        # Bumped on every start so a process left over from an earlier run
        # exits at its next wake-up without ticking.
        self._generation = 0
        self._process: Optional[simpy.events.Process] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def now(self) -> float:
        """Current simulation time in seconds."""
        return self.env.now

    def start(self) -> simpy.events.Process:
        """Register the tick process. The first tick fires one interval later.

        Returns:
            SimPy process for the tick loop.
        """
        if self._running:
            raise RuntimeError("Clock is already running")
        self._running = True
        self._generation += 1
        self._process = self.env.process(self._tick_process(self._generation))
        logger.info("Clock started, one tick every %.3fs", self.interval)
        return self._process

    def stop(self) -> None:
        """Stop ticking. A tick in progress is completed first."""
        if not self._running:
            return
        self._running = False
        logger.info("Clock stopped after %d ticks", self.simulator.tick_count)
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self.interval + 1.0)
            self._thread = None

    def _tick_process(self, generation: int) -> Generator[Any, Any, None]:
        while True:
            yield self.env.timeout(self.interval)
            if not self._running or generation != self._generation:
                return
            self.simulator.tick()

    def advance(self, ticks: int = 1) -> NetworkStats:
        """Step virtual time until ``ticks`` more ticks have completed.

        Args:
            ticks: Number of ticks to run.

        Returns:
            Snapshot after the last tick.
        """
        if self.realtime:
            raise RuntimeError("advance() only drives a virtual-time clock")
        if not self._running:
            raise RuntimeError("Clock is not running, call start() first")
        target = self.simulator.tick_count + ticks
        while self.simulator.tick_count < target:
            self.env.step()
        return self.simulator.snapshot()

    def run_in_background(self) -> threading.Thread:
        """Start a realtime clock on a daemon thread.

        Returns:
            The thread running the SimPy environment.
        """
        if not self.realtime:
            raise RuntimeError("run_in_background() needs a realtime clock")
        self.start()
        self._thread = threading.Thread(
            target=self._run_env, name="simulation-clock", daemon=True
        )
        self._thread.start()
        return self._thread

    def _run_env(self) -> None:
        self.env.sync()
        try:
            self.env.run()
        except Exception:
            logger.exception("Tick failed, stopping the clock")
            self._running = False

    def __repr__(self) -> str:
        state = "running" if self._running else "stopped"
        return f"SimulationClock({self.interval}s, {state}, t={self.env.now})"
