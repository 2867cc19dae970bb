"""
Purpose: Drive the position simulator on a fixed interval.
What it does:
- SimulationClock: one background thread calling simulator.tick() every interval.
  A single thread means two ticks can never overlap for the same simulator.
- run_until_idle(): synchronous driver for tests and scripts (no sleeping).
- SimulationController: the "one object" entry point (simulator + clock) with start/stop/cancel.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor
from typing import Iterable, List, Optional

from routing.models import GeoPoint
from routing.route_service import RouteService
from trips.models import Stop

from .policy import SimulationPolicy, default_simulation_policy
from .simulator import PositionSimulator, SimulationEvent, SimulationListener

logger = logging.getLogger(__name__)

DEFAULT_MAX_TICKS = 10_000


class SimulationClock:
    def __init__(self, simulator: PositionSimulator, interval_seconds: float):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")
        self.simulator = simulator
        self.interval_seconds = interval_seconds
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running and not self._stop_event.is_set():
            return
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            args=(self._stop_event,),
            name="simulation-clock",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        """
        Disarm the timer. Idempotent; callable from inside a tick.

        Waits a bounded time for a tick in progress. A tick doing an inline
        route fetch can outlast the wait (OSRM timeout); the thread then stays
        referenced and is_running reports True until that tick returns. It
        never ticks again because its stop event is set.
        """
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self.interval_seconds + 1.0)
        if thread is not None and not thread.is_alive():
            self._thread = None

    cancel = stop

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self.interval_seconds):
            try:
                self.simulator.tick()
            except Exception:
                logger.exception("Simulation tick failed; stopping clock.")
                break
            if self.simulator.is_idle:
                break


def run_until_idle(simulator: PositionSimulator, max_ticks: int = DEFAULT_MAX_TICKS) -> int:
    """
    Tick as fast as possible until the simulator is IDLE or `max_ticks` is hit.
    Returns the number of ticks executed. Meant for inline route resolution
    (no executor); with an executor pending fetches just burn ticks.
    """
    ticks = 0
    while not simulator.is_idle and ticks < max_ticks:
        simulator.tick()
        ticks += 1
    return ticks


class SimulationController:
    """
    Coordinates one PositionSimulator with its SimulationClock.
    """
    def __init__(
        self,
        route_service: RouteService,
        policy: Optional[SimulationPolicy] = None,
        executor: Optional[Executor] = None,
    ):
        self.policy = policy or default_simulation_policy()
        self.simulator = PositionSimulator(route_service, self.policy, executor)
        self.clock = SimulationClock(self.simulator, self.policy.tick_interval_seconds)

    def subscribe(self, listener: SimulationListener) -> None:
        self.simulator.subscribe(listener)

    def start(
        self,
        stops: Iterable[Stop],
        initial_position: GeoPoint,
        background: bool = True,
    ) -> List[SimulationEvent]:
        """
        Start a run. With background=True the clock ticks on its own thread;
        otherwise the caller drives tick() / run_until_idle().
        """
        self.clock.stop()
        events = self.simulator.start(stops, initial_position)
        if background and not self.simulator.is_idle:
            self.clock.start()
        return events

    def stop(self) -> None:
        self.clock.stop()
        self.simulator.stop()

    cancel = stop

    def run_until_idle(self, max_ticks: int = DEFAULT_MAX_TICKS) -> int:
        return run_until_idle(self.simulator, max_ticks)
