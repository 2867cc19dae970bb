"""
Purpose: Live position simulation (the vehicle walking its route).
What it does:
Owns one SimulationState and advances it one tick at a time:
- moves the vehicle STEP meters along the current route segment (or snaps to
  the next vertex when the segment is shorter than a step)
- detects arrival at the next stop within the arrival radius
- asks the RouteService for a fresh route from the vehicle to the remaining
  stops after every arrival
- reports RouteUpdate / PositionUpdate / StopArrival / SimulationComplete to listeners

Timer agnostic: a SimulationClock, an event loop or a test can call tick().

Route fetches run inline, or on a concurrent.futures executor when one is
given. While a fetch is outstanding ticks are suspended (status
AWAITING_ROUTE) and the vehicle holds its position. Every fetch carries a
token; results whose token is no longer current (run stopped, restarted or
re-routed again in the meantime) are dropped.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future
from contextlib import contextmanager
from dataclasses import replace
from typing import Dict, Iterable, Iterator, List, Optional, Union

from routing.geodesy import bearing, destination, distance
from routing.models import GeoPoint
from routing.route_service import ResolvedRoute, RouteService
from trips.models import Stop

from .models import (
    PositionUpdate,
    RouteUpdate,
    SimulationComplete,
    SimulationState,
    SimulationStatus,
    StopArrival,
)
from .policy import SimulationPolicy, default_simulation_policy

logger = logging.getLogger(__name__)

SimulationEvent = Union[RouteUpdate, PositionUpdate, StopArrival, SimulationComplete]


class SimulationListener:
    """
    Subscriber interface. Override only what you need; every hook defaults to a no-op.
    Listeners must not expect their return values to be used. An exception
    raised by a hook is logged and the remaining listeners still run.
    """

    def on_route_update(self, update: RouteUpdate) -> None:
        pass

    def on_position_update(self, update: PositionUpdate) -> None:
        pass

    def on_stop_arrived(self, arrival: StopArrival) -> None:
        pass

    def on_simulation_complete(self, complete: SimulationComplete) -> None:
        pass


_HOOKS = {
    RouteUpdate: "on_route_update",
    PositionUpdate: "on_position_update",
    StopArrival: "on_stop_arrived",
    SimulationComplete: "on_simulation_complete",
}


class PositionSimulator:
    """
    Tick-driven state machine: IDLE -> AWAITING_ROUTE -> RUNNING -> IDLE.

    One instance simulates one vehicle. Instances share nothing, so several
    drivers can run side by side without any cross-instance locking.
    """

    def __init__(
        self,
        route_service: RouteService,
        policy: Optional[SimulationPolicy] = None,
        executor: Optional[Executor] = None,
    ):
        self.route_service = route_service
        self.policy = policy or default_simulation_policy()
        self.policy.validate()
        self.executor = executor

        self._listeners: List[SimulationListener] = []
        self._lock = threading.RLock()
        self._status = SimulationStatus.IDLE
        self._state: Optional[SimulationState] = None
        self._last_position: Optional[GeoPoint] = None

        # generation counter; a fetch result is applied only if its token is still pending
        self._generation = 0
        self._pending_token: Optional[int] = None

        self._outbox: Optional[List[SimulationEvent]] = None

    # --- Subscription ---

    def subscribe(self, listener: SimulationListener) -> None:
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def unsubscribe(self, listener: SimulationListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    # --- Read-only views ---

    @property
    def status(self) -> SimulationStatus:
        return self._status

    @property
    def is_idle(self) -> bool:
        return self._status == SimulationStatus.IDLE

    @property
    def state(self) -> Optional[SimulationState]:
        return self._state

    @property
    def vehicle_position(self) -> Optional[GeoPoint]:
        """Current vehicle position, or the last known one once the run has ended."""
        if self._state is not None:
            return self._state.vehicle_position
        return self._last_position

    def distances(self) -> Dict[str, float]:
        """Straight-line distance from the vehicle to every remaining stop, in visiting order."""
        with self._lock:
            if self._state is None:
                return {}
            return self._distances(self._state)

    # --- Public API ---

    def start(self, stops: Iterable[Stop], initial_position: GeoPoint) -> List[SimulationEvent]:
        """
        Begin a new run from `initial_position` through `stops` (already in visiting order).

        Any previous run is cancelled first. An empty stop list leaves the simulator IDLE.
        """
        stops = tuple(stops)
        stop_ids = [stop.id for stop in stops]
        if len(set(stop_ids)) != len(stop_ids):
            raise ValueError("Stop ids must be unique within one simulation run.")

        with self._collecting() as events:
            self._cancel()
            self._last_position = initial_position

            if not stops:
                logger.info("No stops to visit; simulation stays idle.")
                return events

            self._state = SimulationState(
                polyline=(initial_position,),
                segment_cursor=0,
                stop_cursor=0,
                remaining_stops=stops,
                vehicle_position=initial_position,
            )
            logger.info("Starting simulation with %d stops.", len(stops))
            self._request_route(self._state)
            return events

    def tick(self) -> List[SimulationEvent]:
        """
        Advance the simulation by one step. Returns the events emitted during this tick.
        Does nothing unless RUNNING.
        """
        with self._collecting() as events:
            if self._status == SimulationStatus.RUNNING:
                self._tick()
            return events

    def mark_stop_reached(self, stop_id: str) -> bool:
        """
        Manual override: treat `stop_id` as visited right now.

        Returns False (and changes nothing) if the stop is not in the active list,
        e.g. a duplicate confirmation from the UI.
        """
        with self._collecting():
            state = self._state
            if self._status == SimulationStatus.IDLE or state is None:
                return False

            index = next(
                (i for i, stop in enumerate(state.remaining_stops) if stop.id == stop_id),
                None,
            )
            if index is None:
                logger.debug("Ignoring manual arrival for unknown stop %s", stop_id)
                return False

            stop = state.remaining_stops[index]
            remaining = state.remaining_stops[:index] + state.remaining_stops[index + 1:]
            # only the current target moves the cursor
            stop_cursor = state.stop_cursor + 1 if index == 0 else state.stop_cursor

            state = replace(state, remaining_stops=remaining, stop_cursor=stop_cursor)
            self._state = state
            self._emit(StopArrival(stop=stop, position=state.vehicle_position, manual=True))
            if self._state is not state:
                # a listener stopped or restarted the run
                return True

            if remaining:
                self._request_route(state)
            else:
                # nothing left to route to: keep the polyline, just redraw
                self._emit_position(state)
            return True

    def stop(self) -> None:
        """
        Halt the run and return to IDLE. Safe from any state, safe to repeat,
        safe while a route fetch is outstanding (its result is discarded).
        """
        with self._lock:
            if self._status == SimulationStatus.IDLE and self._state is None:
                return
            logger.info("Simulation stopped.")
            self._cancel()

    cancel = stop

    # --- Tick internals ---

    def _tick(self) -> None:
        state = self._state

        # 1. nothing left to do
        if not state.remaining_stops or not state.has_next_segment:
            self._complete(state)
            return

        # 2. current segment
        current = state.current_vertex
        next_vertex = state.polyline[state.segment_cursor + 1]
        segment_distance = distance(current, next_vertex)

        # 3. move
        step = self.policy.step_meters
        if segment_distance <= step:
            state = self._snap_to_next_vertex(state)
        else:
            moved = destination(current, bearing(current, next_vertex), step)
            if distance(moved, next_vertex) >= segment_distance:
                # would overshoot the segment end: clamp to the vertex
                state = self._snap_to_next_vertex(state)
            else:
                state = replace(state, segment_origin=moved, vehicle_position=moved)
        self._state = state

        # 4. arrival
        target = state.target_stop
        if distance(state.vehicle_position, target.point) <= self.policy.arrival_radius_meters:
            self._arrive(state, target)
            return

        # 5. live feed
        self._emit_position(state)

    @staticmethod
    def _snap_to_next_vertex(state: SimulationState) -> SimulationState:
        cursor = state.segment_cursor + 1
        return replace(
            state,
            segment_cursor=cursor,
            segment_origin=None,
            vehicle_position=state.polyline[cursor],
        )

    def _arrive(self, state: SimulationState, stop: Stop) -> None:
        state = replace(
            state,
            vehicle_position=stop.point,
            stop_cursor=state.stop_cursor + 1,
            remaining_stops=state.remaining_stops[1:],
        )
        self._state = state
        logger.info("Arrived at stop %s (%s).", stop.id, stop.kind.value)
        self._emit(StopArrival(stop=stop, position=stop.point))
        if self._state is not state:
            return

        if state.remaining_stops:
            # the re-route replaces any further movement this tick
            self._request_route(state)
        else:
            self._complete(state)

    def _complete(self, state: SimulationState) -> None:
        unvisited = state.remaining_stops
        if unvisited:
            logger.warning("Route ended with %d stops not reached.", len(unvisited))
        else:
            logger.info("All stops visited; simulation complete.")
        self._cancel()
        self._emit(SimulationComplete(unvisited=unvisited))

    def _cancel(self) -> None:
        if self._state is not None:
            self._last_position = self._state.vehicle_position
        self._generation += 1
        self._pending_token = None
        self._state = None
        self._status = SimulationStatus.IDLE

    # --- Routing ---

    def _request_route(self, state: SimulationState) -> None:
        waypoints = [state.vehicle_position] + [stop.point for stop in state.remaining_stops]

        self._generation += 1
        token = self._generation
        self._pending_token = token
        self._status = SimulationStatus.AWAITING_ROUTE

        if self.executor is None:
            self._apply_route(token, self.route_service.resolve_route(waypoints))
            return

        try:
            future = self.executor.submit(self.route_service.resolve_route, waypoints)
        except Exception:
            # e.g. a shut-down executor: the run must not stay AWAITING_ROUTE
            logger.exception("Could not schedule route fetch; stopping simulation.")
            self._cancel()
            raise
        future.add_done_callback(lambda done, token=token: self._on_route_resolved(token, done))

    def _on_route_resolved(self, token: int, future: Future) -> None:
        if future.cancelled():
            return
        resolved = future.result()
        with self._collecting():
            self._apply_route(token, resolved)

    def _apply_route(self, token: int, resolved: ResolvedRoute) -> None:
        if token != self._pending_token or self._state is None:
            logger.debug("Discarding stale route result (token %s).", token)
            return

        polyline = tuple(resolved.polyline)
        self._pending_token = None
        self._state = replace(self._state, polyline=polyline, segment_cursor=0, segment_origin=None)
        self._status = SimulationStatus.RUNNING
        self._emit(RouteUpdate(polyline=polyline, fallback=resolved.fallback))

    # --- Events ---

    @staticmethod
    def _distances(state: SimulationState) -> Dict[str, float]:
        return {
            stop.id: distance(state.vehicle_position, stop.point)
            for stop in state.remaining_stops
        }

    def _emit_position(self, state: SimulationState) -> None:
        self._emit(
            PositionUpdate(
                position=state.vehicle_position,
                distances=self._distances(state),
                polyline=state.remaining_polyline,
            )
        )

    def _emit(self, event: SimulationEvent) -> None:
        if self._outbox is not None:
            self._outbox.append(event)
        hook = _HOOKS[type(event)]
        for listener in list(self._listeners):
            try:
                getattr(listener, hook)(event)
            except Exception:
                # listeners are downstream only; a failing one must not abort a transition
                logger.exception("Listener %r failed handling %s.", listener, type(event).__name__)

    @contextmanager
    def _collecting(self) -> Iterator[List[SimulationEvent]]:
        """
        Hold the lock and gather emitted events. Nested calls (a listener
        calling back into the simulator) fold their events into the outer list.
        """
        with self._lock:
            outer = self._outbox
            self._outbox = []
            try:
                yield self._outbox
            finally:
                collected = self._outbox
                self._outbox = outer
                if outer is not None:
                    outer.extend(collected)
