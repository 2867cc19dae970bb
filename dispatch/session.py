"""
Purpose: Orchestrator for one driven route (the "glue").
What it does:
Takes a Route, its Driver and the passenger group, builds the visiting order
(pickups then dropoffs, absent passengers left out), activates the route and
runs the live position simulation. While it runs it keeps the driver's live
location, the per-stop distances and the passengers' pickup times up to date,
and completes the route once every stop has been visited.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from drivers.models import Driver, DriverStatus
from routing.route_service import RouteService
from tracking.clock import DEFAULT_MAX_TICKS, SimulationController
from tracking.models import PositionUpdate, SimulationComplete, StopArrival
from tracking.policy import SimulationPolicy
from tracking.rendering import MapRenderingListener, MapSink
from tracking.simulator import PositionSimulator, SimulationListener
from trips.models import Passenger, Route, Stop, StopKind
from trips.sequencing import build_route_stops

from .state_machines.passenger_state import record_pickup
from .state_machines.route_state import activate_route, complete_route

logger = logging.getLogger(__name__)


class RouteSession(SimulationListener):
    """
    Coordinates one Route from activation to completion.
    """
    def __init__(
        self,
        route: Route,
        driver: Driver,
        passengers: Sequence[Passenger],
        *,
        route_service: RouteService,
        policy: Optional[SimulationPolicy] = None,
        sink: Optional[MapSink] = None,
        executor: Optional[Executor] = None,
    ):
        self.route = route
        self.driver = driver
        self.passengers: Dict[str, Passenger] = {passenger.id: passenger for passenger in passengers}

        self.stops: List[Stop] = build_route_stops(passengers, driver.location)
        self.distances: Dict[str, float] = {}
        self.visited: List[StopArrival] = []

        self.controller = SimulationController(route_service, policy, executor)
        self.controller.subscribe(self)

        self.renderer: Optional[MapRenderingListener] = None
        if sink is not None:
            self.renderer = MapRenderingListener(sink, self.stops, vehicle_label=driver.full_name)
            self.controller.subscribe(self.renderer)

    @property
    def simulator(self) -> PositionSimulator:
        return self.controller.simulator

    @property
    def pending_stops(self) -> List[Stop]:
        """Stops not visited yet, in visiting order. A resumed route drives only these."""
        visited_ids = {arrival.stop.id for arrival in self.visited}
        return [stop for stop in self.stops if stop.id not in visited_ids]

    def start(self, background: bool = True) -> None:
        self.route = activate_route(self.route, self.driver.id)
        self.driver = replace(self.driver, status=DriverStatus.EN_ROUTE)

        if self.renderer is not None:
            self.renderer.draw_vehicle(self.driver.location)
            self.renderer.draw_stops()

        stops = self.pending_stops
        if not stops:
            # everyone is absent: nothing to drive
            logger.info("Route %s has no stops to visit.", self.route.route_id)
            self._finish(SimulationComplete())
            return

        if len(stops) < len(self.stops):
            logger.info("Resuming route %s with %d of %d stops left.", self.route.route_id, len(stops), len(self.stops))
        self.controller.start(stops, self.driver.location, background=background)

    def stop(self) -> None:
        """Stop simulating. The route stays active so it can be resumed later."""
        self.controller.stop()

    def run_until_idle(self, max_ticks: int = DEFAULT_MAX_TICKS) -> int:
        return self.controller.run_until_idle(max_ticks)

    def mark_picked_up(self, passenger_id: str) -> bool:
        """
        Driver confirms a passenger boarded before the vehicle reached their pickup.
        Returns False for unknown passengers or pickups that were already visited.
        """
        passenger = self.passengers.get(passenger_id)
        if passenger is None or passenger.actual_pickup_time is not None:
            return False

        stop_id = next(
            (
                stop.id for stop in self.stops
                if stop.passenger_id == passenger_id and stop.kind == StopKind.PICKUP
            ),
            None,
        )
        if stop_id is None:
            return False
        return self.simulator.mark_stop_reached(stop_id)

    # --- SimulationListener hooks ---

    def on_position_update(self, update: PositionUpdate) -> None:
        self.driver = replace(self.driver, location=update.position)
        self.distances = dict(update.distances)

    def on_stop_arrived(self, arrival: StopArrival) -> None:
        self.visited.append(arrival)
        self.driver = replace(self.driver, location=arrival.position)
        self.distances.pop(arrival.stop.id, None)

        passenger = self.passengers.get(arrival.stop.passenger_id)
        if arrival.manual and arrival.stop.kind == StopKind.PICKUP and passenger is not None:
            self.passengers[passenger.id] = record_pickup(passenger, arrival.arrived_at)

    def on_simulation_complete(self, complete: SimulationComplete) -> None:
        self._finish(complete)

    def _finish(self, complete: SimulationComplete) -> None:
        if complete.unvisited:
            logger.warning(
                "Route %s ended with %d unvisited stops; leaving it active.",
                self.route.route_id, len(complete.unvisited),
            )
            return

        self.route = complete_route(self.route)
        self.driver = replace(self.driver, status=DriverStatus.AVAILABLE)
        logger.info("Route %s completed.", self.route.route_id)
