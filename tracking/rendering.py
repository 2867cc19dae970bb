"""
Purpose: Translate simulation events into map drawing calls.
What it does:
- MapSink: the drawing surface contract (markers, polyline, bounds). Any map toolkit can implement it.
- MarkerStyle + color/label rules for the vehicle and stop markers
- MapRenderingListener: a downstream subscriber that redraws the map on every event

Rule: Rendering never reads from the sink and never feeds back into the simulator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Sequence

from routing.models import GeoPoint
from trips.models import PassengerStatus, Stop, StopKind

from .models import PositionUpdate, RouteUpdate, SimulationComplete, StopArrival
from .simulator import SimulationListener

VEHICLE_MARKER_ID = "vehicle"

VEHICLE_COLOR = "#0066cc"
DROPOFF_COLOR = "#fd00b6"
DEFAULT_COLOR = "#6b7280"
STATUS_COLORS: Dict[PassengerStatus, str] = {
    PassengerStatus.READY: "#10b981",
    PassengerStatus.NOT_READY: "#f59e0b",
    PassengerStatus.ABSENT: "#ef4444",
}


@dataclass(frozen=True)
class MarkerStyle:
    color: str
    radius: int = 8
    label: Optional[str] = None
    popup: Optional[str] = None


class MapSink(Protocol):
    def upsert_marker(self, marker_id: str, point: GeoPoint, style: MarkerStyle) -> None:
        ...

    def remove_marker(self, marker_id: str) -> None:
        ...

    def set_polyline(self, points: Sequence[GeoPoint]) -> None:
        ...

    def fit_bounds(self, points: Sequence[GeoPoint]) -> None:
        ...


def stop_color(stop: Stop) -> str:
    """Pickups are colored by passenger readiness, dropoffs share one color."""
    if stop.kind == StopKind.DROPOFF:
        return DROPOFF_COLOR
    return STATUS_COLORS.get(stop.passenger_status, DEFAULT_COLOR)


def stop_labels(stops: Sequence[Stop]) -> Dict[str, int]:
    """
    Number pickups and dropoffs separately, 1-based, in visiting order:
    pickup #1, #2, ... and dropoff #1, #2, ...
    """
    counters = {StopKind.PICKUP: 0, StopKind.DROPOFF: 0}
    labels: Dict[str, int] = {}
    for stop in stops:
        counters[stop.kind] += 1
        labels[stop.id] = counters[stop.kind]
    return labels


class MapRenderingListener(SimulationListener):
    """
    Keeps a MapSink in sync with the simulation:
    - a numbered marker per stop, removed once the stop is visited
    - the vehicle marker, moved every tick
    - the remaining route polyline
    """

    def __init__(self, sink: MapSink, stops: Sequence[Stop], vehicle_label: str = "Driver"):
        self.sink = sink
        self.vehicle_label = vehicle_label
        self._stops: Dict[str, Stop] = {stop.id: stop for stop in stops}
        self._labels = stop_labels(stops)
        self._vehicle_position: Optional[GeoPoint] = None

    def draw_stops(self, distances: Optional[Dict[str, float]] = None) -> None:
        for stop in self._stops.values():
            self._draw_stop(stop, (distances or {}).get(stop.id))

    def draw_vehicle(self, position: GeoPoint) -> None:
        self._vehicle_position = position
        self.sink.upsert_marker(
            VEHICLE_MARKER_ID,
            position,
            MarkerStyle(color=VEHICLE_COLOR, radius=10, popup=self.vehicle_label),
        )

    # --- SimulationListener hooks ---

    def on_route_update(self, update: RouteUpdate) -> None:
        self.sink.set_polyline(list(update.polyline))
        bounds: List[GeoPoint] = []
        if self._vehicle_position is not None:
            bounds.append(self._vehicle_position)
        bounds.extend(stop.point for stop in self._stops.values())
        if bounds:
            self.sink.fit_bounds(bounds)

    def on_position_update(self, update: PositionUpdate) -> None:
        self.draw_vehicle(update.position)
        self.sink.set_polyline(list(update.polyline))
        for stop_id, meters in update.distances.items():
            stop = self._stops.get(stop_id)
            if stop is not None:
                self._draw_stop(stop, meters)

    def on_stop_arrived(self, arrival: StopArrival) -> None:
        if self._stops.pop(arrival.stop.id, None) is not None:
            self.sink.remove_marker(arrival.stop.id)

    def on_simulation_complete(self, complete: SimulationComplete) -> None:
        if self._vehicle_position is not None:
            self.sink.fit_bounds([self._vehicle_position])

    def _draw_stop(self, stop: Stop, meters: Optional[float]) -> None:
        number = self._labels.get(stop.id)
        popup = f"{stop.passenger_id} {stop.kind.value} #{number}"
        if meters is not None:
            popup += f" Distance: {meters:.0f}m"
        self.sink.upsert_marker(
            stop.id,
            stop.point,
            MarkerStyle(color=stop_color(stop), radius=8, label=str(number), popup=popup),
        )
