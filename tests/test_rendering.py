import pytest

from routing.models import GeoPoint
from tracking.models import PositionUpdate, RouteUpdate, SimulationComplete, StopArrival
from tracking.rendering import (
    DEFAULT_COLOR,
    DROPOFF_COLOR,
    VEHICLE_COLOR,
    VEHICLE_MARKER_ID,
    MapRenderingListener,
    stop_color,
    stop_labels,
)
from trips.models import PassengerStatus, Stop, StopKind


class RecordingSink:
    def __init__(self):
        self.markers = {}
        self.removed = []
        self.polylines = []
        self.bounds = []

    def upsert_marker(self, marker_id, point, style):
        self.markers[marker_id] = (point, style)

    def remove_marker(self, marker_id):
        self.removed.append(marker_id)
        self.markers.pop(marker_id, None)

    def set_polyline(self, points):
        self.polylines.append(list(points))

    def fit_bounds(self, points):
        self.bounds.append(list(points))


def make(stop_id, kind, status=PassengerStatus.UNSET, lat=0.01, lng=0.0):
    return Stop(id=stop_id, point=GeoPoint(lat, lng), kind=kind, passenger_id=stop_id.split(":")[0], passenger_status=status)


@pytest.fixture
def stops():
    return [
        make("p1:pickup", StopKind.PICKUP, PassengerStatus.READY, 0.01),
        make("p2:pickup", StopKind.PICKUP, PassengerStatus.NOT_READY, 0.02),
        make("p2:dropoff", StopKind.DROPOFF, PassengerStatus.NOT_READY, 0.03),
        make("p1:dropoff", StopKind.DROPOFF, PassengerStatus.READY, 0.04),
    ]


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def renderer(sink, stops):
    return MapRenderingListener(sink, stops, vehicle_label="Driver: Tafadzwa")


def test_stop_labels_number_each_kind_separately(stops):
    assert stop_labels(stops) == {"p1:pickup": 1, "p2:pickup": 2, "p2:dropoff": 1, "p1:dropoff": 2}


@pytest.mark.parametrize("status, color", [
    (PassengerStatus.READY, "#10b981"),
    (PassengerStatus.NOT_READY, "#f59e0b"),
    (PassengerStatus.ABSENT, "#ef4444"),
    (PassengerStatus.UNSET, DEFAULT_COLOR),
])
def test_pickup_color_follows_status(status, color):
    assert stop_color(make("p:pickup", StopKind.PICKUP, status)) == color


def test_dropoff_color_ignores_status():
    assert stop_color(make("p:dropoff", StopKind.DROPOFF, PassengerStatus.READY)) == DROPOFF_COLOR


def test_draw_stops_places_numbered_markers(renderer, sink):
    renderer.draw_stops()

    assert set(sink.markers) == {"p1:pickup", "p2:pickup", "p2:dropoff", "p1:dropoff"}
    point, style = sink.markers["p2:pickup"]
    assert point == GeoPoint(0.02, 0.0)
    assert style.label == "2"
    assert style.color == "#f59e0b"
    assert "Distance" not in style.popup


def test_route_update_draws_polyline_and_fits_bounds(renderer, sink, stops):
    renderer.draw_vehicle(GeoPoint(0.0, 0.0))
    polyline = (GeoPoint(0.0, 0.0), GeoPoint(0.04, 0.0))

    renderer.on_route_update(RouteUpdate(polyline=polyline))

    assert sink.polylines == [list(polyline)]
    assert sink.bounds == [[GeoPoint(0.0, 0.0)] + [stop.point for stop in stops]]


def test_position_update_moves_vehicle_and_shows_distances(renderer, sink):
    position = GeoPoint(0.005, 0.0)
    renderer.on_position_update(PositionUpdate(
        position=position,
        distances={"p1:pickup": 556.0},
        polyline=(position, GeoPoint(0.01, 0.0)),
    ))

    vehicle_point, vehicle_style = sink.markers[VEHICLE_MARKER_ID]
    assert vehicle_point == position
    assert vehicle_style.color == VEHICLE_COLOR
    assert vehicle_style.popup == "Driver: Tafadzwa"
    assert sink.polylines[-1] == [position, GeoPoint(0.01, 0.0)]
    assert sink.markers["p1:pickup"][1].popup.endswith("Distance: 556m")


def test_arrival_removes_stop_marker_once(renderer, sink, stops):
    renderer.draw_stops()
    arrival = StopArrival(stop=stops[0], position=stops[0].point)

    renderer.on_stop_arrived(arrival)
    renderer.on_stop_arrived(arrival)

    assert sink.removed == ["p1:pickup"]
    assert "p1:pickup" not in sink.markers

    # later redraws never bring it back
    renderer.draw_stops()
    assert "p1:pickup" not in sink.markers


def test_completion_centres_on_vehicle(renderer, sink):
    renderer.draw_vehicle(GeoPoint(0.04, 0.0))
    renderer.on_simulation_complete(SimulationComplete())
    assert sink.bounds[-1] == [GeoPoint(0.04, 0.0)]
