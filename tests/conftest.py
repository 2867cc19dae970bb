import pytest
from concurrent.futures import Executor, Future

from routing.models import GeoPoint
from routing.osrm_client import RouteResult
from routing.route_service import RouteService
from tracking.models import PositionUpdate, RouteUpdate, SimulationComplete, StopArrival
from tracking.simulator import SimulationListener
from trips.models import Stop, StopKind

# Roughly 100 meters of latitude
DEG_100M = 0.0009


class StraightLineOracle:
    """Pretends to be OSRM: the route is just the requested coordinates."""
    def __init__(self):
        self.calls = []

    def compute_route(self, coordinates):
        self.calls.append(list(coordinates))
        return RouteResult(geometry=list(coordinates), distance=0.0, duration=0.0)


class CannedOracle:
    """Always answers with the same geometry, whatever was asked."""
    def __init__(self, geometry):
        self.geometry = geometry
        self.calls = []

    def compute_route(self, coordinates):
        self.calls.append(list(coordinates))
        return RouteResult(geometry=list(self.geometry), distance=0.0, duration=0.0)


class RecordingListener(SimulationListener):
    def __init__(self):
        self.events = []

    def on_route_update(self, update):
        self.events.append(update)

    def on_position_update(self, update):
        self.events.append(update)

    def on_stop_arrived(self, arrival):
        self.events.append(arrival)

    def on_simulation_complete(self, complete):
        self.events.append(complete)

    def of_type(self, event_type):
        return [event for event in self.events if isinstance(event, event_type)]

    @property
    def arrivals(self):
        return self.of_type(StopArrival)

    @property
    def route_updates(self):
        return self.of_type(RouteUpdate)

    @property
    def position_updates(self):
        return self.of_type(PositionUpdate)

    @property
    def completions(self):
        return self.of_type(SimulationComplete)


class ManualExecutor(Executor):
    """Holds submitted work until run_all(), so tests control when a route fetch 'returns'."""
    def __init__(self):
        self.pending = []

    def submit(self, fn, *args, **kwargs):
        future = Future()
        self.pending.append((future, fn, args, kwargs))
        return future

    def run_all(self):
        pending, self.pending = self.pending, []
        for future, fn, args, kwargs in pending:
            future.set_result(fn(*args, **kwargs))


@pytest.fixture
def origin():
    return GeoPoint(0.0, 0.0)


@pytest.fixture
def oracle():
    return StraightLineOracle()


@pytest.fixture
def route_service(oracle):
    return RouteService(oracle)


@pytest.fixture
def recorder():
    return RecordingListener()


@pytest.fixture
def make_stop():
    def _make_stop(stop_id, lat, lng, kind=StopKind.PICKUP, passenger_id=None):
        return Stop(
            id=stop_id,
            point=GeoPoint(lat, lng),
            kind=kind,
            passenger_id=passenger_id or stop_id,
        )
    return _make_stop
