from datetime import datetime

import pytest

from dispatch.state_machines import (
    PassengerStateException,
    RouteStateException,
    activate_route,
    complete_route,
    record_pickup,
)
from trips.models import Passenger, PassengerStatus, Route, RouteState


@pytest.fixture
def route():
    return Route(route_id="r1", driver_id="d1", group_id="g1")


def test_activate_route(route):
    active = activate_route(route, "d1")
    assert active.state == RouteState.ACTIVE
    assert route.state == RouteState.NOT_ACTIVE


def test_activate_route_twice_is_allowed(route):
    assert activate_route(activate_route(route, "d1"), "d1").state == RouteState.ACTIVE


def test_activate_route_by_other_driver(route):
    with pytest.raises(RouteStateException):
        activate_route(route, "d2")


def test_completed_route_cannot_be_reactivated(route):
    done = complete_route(activate_route(route, "d1"))
    assert done.state == RouteState.COMPLETED

    with pytest.raises(RouteStateException):
        activate_route(done, "d1")


def test_complete_requires_active_route(route):
    with pytest.raises(RouteStateException):
        complete_route(route)


@pytest.fixture
def passenger():
    return Passenger.new("p1", "g1", "Passenger 1", 0.0, 0.0, 0.01, 0.01, PassengerStatus.READY)


def test_record_pickup_stamps_given_time(passenger):
    at = datetime(2024, 5, 1, 7, 30)
    assert record_pickup(passenger, at).actual_pickup_time == at


def test_record_pickup_defaults_to_now(passenger):
    before = datetime.now()
    picked = record_pickup(passenger)
    assert before <= picked.actual_pickup_time <= datetime.now()


def test_record_pickup_only_once(passenger):
    picked = record_pickup(passenger)
    with pytest.raises(PassengerStateException):
        record_pickup(picked)


def test_absent_passenger_cannot_be_picked_up(passenger):
    absent = Passenger.new("p2", "g1", "Passenger 2", 0.0, 0.0, 0.01, 0.01, "absent")
    with pytest.raises(PassengerStateException):
        record_pickup(absent)
