"""
Purpose: Domain models for the Trips capability.
What it does:
- Defines core data structures:
- Passenger (id, group, pickup/dropoff points, readiness status, actual pickup time)
- Stop (PICKUP/DROPOFF waypoint tied to one passenger)
- Route (route_id, driver_id, group_id, state)

Defines enums/constants:
- PassengerStatus = READY | NOT_READY | ABSENT | UNSET
- StopKind = PICKUP | DROPOFF
- RouteState = ACTIVE | NOT_ACTIVE | COMPLETED

Rule: No OSRM calls, no sequencing logic. Models only.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from routing.models import GeoPoint


class PassengerStatus(str, Enum):
    READY = "ready"
    NOT_READY = "not-ready"
    ABSENT = "absent"
    UNSET = "unset"


class StopKind(str, Enum):
    PICKUP = "pickup"
    DROPOFF = "dropoff"


class RouteState(str, Enum):
    ACTIVE = "Active"
    NOT_ACTIVE = "Not-Active"
    COMPLETED = "Completed"


@dataclass(frozen=True)
class Passenger:
    """
    A member of a shuttle group with a pickup and a dropoff location.
    """
    id: str
    group_id: str
    name: str
    pickup: GeoPoint
    dropoff: GeoPoint
    status: PassengerStatus = PassengerStatus.UNSET
    actual_pickup_time: Optional[datetime] = None

    @classmethod
    def new(
        cls,
        passenger_id: str,
        group_id: str,
        name: str,
        pickup_lat: float,
        pickup_lng: float,
        dropoff_lat: float,
        dropoff_lng: float,
        status: str | PassengerStatus = PassengerStatus.UNSET,
    ) -> Passenger:
        if isinstance(status, str):
            status = PassengerStatus(status)

        return cls(
            id=passenger_id,
            group_id=group_id,
            name=name,
            pickup=GeoPoint(pickup_lat, pickup_lng),
            dropoff=GeoPoint(dropoff_lat, dropoff_lng),
            status=status,
        )


@dataclass(frozen=True)
class Stop:
    """
    A stop in a route. Immutable; the simulator only ever drops it from
    its active list once visited.
    """
    id: str
    point: GeoPoint
    kind: StopKind
    passenger_id: str
    # snapshot of the passenger's readiness when the stop list was built (used for marker colors)
    passenger_status: PassengerStatus = PassengerStatus.UNSET

    @staticmethod
    def for_passenger(passenger: Passenger, kind: StopKind) -> Stop:
        point = passenger.pickup if kind == StopKind.PICKUP else passenger.dropoff
        return Stop(
            id=f"{passenger.id}:{kind.value}",
            point=point,
            kind=kind,
            passenger_id=passenger.id,
            passenger_status=passenger.status,
        )


@dataclass(frozen=True)
class Route:
    """
    A scheduled run of one driver for one passenger group.
    """
    route_id: str
    driver_id: str
    group_id: str
    state: RouteState = RouteState.NOT_ACTIVE
