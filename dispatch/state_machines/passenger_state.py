from dataclasses import replace
from datetime import datetime
from typing import Optional
from trips.models import Passenger, PassengerStatus

class PassengerStateException(Exception):
    """Raised when an invalid passenger transition is attempted."""
    pass

def record_pickup(passenger: Passenger, at: Optional[datetime] = None) -> Passenger:
    """
    Called when the driver confirms a passenger is on board.
    Stamps the actual pickup time; a passenger can only be picked up once.
    """
    if passenger.status == PassengerStatus.ABSENT:
        raise PassengerStateException(f"Passenger {passenger.id} is marked absent and cannot be picked up")

    if passenger.actual_pickup_time is not None:
        raise PassengerStateException(f"Passenger {passenger.id} was already picked up at {passenger.actual_pickup_time}")

    return replace(passenger, actual_pickup_time=at or datetime.now())
