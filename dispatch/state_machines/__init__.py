from .route_state import RouteStateException, activate_route, complete_route
from .passenger_state import PassengerStateException, record_pickup

__all__ = [
    "RouteStateException",
    "activate_route",
    "complete_route",
    "PassengerStateException",
    "record_pickup",
]
