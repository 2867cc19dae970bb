#Expose the high-level pipeline pieces:
#Route / passenger state transitions
#Route session orchestrator (the "one call" entry point for driving a route)

from .session import RouteSession
from .state_machines.route_state import RouteStateException, activate_route, complete_route
from .state_machines.passenger_state import PassengerStateException, record_pickup

__all__ = [
    "RouteSession",
    "RouteStateException",
    "activate_route",
    "complete_route",
    "PassengerStateException",
    "record_pickup",
]
