from dataclasses import replace
from trips.models import Route, RouteState

class RouteStateException(Exception):
    """Raised when an invalid route transition is attempted."""
    pass

def activate_route(route: Route, driver_id: str) -> Route:
    """
    Called when a driver starts driving a route.
    Only the assigned driver may activate it, and a completed route stays completed.
    Re-activating an already active route is allowed (e.g. the app was reopened mid-route).
    """
    if route.driver_id != driver_id:
        raise RouteStateException(f"Route {route.route_id} is assigned to driver {route.driver_id}, not {driver_id}")

    if route.state == RouteState.COMPLETED:
        raise RouteStateException(f"Route {route.route_id} is already completed")

    # Because Route is a frozen dataclass, we must return a new instance via replace
    return replace(route, state=RouteState.ACTIVE)

def complete_route(route: Route) -> Route:
    """
    Called once every stop of the route has been visited.
    """
    if route.state != RouteState.ACTIVE:
        raise RouteStateException(f"Cannot complete route {route.route_id} from {route.state.value}")

    return replace(route, state=RouteState.COMPLETED)
