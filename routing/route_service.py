#Purpose: Route computation for downstream use.
#Returns the actual path (polyline geometry) the vehicle should follow through
#an ordered list of waypoints.
#Uses OSRM /route through the client, but never lets a routing failure escape:
#when the oracle is missing, unreachable or answers garbage we hand back the
#waypoints themselves (a straight-line route) and log a warning.

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from .models import GeoPoint, LatLng, RoutePolyline
from .osrm_client import RouteResult

logger = logging.getLogger(__name__)


class RouteOracle(Protocol):
    """Anything that can answer "give me a driving path through these points"."""

    def compute_route(self, coordinates: List[LatLng]) -> RouteResult:
        ...


@dataclass(frozen=True)
class ResolvedRoute:
    polyline: RoutePolyline
    fallback: bool = False # True when the straight-line route was used


class RouteService:
    """
    Route Oracle Adapter.

    resolve() always returns a non-empty polyline. Failures are observable
    only through the log, `ResolvedRoute.fallback` and `last_resolution_fallback`.
    """
    def __init__(self, oracle: Optional[RouteOracle] = None):
        self.oracle = oracle
        self.last_resolution_fallback = False

    def resolve(self, waypoints: Sequence[GeoPoint]) -> RoutePolyline:
        resolved = self.resolve_route(waypoints)
        self.last_resolution_fallback = resolved.fallback
        return resolved.polyline

    def resolve_route(self, waypoints: Sequence[GeoPoint]) -> ResolvedRoute:
        """
        Same as resolve() but reports whether the fallback was used.
        Safe to call from several worker threads at once.
        """
        if not waypoints:
            raise ValueError("At least one waypoint is required to resolve a route.")

        waypoints = list(waypoints)

        # nothing to route between
        if len(waypoints) == 1:
            return ResolvedRoute(polyline=waypoints)

        if self.oracle is None:
            return self._fallback(waypoints, "no routing oracle configured")

        try:
            result = self.oracle.compute_route([point.as_pair() for point in waypoints])
            polyline = [GeoPoint.from_pair(pair) for pair in result.geometry]
        except Exception as e:
            return self._fallback(waypoints, f"{type(e).__name__}: {e}")

        if not polyline:
            return self._fallback(waypoints, "empty route geometry")

        logger.debug(
            "Resolved %d waypoints into %d-point route (%.0f m)",
            len(waypoints), len(polyline), result.distance,
        )
        return ResolvedRoute(polyline=polyline)

    def _fallback(self, waypoints: RoutePolyline, reason: str) -> ResolvedRoute:
        logger.warning("Routing failed, using straight-line fallback: %s", reason)
        return ResolvedRoute(polyline=list(waypoints), fallback=True)
