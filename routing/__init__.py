#Marks routing as a package.
#Re-exports the public API (GeoPoint, geo math, OSRMClient, RouteService)
#so other modules import from routing without knowing internal file names.
#No business logic.

from .models import GeoPoint, LatLng, RoutePolyline
from .geodesy import distance, bearing, destination
from .osrm_client import OSRMClient, OSRMError, RouteResult
from .route_service import RouteService, ResolvedRoute

__all__ = [
    "GeoPoint",
    "LatLng",
    "RoutePolyline",
    "distance",
    "bearing",
    "destination",
    "OSRMClient",
    "OSRMError",
    "RouteResult",
    "RouteService",
    "ResolvedRoute",
]
