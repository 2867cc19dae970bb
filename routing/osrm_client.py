#Purpose: The OSRM "adapter/client".
#Sole responsibility: talk to OSRM via HTTP and return normalized outputs.
#Encapsulates OSRM-specific details:
#coordinate formatting (lng,lat)
#URL construction (/route)
#timeouts and response validation
#parsing GeoJSON geometry back into our internal (lat, lng) shape
#It should not contain fallback rules or simulation logic (see route_service.py).


from dotenv import load_dotenv
import os
from dataclasses import dataclass
from typing import List, Optional
import requests

from .models import LatLng

# Read OSRM base URL from environment
# Example in .env:
# BASE_URL=https://router.project-osrm.org
load_dotenv()
BASE_URL = os.getenv("BASE_URL")


class OSRMError(Exception):
    """Raised when OSRM answers but reports a routing error."""
    pass


@dataclass(frozen=True)
class RouteResult:
    """
    Normalized /route answer.
    geometry is the full path in (lat, lng) order.
    """
    geometry: List[LatLng]
    distance: float # in meters
    duration: float # in seconds


class OSRMClient:
    """
    OSRM Adapter / Client

    Sole responsibility:
    - Talk to OSRM via HTTP
    - Convert internal (lat, lng) -> OSRM (lng,lat) and back
    - Return normalized outputs

    """
    def __init__(self, base_url: Optional[str] = None, profile: str = "driving", timeout: int = 5):
        self.base_url = (base_url or BASE_URL or "").rstrip("/")
        self.timeout = timeout #seconds to wait for OSRM before giving up
        self.profile = profile #the mode of transportation (driving, walking, cycling)

        if not self.base_url:
            raise ValueError("OSRM base URL not set. Please set BASE_URL in the .env file.")

    #----------------
    # Internal helpers
    #----------------
    def format_coordinates(self, coords: List[LatLng]) -> str:
        """Convert list of (lat, lng) to OSRM format 'lng,lat;lng,lat;...'"""
        return ';'.join([f"{lng},{lat}" for lat, lng in coords])

    #----------------
    # route service
    #----------------
    def compute_route(self, coordinates: List[LatLng]) -> RouteResult:
        """
        Calls the OSRM /route endpoint for a driving path visiting
        the coordinates in order and returns its full geometry.

        Raises:
            ValueError: fewer than two coordinates.
            requests.RequestException: transport errors, timeouts, non-2xx.
            OSRMError: OSRM reported a non "Ok" code or returned no route.
        """
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required to compute a route.")

        url = f"{self.base_url}/route/v1/{self.profile}/{self.format_coordinates(coordinates)}"

        response = requests.get(
            url,
            params={
                "overview": "full", # we need the whole path, not a simplified one
                "geometries": "geojson",
            },
            timeout=self.timeout,
        )
        response.raise_for_status()

        data = response.json()

        #validating OSRM response
        if data.get("code") != "Ok":
            raise OSRMError(f"OSRM error: {data.get('message', 'Unknown error')}")

        routes = data.get("routes") or []
        if not routes:
            raise OSRMError("OSRM error: no route returned")

        route = routes[0] #take the first route (OSRM may return alternatives)

        # GeoJSON coordinates are [lng, lat]
        geometry = [(float(lat), float(lng)) for lng, lat in route["geometry"]["coordinates"]]

        return RouteResult(
            geometry=geometry,
            distance=float(route.get("distance", 0.0)),
            duration=float(route.get("duration", 0.0)),
        )
