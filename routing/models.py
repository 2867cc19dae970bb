"""
Purpose: Core geographic types for the routing domain.
What it does:
Defines GeoPoint (degrees) and the polyline alias shared by the route service,
the sequencer and the simulator.

Rule: No HTTP, no math beyond range validation. Models only.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

# Internal coordinate pair type: (lat, lng)
LatLng = Tuple[float, float]


@dataclass(frozen=True)
class GeoPoint:
    """
    A latitude/longitude pair in decimal degrees.
    """
    lat: float
    lng: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"latitude out of range: {self.lat}")
        if not -180.0 <= self.lng <= 180.0:
            raise ValueError(f"longitude out of range: {self.lng}")

    @classmethod
    def from_pair(cls, pair: LatLng) -> GeoPoint:
        lat, lng = pair
        return cls(lat=float(lat), lng=float(lng))

    def as_pair(self) -> LatLng:
        return (self.lat, self.lng)


# Ordered path the vehicle walks, always at least one point long.
RoutePolyline = List[GeoPoint]
