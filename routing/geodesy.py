#Purpose: Spherical geo math used by sequencing and live position simulation.
#Pure functions only: great-circle distance, initial bearing, destination point.
#All inputs/outputs are GeoPoint in degrees, bearings in radians, distances in meters.
#No OSRM calls here; this is the "as the crow flies" layer.

import math

from .models import GeoPoint

EARTH_RADIUS_M = 6_371_000.0


def distance(a: GeoPoint, b: GeoPoint) -> float:
    """
    Haversine great-circle distance in meters between two points.
    """
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    delta_lat = math.radians(b.lat - a.lat)
    delta_lng = math.radians(b.lng - a.lng)

    h = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(delta_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_M * c


def bearing(a: GeoPoint, b: GeoPoint) -> float:
    """
    Initial great-circle bearing from a to b, in radians within (-pi, pi].

    Identical points have no direction; 0.0 is returned for them.
    """
    if a == b:
        return 0.0

    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    delta_lng = math.radians(b.lng - a.lng)

    y = math.sin(delta_lng) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(delta_lng)

    theta = math.atan2(y, x)
    # atan2 can hand back -pi for due-south on a signed zero
    if theta <= -math.pi:
        theta = math.pi
    return theta


def destination(origin: GeoPoint, bearing_rad: float, meters: float) -> GeoPoint:
    """
    Point reached by travelling `meters` along the great circle that leaves
    `origin` with initial bearing `bearing_rad`.
    """
    lat1 = math.radians(origin.lat)
    lng1 = math.radians(origin.lng)
    angular = meters / EARTH_RADIUS_M

    lat2 = math.asin(
        math.sin(lat1) * math.cos(angular)
        + math.cos(lat1) * math.sin(angular) * math.cos(bearing_rad)
    )
    lng2 = lng1 + math.atan2(
        math.sin(bearing_rad) * math.sin(angular) * math.cos(lat1),
        math.cos(angular) - math.sin(lat1) * math.sin(lat2),
    )

    lat_deg = max(-90.0, min(90.0, math.degrees(lat2)))
    lng_deg = (math.degrees(lng2) + 540.0) % 360.0 - 180.0
    return GeoPoint(lat=lat_deg, lng=lng_deg)
