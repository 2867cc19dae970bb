# trips/sequencing.py

"""
Purpose: Decide the order in which a vehicle visits its stops.
What it does:
- sequence(): greedy nearest-neighbour ordering from a start point
- build_route_stops(): turns a passenger group into the full visiting order
  (all pickups first, sequenced from the vehicle, then all dropoffs,
  sequenced from the last pickup)

Notes:
- Uses straight great-circle distance, not OSRM. n is tens of stops, so O(n^2) is fine.
- Ties go to the stop that came first in the input, so results are deterministic.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

from routing.geodesy import distance
from routing.models import GeoPoint

from .models import Passenger, PassengerStatus, Stop, StopKind


def sequence(stops: Iterable[Stop], start: GeoPoint) -> List[Stop]:
    """
    Order `stops` by repeatedly hopping to the nearest unvisited one.

    Returns a permutation of the input (empty in, empty out).
    """
    remaining: List[Stop] = list(stops)
    ordered: List[Stop] = []
    current = start

    while remaining:
        nearest_index = 0
        nearest_distance = distance(current, remaining[0].point)

        for index in range(1, len(remaining)):
            candidate_distance = distance(current, remaining[index].point)
            # strict "<" keeps the first occurrence on ties
            if candidate_distance < nearest_distance:
                nearest_distance = candidate_distance
                nearest_index = index

        nearest = remaining.pop(nearest_index)
        ordered.append(nearest)
        current = nearest.point

    return ordered


def build_route_stops(passengers: Sequence[Passenger], start: GeoPoint) -> List[Stop]:
    """
    Build the visiting order for a passenger group.

    Absent passengers are left out entirely. Pickups are sequenced from
    `start`; dropoffs are sequenced from wherever the last pickup is.
    """
    riding = [passenger for passenger in passengers if passenger.status != PassengerStatus.ABSENT]

    pickups = sequence(
        [Stop.for_passenger(passenger, StopKind.PICKUP) for passenger in riding],
        start,
    )

    dropoff_start = pickups[-1].point if pickups else start
    dropoffs = sequence(
        [Stop.for_passenger(passenger, StopKind.DROPOFF) for passenger in riding],
        dropoff_start,
    )

    return pickups + dropoffs
