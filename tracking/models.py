"""
Purpose: Data models for live position simulation.
What it does:
- SimulationStatus: IDLE -> AWAITING_ROUTE -> RUNNING -> IDLE
- SimulationState: immutable snapshot replaced on every tick / re-route
- Events emitted to listeners: RouteUpdate, PositionUpdate, StopArrival, SimulationComplete

Rule: No movement logic here. Models only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Tuple

from routing.models import GeoPoint
from trips.models import Stop


class SimulationStatus(str, Enum):
    IDLE = "idle"
    AWAITING_ROUTE = "awaitingRoute" # route fetch outstanding, ticks suspended
    RUNNING = "running"


@dataclass(frozen=True)
class SimulationState:
    """
    Snapshot of one simulation run.

    The polyline itself is never mutated. When the vehicle advances part way
    along a segment, `segment_origin` holds the advanced point and stands in
    for polyline[segment_cursor] ("traveled-from" point).
    """
    polyline: Tuple[GeoPoint, ...]
    segment_cursor: int
    stop_cursor: int
    remaining_stops: Tuple[Stop, ...]
    vehicle_position: GeoPoint
    segment_origin: Optional[GeoPoint] = None

    @property
    def current_vertex(self) -> GeoPoint:
        if self.segment_origin is not None:
            return self.segment_origin
        return self.polyline[self.segment_cursor]

    @property
    def has_next_segment(self) -> bool:
        return len(self.polyline) - self.segment_cursor >= 2

    @property
    def remaining_polyline(self) -> Tuple[GeoPoint, ...]:
        if self.segment_cursor >= len(self.polyline):
            return ()
        return (self.current_vertex,) + self.polyline[self.segment_cursor + 1:]

    @property
    def target_stop(self) -> Optional[Stop]:
        return self.remaining_stops[0] if self.remaining_stops else None


@dataclass(frozen=True)
class RouteUpdate:
    """A new route polyline replaced the previous one."""
    polyline: Tuple[GeoPoint, ...]
    fallback: bool = False


@dataclass(frozen=True)
class PositionUpdate:
    """
    Live position feed. `distances` maps every remaining stop id to its
    straight-line distance from the vehicle, in visiting order.
    """
    position: GeoPoint
    distances: Dict[str, float]
    polyline: Tuple[GeoPoint, ...]


@dataclass(frozen=True)
class StopArrival:
    stop: Stop
    position: GeoPoint
    arrived_at: datetime = field(default_factory=datetime.now)
    # True when the stop was confirmed by hand instead of reached by the vehicle
    manual: bool = False


@dataclass(frozen=True)
class SimulationComplete:
    # stops never reached because the route ran out before them
    unvisited: Tuple[Stop, ...] = ()
