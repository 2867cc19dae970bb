"""
Trips domain package.

Public API:
- Domain models: Passenger, Stop, Route, PassengerStatus, StopKind, RouteState
- Sequencing entry points: sequence, build_route_stops

"""
from .models import Passenger, Stop, Route, PassengerStatus, StopKind, RouteState
from .sequencing import sequence, build_route_stops

__all__ = ["Passenger",
           "Stop",
             "Route",
               "PassengerStatus",
               "StopKind",
               "RouteState",
               "sequence",
               "build_route_stops",
               ]
