"""
Tracking package: live position simulation of a vehicle along its route.

Public API:
- PositionSimulator, SimulationListener
- SimulationController, SimulationClock, run_until_idle
- SimulationPolicy and its factories
- State and event models
- MapRenderingListener / MapSink for drawing
"""

from .models import (
    PositionUpdate,
    RouteUpdate,
    SimulationComplete,
    SimulationState,
    SimulationStatus,
    StopArrival,
)
from .policy import SimulationPolicy, default_simulation_policy, policy_from_env
from .simulator import PositionSimulator, SimulationListener
from .clock import SimulationClock, SimulationController, run_until_idle
from .rendering import MapRenderingListener, MapSink, MarkerStyle

__all__ = [
    "PositionUpdate",
    "RouteUpdate",
    "SimulationComplete",
    "SimulationState",
    "SimulationStatus",
    "StopArrival",
    "SimulationPolicy",
    "default_simulation_policy",
    "policy_from_env",
    "PositionSimulator",
    "SimulationListener",
    "SimulationClock",
    "SimulationController",
    "run_until_idle",
    "MapRenderingListener",
    "MapSink",
    "MarkerStyle",
]
