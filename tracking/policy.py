"""
Purpose: Central configuration for live position simulation.
What it does:

Stores all tunable thresholds for moving the vehicle along its route:

STEP_METERS = 50
ARRIVAL_RADIUS_METERS = 60
TICK_INTERVAL_MS = 2000

Values can be overridden from the environment (or a .env file):
SIM_STEP_METERS, SIM_ARRIVAL_RADIUS_METERS, SIM_TICK_INTERVAL_MS

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class SimulationPolicy:
    """
    Central configuration for the position simulator and its clock.
    """

    # --- Movement ---
    # Distance covered per tick along the current route segment.
    # Segments shorter than this are snapped to in a single tick.
    step_meters: float = 50.0

    # --- Arrival detection ---
    # The vehicle counts as "at the stop" once it is this close.
    arrival_radius_meters: float = 60.0

    # --- Clock ---
    tick_interval_ms: int = 2000

    @property
    def tick_interval_seconds(self) -> float:
        return self.tick_interval_ms / 1000.0

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if self.step_meters <= 0:
            raise ValueError("step_meters must be > 0")

        if self.arrival_radius_meters <= 0:
            raise ValueError("arrival_radius_meters must be > 0")

        if self.tick_interval_ms <= 0:
            raise ValueError("tick_interval_ms must be > 0")


def default_simulation_policy() -> SimulationPolicy:
    """
    Convenience factory for the default policy.
    """
    p = SimulationPolicy()
    p.validate()
    return p


def policy_from_env() -> SimulationPolicy:
    """
    Build a policy from SIM_* environment variables, falling back to defaults.
    """
    load_dotenv()
    defaults = SimulationPolicy()
    p = SimulationPolicy(
        step_meters=float(os.getenv("SIM_STEP_METERS", defaults.step_meters)),
        arrival_radius_meters=float(os.getenv("SIM_ARRIVAL_RADIUS_METERS", defaults.arrival_radius_meters)),
        tick_interval_ms=int(os.getenv("SIM_TICK_INTERVAL_MS", defaults.tick_interval_ms)),
    )
    p.validate()
    return p
