import argparse
import logging
import os
import time
from typing import List

import pandas as pd

from dispatch.session import RouteSession
from drivers.models import Driver
from routing.osrm_client import OSRMClient
from routing.route_service import RouteService
from tracking.models import PositionUpdate, SimulationComplete, StopArrival
from tracking.policy import policy_from_env
from tracking.simulator import SimulationListener
from trips.models import Passenger, Route


class ConsoleListener(SimulationListener):
    """Prints the live feed the way the driver's map would show it."""

    def __init__(self):
        self.ticks = 0

    def on_position_update(self, update: PositionUpdate):
        self.ticks += 1
        if self.ticks % 10 == 0 and update.distances:
            next_stop, meters = next(iter(update.distances.items()))
            print(f"  tick {self.ticks}: at ({update.position.lat:.5f}, {update.position.lng:.5f}), {meters:.0f}m to {next_stop}")

    def on_stop_arrived(self, arrival: StopArrival):
        how = "confirmed" if arrival.manual else "reached"
        print(f"[ARRIVED] {arrival.stop.kind.value} {arrival.stop.id} {how} at {arrival.arrived_at:%H:%M:%S}")

    def on_simulation_complete(self, complete: SimulationComplete):
        if complete.unvisited:
            print(f"[STOPPED] Route ended with {len(complete.unvisited)} stops not reached.")
        else:
            print("[DONE] All stops visited.")


def load_passengers(filepath="passengers_generated.csv", group_id=None) -> List[Passenger]:
    # Resolve the correct path depending on where the user runs the script from.
    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    absolute_path = filepath if os.path.isabs(filepath) else os.path.join(base_dir, filepath)

    df = pd.read_csv(absolute_path)
    if group_id is None:
        group_id = df["group_id"].iloc[0]
    df = df[df["group_id"] == group_id]

    passengers = []
    for _, row in df.iterrows():
        passengers.append(
            Passenger.new(
                str(row["passenger_id"]),
                str(row["group_id"]),
                str(row["name"]),
                float(row["pickup_lat"]),
                float(row["pickup_lng"]),
                float(row["dropoff_lat"]),
                float(row["dropoff_lng"]),
                str(row["status"]),
            )
        )
    return passengers


def run_simulation(filepath: str, use_osrm: bool, max_ticks: int):
    print("=== STARTING ROUTE SIMULATION ===")

    # 1. Load Data
    passengers = load_passengers(filepath)
    driver = Driver.new("DRV-001", "Demo", "Driver", -26.005, 28.0038889)
    route = Route(route_id="R-001", driver_id=driver.id, group_id=passengers[0].group_id)
    print(f"Loaded {len(passengers)} passengers for group {route.group_id}.\n")

    # 2. Configure System
    oracle = OSRMClient() if use_osrm else None
    session = RouteSession(
        route,
        driver,
        passengers,
        route_service=RouteService(oracle),
        policy=policy_from_env(),
    )
    session.controller.subscribe(ConsoleListener())

    print("Visiting order:")
    for index, stop in enumerate(session.stops, 1):
        print(f"  {index}. {stop.kind.value:<8} {stop.passenger_id}")
    print()

    # 3. Drive the route without waiting for the real clock
    start_time = time.time()
    session.start(background=False)
    ticks = session.run_until_idle(max_ticks)

    print("\n=== SIMULATION COMPLETE ===")
    print(f"Ticks: {ticks} ({time.time() - start_time:.2f}s wall time)")
    print(f"Stops visited: {len(session.visited)} / {len(session.stops)}")
    print(f"Route state: {session.route.state.value}")
    print(f"Driver: {session.driver.status.value} at ({session.driver.location.lat:.5f}, {session.driver.location.lng:.5f})")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Drive a simulated shuttle route.")
    parser.add_argument("--passengers", default="passengers_generated.csv")
    parser.add_argument("--osrm", action="store_true", help="resolve routes with OSRM (BASE_URL) instead of straight lines")
    parser.add_argument("--max-ticks", type=int, default=10_000)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    run_simulation(args.passengers, args.osrm, args.max_ticks)
