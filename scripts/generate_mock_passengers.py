import pandas as pd
import numpy as np
import uuid

# Default driver start point (Johannesburg north)
DRIVER_LAT = -26.005
DRIVER_LNG = 28.0038889

# Readiness cycles through every status so absent passengers show up in the data
STATUSES = ["ready", "not-ready", "absent", "unset"]

KM_PER_DEGREE = 111.0


def random_offset_km(lat, lng, max_km):
    """
    Random point within roughly `max_km` of (lat, lng).
    Longitude degrees shrink with latitude, so scale by cos(lat).
    """
    offset_lat = np.random.uniform(-max_km, max_km) / KM_PER_DEGREE
    offset_lng = np.random.uniform(-max_km, max_km) / (KM_PER_DEGREE * np.cos(np.radians(lat)))
    return lat + offset_lat, lng + offset_lng


def generate_mock_passengers(num_groups=3, passengers_per_group=3, output_file="passengers_generated.csv"):
    """
    Generates shuttle passengers around the driver start point.
    Pickups are placed within ~3km of the driver, dropoffs within ~6km of their pickup.
    """
    data = []

    for group_index in range(num_groups):
        group_id = f"g_{str(uuid.uuid4())[:8]}"

        for passenger_index in range(passengers_per_group):
            pickup_lat, pickup_lng = random_offset_km(DRIVER_LAT, DRIVER_LNG, 3)
            dropoff_lat, dropoff_lng = random_offset_km(pickup_lat, pickup_lng, 6)

            data.append({
                "passenger_id": f"p_{str(uuid.uuid4())[:8]}",
                "group_id": group_id,
                "name": f"Passenger {group_index+1}-{passenger_index+1}",
                "pickup_lat": np.round(pickup_lat, 6),
                "pickup_lng": np.round(pickup_lng, 6),
                "dropoff_lat": np.round(dropoff_lat, 6),
                "dropoff_lng": np.round(dropoff_lng, 6),
                "status": STATUSES[passenger_index % len(STATUSES)],
            })

    # Save to CSV
    df = pd.DataFrame(data)
    df.to_csv(output_file, index=False)
    print(f"Generated {len(df)} passengers in {num_groups} groups and saved to '{output_file}'")

    print("\nPassengers per status:")
    for status, count in df["status"].value_counts().items():
        print(f"  {status}: {count}")

if __name__ == "__main__":
    generate_mock_passengers(num_groups=3, passengers_per_group=3)
