"""
Generate or wipe demo data via the running FastAPI service.

Usage examples
──────────────
# wipe previously generated rooms (and their readings), then insert new ones
python scripts/generate_fake_data.py --wipe

# two hours of one-minute readings for four rooms, ending now
python scripts/generate_fake_data.py --base-url http://localhost:5000 --readings-per-room 120
"""

import argparse
import random
from datetime import datetime, timedelta, timezone

import requests

BASE_URL = "http://localhost:5000"
MAGIC_IDENTIFIER = "fake"

ROOMS = [
    {"name": "kitchen", "floor": "0", "maxOccupancy": 6},
    {"name": "living_room", "floor": "0", "maxOccupancy": 8},
    {"name": "bedroom", "floor": "1", "maxOccupancy": 2},
    {"name": "office", "floor": "1", "maxOccupancy": 3},
]


# ─────────────────────────── HTTP helpers ────────────────────────────
def post(base_url: str, endpoint: str, payload: dict) -> list:
    r = requests.post(f"{base_url}{endpoint}", json=payload, timeout=5)
    r.raise_for_status()
    return r.json()


def get(base_url: str, endpoint: str, params: dict) -> dict:
    r = requests.get(f"{base_url}{endpoint}", params=params, timeout=5)
    r.raise_for_status()
    return r.json()


# ─────────────────────────── API helpers ────────────────────────────
def insert_rooms(base_url: str) -> list[dict]:
    rooms = [
        {**room, "description": f"{MAGIC_IDENTIFIER} room generated for demos"}
        for room in ROOMS
    ]
    return post(base_url, "/api/rooms/batch", {"rooms": rooms})


def insert_readings(
    base_url: str,
    room_id: int,
    start_time: datetime,
    count: int,
    interval_seconds: int,
) -> None:
    ppm = random.uniform(420, 600)
    readings = []
    for i in range(count):
        # random walk, occasionally someone opens a window
        ppm = max(380.0, ppm + random.uniform(-40, 60))
        if random.random() < 0.05:
            ppm = random.uniform(420, 500)
        readings.append(
            {
                "roomId": room_id,
                "ppm": round(ppm, 1),
                "timestamp": (start_time + timedelta(seconds=i * interval_seconds)).isoformat(),
            }
        )
    post(base_url, "/api/co2readings/batch", {"readings": readings})


def wipe_data(base_url: str) -> int:
    ids = []
    page = 1
    while True:
        body = get(base_url, "/api/rooms", {"page": page, "pageSize": 100})
        ids += [
            room["id"]
            for room in body["data"]
            if MAGIC_IDENTIFIER in (room.get("description") or "")
        ]
        if page >= body["totalPages"]:
            break
        page += 1

    if not ids:
        return 0
    r = requests.delete(f"{base_url}/api/rooms/batch", json=ids, timeout=5)
    r.raise_for_status()
    return len(ids)


# ───────────────────────────── CLI ─────────────────────────────
def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--base-url", default=BASE_URL)
    parser.add_argument("--wipe", action="store_true")
    parser.add_argument("--readings-per-room", type=int, default=120)
    parser.add_argument("--interval-seconds", type=int, default=60)
    args = parser.parse_args()

    if args.wipe:
        print(f"Removed {wipe_data(args.base_url)} rooms.")

    span = timedelta(seconds=args.readings_per_room * args.interval_seconds)
    start = datetime.now(tz=timezone.utc) - span

    for room in insert_rooms(args.base_url):
        insert_readings(
            args.base_url,
            room["id"],
            start,
            args.readings_per_room,
            args.interval_seconds,
        )
    print("Done.")


if __name__ == "__main__":
    main()
