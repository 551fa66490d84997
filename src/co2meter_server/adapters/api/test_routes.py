from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from co2meter_server.adapters.api.dependencies import get_uow
from co2meter_server.adapters.api.main import create_app
from co2meter_server.adapters.db.sqlalchemy_models import Base
from co2meter_server.adapters.db.uow import SqlAlchemyUoW

T0 = datetime(2025, 6, 1, tzinfo=timezone.utc)


def iso(minutes: int) -> str:
    return (T0 + timedelta(minutes=minutes)).isoformat().replace("+00:00", "Z")


# ───────────── fixtures ─────────────
@pytest.fixture()
def app():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(eng)
    factory = sessionmaker(bind=eng, autoflush=False, future=True)

    def override_uow():
        with SqlAlchemyUoW(session_factory=factory) as uow:
            yield uow

    app = create_app()
    app.dependency_overrides[get_uow] = override_uow
    return app


@pytest.fixture()
def client(app):
    return TestClient(app)


def add_room(client, **fields):
    payload = {"name": "Kitchen", "floor": "1", "maxOccupancy": 4, **fields}
    res = client.post("/api/rooms", json=payload)
    assert res.status_code == 201, res.text
    return res.json()


def add_readings(client, room_id, *points):
    """points: (minutes after T0, ppm)"""
    body = {"readings": [{"roomId": room_id, "ppm": ppm, "timestamp": iso(m)} for m, ppm in points]}
    res = client.post("/api/co2readings/batch", json=body)
    assert res.status_code == 201, res.text
    return res.json()


# ───────────── rooms ─────────────
def test_ping(client):
    assert client.get("/ping").json() == {"status": "ok"}


def test_create_and_fetch_room(client):
    room = add_room(client, description="Ground floor kitchen")
    res = client.get(f"/api/rooms/{room['id']}")
    assert res.status_code == 200
    assert res.json() == {
        "id": room["id"],
        "name": "Kitchen",
        "description": "Ground floor kitchen",
        "floor": "1",
        "maxOccupancy": 4,
    }


def test_create_room_sets_location_header(client):
    res = client.post("/api/rooms", json={"name": "Lab"})
    assert res.headers["location"] == f"/api/rooms/{res.json()['id']}"


@pytest.mark.parametrize(
    "payload",
    [{"name": ""}, {"name": "x" * 101}, {"name": "Lab", "maxOccupancy": -1}, {"floor": "2"}],
)
def test_invalid_room_is_a_client_error(client, payload):
    res = client.post("/api/rooms", json=payload)
    assert res.status_code == 400
    assert client.get("/api/rooms").json()["totalCount"] == 0


def test_unknown_room_is_not_found(client):
    assert client.get("/api/rooms/42").status_code == 404


def test_room_list_filters_sorts_and_paginates(client):
    rooms = [
        {"name": "Attic", "floor": "3", "maxOccupancy": 2},
        {"name": "Boardroom", "floor": "1", "maxOccupancy": 12},
        {"name": "Canteen", "floor": "1", "maxOccupancy": 80},
        {"name": "Den", "floor": "1", "maxOccupancy": 6},
        {"name": "Entry", "floor": "1"},
    ]
    res = client.post("/api/rooms/batch", json={"rooms": rooms})
    assert res.status_code == 201
    assert len({r["id"] for r in res.json()}) == 5

    params = {"floor": "1", "minOccupancy": 5, "sortBy": "maxoccupancy", "sortDescending": True, "pageSize": 2}
    page1 = client.get("/api/rooms", params=params).json()
    page2 = client.get("/api/rooms", params={**params, "page": 2}).json()

    assert page1["totalCount"] == 3
    assert page1["totalPages"] == 2
    assert [r["name"] for r in page1["data"] + page2["data"]] == ["Canteen", "Boardroom", "Den"]


def test_room_index_pages_cover_every_room(client):
    names = [f"Room {n:04d}" for n in range(1100)]
    res = client.post("/api/rooms/batch", json={"rooms": [{"name": n} for n in names]})
    assert res.status_code == 201

    collected, page, total_pages = [], 1, 1
    while page <= total_pages:
        body = client.get("/api/rooms", params={"sortBy": "name", "page": page, "pageSize": 200}).json()
        collected += [r["name"] for r in body["data"]]
        total_pages = body["totalPages"]
        page += 1

    assert total_pages == 6
    assert collected == names


def test_empty_room_batch_is_rejected(client):
    assert client.post("/api/rooms/batch", json={"rooms": []}).status_code == 400


def test_update_room(client):
    room = add_room(client)
    res = client.put(f"/api/rooms/{room['id']}", json={"id": room["id"], "name": "Pantry", "floor": "0"})
    assert res.status_code == 204
    assert client.get(f"/api/rooms/{room['id']}").json()["name"] == "Pantry"


def test_update_room_id_mismatch(client):
    room = add_room(client)
    res = client.put(f"/api/rooms/{room['id']}", json={"id": room["id"] + 1, "name": "Pantry"})
    assert res.status_code == 400
    assert client.get(f"/api/rooms/{room['id']}").json()["name"] == "Kitchen"


def test_update_missing_room_is_not_found(client):
    assert client.put("/api/rooms/9", json={"id": 9, "name": "Ghost"}).status_code == 404


def test_delete_room_cascades_to_readings(client):
    room = add_room(client)
    other = add_room(client, name="Office")
    readings = add_readings(client, room["id"], (0, 500), (5, 650))
    kept = add_readings(client, other["id"], (0, 700))

    assert client.delete(f"/api/rooms/{room['id']}").status_code == 204

    assert client.get(f"/api/rooms/{room['id']}").status_code == 404
    for reading in readings:
        assert client.get(f"/api/co2readings/{reading['id']}").status_code == 404
    assert client.get(f"/api/co2readings/{kept[0]['id']}").status_code == 200


def test_delete_missing_room_is_not_found(client):
    assert client.delete("/api/rooms/77").status_code == 404


def test_batch_room_delete_accepts_partial_match(client):
    room = add_room(client)
    add_readings(client, room["id"], (0, 500))

    res = client.request("DELETE", "/api/rooms/batch", json=[room["id"], 999])
    assert res.status_code == 204
    assert client.get("/api/co2readings").json()["totalCount"] == 0

    res = client.request("DELETE", "/api/rooms/batch", json=[998, 999])
    assert res.status_code == 404


# ───────────── readings ─────────────
def test_reading_for_missing_room_is_rejected(client):
    res = client.post("/api/co2readings", json={"roomId": 999, "ppm": 500})
    assert res.status_code == 400
    assert res.json()["missingRoomIds"] == [999]
    assert client.get("/api/co2readings").json()["totalCount"] == 0


def test_reading_batch_is_all_or_nothing(client):
    room = add_room(client)
    body = {
        "readings": [
            {"roomId": room["id"], "ppm": 500},
            {"roomId": 999, "ppm": 600},
            {"roomId": 998, "ppm": 700},
        ]
    }
    res = client.post("/api/co2readings/batch", json=body)
    assert res.status_code == 400
    assert res.json()["missingRoomIds"] == [999, 998]
    assert client.get("/api/co2readings").json()["totalCount"] == 0


def test_negative_ppm_is_rejected(client):
    room = add_room(client)
    res = client.post("/api/co2readings", json={"roomId": room["id"], "ppm": -1})
    assert res.status_code == 400


def test_reading_without_timestamp_gets_current_time(client):
    room = add_room(client)
    before = datetime.now(tz=timezone.utc) - timedelta(seconds=1)
    res = client.post("/api/co2readings", json={"roomId": room["id"], "ppm": 480.5})
    assert res.status_code == 201
    created = res.json()
    assert res.headers["location"] == f"/api/co2readings/{created['id']}"

    fetched = client.get(f"/api/co2readings/{created['id']}").json()
    assert datetime.fromisoformat(fetched["timestamp"].replace("Z", "+00:00")) >= before
    assert fetched["room"]["name"] == "Kitchen"
    assert fetched["ppm"] == 480.5


def test_reading_list_applies_every_filter(client):
    kitchen = add_room(client)
    office = add_room(client, name="Office")
    add_readings(client, kitchen["id"], (0, 400), (10, 900), (20, 1300), (30, 700))
    add_readings(client, office["id"], (10, 1000), (20, 1100))

    params = {
        "roomId": kitchen["id"],
        "startDate": iso(5),
        "endDate": iso(30),
        "minPpm": 700,
        "maxPpm": 1300,
    }
    body = client.get("/api/co2readings", params=params).json()

    assert body["totalCount"] == 3
    assert [r["ppm"] for r in body["data"]] == [700, 1300, 900]
    assert all(r["room"]["id"] == kitchen["id"] for r in body["data"])


def test_reading_pages_reconstruct_sorted_set(client):
    room = add_room(client)
    add_readings(client, room["id"], *[(m, 400 + (m * 37) % 500) for m in range(11)])

    params = {"sortBy": "ppm", "sortDescending": False, "pageSize": 3}
    first = client.get("/api/co2readings", params=params).json()
    assert first["totalPages"] == 4

    collected = []
    for page in range(1, first["totalPages"] + 1):
        collected += client.get("/api/co2readings", params={**params, "page": page}).json()["data"]

    assert len({r["id"] for r in collected}) == 11
    ppms = [r["ppm"] for r in collected]
    assert ppms == sorted(ppms)


def test_unknown_sort_key_orders_newest_first(client):
    room = add_room(client)
    add_readings(client, room["id"], (0, 400), (20, 300), (10, 500))
    body = client.get("/api/co2readings", params={"sortBy": "colour", "sortDescending": False}).json()
    assert [r["ppm"] for r in body["data"]] == [300, 500, 400]


def test_invalid_page_is_a_client_error(client):
    assert client.get("/api/co2readings", params={"page": 0}).status_code == 400


def test_update_reading_with_mismatched_id_leaves_row_unchanged(client):
    room = add_room(client)
    created = add_readings(client, room["id"], *[(m, 500) for m in range(7)])
    path_id, body_id = created[4]["id"], created[6]["id"]

    res = client.put(
        f"/api/co2readings/{path_id}",
        json={"id": body_id, "roomId": room["id"], "ppm": 9999, "timestamp": iso(100)},
    )
    assert res.status_code == 400
    assert client.get(f"/api/co2readings/{path_id}").json()["ppm"] == 500


def test_update_reading(client):
    room = add_room(client)
    office = add_room(client, name="Office")
    (reading,) = add_readings(client, room["id"], (0, 500))

    res = client.put(
        f"/api/co2readings/{reading['id']}",
        json={"id": reading["id"], "roomId": office["id"], "ppm": 640, "timestamp": iso(3)},
    )
    assert res.status_code == 204
    updated = client.get(f"/api/co2readings/{reading['id']}").json()
    assert (updated["ppm"], updated["room"]["name"], updated["timestamp"]) == (640, "Office", iso(3))


def test_update_reading_to_missing_room_is_rejected(client):
    room = add_room(client)
    (reading,) = add_readings(client, room["id"], (0, 500))
    res = client.put(
        f"/api/co2readings/{reading['id']}",
        json={"id": reading["id"], "roomId": 999, "ppm": 640},
    )
    assert res.status_code == 400
    assert res.json()["missingRoomIds"] == [999]


def test_update_missing_reading_is_not_found(client):
    room = add_room(client)
    res = client.put("/api/co2readings/5", json={"id": 5, "roomId": room["id"], "ppm": 1})
    assert res.status_code == 404


def test_device_ingest_inserts_new_reading(client):
    room = add_room(client)
    before = datetime.now(tz=timezone.utc) - timedelta(seconds=1)

    res = client.put(
        "/api/co2readings",
        json={"id": 42, "roomId": room["id"], "ppm": 710, "timestamp": "0001-01-01T00:00:00Z"},
    )
    assert res.status_code == 201
    created = res.json()
    assert res.headers["location"] == f"/api/co2readings/{created['id']}"

    fetched = client.get(f"/api/co2readings/{created['id']}").json()
    assert fetched["ppm"] == 710
    assert fetched["room"]["name"] == "Kitchen"
    assert datetime.fromisoformat(fetched["timestamp"].replace("Z", "+00:00")) >= before


def test_device_ingest_for_missing_room_is_rejected(client):
    res = client.put("/api/co2readings", json={"roomId": 999, "ppm": 500})
    assert res.status_code == 400
    assert res.json()["missingRoomIds"] == [999]
    assert client.get("/api/co2readings").json()["totalCount"] == 0


def test_delete_readings(client):
    room = add_room(client)
    created = add_readings(client, room["id"], (0, 500), (1, 510), (2, 520))

    assert client.delete(f"/api/co2readings/{created[0]['id']}").status_code == 204
    assert client.delete(f"/api/co2readings/{created[0]['id']}").status_code == 404

    res = client.request("DELETE", "/api/co2readings/batch", json=[created[1]["id"], 999])
    assert res.status_code == 204
    res = client.request("DELETE", "/api/co2readings/batch", json=[998, 999])
    assert res.status_code == 404
    assert client.get("/api/co2readings").json()["totalCount"] == 1


# ───────────── stats ─────────────
def test_global_and_room_stats(client):
    room = add_room(client)
    other = add_room(client, name="Office")
    add_readings(client, room["id"], (0, 400), (10, 800))
    add_readings(client, other["id"], (10, 1200), (60, 2000))

    window = {"startDate": iso(0), "endDate": iso(10)}
    stats = client.get("/api/co2readings/stats", params=window).json()
    assert stats["totalReadings"] == 3
    assert stats["averagePpm"] == pytest.approx(800)
    assert (stats["minPpm"], stats["maxPpm"]) == (400, 1200)

    room_stats = client.get(f"/api/rooms/{room['id']}/stats", params=window).json()
    assert room_stats["roomName"] == "Kitchen"
    assert room_stats["totalReadings"] == 2
    assert room_stats["averagePpm"] == pytest.approx(600)


def test_empty_window_is_not_found_globally_but_zero_per_room(client):
    room = add_room(client)
    add_readings(client, room["id"], (0, 400))
    window = {"startDate": iso(100), "endDate": iso(200)}

    assert client.get("/api/co2readings/stats", params=window).status_code == 404

    res = client.get(f"/api/rooms/{room['id']}/stats", params=window)
    assert res.status_code == 200
    body = res.json()
    assert body["roomId"] == room["id"]
    assert (body["averagePpm"], body["minPpm"], body["maxPpm"], body["totalReadings"]) == (0, 0, 0, 0)


def test_room_stats_for_unknown_room(client):
    res = client.get("/api/rooms/5/stats", params={"startDate": iso(0), "endDate": iso(1)})
    assert res.status_code == 404


def test_stats_require_both_dates(client):
    assert client.get("/api/co2readings/stats", params={"startDate": iso(0)}).status_code == 400


# ───────────── boundary ─────────────
@pytest.mark.parametrize(
    "method, url, kwargs",
    [
        ("POST", "/api/rooms", {"json": {"name": "Hall", "maxOccupancy": 2**63}}),
        ("POST", "/api/rooms", {"json": {"name": "Hall", "maxOccupancy": 3_000_000_000}}),
        ("POST", "/api/co2readings", {"json": {"roomId": 2**40, "ppm": 500}}),
        ("GET", "/api/rooms", {"params": {"page": 2**62, "pageSize": 10}}),
        ("GET", "/api/rooms", {"params": {"minOccupancy": 2**40}}),
        ("GET", "/api/co2readings", {"params": {"roomId": -(2**40)}}),
        ("GET", f"/api/rooms/{2**64}", {}),
        ("GET", f"/api/co2readings/{2**40}", {}),
        ("DELETE", "/api/rooms/batch", {"json": [1, 2**40]}),
    ],
)
def test_integers_outside_column_range_are_client_errors(client, method, url, kwargs):
    res = client.request(method, url, **kwargs)
    assert res.status_code == 400


def test_largest_column_value_is_accepted(client):
    room = add_room(client, maxOccupancy=2**31 - 1)
    assert client.get(f"/api/rooms/{room['id']}").json()["maxOccupancy"] == 2**31 - 1
    assert client.get(f"/api/rooms/{2**31 - 1}").status_code == 404


class ExplodingUoW:
    def room_repo(self):
        raise RuntimeError("database went away")

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        pass


def test_unexpected_error_becomes_server_error(app):
    app.dependency_overrides[get_uow] = lambda: ExplodingUoW()
    res = TestClient(app, raise_server_exceptions=False).get("/api/rooms")
    assert res.status_code == 500
    assert res.json() == {"detail": "An unexpected error occurred"}


def test_browser_client_is_served(client):
    res = client.get("/")
    assert res.status_code == 200
    assert "CO2 Meter" in res.text
