from datetime import datetime, timedelta, timezone

import factory
from co2meter_core.domain.models import Reading, Room

BASE_TIME = datetime(2025, 6, 1, tzinfo=timezone.utc)


class RoomFactory(factory.Factory):
    class Meta:
        model = Room

    name = factory.Sequence(lambda n: f"Room {n}")
    description = None
    floor = "1"
    max_occupancy = 20


class ReadingFactory(factory.Factory):
    class Meta:
        model = Reading

    ppm = factory.Sequence(lambda n: 400.0 + 10 * n)
    room_id = 1
    timestamp = factory.Sequence(lambda n: BASE_TIME + timedelta(minutes=n))
