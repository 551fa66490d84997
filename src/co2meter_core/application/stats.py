from datetime import datetime

from co2meter_core.domain.errors import NotFoundError
from co2meter_core.domain.models import ReadingStats, RoomStats, as_utc
from co2meter_core.domain.ports import UnitOfWork


def get_reading_stats(start_date: datetime, end_date: datetime, uow: UnitOfWork) -> ReadingStats:
    """Summary over every reading in ``[start_date, end_date]``.

    An empty window is reported as not found.
    """
    start_date, end_date = as_utc(start_date), as_utc(end_date)
    with uow:
        values = uow.reading_repo().ppm_values(start_date, end_date)
    if not values:
        raise NotFoundError("readings in the requested period")
    return ReadingStats.from_values(values, start_date, end_date)


def get_room_stats(
    room_id: int, start_date: datetime, end_date: datetime, uow: UnitOfWork
) -> RoomStats:
    """Summary for one room; an empty window yields an all-zero record."""
    start_date, end_date = as_utc(start_date), as_utc(end_date)
    with uow:
        room = uow.room_repo().get(room_id)
        if room is None:
            raise NotFoundError("Room", room_id)
        values = uow.reading_repo().ppm_values(start_date, end_date, room_id=room_id)
    return RoomStats.from_values(
        values, start_date, end_date, room_id=room_id, room_name=room.name
    )
