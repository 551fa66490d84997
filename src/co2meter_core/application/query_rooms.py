from co2meter_core.domain.errors import NotFoundError
from co2meter_core.domain.models import Page, Room, RoomFilter
from co2meter_core.domain.ports import UnitOfWork


def list_rooms(flt: RoomFilter, uow: UnitOfWork) -> Page[Room]:
    with uow:
        return uow.room_repo().query(flt)


def get_room(room_id: int, uow: UnitOfWork) -> Room:
    with uow:
        room = uow.room_repo().get(room_id)
    if room is None:
        raise NotFoundError("Room", room_id)
    return room
