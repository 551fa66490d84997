import logging
from typing import Iterable, List, Sequence

from co2meter_core.domain.errors import ConcurrencyConflictError, IdMismatchError, NotFoundError
from co2meter_core.domain.models import Room
from co2meter_core.domain.ports import UnitOfWork

log = logging.getLogger(__name__)


def create_room(room: Room, uow: UnitOfWork) -> Room:
    return create_rooms([room], uow)[0]


def create_rooms(rooms: Sequence[Room], uow: UnitOfWork) -> List[Room]:
    with uow:
        created = uow.room_repo().add_many(rooms)
    log.info("Created %d room(s)", len(created))
    return created


def update_room(room_id: int, room: Room, uow: UnitOfWork) -> None:
    if room.id != room_id:
        raise IdMismatchError(room_id, room.id)

    with uow:
        repo = uow.room_repo()
        if not repo.update(room):
            raise NotFoundError("Room", room_id)
        try:
            uow.flush()
        except ConcurrencyConflictError:
            if not repo.existing_ids([room_id]):
                raise NotFoundError("Room", room_id) from None
            raise


def delete_room(room_id: int, uow: UnitOfWork) -> None:
    try:
        delete_rooms([room_id], uow)
    except NotFoundError:
        raise NotFoundError("Room", room_id) from None


def delete_rooms(room_ids: Iterable[int], uow: UnitOfWork) -> int:
    """Delete the rooms that exist among *room_ids* along with their readings.

    Raises NotFoundError only when none of the ids exist.
    """
    with uow:
        rooms = uow.room_repo()
        found = rooms.existing_ids(room_ids)
        if not found:
            raise NotFoundError("rooms matching the requested ids")
        removed_readings = uow.reading_repo().delete_for_rooms(found)
        removed = rooms.delete(found)
    log.info("Deleted %d room(s) and %d dependent reading(s)", removed, removed_readings)
    return removed
