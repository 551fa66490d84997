import logging
from typing import Iterable, List, Sequence

from co2meter_core.domain.errors import (
    ConcurrencyConflictError,
    IdMismatchError,
    MissingRoomsError,
    NotFoundError,
)
from co2meter_core.domain.models import Reading
from co2meter_core.domain.ports import UnitOfWork

log = logging.getLogger(__name__)


def _missing_room_ids(readings: Iterable[Reading], uow: UnitOfWork) -> List[int]:
    requested = list(dict.fromkeys(r.room_id for r in readings))
    found = uow.room_repo().existing_ids(requested)
    return [room_id for room_id in requested if room_id not in found]


def create_reading(reading: Reading, uow: UnitOfWork) -> Reading:
    return create_readings([reading], uow)[0]


def create_readings(readings: Sequence[Reading], uow: UnitOfWork) -> List[Reading]:
    """Insert *readings* once every referenced room is known to exist.

    Nothing is written when any room is missing.
    """
    with uow:
        missing = _missing_room_ids(readings, uow)
        if missing:
            raise MissingRoomsError(missing)
        created = uow.reading_repo().add_many(readings)
    log.info("Created %d reading(s)", len(created))
    return created


def update_reading(reading_id: int, reading: Reading, uow: UnitOfWork) -> None:
    if reading.id != reading_id:
        raise IdMismatchError(reading_id, reading.id)

    with uow:
        missing = _missing_room_ids([reading], uow)
        if missing:
            raise MissingRoomsError(missing)
        repo = uow.reading_repo()
        if not repo.update(reading):
            raise NotFoundError("Reading", reading_id)
        try:
            uow.flush()
        except ConcurrencyConflictError:
            if not repo.exists(reading_id):
                raise NotFoundError("Reading", reading_id) from None
            raise


def delete_reading(reading_id: int, uow: UnitOfWork) -> None:
    try:
        delete_readings([reading_id], uow)
    except NotFoundError:
        raise NotFoundError("Reading", reading_id) from None


def delete_readings(reading_ids: Iterable[int], uow: UnitOfWork) -> int:
    with uow:
        removed = uow.reading_repo().delete(reading_ids)
        if not removed:
            raise NotFoundError("readings matching the requested ids")
    log.info("Deleted %d reading(s)", removed)
    return removed
