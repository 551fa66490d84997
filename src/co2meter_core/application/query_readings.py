from co2meter_core.domain.errors import NotFoundError
from co2meter_core.domain.models import Page, Reading, ReadingFilter
from co2meter_core.domain.ports import UnitOfWork


def list_readings(flt: ReadingFilter, uow: UnitOfWork) -> Page[Reading]:
    with uow:
        return uow.reading_repo().query(flt)


def get_reading(reading_id: int, uow: UnitOfWork) -> Reading:
    with uow:
        reading = uow.reading_repo().get(reading_id)
    if reading is None:
        raise NotFoundError("Reading", reading_id)
    return reading
