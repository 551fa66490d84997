# co2meter_server/adapters/api/readings.py

from datetime import datetime
from typing import List

from co2meter_core.application import (
    create_reading,
    create_readings,
    delete_reading,
    delete_readings,
    get_reading,
    get_reading_stats,
    list_readings,
    update_reading,
)
from co2meter_core.domain.models import ReadingFilter
from fastapi import APIRouter, Depends, Query, Response, status

from co2meter_server.adapters.api.dependencies import IdList, IdPath, get_uow, reading_filter
from co2meter_server.adapters.api.schemas import (
    PageOut,
    ReadingBatchIn,
    ReadingIn,
    ReadingOut,
    ReadingStatsOut,
)
from co2meter_server.adapters.db.uow import SqlAlchemyUoW

router = APIRouter(prefix="/api/co2readings", tags=["co2readings"])


@router.get("", response_model=PageOut[ReadingOut])
def readings(
    flt: ReadingFilter = Depends(reading_filter),
    uow: SqlAlchemyUoW = Depends(get_uow),
):
    return PageOut[ReadingOut].from_page(list_readings(flt, uow), ReadingOut.from_domain)


# fixed paths before /{reading_id}
@router.get("/stats", response_model=ReadingStatsOut)
def reading_stats(
    start_date: datetime = Query(..., alias="startDate"),
    end_date: datetime = Query(..., alias="endDate"),
    uow: SqlAlchemyUoW = Depends(get_uow),
):
    return ReadingStatsOut.from_domain(get_reading_stats(start_date, end_date, uow))


@router.post("/batch", status_code=status.HTTP_201_CREATED, response_model=List[ReadingOut])
def add_readings(batch: ReadingBatchIn, uow: SqlAlchemyUoW = Depends(get_uow)):
    created = create_readings([r.to_domain() for r in batch.readings], uow)
    return [ReadingOut.from_domain(r) for r in created]


@router.delete(
    "/batch", status_code=status.HTTP_204_NO_CONTENT, response_class=Response
)
def remove_readings(ids: IdList, uow: SqlAlchemyUoW = Depends(get_uow)):
    delete_readings(ids, uow)


@router.get("/{reading_id}", response_model=ReadingOut)
def reading(reading_id: IdPath, uow: SqlAlchemyUoW = Depends(get_uow)):
    return ReadingOut.from_domain(get_reading(reading_id, uow))


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ReadingOut)
def add_reading(reading_in: ReadingIn, response: Response, uow: SqlAlchemyUoW = Depends(get_uow)):
    created = create_reading(reading_in.to_domain(), uow)
    response.headers["Location"] = f"{router.prefix}/{created.id}"
    return ReadingOut.from_domain(created)


@router.put("", status_code=status.HTTP_201_CREATED, response_model=ReadingOut)
def ingest_reading(reading_in: ReadingIn, response: Response, uow: SqlAlchemyUoW = Depends(get_uow)):
    """Device push: always inserts a new reading, any body id is ignored."""
    return add_reading(reading_in, response, uow)


@router.put("/{reading_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def replace_reading(reading_id: IdPath, reading_in: ReadingIn, uow: SqlAlchemyUoW = Depends(get_uow)):
    update_reading(reading_id, reading_in.to_domain(), uow)


@router.delete("/{reading_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def remove_reading(reading_id: IdPath, uow: SqlAlchemyUoW = Depends(get_uow)):
    delete_reading(reading_id, uow)
