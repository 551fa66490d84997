from datetime import datetime
from typing import Annotated, List, Optional

from co2meter_core.domain.models import ReadingFilter, RoomFilter
from fastapi import Body, Path, Query

from co2meter_server.adapters.api.schemas import INT32_MAX, INT32_MIN, Int32
from co2meter_server.adapters.db.uow import SqlAlchemyUoW

IdPath = Annotated[int, Path(ge=INT32_MIN, le=INT32_MAX)]
IdList = Annotated[List[Int32], Body()]


def get_uow():
    with SqlAlchemyUoW() as uow:
        yield uow


def room_filter(
    floor: Optional[str] = Query(None, max_length=50),
    min_occupancy: Optional[int] = Query(None, ge=INT32_MIN, le=INT32_MAX, alias="minOccupancy"),
    max_occupancy: Optional[int] = Query(None, ge=INT32_MIN, le=INT32_MAX, alias="maxOccupancy"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_descending: bool = Query(False, alias="sortDescending"),
    page: int = Query(1, ge=1, le=INT32_MAX),
    page_size: int = Query(10, ge=1, le=INT32_MAX, alias="pageSize"),
) -> RoomFilter:
    return RoomFilter(
        floor=floor,
        min_occupancy=min_occupancy,
        max_occupancy=max_occupancy,
        sort_by=sort_by,
        sort_descending=sort_descending,
        page=page,
        page_size=page_size,
    )


def reading_filter(
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    min_ppm: Optional[float] = Query(None, alias="minPpm"),
    max_ppm: Optional[float] = Query(None, alias="maxPpm"),
    room_id: Optional[int] = Query(None, ge=INT32_MIN, le=INT32_MAX, alias="roomId"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_descending: bool = Query(True, alias="sortDescending"),
    page: int = Query(1, ge=1, le=INT32_MAX),
    page_size: int = Query(10, ge=1, le=INT32_MAX, alias="pageSize"),
) -> ReadingFilter:
    return ReadingFilter(
        start_date=start_date,
        end_date=end_date,
        min_ppm=min_ppm,
        max_ppm=max_ppm,
        room_id=room_id,
        sort_by=sort_by,
        sort_descending=sort_descending,
        page=page,
        page_size=page_size,
    )
