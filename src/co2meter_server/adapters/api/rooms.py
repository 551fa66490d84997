# co2meter_server/adapters/api/rooms.py

from datetime import datetime
from typing import List

from co2meter_core.application import (
    create_room,
    create_rooms,
    delete_room,
    delete_rooms,
    get_room,
    get_room_stats,
    list_rooms,
    update_room,
)
from co2meter_core.domain.models import RoomFilter
from fastapi import APIRouter, Depends, Query, Response, status

from co2meter_server.adapters.api.dependencies import IdList, IdPath, get_uow, room_filter
from co2meter_server.adapters.api.schemas import (
    PageOut,
    RoomBatchIn,
    RoomIn,
    RoomOut,
    RoomStatsOut,
)
from co2meter_server.adapters.db.uow import SqlAlchemyUoW

router = APIRouter(prefix="/api/rooms", tags=["rooms"])


@router.get("", response_model=PageOut[RoomOut])
def rooms(
    flt: RoomFilter = Depends(room_filter),
    uow: SqlAlchemyUoW = Depends(get_uow),
):
    return PageOut[RoomOut].from_page(list_rooms(flt, uow), RoomOut.from_domain)


@router.post("/batch", status_code=status.HTTP_201_CREATED, response_model=List[RoomOut])
def add_rooms(batch: RoomBatchIn, uow: SqlAlchemyUoW = Depends(get_uow)):
    created = create_rooms([r.to_domain() for r in batch.rooms], uow)
    return [RoomOut.from_domain(r) for r in created]


@router.delete(
    "/batch", status_code=status.HTTP_204_NO_CONTENT, response_class=Response
)
def remove_rooms(ids: IdList, uow: SqlAlchemyUoW = Depends(get_uow)):
    delete_rooms(ids, uow)


@router.get("/{room_id}", response_model=RoomOut)
def room(room_id: IdPath, uow: SqlAlchemyUoW = Depends(get_uow)):
    return RoomOut.from_domain(get_room(room_id, uow))


@router.get("/{room_id}/stats", response_model=RoomStatsOut)
def room_stats(
    room_id: IdPath,
    start_date: datetime = Query(..., alias="startDate"),
    end_date: datetime = Query(..., alias="endDate"),
    uow: SqlAlchemyUoW = Depends(get_uow),
):
    return RoomStatsOut.from_domain(get_room_stats(room_id, start_date, end_date, uow))


@router.post("", status_code=status.HTTP_201_CREATED, response_model=RoomOut)
def add_room(room_in: RoomIn, response: Response, uow: SqlAlchemyUoW = Depends(get_uow)):
    created = create_room(room_in.to_domain(), uow)
    response.headers["Location"] = f"{router.prefix}/{created.id}"
    return RoomOut.from_domain(created)


@router.put("/{room_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def replace_room(room_id: IdPath, room_in: RoomIn, uow: SqlAlchemyUoW = Depends(get_uow)):
    update_room(room_id, room_in.to_domain(), uow)


@router.delete("/{room_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def remove_room(room_id: IdPath, uow: SqlAlchemyUoW = Depends(get_uow)):
    delete_room(room_id, uow)
