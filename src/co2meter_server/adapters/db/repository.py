from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Set

from co2meter_core.domain.models import (
    Page,
    Reading,
    ReadingFilter,
    ReadingSortKey,
    Room,
    RoomFilter,
    RoomSortKey,
    as_utc,
)
from co2meter_core.domain.ports import ReadingRepository, RoomRepository
from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session, joinedload

from co2meter_server.adapters.db.sqlalchemy_models import ReadingORM, RoomORM

_ROOM_SORT_COLUMNS = {
    RoomSortKey.NAME: RoomORM.name,
    RoomSortKey.FLOOR: RoomORM.floor,
    RoomSortKey.MAX_OCCUPANCY: RoomORM.max_occupancy,
}

_READING_SORT_COLUMNS = {
    ReadingSortKey.PPM: ReadingORM.ppm,
    ReadingSortKey.TIMESTAMP: ReadingORM.timestamp,
}


def _direction(column, descending: bool):
    return column.desc() if descending else column.asc()


def _count(session: Session, model, conditions) -> int:
    stmt = select(func.count()).select_from(model).where(*conditions)
    return session.scalar(stmt) or 0


class PostgresRoomRepository(RoomRepository):
    def __init__(self, session: Session):
        self.session = session

    # READ side
    def get(self, room_id: int) -> Optional[Room]:
        row = self.session.get(RoomORM, room_id)
        return self._to_domain(row) if row is not None else None

    def existing_ids(self, room_ids: Iterable[int]) -> Set[int]:
        ids = list(room_ids)
        if not ids:
            return set()
        stmt = select(RoomORM.id).where(RoomORM.id.in_(ids))
        return set(self.session.scalars(stmt).all())

    def query(self, flt: RoomFilter) -> Page[Room]:
        conditions = []
        if flt.floor:
            conditions.append(RoomORM.floor == flt.floor)
        if flt.min_occupancy is not None:
            conditions.append(RoomORM.max_occupancy >= flt.min_occupancy)
        if flt.max_occupancy is not None:
            conditions.append(RoomORM.max_occupancy <= flt.max_occupancy)

        total = _count(self.session, RoomORM, conditions)

        stmt = select(RoomORM).where(*conditions)
        ordering = flt.ordering()
        if ordering is not None:
            key, descending = ordering
            stmt = stmt.order_by(
                _direction(_ROOM_SORT_COLUMNS[key], descending),
                _direction(RoomORM.id, descending),
            )
        stmt = stmt.offset(flt.offset).limit(flt.page_size)

        rooms = [self._to_domain(r) for r in self.session.scalars(stmt).all()]
        return Page(items=rooms, total_count=total, page=flt.page, page_size=flt.page_size)

    # WRITE side
    def add(self, room: Room) -> Room:
        return self.add_many([room])[0]

    def add_many(self, rooms: Sequence[Room]) -> List[Room]:
        rows = []
        for room in rooms:
            row = RoomORM()
            self._assign(row, room)
            rows.append(row)
        self.session.add_all(rows)
        self.session.flush()
        return [self._to_domain(r) for r in rows]

    def update(self, room: Room) -> bool:
        row = self.session.get(RoomORM, room.id)
        if row is None:
            return False
        self._assign(row, room)
        return True

    def delete(self, room_ids: Iterable[int]) -> int:
        ids = list(room_ids)
        if not ids:
            return 0
        result = self.session.execute(delete(RoomORM).where(RoomORM.id.in_(ids)))
        return result.rowcount

    # helpers
    @staticmethod
    def _assign(row: RoomORM, room: Room) -> None:
        row.name = room.name
        row.description = room.description
        row.floor = room.floor
        row.max_occupancy = room.max_occupancy

    @staticmethod
    def _to_domain(row: RoomORM) -> Room:
        return Room(
            id=row.id,
            name=row.name,
            description=row.description,
            floor=row.floor,
            max_occupancy=row.max_occupancy,
        )


class PostgresReadingRepository(ReadingRepository):
    def __init__(self, session: Session):
        self.session = session

    # READ side
    def get(self, reading_id: int) -> Optional[Reading]:
        row = self.session.get(ReadingORM, reading_id, options=[joinedload(ReadingORM.room)])
        return self._to_domain(row, with_room=True) if row is not None else None

    def exists(self, reading_id: int) -> bool:
        stmt = select(ReadingORM.id).where(ReadingORM.id == reading_id)
        return self.session.scalar(stmt) is not None

    def query(self, flt: ReadingFilter) -> Page[Reading]:
        conditions = []
        if flt.start_date is not None:
            conditions.append(ReadingORM.timestamp >= as_utc(flt.start_date))
        if flt.end_date is not None:
            conditions.append(ReadingORM.timestamp <= as_utc(flt.end_date))
        if flt.min_ppm is not None:
            conditions.append(ReadingORM.ppm >= flt.min_ppm)
        if flt.max_ppm is not None:
            conditions.append(ReadingORM.ppm <= flt.max_ppm)
        if flt.room_id is not None:
            conditions.append(ReadingORM.room_id == flt.room_id)

        total = _count(self.session, ReadingORM, conditions)

        key, descending = flt.ordering()
        stmt = (
            select(ReadingORM)
            .options(joinedload(ReadingORM.room))
            .where(*conditions)
            .order_by(
                _direction(_READING_SORT_COLUMNS[key], descending),
                _direction(ReadingORM.id, descending),
            )
            .offset(flt.offset)
            .limit(flt.page_size)
        )
        readings = [self._to_domain(r, with_room=True) for r in self.session.scalars(stmt).all()]
        return Page(items=readings, total_count=total, page=flt.page, page_size=flt.page_size)

    def ppm_values(
        self, start_date: datetime, end_date: datetime, room_id: Optional[int] = None
    ) -> List[float]:
        stmt = select(ReadingORM.ppm).where(
            ReadingORM.timestamp >= as_utc(start_date),
            ReadingORM.timestamp <= as_utc(end_date),
        )
        if room_id is not None:
            stmt = stmt.where(ReadingORM.room_id == room_id)
        return list(self.session.scalars(stmt).all())

    # WRITE side
    def add(self, reading: Reading) -> Reading:
        return self.add_many([reading])[0]

    def add_many(self, readings: Sequence[Reading]) -> List[Reading]:
        rows = []
        for reading in readings:
            row = ReadingORM()
            self._assign(row, reading)
            rows.append(row)
        self.session.add_all(rows)
        self.session.flush()
        return [self._to_domain(r) for r in rows]

    def update(self, reading: Reading) -> bool:
        row = self.session.get(ReadingORM, reading.id)
        if row is None:
            return False
        self._assign(row, reading)
        return True

    def delete(self, reading_ids: Iterable[int]) -> int:
        ids = list(reading_ids)
        if not ids:
            return 0
        result = self.session.execute(delete(ReadingORM).where(ReadingORM.id.in_(ids)))
        return result.rowcount

    def delete_for_rooms(self, room_ids: Iterable[int]) -> int:
        ids = list(room_ids)
        if not ids:
            return 0
        result = self.session.execute(delete(ReadingORM).where(ReadingORM.room_id.in_(ids)))
        return result.rowcount

    # helpers
    @staticmethod
    def _assign(row: ReadingORM, reading: Reading) -> None:
        row.timestamp = reading.resolved_timestamp()
        row.ppm = reading.ppm
        row.room_id = reading.room_id

    @staticmethod
    def _to_domain(row: ReadingORM, with_room: bool = False) -> Reading:
        return Reading(
            id=row.id,
            timestamp=as_utc(row.timestamp),
            ppm=row.ppm,
            room_id=row.room_id,
            room=PostgresRoomRepository._to_domain(row.room) if with_room else None,
        )
