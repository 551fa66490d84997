from datetime import datetime
from typing import Iterable, List, Optional, Protocol, Sequence, Set

from co2meter_core.domain.models import Page, Reading, ReadingFilter, Room, RoomFilter


class RoomRepository(Protocol):
    def get(self, room_id: int) -> Optional[Room]: ...

    def existing_ids(self, room_ids: Iterable[int]) -> Set[int]: ...

    def query(self, flt: RoomFilter) -> Page[Room]: ...

    def add(self, room: Room) -> Room: ...

    def add_many(self, rooms: Sequence[Room]) -> List[Room]: ...

    def update(self, room: Room) -> bool: ...

    def delete(self, room_ids: Iterable[int]) -> int: ...


class ReadingRepository(Protocol):
    def get(self, reading_id: int) -> Optional[Reading]: ...

    def exists(self, reading_id: int) -> bool: ...

    def query(self, flt: ReadingFilter) -> Page[Reading]: ...

    def ppm_values(
        self, start_date: datetime, end_date: datetime, room_id: Optional[int] = None
    ) -> List[float]: ...

    def add(self, reading: Reading) -> Reading: ...

    def add_many(self, readings: Sequence[Reading]) -> List[Reading]: ...

    def update(self, reading: Reading) -> bool: ...

    def delete(self, reading_ids: Iterable[int]) -> int: ...

    def delete_for_rooms(self, room_ids: Iterable[int]) -> int: ...


class UnitOfWork(Protocol):
    def room_repo(self) -> RoomRepository: ...

    def reading_repo(self) -> ReadingRepository: ...

    def flush(self) -> None: ...

    def __enter__(self) -> "UnitOfWork": ...

    def __exit__(self, exc_type, exc_val, exc_tb) -> None: ...
