import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Generic, List, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")

# year-one timestamps mean "unset" and are replaced on write
UNSET_TIMESTAMP = datetime(1, 1, 1, tzinfo=timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Return *value* as an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass
class Room:
    name: str
    description: Optional[str] = None
    floor: Optional[str] = None
    max_occupancy: Optional[int] = None
    id: Optional[int] = None


@dataclass
class Reading:
    ppm: float
    room_id: int
    timestamp: Optional[datetime] = None
    id: Optional[int] = None
    room: Optional[Room] = None

    def resolved_timestamp(self) -> datetime:
        """Timestamp to persist: the current time when unset."""
        if self.timestamp is None:
            return utc_now()
        ts = as_utc(self.timestamp)
        if ts == UNSET_TIMESTAMP:
            return utc_now()
        return ts


class _SortKey(str, Enum):
    @classmethod
    def parse(cls, value: Optional[str]):
        """Case-insensitive lookup; ``None`` for absent or unknown keys."""
        if not value:
            return None
        try:
            return cls(value.lower())
        except ValueError:
            return None


class ReadingSortKey(_SortKey):
    PPM = "ppm"
    TIMESTAMP = "timestamp"


class RoomSortKey(_SortKey):
    NAME = "name"
    FLOOR = "floor"
    MAX_OCCUPANCY = "maxoccupancy"


@dataclass
class ReadingFilter:
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    min_ppm: Optional[float] = None
    max_ppm: Optional[float] = None
    room_id: Optional[int] = None
    sort_by: Optional[str] = None
    sort_descending: bool = True
    page: int = 1
    page_size: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def ordering(self) -> Tuple[ReadingSortKey, bool]:
        key = ReadingSortKey.parse(self.sort_by)
        if key is None:
            return ReadingSortKey.TIMESTAMP, True
        return key, self.sort_descending


@dataclass
class RoomFilter:
    floor: Optional[str] = None
    min_occupancy: Optional[int] = None
    max_occupancy: Optional[int] = None
    sort_by: Optional[str] = None
    sort_descending: bool = False
    page: int = 1
    page_size: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def ordering(self) -> Optional[Tuple[RoomSortKey, bool]]:
        """Requested ordering, or ``None`` to keep the store's native order."""
        key = RoomSortKey.parse(self.sort_by)
        if key is None:
            return None
        return key, self.sort_descending


@dataclass
class Page(Generic[T]):
    items: List[T]
    total_count: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size)


@dataclass
class ReadingStats:
    average_ppm: float
    min_ppm: float
    max_ppm: float
    total_readings: int
    start_date: datetime
    end_date: datetime

    @classmethod
    def from_values(
        cls, values: Sequence[float], start_date: datetime, end_date: datetime, **extra
    ):
        if not values:
            return cls(0.0, 0.0, 0.0, 0, start_date, end_date, **extra)
        return cls(
            average_ppm=sum(values) / len(values),
            min_ppm=min(values),
            max_ppm=max(values),
            total_readings=len(values),
            start_date=start_date,
            end_date=end_date,
            **extra,
        )


@dataclass
class RoomStats(ReadingStats):
    room_id: int
    room_name: str
