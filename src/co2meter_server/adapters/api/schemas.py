# co2meter_server/adapters/api/schemas.py

from datetime import datetime
from typing import Annotated, Callable, Generic, List, Optional, TypeVar

from co2meter_core.domain.models import Page, Reading, ReadingStats, Room, RoomStats
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")

INT32_MIN, INT32_MAX = -(2**31), 2**31 - 1

# ids and counts are stored in 32-bit INTEGER columns
Int32 = Annotated[int, Field(ge=INT32_MIN, le=INT32_MAX)]


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RoomIn(ApiModel):
    id: Int32 = 0
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    floor: Optional[str] = Field(None, max_length=50)
    max_occupancy: Optional[Int32] = Field(None, ge=0)

    def to_domain(self) -> Room:
        return Room(
            id=self.id,
            name=self.name,
            description=self.description,
            floor=self.floor,
            max_occupancy=self.max_occupancy,
        )


class RoomOut(ApiModel):
    id: int
    name: str
    description: Optional[str] = None
    floor: Optional[str] = None
    max_occupancy: Optional[int] = None

    @classmethod
    def from_domain(cls, room: Room) -> "RoomOut":
        return cls(
            id=room.id,
            name=room.name,
            description=room.description,
            floor=room.floor,
            max_occupancy=room.max_occupancy,
        )


class RoomBatchIn(ApiModel):
    rooms: List[RoomIn] = Field(..., min_length=1, description="At least one room is required")


class ReadingIn(ApiModel):
    id: Int32 = 0
    ppm: float = Field(..., ge=0, description="PPM value must be positive")
    timestamp: Optional[datetime] = Field(None, description="Defaults to the current UTC time")
    room_id: Int32

    def to_domain(self) -> Reading:
        return Reading(
            id=self.id,
            ppm=self.ppm,
            timestamp=self.timestamp,
            room_id=self.room_id,
        )


class ReadingOut(ApiModel):
    id: int
    ppm: float
    timestamp: datetime
    room_id: Int32
    room: Optional[RoomOut] = None

    @classmethod
    def from_domain(cls, reading: Reading) -> "ReadingOut":
        return cls(
            id=reading.id,
            ppm=reading.ppm,
            timestamp=reading.timestamp,
            room_id=reading.room_id,
            room=RoomOut.from_domain(reading.room) if reading.room is not None else None,
        )


class ReadingBatchIn(ApiModel):
    readings: List[ReadingIn] = Field(
        ..., min_length=1, description="At least one reading is required"
    )


class PageOut(ApiModel, Generic[T]):
    data: List[T]
    total_count: int
    page: int
    page_size: int
    total_pages: int

    @classmethod
    def from_page(cls, page: Page, convert: Callable) -> "PageOut":
        return cls(
            data=[convert(item) for item in page.items],
            total_count=page.total_count,
            page=page.page,
            page_size=page.page_size,
            total_pages=page.total_pages,
        )


class ReadingStatsOut(ApiModel):
    average_ppm: float
    min_ppm: float
    max_ppm: float
    total_readings: int
    start_date: datetime
    end_date: datetime

    @classmethod
    def from_domain(cls, stats: ReadingStats) -> "ReadingStatsOut":
        return cls(
            average_ppm=stats.average_ppm,
            min_ppm=stats.min_ppm,
            max_ppm=stats.max_ppm,
            total_readings=stats.total_readings,
            start_date=stats.start_date,
            end_date=stats.end_date,
        )


class RoomStatsOut(ReadingStatsOut):
    room_id: Int32
    room_name: str

    @classmethod
    def from_domain(cls, stats: RoomStats) -> "RoomStatsOut":
        return cls(
            room_id=stats.room_id,
            room_name=stats.room_name,
            average_ppm=stats.average_ppm,
            min_ppm=stats.min_ppm,
            max_ppm=stats.max_ppm,
            total_readings=stats.total_readings,
            start_date=stats.start_date,
            end_date=stats.end_date,
        )
