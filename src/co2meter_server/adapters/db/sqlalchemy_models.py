__all__ = ["Base", "RoomORM", "ReadingORM"]

from datetime import datetime
from typing import List

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from co2meter_server.adapters.db.session import Base


class RoomORM(Base):
    __tablename__ = "rooms"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    floor: Mapped[str | None] = mapped_column(String(50), index=True, nullable=True)
    max_occupancy: Mapped[int | None] = mapped_column(Integer, nullable=True)

    readings: Mapped[List["ReadingORM"]] = relationship(back_populates="room")


class ReadingORM(Base):
    __tablename__ = "co2_readings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True, nullable=False)
    ppm: Mapped[float] = mapped_column(Float, index=True, nullable=False)
    room_id: Mapped[int] = mapped_column(ForeignKey("rooms.id"), index=True, nullable=False)

    room: Mapped[RoomORM] = relationship(back_populates="readings")
