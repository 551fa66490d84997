from .manage_readings import (
    create_reading,
    create_readings,
    delete_reading,
    delete_readings,
    update_reading,
)
from .manage_rooms import create_room, create_rooms, delete_room, delete_rooms, update_room
from .query_readings import get_reading, list_readings
from .query_rooms import get_room, list_rooms
from .stats import get_reading_stats, get_room_stats

__all__ = [
    "create_reading",
    "create_readings",
    "delete_reading",
    "delete_readings",
    "update_reading",
    "create_room",
    "create_rooms",
    "delete_room",
    "delete_rooms",
    "update_room",
    "get_reading",
    "list_readings",
    "get_room",
    "list_rooms",
    "get_reading_stats",
    "get_room_stats",
]
