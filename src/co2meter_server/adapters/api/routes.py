# co2meter_server/adapters/api/routes.py

from fastapi import APIRouter

from co2meter_server.adapters.api import readings, rooms

router = APIRouter()


@router.get("/ping")
def ping():
    return {"status": "ok"}


router.include_router(rooms.router)
router.include_router(readings.router)
