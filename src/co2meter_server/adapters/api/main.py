import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from co2meter_core.config.environments import get_settings
from co2meter_core.config.log_setup import setup_logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from co2meter_server.adapters.api.errors import register_error_handlers
from co2meter_server.adapters.api.routes import router
from co2meter_server.adapters.db.bootstrap import ensure_schema
from co2meter_server.adapters.db.session import engine

log = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parents[1] / "web" / "static"


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    if settings.DB_BOOTSTRAP_ON_STARTUP:
        ensure_schema(
            engine,
            retries=settings.DB_CONNECT_RETRIES,
            delay_sec=settings.DB_CONNECT_RETRY_DELAY_SEC,
        )
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings)
    log.info(f"Creating API app for {settings.ENVIRONMENT.value} environment")

    app = FastAPI(
        title="CO2 Meter API",
        description="Rooms and CO2 readings with filtering, pagination and statistics.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(router)
    # last, so API routes win over static files
    app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="ui")
    return app


app = create_app()
