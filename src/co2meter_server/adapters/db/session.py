import logging

from co2meter_core.config.environments import get_settings
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

log = logging.getLogger(__name__)


def create_db_engine(url: str) -> Engine:
    # SQLite connections are shared with the threadpool that runs sync endpoints
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, future=True, echo=False, connect_args=connect_args)


def create_session_factory(engine: Engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def _default_engine() -> Engine:
    settings = get_settings()
    log.info(f"Initializing database connection for {settings.ENVIRONMENT.value} environment")
    return create_db_engine(settings.DATABASE_URL)


engine = _default_engine()
SessionLocal = create_session_factory(engine)

Base = declarative_base()
