import logging
import time
from typing import Callable

from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError

from co2meter_server.adapters.db.sqlalchemy_models import Base

log = logging.getLogger(__name__)


def ensure_schema(
    engine: Engine,
    retries: int,
    delay_sec: float,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Create missing tables, waiting for the database to come up.

    Makes at most *retries* attempts, *delay_sec* apart, and re-raises the
    last connection error. Returns the attempt that succeeded.
    """
    attempts = max(retries, 1)
    attempt = 1
    while True:
        try:
            Base.metadata.create_all(bind=engine)
        except OperationalError:
            if attempt >= attempts:
                log.error("Database unreachable after %d attempt(s)", attempts)
                raise
            log.warning(
                "Database connection attempt %d failed. Retrying in %.0f seconds...",
                attempt,
                delay_sec,
            )
            sleep(delay_sec)
            attempt += 1
        else:
            log.info("Database schema ready (attempt %d)", attempt)
            return attempt
