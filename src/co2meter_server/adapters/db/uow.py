from contextlib import AbstractContextManager
from typing import Callable

from co2meter_core.domain.errors import ConcurrencyConflictError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from co2meter_server.adapters.db.session import SessionLocal


class SqlAlchemyUoW(AbstractContextManager):
    def __init__(
        self,
        session: Session | None = None,
        session_factory: Callable[[], Session] | None = None,
    ):
        self._external = session is not None
        self.session: Session = session or (session_factory or SessionLocal)()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, *_):
        if self._external:
            return
        if exc_type:
            self.session.rollback()
        else:
            self.session.commit()
        self.session.close()

    def flush(self) -> None:
        """Push pending changes now so write conflicts surface inside the block."""
        try:
            self.session.flush()
        except StaleDataError as exc:
            self.session.rollback()
            raise ConcurrencyConflictError(str(exc)) from exc

    def room_repo(self):
        from co2meter_server.adapters.db.repository import PostgresRoomRepository

        return PostgresRoomRepository(self.session)

    def reading_repo(self):
        from co2meter_server.adapters.db.repository import PostgresReadingRepository

        return PostgresReadingRepository(self.session)
