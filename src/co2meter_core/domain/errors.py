from typing import Iterable, List, Optional


class DomainError(Exception):
    """Base class for failures the API reports back to the caller."""


class NotFoundError(DomainError):
    def __init__(self, entity: str, entity_id: Optional[int] = None):
        self.entity = entity
        self.entity_id = entity_id
        if entity_id is None:
            super().__init__(f"No {entity} found")
        else:
            super().__init__(f"{entity} {entity_id} not found")


class InvalidRequestError(DomainError):
    pass


class IdMismatchError(InvalidRequestError):
    def __init__(self, path_id: int, body_id: Optional[int]):
        self.path_id = path_id
        self.body_id = body_id
        super().__init__(f"Path id {path_id} does not match body id {body_id}")


class MissingRoomsError(InvalidRequestError):
    def __init__(self, room_ids: Iterable[int]):
        self.room_ids: List[int] = list(room_ids)
        joined = ", ".join(str(i) for i in self.room_ids)
        super().__init__(f"Rooms not found: {joined}")


class ConcurrencyConflictError(DomainError):
    """A row changed or vanished between read and write."""
