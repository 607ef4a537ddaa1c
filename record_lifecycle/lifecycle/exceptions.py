"""Exceptions for record lifecycle operations."""

from typing import Iterable, Optional


class LifecycleError(Exception):
    """Base exception for lifecycle operations."""

    def __init__(self, message: str, entity_id: Optional[str] = None):
        self.entity_id = entity_id
        super().__init__(message)


class DetachedRecordError(LifecycleError):
    """Raised when a record bound to no session is asked to persist itself."""

    def __init__(self, entity_id: str):
        super().__init__(
            f"Record {entity_id} is not attached to a session and no session "
            "was given",
            entity_id=entity_id,
        )


class NotALifecycleTableError(LifecycleError):
    """Raised when a table lacks the lifecycle flag columns."""

    def __init__(self, table_name: str, missing: Iterable[str]):
        self.table_name = table_name
        self.missing = sorted(missing)
        super().__init__(
            f"Table {table_name} is missing lifecycle columns: "
            f"{', '.join(self.missing)}"
        )
