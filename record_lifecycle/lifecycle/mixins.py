"""
SQLAlchemy mixin for record lifecycle flags.

Adds soft delete and active/inactive flags to a declarative model, the
instance methods that flip them, and class-level query helpers.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, TypeVar

from sqlalchemy import Boolean, ColumnElement, DateTime, and_, event
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Mapped, Query, Session, mapped_column, object_session

from ..config import get_config
from .exceptions import DetachedRecordError
from .models import LifecycleStatus

logger = logging.getLogger(__name__)

#: Flag values a record must carry to be returned by default reads.
ACTIVE_FLAGS: Dict[str, bool] = {"is_deleted": False, "is_active": True}

LIFECYCLE_FIELDS = ("is_deleted", "deleted_at", "is_active")

Q = TypeVar("Q")


def _utcnow() -> datetime:
    # Naive UTC; SQLite drops tzinfo on the way back anyway.
    return datetime.now(timezone.utc).replace(tzinfo=None)


def lifecycle_criteria(cls: Any) -> ColumnElement[bool]:
    """
    Return the "active and not deleted" expression for a lifecycle model.

    Args:
        cls: A class using LifecycleMixin (or an alias of one)

    Returns:
        SQL expression usable in ``where()`` / ``filter()``
    """
    return and_(cls.is_deleted.is_(False), cls.is_active.is_(True))


def include_flagged(statement: Q) -> Q:
    """
    Tag a ``select()`` or ``Query`` so the default-read filter skips it.

    Args:
        statement: Statement or legacy query to tag

    Returns:
        The tagged statement
    """
    option = get_config().include_flagged_option
    return statement.execution_options(**{option: True})  # type: ignore[attr-defined]


class LifecycleMixin:
    """
    Mixin adding lifecycle flags to SQLAlchemy models.

    Provides:
    - ``is_deleted``, ``deleted_at`` and ``is_active`` columns
    - ``soft_delete()``, ``deactivate()`` and ``activate()``, each persisting
      the record with a single write
    - Query helpers for active, deleted, inactive and all records

    The flags are independent. Nothing stops a deleted record from being
    activated again; callers that care must check ``is_deleted`` themselves.

    Usage:
        class Customer(Base, LifecycleMixin):
            __tablename__ = 'customers'
            id = Column(Integer, primary_key=True)
            name = Column(String)

        customer.soft_delete()
        Customer.find_active_non_deleted(session, name="Ada")
    """

    is_deleted: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False, index=True
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False, index=True
    )

    def soft_delete(self, session: Optional[Session] = None) -> None:
        """
        Mark this record as deleted and persist it.

        Args:
            session: Session to write through; defaults to the record's own

        Raises:
            DetachedRecordError: If no session is available
        """
        self.is_deleted = True
        self.deleted_at = _utcnow()
        self.save(session)
        logger.debug(f"Soft deleted {self._describe()}")

    def deactivate(self, session: Optional[Session] = None) -> None:
        """Mark this record inactive and persist it."""
        self.is_active = False
        self.save(session)
        logger.debug(f"Deactivated {self._describe()}")

    def activate(self, session: Optional[Session] = None) -> None:
        """Mark this record active and persist it."""
        self.is_active = True
        self.save(session)
        logger.debug(f"Activated {self._describe()}")

    def save(self, session: Optional[Session] = None) -> None:
        """
        Persist this record with a single commit (or flush).

        Storage errors propagate as raised by SQLAlchemy. When the session
        filters default reads and the record is now deleted or inactive, it
        is expunged after the write so later lookups through that session
        cannot return it from the identity map. An evicted record remembers
        its session and can still be saved through it; if the session has
        loaded another copy of the row meanwhile, the lifecycle flags are
        written through that copy.

        Args:
            session: Session to write through; defaults to the record's own

        Raises:
            DetachedRecordError: If no session is available
        """
        from .filters import evict_if_hidden

        if session is None:
            session = object_session(self) or self._evicted_session()
        if session is None:
            raise DetachedRecordError(self._describe())

        record = self._attach_to(session)
        session.add(record)
        if get_config().commit_on_change:
            session.commit()
        else:
            session.flush()

        evict_if_hidden(session, record)

    def _evicted_session(self) -> Optional[Session]:
        ref = getattr(self, "_evicted_from", None)
        return ref() if ref is not None else None

    def _attach_to(self, session: Session) -> Any:
        key = sa_inspect(self).key
        if key is None or object_session(self) is session:
            return self

        current = session.identity_map.get(key)
        if current is None or current is self:
            return self

        for field in LIFECYCLE_FIELDS:
            setattr(current, field, getattr(self, field))
        return current

    def lifecycle_status(self) -> LifecycleStatus:
        """Return a snapshot of this record's flags."""
        return LifecycleStatus(
            is_deleted=self.is_deleted,
            deleted_at=self.deleted_at,
            is_active=self.is_active,
        )

    @classmethod
    def find_active_non_deleted(
        cls,
        session: Session,
        query: Optional[Dict[str, Any]] = None,
        **criteria: Any,
    ) -> List[Any]:
        """
        Return records matching the criteria that are active and not deleted.

        Criteria come from ``query`` and keyword arguments, keywords last.
        ``is_deleted`` and ``is_active`` are always forced to False and True,
        overriding any value the caller passed for them.

        Args:
            session: SQLAlchemy session
            query: Optional mapping of attribute name to value
            **criteria: Further attribute equality criteria

        Returns:
            List of matching records
        """
        merged = {**(query or {}), **criteria, **ACTIVE_FLAGS}
        return session.query(cls).filter_by(**merged).all()

    @classmethod
    def query_active(cls, session: Session) -> Query[Any]:
        """Return query for active, non-deleted records."""
        return session.query(cls).filter(lifecycle_criteria(cls))

    @classmethod
    def query_deleted(cls, session: Session) -> Query[Any]:
        """
        Return query for deleted records only.

        Bypasses the default-read filter.
        """
        return include_flagged(session.query(cls)).filter(cls.is_deleted.is_(True))

    @classmethod
    def query_inactive(cls, session: Session) -> Query[Any]:
        """Return query for inactive records that are not deleted."""
        return include_flagged(session.query(cls)).filter(
            and_(cls.is_deleted.is_(False), cls.is_active.is_(False))
        )

    @classmethod
    def query_all(cls, session: Session) -> Query[Any]:
        """
        Return query for all records, deleted and inactive included.

        Args:
            session: SQLAlchemy session

        Returns:
            Query with no lifecycle filter
        """
        return include_flagged(session.query(cls))

    def to_dict(self, include_lifecycle_fields: bool = True) -> Dict[str, Any]:
        """
        Convert model to dictionary representation.

        Args:
            include_lifecycle_fields: Whether to include the lifecycle flags

        Returns:
            Dictionary representation of the model
        """
        result: Dict[str, Any] = {}

        table = getattr(self, "__table__", None)
        if table is None:
            return result

        for column in table.columns:
            if not include_lifecycle_fields and column.name in LIFECYCLE_FIELDS:
                continue
            value = getattr(self, column.key, None)
            if isinstance(value, datetime):
                value = value.isoformat()
            result[column.name] = value

        return result

    def _describe(self) -> str:
        # Identity key only; reading attributes here would reload expired rows
        identity = sa_inspect(self).identity
        key = ", ".join(str(part) for part in identity) if identity else "(transient)"
        return f"{self.__class__.__name__} {key}"


@event.listens_for(LifecycleMixin, "init", propagate=True)
def _apply_lifecycle_defaults(target: Any, args: Any, kwargs: Dict[str, Any]) -> None:
    """Give new instances their flag defaults before the first flush."""
    kwargs.setdefault("is_deleted", False)
    kwargs.setdefault("deleted_at", None)
    kwargs.setdefault("is_active", True)
