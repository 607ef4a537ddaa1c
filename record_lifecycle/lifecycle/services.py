"""
Service layer for lifecycle reporting.

Counts active, inactive and deleted rows for mapped models and for plain
tables found by reflection.
"""

import logging
from typing import Any, Type

from sqlalchemy import MetaData, Table, and_, case, func, select
from sqlalchemy.orm import Session

from .exceptions import NotALifecycleTableError
from .mixins import LIFECYCLE_FIELDS, LifecycleMixin, include_flagged
from .models import LifecycleSummary

logger = logging.getLogger(__name__)


def _count_columns(is_deleted: Any, is_active: Any) -> Any:
    def _sum(condition: Any) -> Any:
        return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)

    return (
        func.count().label("total"),
        _sum(and_(is_deleted.is_(False), is_active.is_(True))).label("active"),
        _sum(and_(is_deleted.is_(False), is_active.is_(False))).label("inactive"),
        _sum(is_deleted.is_(True)).label("deleted"),
    )


class LifecycleService:
    """
    Reporting over lifecycle flags.

    Counts always include flagged rows, whether or not the default-read
    filter is installed on the session.
    """

    def __init__(self, session: Session):
        """
        Initialize the service.

        Args:
            session: SQLAlchemy database session
        """
        self.session = session

    def summarize(self, model: Type[LifecycleMixin]) -> LifecycleSummary:
        """
        Count rows of a mapped lifecycle model by flag state.

        Args:
            model: Class using LifecycleMixin

        Returns:
            Summary of the model's table
        """
        stmt = include_flagged(
            select(*_count_columns(model.is_deleted, model.is_active)).select_from(
                model
            )
        )
        row = self.session.execute(stmt).one()

        table_name = getattr(model, "__tablename__", model.__name__)
        return self._to_summary(table_name, row)

    def summarize_table(self, table_name: str) -> LifecycleSummary:
        """
        Count rows of a table by flag state, using reflection.

        Args:
            table_name: Name of a table carrying the lifecycle columns

        Returns:
            Summary of the table

        Raises:
            NotALifecycleTableError: If a flag column is missing
            sqlalchemy.exc.NoSuchTableError: If the table does not exist
        """
        connection = self.session.connection()
        table = Table(table_name, MetaData(), autoload_with=connection)

        missing = set(LIFECYCLE_FIELDS) - set(table.columns.keys())
        if missing:
            raise NotALifecycleTableError(table_name, missing)

        stmt = select(*_count_columns(table.c.is_deleted, table.c.is_active))
        row = connection.execute(stmt).one()

        return self._to_summary(table_name, row)

    def _to_summary(self, table_name: str, row: Any) -> LifecycleSummary:
        summary = LifecycleSummary(
            table_name=table_name,
            total=row.total,
            active=row.active,
            inactive=row.inactive,
            deleted=row.deleted,
        )
        logger.debug(f"Lifecycle summary for {table_name}: {summary.model_dump()}")
        return summary
