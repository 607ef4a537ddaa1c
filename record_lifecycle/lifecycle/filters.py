"""
Default-read filtering for lifecycle models.

Filtering is opt-in: nothing is hidden until ``install_lifecycle_filter`` is
called on a session, session factory or the ``Session`` class. Once
installed, every ORM SELECT issued through that target excludes deleted and
inactive rows of every LifecycleMixin model, including lookups by primary key
and relationship loads. A single statement opts out with the
``include_flagged`` execution option:

    session.execute(
        select(Customer).execution_options(include_flagged=True)
    )

A record hidden through a filtered session is evicted from that session once
it is written, so a later ``Session.get`` goes to the database and is
filtered like any other lookup.
"""

import logging
import weakref
from typing import Any, Optional

from sqlalchemy import event
from sqlalchemy.orm import ORMExecuteState, Session, with_loader_criteria

from ..config import get_config
from .mixins import LifecycleMixin

logger = logging.getLogger(__name__)

# target -> installed listener, so remove_lifecycle_filter can find it
_installed: "weakref.WeakKeyDictionary[Any, Any]" = weakref.WeakKeyDictionary()


def _make_listener(option_name: Optional[str]) -> Any:
    def _filter_lifecycle_reads(orm_execute_state: ORMExecuteState) -> None:
        config = get_config()
        if not config.filter_default_reads:
            return
        if (
            not orm_execute_state.is_select
            or orm_execute_state.is_column_load
            or orm_execute_state.is_relationship_load
        ):
            return

        options = orm_execute_state.execution_options
        if options.get(config.include_flagged_option, False):
            return
        if option_name and options.get(option_name, False):
            return

        orm_execute_state.statement = orm_execute_state.statement.options(
            with_loader_criteria(
                LifecycleMixin,
                lambda cls: cls.is_deleted.is_(False) & cls.is_active.is_(True),
                include_aliases=True,
            )
        )

    _filter_lifecycle_reads.lifecycle_filter = True  # type: ignore[attr-defined]
    return _filter_lifecycle_reads


def install_lifecycle_filter(target: Any, option_name: Optional[str] = None) -> None:
    """
    Hide deleted and inactive records from reads made through ``target``.

    The configured ``include_flagged_option`` always bypasses the filter, so
    ``include_flagged()`` and the ``query_*`` helpers keep working. A custom
    ``option_name`` is honoured in addition to it. Whether filtering is
    enabled (``filter_default_reads``) is read on every statement.

    Args:
        target: ``Session`` subclass, ``sessionmaker`` or session instance
        option_name: Extra execution option that bypasses the filter
    """
    if is_lifecycle_filter_installed(target):
        logger.debug(f"Lifecycle filter already installed on {target!r}")
        return

    listener = _make_listener(option_name)

    event.listen(target, "do_orm_execute", listener)
    _installed[target] = listener

    bypass = option_name or get_config().include_flagged_option
    logger.info(f"Installed lifecycle filter on {target!r} (bypass option: {bypass})")


def remove_lifecycle_filter(target: Any) -> None:
    """
    Undo ``install_lifecycle_filter`` for ``target``.

    Does nothing if no filter was installed.
    """
    listener = _installed.pop(target, None)
    if listener is None:
        return

    event.remove(target, "do_orm_execute", listener)
    logger.info(f"Removed lifecycle filter from {target!r}")


def is_lifecycle_filter_installed(target: Any) -> bool:
    """Return True if ``install_lifecycle_filter`` was called on ``target``."""
    listener = _installed.get(target)
    return listener is not None and event.contains(
        target, "do_orm_execute", listener
    )


def filters_reads(session: Session) -> bool:
    """
    Return True if reads through ``session`` hide flagged records.

    Looks at every ``do_orm_execute`` listener the session sees, so a filter
    installed on the session, its sessionmaker or a Session class counts.
    """
    if not get_config().filter_default_reads:
        return False
    return any(
        getattr(listener, "lifecycle_filter", False)
        for listener in session.dispatch.do_orm_execute
    )


def evict_if_hidden(session: Session, record: LifecycleMixin) -> bool:
    """
    Expunge ``record`` from ``session`` if the filter now hides it.

    Reading the flags loads every expired column first (an unfiltered column
    load), so the detached record stays readable.

    Returns:
        True if the record was evicted
    """
    if not filters_reads(session):
        return False
    if not record.is_deleted and record.is_active:
        return False

    session.expunge(record)
    record._evicted_from = weakref.ref(session)
    logger.debug(f"Evicted hidden {record._describe()} from {session!r}")
    return True
