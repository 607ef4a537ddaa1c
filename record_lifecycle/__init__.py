"""
Record Lifecycle - soft delete and active/inactive flags for SQLAlchemy models.

Records are never removed: soft deletion and deactivation are flags, and
default reads can be told to skip flagged rows.

Quick Start
-----------
>>> from record_lifecycle import LifecycleMixin, install_lifecycle_filter
>>>
>>> class Customer(Base, LifecycleMixin):
...     __tablename__ = "customers"
...     id = Column(Integer, primary_key=True)
>>>
>>> Session = sessionmaker(bind=engine)
>>> install_lifecycle_filter(Session)
>>>
>>> customer.soft_delete()
>>> Customer.find_active_non_deleted(session)
>>> Customer.query_all(session).all()  # deleted and inactive included
"""

__version__ = "1.0.0"

from .config import LifecycleConfig, configure, get_config, set_config
from .lifecycle import (
    LifecycleMixin,
    LifecycleService,
    include_flagged,
    install_lifecycle_filter,
    remove_lifecycle_filter,
)

__all__ = [
    # Lifecycle
    "LifecycleMixin",
    "LifecycleService",
    "install_lifecycle_filter",
    "remove_lifecycle_filter",
    "include_flagged",
    # Configuration
    "LifecycleConfig",
    "get_config",
    "set_config",
    "configure",
]
