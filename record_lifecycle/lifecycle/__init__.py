"""
Lifecycle Module - soft delete and active/inactive flags.

Provides the model mixin, opt-in default-read filtering and reporting
services for records that are never physically removed.
"""

from .exceptions import DetachedRecordError, LifecycleError, NotALifecycleTableError
from .filters import (
    install_lifecycle_filter,
    is_lifecycle_filter_installed,
    remove_lifecycle_filter,
)
from .mixins import ACTIVE_FLAGS, LifecycleMixin, include_flagged, lifecycle_criteria
from .models import LifecycleStatus, LifecycleSummary
from .services import LifecycleService

__all__ = [
    # Mixins
    "LifecycleMixin",
    "ACTIVE_FLAGS",
    "lifecycle_criteria",
    "include_flagged",
    # Filtering
    "install_lifecycle_filter",
    "remove_lifecycle_filter",
    "is_lifecycle_filter_installed",
    # Services
    "LifecycleService",
    # Models
    "LifecycleStatus",
    "LifecycleSummary",
    # Exceptions
    "LifecycleError",
    "DetachedRecordError",
    "NotALifecycleTableError",
]
