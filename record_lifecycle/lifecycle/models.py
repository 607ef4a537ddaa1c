"""
Data models for lifecycle reporting.

Snapshots of a single record's flags and per-table flag counts.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class LifecycleStatus(BaseModel):
    """Snapshot of one record's lifecycle flags."""

    model_config = ConfigDict(frozen=True)

    is_deleted: bool = Field(False, description="Record is logically deleted")
    deleted_at: Optional[datetime] = Field(
        None, description="When the record was soft deleted"
    )
    is_active: bool = Field(True, description="Record is administratively enabled")

    @property
    def is_visible(self) -> bool:
        """True when default reads would return the record."""
        return not self.is_deleted and self.is_active


class LifecycleSummary(BaseModel):
    """Flag counts for one table."""

    table_name: str = Field(..., description="Table the counts were taken from")
    total: int = Field(0, description="All rows", ge=0)
    active: int = Field(0, description="Rows that are active and not deleted", ge=0)
    inactive: int = Field(0, description="Rows that are inactive and not deleted", ge=0)
    deleted: int = Field(0, description="Soft deleted rows", ge=0)

    @model_validator(mode="after")
    def check_totals(self) -> "LifecycleSummary":
        """Active, inactive and deleted partition the table."""
        if self.active + self.inactive + self.deleted != self.total:
            raise ValueError(
                f"Counts for {self.table_name} do not add up to {self.total}"
            )
        return self
