"""
Tests for lifecycle reporting services and models.
"""

import pytest
from pydantic import ValidationError
from sqlalchemy import Column, Integer, String, create_engine
from sqlalchemy.exc import NoSuchTableError
from sqlalchemy.orm import declarative_base, sessionmaker

from record_lifecycle.lifecycle import (
    LifecycleMixin,
    LifecycleService,
    LifecycleStatus,
    LifecycleSummary,
    NotALifecycleTableError,
    install_lifecycle_filter,
)

Base = declarative_base()


class Device(Base, LifecycleMixin):
    """Sample record with lifecycle flags."""

    __tablename__ = "devices"

    id = Column(Integer, primary_key=True)
    serial = Column(String(50))


class Note(Base):
    """Plain table without lifecycle flags."""

    __tablename__ = "notes"

    id = Column(Integer, primary_key=True)
    body = Column(String(200))


@pytest.fixture
def db_session():
    """In-memory SQLite session with the default-read filter installed."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    Session = sessionmaker(bind=engine)
    install_lifecycle_filter(Session)
    session = Session()

    yield session

    session.close()
    engine.dispose()


@pytest.fixture
def devices(db_session):
    """Three active, two inactive and one deleted device."""
    fleet = [Device(serial=f"SN-{n}") for n in range(6)]
    db_session.add_all(fleet)
    db_session.commit()

    fleet[3].deactivate()
    fleet[4].deactivate()
    fleet[5].soft_delete()
    return fleet


@pytest.fixture
def service(db_session):
    return LifecycleService(db_session)


class TestLifecycleService:
    """Counting rows by flag state."""

    def test_summarize_model(self, service, devices):
        summary = service.summarize(Device)

        assert summary.table_name == "devices"
        assert summary.total == 6
        assert summary.active == 3
        assert summary.inactive == 2
        assert summary.deleted == 1

    def test_summarize_empty_model(self, service):
        summary = service.summarize(Device)

        assert summary.total == 0
        assert summary.active == summary.inactive == summary.deleted == 0

    def test_summarize_table(self, service, devices):
        summary = service.summarize_table("devices")

        assert summary.model_dump() == {
            "table_name": "devices",
            "total": 6,
            "active": 3,
            "inactive": 2,
            "deleted": 1,
        }

    def test_deleted_and_inactive_counts_as_deleted(self, service, devices):
        devices[5].deactivate()

        summary = service.summarize_table("devices")
        assert summary.deleted == 1
        assert summary.inactive == 2

    def test_summarize_table_without_flags(self, service):
        with pytest.raises(NotALifecycleTableError) as exc:
            service.summarize_table("notes")

        assert exc.value.table_name == "notes"
        assert exc.value.missing == ["deleted_at", "is_active", "is_deleted"]
        assert "is_deleted" in str(exc.value)

    def test_summarize_missing_table(self, service):
        with pytest.raises(NoSuchTableError):
            service.summarize_table("no_such_table")


class TestLifecycleModels:
    """Pydantic snapshots."""

    def test_status_defaults(self):
        status = LifecycleStatus()

        assert status.is_deleted is False
        assert status.deleted_at is None
        assert status.is_active is True
        assert status.is_visible is True

    def test_deleted_status_is_not_visible(self):
        assert LifecycleStatus(is_deleted=True).is_visible is False
        assert LifecycleStatus(is_active=False).is_visible is False

    def test_status_is_frozen(self):
        status = LifecycleStatus()

        with pytest.raises(ValidationError):
            status.is_deleted = True

    def test_summary_counts_must_add_up(self):
        with pytest.raises(ValidationError) as exc:
            LifecycleSummary(table_name="devices", total=5, active=1, deleted=1)

        assert "do not add up" in str(exc.value)

    def test_summary_rejects_negative_counts(self):
        with pytest.raises(ValidationError):
            LifecycleSummary(table_name="devices", total=-1)
