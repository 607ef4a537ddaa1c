"""Pytest configuration for Record Lifecycle."""

import pytest

from record_lifecycle.config import LifecycleConfig, set_config


def pytest_configure(config):
    """Configure pytest with custom settings."""
    config.addinivalue_line("markers", "scenario: end-to-end lifecycle scenario")


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Start every test from default configuration and a clean environment."""
    for field_name in LifecycleConfig.model_fields:
        monkeypatch.delenv(f"LIFECYCLE_{field_name.upper()}", raising=False)

    set_config(None)
    yield
    set_config(None)
