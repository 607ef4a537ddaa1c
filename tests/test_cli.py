"""
Tests for the Record Lifecycle CLI.
"""

import pytest
from click.testing import CliRunner
from sqlalchemy import Column, Integer, String, create_engine
from sqlalchemy.orm import Session, declarative_base

from record_lifecycle.cli import cli
from record_lifecycle.config import LifecycleConfig, set_config
from record_lifecycle.lifecycle import LifecycleMixin

Base = declarative_base()


class Ticket(Base, LifecycleMixin):
    """Sample record with lifecycle flags."""

    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True)
    title = Column(String(100))


class AuditNote(Base):
    """Table without lifecycle flags."""

    __tablename__ = "audit_notes"

    id = Column(Integer, primary_key=True)


@pytest.fixture
def runner():
    """Create a CLI runner."""
    return CliRunner()


@pytest.fixture
def database_url(tmp_path):
    """File-backed SQLite database with a few tickets in each state."""
    url = f"sqlite:///{tmp_path / 'lifecycle.db'}"
    engine = create_engine(url)
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        tickets = [Ticket(title=f"Ticket {n}") for n in range(4)]
        session.add_all(tickets)
        session.commit()

        tickets[1].deactivate()
        tickets[2].soft_delete()
        tickets[3].soft_delete()

    engine.dispose()
    return url


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_cli_help(self, runner):
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "Record Lifecycle" in result.output

    def test_cli_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "version" in result.output.lower()

    def test_cli_no_command(self, runner):
        result = runner.invoke(cli, [])

        assert result.exit_code == 0
        assert "Record Lifecycle" in result.output


class TestConfigCommands:
    """Test configuration-related commands."""

    def test_config_show(self, runner):
        result = runner.invoke(cli, ["config", "show"])

        assert result.exit_code == 0
        assert "commit_on_change" in result.output

    def test_config_show_json(self, runner):
        set_config(LifecycleConfig(application_name="Helpdesk"))

        result = runner.invoke(cli, ["config", "show", "--format", "json"])

        assert result.exit_code == 0
        assert '"application_name": "Helpdesk"' in result.output

    def test_config_show_yaml(self, runner):
        result = runner.invoke(cli, ["config", "show", "--format", "yaml"])

        assert result.exit_code == 0
        assert "include_flagged_option: include_flagged" in result.output

    def test_config_show_invalid_environment(self, runner, monkeypatch):
        monkeypatch.setenv("LIFECYCLE_ENVIRONMENT", "moon")

        result = runner.invoke(cli, ["config", "show"])

        assert result.exit_code == 1
        assert "Error loading configuration" in result.output

    def test_config_validate_warnings(self, runner):
        set_config(LifecycleConfig(filter_default_reads=False))

        result = runner.invoke(cli, ["config", "validate"])

        assert result.exit_code == 0
        assert "Configuration is valid" in result.output
        assert "Default-read filtering is disabled" in result.output
        assert "No database_url configured" in result.output

    def test_config_validate_failure(self, runner, monkeypatch):
        monkeypatch.setenv("LIFECYCLE_LOG_LEVEL", "chatty")

        result = runner.invoke(cli, ["config", "validate"])

        assert result.exit_code == 1
        assert "validation failed" in result.output


class TestInspectCommand:
    """Test the inspect command."""

    def test_inspect_table(self, runner, database_url):
        result = runner.invoke(cli, ["inspect", "tickets", "--database-url", database_url])

        assert result.exit_code == 0
        assert "tickets" in result.output
        assert "Lifecycle Summary" in result.output

    def test_inspect_json(self, runner, database_url):
        result = runner.invoke(
            cli, ["inspect", "tickets", "--database-url", database_url, "--format", "json"]
        )

        assert result.exit_code == 0
        assert '"total": 4' in result.output
        assert '"active": 1' in result.output
        assert '"inactive": 1' in result.output
        assert '"deleted": 2' in result.output

    def test_inspect_uses_configured_url(self, runner, database_url, monkeypatch):
        monkeypatch.setenv("LIFECYCLE_DATABASE_URL", database_url)
        set_config(None)

        result = runner.invoke(cli, ["inspect", "tickets", "--format", "json"])

        assert result.exit_code == 0
        assert '"deleted": 2' in result.output

    def test_inspect_without_database(self, runner):
        result = runner.invoke(cli, ["inspect", "tickets"])

        assert result.exit_code == 2
        assert "No database configured" in result.output

    def test_inspect_table_without_flags(self, runner, database_url):
        result = runner.invoke(
            cli, ["inspect", "audit_notes", "--database-url", database_url]
        )

        assert result.exit_code == 1
        assert "Error inspecting tables" in result.output
        assert "missing lifecycle columns" in result.output


class TestDoctorCommand:
    """Test the doctor command."""

    def test_doctor_with_database(self, runner, database_url):
        result = runner.invoke(cli, ["doctor", "--database-url", database_url])

        assert result.exit_code == 0
        assert "Database connection successful" in result.output
        assert "All systems operational" in result.output

    def test_doctor_without_database(self, runner):
        result = runner.invoke(cli, ["doctor"])

        assert result.exit_code == 0
        assert "No database configured" in result.output
