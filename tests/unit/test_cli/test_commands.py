"""Tests for the clipstream management CLI.

Testing approach:
- Uses Click's CliRunner for command invocation
- Mocks the database layer so no real connection is opened
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from click.testing import CliRunner
from sqlalchemy.exc import OperationalError

from clipstream import __version__
from clipstream.cli.main import cli


@pytest.fixture
def cli_runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    """Keep the CLI from reconfiguring process-wide logging during tests."""
    monkeypatch.setattr("clipstream.cli.main.setup_logging", lambda: None)


class TestCliGroup:
    def test_version(self, cli_runner):
        result = cli_runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_groups(self, cli_runner):
        result = cli_runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "db" in result.output
        assert "storage" in result.output


class TestStorageInfo:
    def test_local_backend(self, cli_runner):
        result = cli_runner.invoke(cli, ["storage", "info"])

        assert result.exit_code == 0
        assert "Backend:        local" in result.output
        assert "Mounted at:" in result.output
        assert "secret" not in result.output.lower()


class TestDbInit:
    def test_creates_tables(self, cli_runner, monkeypatch):
        create_tables = AsyncMock()
        close_database = AsyncMock()
        monkeypatch.setattr("clipstream.infra.database.create_tables", create_tables)
        monkeypatch.setattr("clipstream.infra.database.close_database", close_database)

        result = cli_runner.invoke(cli, ["db", "init"])

        assert result.exit_code == 0
        assert "Database tables created" in result.output
        create_tables.assert_awaited_once()
        close_database.assert_awaited_once()

    def test_failure_exits_nonzero(self, cli_runner, monkeypatch):
        create_tables = AsyncMock(side_effect=OperationalError("CREATE TABLE", {}, Exception("locked")))
        monkeypatch.setattr("clipstream.infra.database.create_tables", create_tables)
        monkeypatch.setattr("clipstream.infra.database.close_database", AsyncMock())

        result = cli_runner.invoke(cli, ["db", "init"])

        assert result.exit_code == 1
