"""Tests for CLI commands."""

import json
import sys
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from versa_tenancy.cli import cli
from versa_tenancy.models import MigrationReport

cli_module = sys.modules["versa_tenancy.cli"]


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CLI runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("TABLE_NAME", "TARGET_ORG_ID", "MIGRATION_CONCURRENCY", "MIGRATION_PAGE_SIZE"):
        monkeypatch.delenv(name, raising=False)


class TestCLI:
    """Test CLI commands."""

    def test_cli_help(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "tenancy migration CLI" in result.output

    def test_migrate_help(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["migrate", "--help"])
        assert result.exit_code == 0
        assert "--table-name" in result.output
        assert "--tenant-id" in result.output
        assert "--concurrency" in result.output
        assert "--dry-run" in result.output

    def test_migrate_success(self, runner: CliRunner) -> None:
        run = AsyncMock(return_value=MigrationReport(scanned=4, migrated=3, skipped=1))

        with patch.object(cli_module, "run_migration", run):
            result = runner.invoke(
                cli, ["migrate", "--table-name", "versa-prod", "--tenant-id", "acme"]
            )

        assert result.exit_code == 0
        assert "Migrating table: versa-prod" in result.output
        assert "Target tenant: acme" in result.output
        assert "Migrated: 3" in result.output
        assert "✓ Migration complete" in result.output
        config = run.call_args.args[0]
        assert config.table_name == "versa-prod"
        assert run.call_args.kwargs == {"dry_run": False}

    def test_migrate_json_output(self, runner: CliRunner) -> None:
        report = MigrationReport(scanned=1, migrated=1, skipped=0)

        with patch.object(cli_module, "run_migration", AsyncMock(return_value=report)):
            result = runner.invoke(cli, ["migrate", "--table-name", "versa-prod", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.output) == {
            "scanned": 1,
            "migrated": 1,
            "skipped": 0,
            "errors": [],
        }

    def test_migrate_dry_run(self, runner: CliRunner) -> None:
        run = AsyncMock(return_value=MigrationReport(scanned=2, migrated=2))

        with patch.object(cli_module, "run_migration", run):
            result = runner.invoke(cli, ["migrate", "--table-name", "versa-prod", "--dry-run"])

        assert result.exit_code == 0
        assert "Would migrate: 2" in result.output
        assert run.call_args.kwargs == {"dry_run": True}

    def test_migrate_with_errors_exits_nonzero(self, runner: CliRunner) -> None:
        report = MigrationReport(
            scanned=2,
            migrated=1,
            errors=["Failed to migrate customer (pk: $versa#customerid_c2): conflict"],
        )

        with patch.object(cli_module, "run_migration", AsyncMock(return_value=report)):
            result = runner.invoke(cli, ["migrate", "--table-name", "versa-prod"])

        assert result.exit_code == 1
        assert "Errors: 1" in result.output
        assert "$versa#customerid_c2" in result.output

    def test_migrate_scan_failure(self, runner: CliRunner) -> None:
        run = AsyncMock(side_effect=RuntimeError("table not found"))

        with patch.object(cli_module, "run_migration", run):
            result = runner.invoke(cli, ["migrate", "--table-name", "versa-prod"])

        assert result.exit_code == 1
        assert "✗ Migration failed: table not found" in result.output

    def test_migrate_requires_table_name(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["migrate"])
        assert result.exit_code == 1
        assert "TABLE_NAME is not set" in result.output

    def test_migrate_rejects_reserved_tenant(self, runner: CliRunner) -> None:
        result = runner.invoke(
            cli, ["migrate", "--table-name", "versa-prod", "--tenant-id", "GLOBAL"]
        )
        assert result.exit_code == 1
        assert "tenant_id" in result.output

    def test_entities(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["entities"])
        assert result.exit_code == 0
        assert "propertyType (GLOBAL)" in result.output
        assert "customer (tenant)" in result.output
        assert "sk: serviceTypeId" in result.output
