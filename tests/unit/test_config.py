"""Tests for migration configuration and name validation."""

import pytest

from versa_tenancy.config import MigrationConfig
from versa_tenancy.exceptions import ConfigurationError, ValidationError
from versa_tenancy.naming import validate_table_name, validate_tenant_id


class TestFromEnv:
    """Tests for MigrationConfig.from_env."""

    def test_reads_environment(self):
        config = MigrationConfig.from_env(
            environ={
                "TABLE_NAME": "versa-prod",
                "TARGET_ORG_ID": "acme",
                "AWS_REGION": "eu-west-1",
                "MIGRATION_CONCURRENCY": "8",
                "MIGRATION_PAGE_SIZE": "250",
            }
        )

        assert config == MigrationConfig(
            table_name="versa-prod",
            target_tenant_id="acme",
            region="eu-west-1",
            concurrency=8,
            page_size=250,
        )

    def test_tenant_falls_back_to_default(self):
        config = MigrationConfig.from_env(environ={"TABLE_NAME": "versa-prod"})
        assert config.target_tenant_id == "versa-default"
        assert config.concurrency == 1
        assert config.page_size is None

    def test_arguments_win_over_environment(self):
        config = MigrationConfig.from_env(
            "versa-dev",
            "globex",
            concurrency=2,
            environ={"TABLE_NAME": "versa-prod", "TARGET_ORG_ID": "acme"},
        )
        assert config.table_name == "versa-dev"
        assert config.target_tenant_id == "globex"
        assert config.concurrency == 2

    def test_missing_table_name(self):
        with pytest.raises(ConfigurationError, match="TABLE_NAME is not set"):
            MigrationConfig.from_env(environ={})

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("TABLE_NAME", "versa-env")
        monkeypatch.delenv("TARGET_ORG_ID", raising=False)
        assert MigrationConfig.from_env().table_name == "versa-env"

    def test_non_integer_concurrency(self):
        with pytest.raises(ConfigurationError, match="MIGRATION_CONCURRENCY"):
            MigrationConfig.from_env(
                environ={"TABLE_NAME": "versa-prod", "MIGRATION_CONCURRENCY": "many"}
            )


class TestValidation:
    """Tests for config and name validation."""

    @pytest.mark.parametrize("concurrency", [0, 65])
    def test_concurrency_out_of_range(self, concurrency):
        with pytest.raises(ConfigurationError, match="concurrency"):
            MigrationConfig(table_name="versa-prod", concurrency=concurrency)

    def test_page_size_must_be_positive(self):
        with pytest.raises(ConfigurationError, match="page_size"):
            MigrationConfig(table_name="versa-prod", page_size=0)

    def test_invalid_tenant_becomes_configuration_error(self):
        with pytest.raises(ConfigurationError, match="tenant_id"):
            MigrationConfig(table_name="versa-prod", target_tenant_id="GLOBAL")

    @pytest.mark.parametrize("name", ["", "ab", "has space", "bad/char"])
    def test_invalid_table_names(self, name):
        with pytest.raises(ValidationError):
            validate_table_name(name)

    @pytest.mark.parametrize("name", ["versa", "versa-prod", "Versa_Table.v2"])
    def test_valid_table_names(self, name):
        validate_table_name(name)

    @pytest.mark.parametrize("tenant_id", ["", "  ", "a#b", "GLOBAL"])
    def test_invalid_tenant_ids(self, tenant_id):
        with pytest.raises(ValidationError):
            validate_tenant_id(tenant_id)

    def test_valid_tenant_id(self):
        validate_tenant_id("versa-default")
