"""Migration run configuration."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .exceptions import ConfigurationError, ValidationError
from .naming import TABLE_ENV_VAR, TENANT_ENV_VAR, normalize_table_name, validate_tenant_id
from .schema import DEFAULT_TENANT_ID

CONCURRENCY_ENV_VAR = "MIGRATION_CONCURRENCY"
PAGE_SIZE_ENV_VAR = "MIGRATION_PAGE_SIZE"
MAX_CONCURRENCY = 64


@dataclass(frozen=True)
class MigrationConfig:
    """
    Settings consumed once at startup.

    Attributes:
        table_name: DynamoDB table holding every entity
        target_tenant_id: Tenant assigned to non-shared records
        region: AWS region (boto3 default if None)
        endpoint_url: Custom endpoint (LocalStack, DynamoDB Local)
        concurrency: Items migrated in parallel within a page (1 = sequential)
        page_size: Scan page size (DynamoDB default if None)
    """

    table_name: str
    target_tenant_id: str = DEFAULT_TENANT_ID
    region: str | None = None
    endpoint_url: str | None = None
    concurrency: int = 1
    page_size: int | None = None

    def __post_init__(self) -> None:
        try:
            normalize_table_name(self.table_name)
            validate_tenant_id(self.target_tenant_id)
        except ValidationError as e:
            raise ConfigurationError(e.field, e.reason) from e
        if not 1 <= self.concurrency <= MAX_CONCURRENCY:
            raise ConfigurationError(
                "concurrency", f"must be between 1 and {MAX_CONCURRENCY}, got {self.concurrency}"
            )
        if self.page_size is not None and self.page_size <= 0:
            raise ConfigurationError("page_size", f"must be positive, got {self.page_size}")

    @classmethod
    def from_env(
        cls,
        table_name: str | None = None,
        target_tenant_id: str | None = None,
        *,
        region: str | None = None,
        endpoint_url: str | None = None,
        concurrency: int | None = None,
        page_size: int | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "MigrationConfig":
        """
        Build a config, filling unset arguments from the environment.

        Resolution order for each setting: explicit argument, environment
        variable, default. The target tenant falls back to ``versa-default``.

        Environment variables:
            TABLE_NAME: DynamoDB table name (required)
            TARGET_ORG_ID: Target tenant id (default: versa-default)
            AWS_REGION: AWS region
            AWS_ENDPOINT_URL: Custom endpoint URL
            MIGRATION_CONCURRENCY: Parallel items per page (default: 1)
            MIGRATION_PAGE_SIZE: Scan page size

        Raises:
            ConfigurationError: If the table name is missing or a value is invalid
        """
        env = os.environ if environ is None else environ

        resolved_table = table_name or env.get(TABLE_ENV_VAR)
        if not resolved_table:
            raise ConfigurationError(
                "table_name", f"no table name given and {TABLE_ENV_VAR} is not set"
            )

        return cls(
            table_name=resolved_table,
            target_tenant_id=target_tenant_id or env.get(TENANT_ENV_VAR) or DEFAULT_TENANT_ID,
            region=region or env.get("AWS_REGION") or None,
            endpoint_url=endpoint_url or env.get("AWS_ENDPOINT_URL") or None,
            concurrency=(
                concurrency
                if concurrency is not None
                else _int_setting(env, CONCURRENCY_ENV_VAR, default=1)
            ),
            page_size=page_size if page_size is not None else _int_setting(env, PAGE_SIZE_ENV_VAR),
        )


def _int_setting(env: Mapping[str, str], name: str, default: int | None = None) -> int | None:
    raw = env.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(name, f"expected an integer, got {raw!r}") from e
