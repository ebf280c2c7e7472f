"""
versa-tenancy: single-table multi-tenancy migration for the versa DynamoDB table.

Rewrites every legacy record's keys to embed an ``organizationId`` segment,
one atomic put+delete per record, skipping records that are already
tenant-scoped so the job can be re-run safely.

Example:
    from versa_tenancy import Repository, TenancyMigrator

    async with Repository("versa-prod", region="us-east-1") as repo:
        report = await TenancyMigrator(repo, "acme").run()

    print(report.to_dict())
    # {"scanned": 120, "migrated": 118, "skipped": 2, "errors": []}
"""

from .config import MigrationConfig
from .exceptions import (
    ConfigurationError,
    RecordDecodeError,
    ValidationError,
    VersaTenancyError,
)
from .migrator import TenancyMigrator, build_tenant_scoped_item, run_migration
from .models import EntityRecord, MigrationReport, Outcome
from .registry import (
    ENTITY_SCHEMAS,
    SHARED_ENTITY_TYPES,
    EntityKeySchema,
    get_entity_schema,
    registered_entity_types,
)
from .repository import Repository
from .repository_protocol import RepositoryProtocol
from .tenancy import is_tenant_scoped, resolve_tenant_id

__all__ = [
    # Configuration
    "MigrationConfig",
    # Migration
    "TenancyMigrator",
    "build_tenant_scoped_item",
    "run_migration",
    # Models
    "EntityRecord",
    "MigrationReport",
    "Outcome",
    # Registry
    "ENTITY_SCHEMAS",
    "SHARED_ENTITY_TYPES",
    "EntityKeySchema",
    "get_entity_schema",
    "registered_entity_types",
    "resolve_tenant_id",
    "is_tenant_scoped",
    # Storage
    "Repository",
    "RepositoryProtocol",
    # Exceptions
    "VersaTenancyError",
    "ConfigurationError",
    "ValidationError",
    "RecordDecodeError",
]
