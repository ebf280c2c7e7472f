"""
Single-table multi-tenancy migration.

Rewrites every legacy (tenant-less) record so that its partition key and both
secondary index keys carry an ``organizationid_<tenant>`` segment:

    Old: pk=$versa#customerid_c1                      sk=$customer_1
    New: pk=$versa#organizationid_acme#customerid_c1  sk=$customer_1

Each record is replaced with a single transaction (put new + delete old), so
a record is always in exactly one of the two formats. Records that already
carry ``organizationId`` are skipped, which makes re-running the migration
after a partial failure safe.
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

from . import schema
from .config import MigrationConfig
from .exceptions import ConfigurationError, RecordDecodeError, ValidationError
from .models import EntityRecord, MigrationReport, Outcome
from .naming import validate_tenant_id
from .registry import EntityKeySchema, get_entity_schema
from .repository import Repository
from .repository_protocol import RepositoryProtocol
from .tenancy import is_tenant_scoped, resolve_tenant_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ItemResult:
    """Terminal outcome of one scanned item."""

    outcome: Outcome
    error: str | None = None


def build_tenant_scoped_item(
    config: EntityKeySchema,
    record: EntityRecord,
    tenant_id: str,
) -> dict[str, Any]:
    """
    Build the tenant-scoped replacement for a legacy record.

    Business attributes are copied as-is; key, tenant and index attributes
    are overwritten. Index 1 attributes are only written for entity types
    that declare index 1.
    """
    item = dict(record.attributes)
    item[schema.PK] = {"S": schema.build_primary_key(config, record.attributes, tenant_id)}
    item[schema.SK] = {"S": schema.build_sort_key(config, record.attributes)}
    item[schema.TENANT_ATTRIBUTE] = {"S": tenant_id}

    index1 = schema.build_index1_keys(config, record.attributes, tenant_id)
    if index1 is not None:
        item[schema.GSI1PK] = {"S": index1[0]}
        item[schema.GSI1SK] = {"S": index1[1]}

    gsi2pk, gsi2sk = schema.build_index2_keys(config, record.attributes, tenant_id)
    item[schema.GSI2PK] = {"S": gsi2pk}
    item[schema.GSI2SK] = {"S": gsi2sk}
    return item


class TenancyMigrator:
    """
    Migrates every legacy record in a table to the tenant-scoped key format.

    Example:
        async with Repository("versa-prod") as repo:
            report = await TenancyMigrator(repo, "acme").run()
        print(report.to_dict())

    Args:
        repository: Storage backend providing scan and put+delete primitives
        target_tenant_id: Tenant assigned to all non-shared entity types
        concurrency: Items of a page migrated in parallel (1 = sequential)
        page_size: Scan page size (backend default if None)
        dry_run: Classify and build keys without writing anything
    """

    def __init__(
        self,
        repository: RepositoryProtocol,
        target_tenant_id: str = schema.DEFAULT_TENANT_ID,
        *,
        concurrency: int = 1,
        page_size: int | None = None,
        dry_run: bool = False,
    ) -> None:
        try:
            validate_tenant_id(target_tenant_id)
        except ValidationError as e:
            raise ConfigurationError(e.field, e.reason) from e
        if concurrency < 1:
            raise ConfigurationError("concurrency", f"must be at least 1, got {concurrency}")

        self._repository = repository
        self.target_tenant_id = target_tenant_id
        self.concurrency = concurrency
        self.page_size = page_size
        self.dry_run = dry_run
        self._key_locks: dict[tuple[str, str], asyncio.Lock] = {}
        self._key_users: Counter[tuple[str, str]] = Counter()

    async def run(self) -> MigrationReport:
        """
        Scan the whole table and migrate every eligible record.

        Returns:
            Report with scanned/migrated/skipped counts and per-item errors

        Raises:
            Exception: Any scan failure, unmodified. Records migrated before
                the failure stay migrated; re-running resumes the job.
        """
        report = MigrationReport()
        logger.info(
            "Migration started: table=%s target_tenant=%s concurrency=%d dry_run=%s",
            self._repository.table_name,
            self.target_tenant_id,
            self.concurrency,
            self.dry_run,
        )

        async for page in self._repository.scan_pages(self.page_size):
            for result in await self._migrate_page(page):
                report.record(result.outcome, result.error)
            logger.debug(
                "Page processed: items=%d scanned=%d migrated=%d",
                len(page),
                report.scanned,
                report.migrated,
            )

        logger.info(
            "Migration complete: scanned %d, migrated %d, skipped %d, errors %d",
            report.scanned,
            report.migrated,
            report.skipped,
            len(report.errors),
        )
        return report

    async def _migrate_page(self, items: list[dict[str, Any]]) -> list[ItemResult]:
        """Migrate one page, returning results in scan order."""
        if self.concurrency == 1:
            return [await self.migrate_item(item) for item in items]

        semaphore = asyncio.Semaphore(self.concurrency)

        async def bounded(item: dict[str, Any]) -> ItemResult:
            async with semaphore:
                return await self.migrate_item(item)

        return list(await asyncio.gather(*(bounded(item) for item in items)))

    async def migrate_item(self, item: dict[str, Any]) -> ItemResult:
        """
        Classify and, if eligible, migrate a single scanned item.

        Never raises for per-item problems: every item ends in exactly one
        terminal outcome.
        """
        try:
            record = EntityRecord.from_item(item)
        except RecordDecodeError as e:
            logger.error("Cannot decode scanned item: %s", e)
            return ItemResult(Outcome.FAILED, f"Failed to decode item: {e.reason}")

        if record.entity_type is None:
            return ItemResult(Outcome.SKIPPED_NO_ENTITY)

        if is_tenant_scoped(record):
            return ItemResult(Outcome.SKIPPED_TENANT_SCOPED)

        config = get_entity_schema(record.entity_type)
        if config is None:
            logger.info("Unknown entity type: %s, skipping", record.entity_type)
            return ItemResult(Outcome.SKIPPED_UNKNOWN_TYPE)

        tenant_id = resolve_tenant_id(record.entity_type, self.target_tenant_id)

        try:
            new_item = build_tenant_scoped_item(config, record, tenant_id)
            if self.dry_run:
                logger.info(
                    "Dry run: would migrate %s pk=%s -> %s",
                    record.entity_type,
                    record.pk,
                    new_item[schema.PK]["S"],
                )
                return ItemResult(Outcome.MIGRATED)

            async with self._key_lock((record.pk, record.sk)):
                await self._repository.replace_item(new_item, record.legacy_key)
        except Exception as e:
            error_msg = f"Failed to migrate {record.entity_type} (pk: {record.pk}): {e}"
            logger.error(error_msg)
            return ItemResult(Outcome.FAILED, error_msg)

        return ItemResult(Outcome.MIGRATED)

    @asynccontextmanager
    async def _key_lock(self, key: tuple[str, str]) -> AsyncIterator[None]:
        """Serialize transactions that target the same legacy key."""
        lock = self._key_locks.setdefault(key, asyncio.Lock())
        self._key_users[key] += 1
        try:
            async with lock:
                yield
        finally:
            self._key_users[key] -= 1
            if not self._key_users[key]:
                del self._key_users[key]
                del self._key_locks[key]


async def run_migration(config: MigrationConfig, *, dry_run: bool = False) -> MigrationReport:
    """
    Run a full migration against the DynamoDB table named in ``config``.

    Opens and closes its own repository.
    """
    async with Repository(
        config.table_name,
        region=config.region,
        endpoint_url=config.endpoint_url,
    ) as repository:
        migrator = TenancyMigrator(
            repository,
            config.target_tenant_id,
            concurrency=config.concurrency,
            page_size=config.page_size,
            dry_run=dry_run,
        )
        return await migrator.run()
