"""Lambda handler for the operator-triggered tenancy migration."""

import asyncio
import json
import time
import traceback
from datetime import UTC, datetime
from typing import Any

from ulid import ULID

from .config import MigrationConfig
from .exceptions import ConfigurationError
from .migrator import run_migration


class StructuredLogger:
    """JSON-formatted logger for CloudWatch Logs Insights."""

    def __init__(self, name: str):
        self._name = name

    def _log(self, level: str, message: str, **extra: Any) -> None:
        log_entry = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": level,
            "logger": self._name,
            "message": message,
            **extra,
        }
        print(json.dumps(log_entry))

    def info(self, message: str, **extra: Any) -> None:
        self._log("INFO", message, **extra)

    def error(self, message: str, exc_info: bool = False, **extra: Any) -> None:
        if exc_info:
            extra["exception"] = traceback.format_exc()
        self._log("ERROR", message, **extra)


logger = StructuredLogger(__name__)


def handler(event: dict[str, Any] | None = None, context: Any = None) -> dict[str, Any]:
    """
    Lambda handler that migrates the whole table to tenant-scoped keys.

    The event is ignored; the job takes no parameters.

    Environment variables:
        TABLE_NAME: DynamoDB table name (required)
        TARGET_ORG_ID: Tenant for non-shared records (default: versa-default)
        MIGRATION_CONCURRENCY: Parallel items per page (default: 1)
        MIGRATION_PAGE_SIZE: Scan page size (default: DynamoDB's)

    Args:
        event: Lambda event (unused)
        context: Lambda context

    Returns:
        Migration report: ``{scanned, migrated, skipped, errors}``

    Raises:
        ConfigurationError: If the environment is misconfigured
        Exception: Any scan failure, unmodified
    """
    start_time = time.perf_counter()
    run_id = str(ULID())
    request_id = getattr(context, "aws_request_id", "unknown")

    try:
        config = MigrationConfig.from_env()
    except ConfigurationError as e:
        logger.error(
            "Invalid configuration",
            run_id=run_id,
            request_id=request_id,
            error=str(e),
        )
        raise

    logger.info(
        "Migration started",
        run_id=run_id,
        request_id=request_id,
        table_name=config.table_name,
        target_tenant_id=config.target_tenant_id,
        concurrency=config.concurrency,
    )

    try:
        report = asyncio.run(run_migration(config))
    except Exception as e:
        logger.error(
            "Migration aborted",
            exc_info=True,
            run_id=run_id,
            request_id=request_id,
            error=str(e),
        )
        raise

    processing_time_ms = (time.perf_counter() - start_time) * 1000
    logger.info(
        "Migration complete",
        run_id=run_id,
        request_id=request_id,
        scanned=report.scanned,
        migrated=report.migrated,
        skipped=report.skipped,
        error_count=len(report.errors),
        processing_time_ms=round(processing_time_ms, 2),
    )
    return report.to_dict()
