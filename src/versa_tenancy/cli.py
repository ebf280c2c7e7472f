"""Command-line interface for the versa tenancy migration."""

import asyncio
import json
import logging
import sys

import click

from .config import MAX_CONCURRENCY, MigrationConfig
from .exceptions import ConfigurationError
from .migrator import run_migration
from .registry import ENTITY_SCHEMAS, SHARED_ENTITY_TYPES, registered_entity_types


@click.group()
@click.version_option(package_name="versa-tenancy")
def cli() -> None:
    """versa single-table tenancy migration CLI."""
    pass


@cli.command()
@click.option(
    "--table-name",
    help="DynamoDB table name (default: $TABLE_NAME)",
)
@click.option(
    "--tenant-id",
    help="Tenant assigned to non-shared records (default: $TARGET_ORG_ID or versa-default)",
)
@click.option(
    "--region",
    help="AWS region (default: use boto3 defaults)",
)
@click.option(
    "--endpoint-url",
    help=(
        "AWS endpoint URL "
        "(e.g., http://localhost:4566 for LocalStack, or other AWS-compatible services)"
    ),
)
@click.option(
    "--concurrency",
    type=click.IntRange(1, MAX_CONCURRENCY),
    default=None,
    help=f"Items migrated in parallel within a scan page (1-{MAX_CONCURRENCY}, default: 1)",
)
@click.option(
    "--page-size",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum items per scan page (default: DynamoDB's 1 MB pages)",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Classify records and build keys without writing anything",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print the report as JSON",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Log every page and skipped record",
)
def migrate(
    table_name: str | None,
    tenant_id: str | None,
    region: str | None,
    endpoint_url: str | None,
    concurrency: int | None,
    page_size: int | None,
    dry_run: bool,
    as_json: bool,
    verbose: bool,
) -> None:
    """Rewrite every legacy record to tenant-scoped keys.

    Safe to re-run: records that already carry an organizationId are skipped.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = MigrationConfig.from_env(
            table_name,
            tenant_id,
            region=region,
            endpoint_url=endpoint_url,
            concurrency=concurrency,
            page_size=page_size,
        )
    except ConfigurationError as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    if not as_json:
        click.echo(f"Migrating table: {config.table_name}")
        click.echo(f"  Target tenant: {config.target_tenant_id}")
        click.echo(f"  Region: {config.region or 'default'}")
        click.echo(f"  Concurrency: {config.concurrency}")
        if dry_run:
            click.echo("  Dry run: no records will be written")
        click.echo()

    try:
        report = asyncio.run(run_migration(config, dry_run=dry_run))
    except Exception as e:
        click.echo(f"✗ Migration failed: {e}", err=True)
        click.echo(
            "  Records migrated so far are intact; re-run to resume.",
            err=True,
        )
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        verb = "Would migrate" if dry_run else "Migrated"
        click.echo(f"Scanned: {report.scanned}")
        click.echo(f"{verb}: {report.migrated}")
        click.echo(f"Skipped: {report.skipped}")
        click.echo(f"Errors: {len(report.errors)}")
        for error in report.errors:
            click.echo(f"  ✗ {error}", err=True)
        if report.succeeded:
            click.echo("✓ Migration complete")

    if not report.succeeded:
        sys.exit(1)


@cli.command()
def entities() -> None:
    """List registered entity types and their key attributes."""
    for entity_type in registered_entity_types():
        config = ENTITY_SCHEMAS[entity_type]
        owner = "GLOBAL" if entity_type in SHARED_ENTITY_TYPES else "tenant"
        click.echo(f"{entity_type} ({owner})")
        click.echo(f"  pk: {', '.join(config.pk)}")
        if config.sk:
            click.echo(f"  sk: {', '.join(config.sk)}")
        if config.gsi1_pk is not None:
            click.echo(
                f"  gsi1: [{', '.join(config.gsi1_pk)}] / [{', '.join(config.gsi1_sk)}]"
            )
        click.echo(f"  gsi2: [{', '.join(config.gsi2_sk)}]")


if __name__ == "__main__":
    cli()
