"""Table and tenant name utilities.

This module provides centralized validation and environment variable names for
the names a migration run operates on:
- Table names follow DynamoDB rules (3-255 characters of ``[A-Za-z0-9_.-]``)
- Tenant ids become key segments, so they may not contain the key delimiter
"""

import re

from .exceptions import ValidationError
from .schema import DELIMITER, GLOBAL_TENANT_ID

TABLE_ENV_VAR = "TABLE_NAME"
"""Environment variable naming the table to migrate."""

TENANT_ENV_VAR = "TARGET_ORG_ID"
"""Environment variable naming the tenant that receives non-shared records."""

TABLE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]{3,255}$")


def validate_table_name(name: str) -> None:
    """
    Validate a DynamoDB table name.

    Raises:
        ValidationError: If the name is empty or breaks DynamoDB naming rules
    """
    if not name:
        raise ValidationError("table_name", name, "Table name cannot be empty")

    if " " in name:
        raise ValidationError("table_name", name, "Contains spaces.")

    if not TABLE_NAME_PATTERN.match(name):
        raise ValidationError(
            "table_name",
            name,
            "Must be 3-255 characters of letters, digits, '_', '-' or '.'.",
        )


def normalize_table_name(name: str) -> str:
    """Validate a table name and return it unchanged."""
    validate_table_name(name)
    return name


def validate_tenant_id(tenant_id: str) -> None:
    """
    Validate a target tenant id.

    Raises:
        ValidationError: If the id is empty, contains the key delimiter,
            or is the reserved global tenant id
    """
    if not tenant_id or not tenant_id.strip():
        raise ValidationError("tenant_id", tenant_id, "Tenant id cannot be empty")
    if DELIMITER in tenant_id:
        raise ValidationError(
            "tenant_id",
            tenant_id,
            f"Contains '{DELIMITER}', which is reserved as the key delimiter.",
        )
    if tenant_id == GLOBAL_TENANT_ID:
        raise ValidationError(
            "tenant_id",
            tenant_id,
            "Reserved for shared lookup records.",
        )
