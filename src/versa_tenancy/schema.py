"""DynamoDB schema definitions and key builders."""

from collections.abc import Mapping, Sequence
from typing import Any

from .registry import EntityKeySchema

# Index names
GSI1_NAME = "gsi1pk-gsi1sk-index"  # Secondary access pattern (e.g. customer -> invoices)
GSI2_NAME = "gsi2pk-gsi2sk-index"  # Tenant-wide enumeration of an entity type

# Key attributes
PK = "pk"
SK = "sk"
GSI1PK = "gsi1pk"
GSI1SK = "gsi1sk"
GSI2PK = "gsi2pk"
GSI2SK = "gsi2sk"

# Record metadata attributes
ENTITY_ATTRIBUTE = "__edb_e__"
VERSION_ATTRIBUTE = "__edb_v__"
TENANT_ATTRIBUTE = "organizationId"

# Key tokens
ROOT_TOKEN = "$versa"
DELIMITER = "#"
SEGMENT_SEPARATOR = "_"
ENTITY_VERSION = "1"

# Tenant id owning shared lookup entities
GLOBAL_TENANT_ID = "GLOBAL"
DEFAULT_TENANT_ID = "versa-default"


def attribute_string(item: Mapping[str, Any], name: str, default: str = "") -> str:
    """
    Read an attribute from a DynamoDB attribute map as a string.

    Missing, NULL and non-scalar attributes return ``default`` instead of
    raising, so partially populated legacy records still produce keys.
    """
    value = item.get(name)
    if not isinstance(value, Mapping):
        return default
    if "S" in value:
        return str(value["S"])
    if "N" in value:
        return str(value["N"])
    if "BOOL" in value:
        return "true" if value["BOOL"] else "false"
    return default


def key_segment(name: str, value: str) -> str:
    """Build one ``name_value`` key segment (name is lower-cased)."""
    return f"{name.lower()}{SEGMENT_SEPARATOR}{value}"


def composite_key(prefix: str, segments: Sequence[str]) -> str:
    """Join a prefix token and key segments; bare prefix when there are none."""
    if not segments:
        return prefix
    return DELIMITER.join([prefix, *segments])


def entity_token(entity_type: str) -> str:
    """Build the entity token that prefixes sort keys (e.g. ``$customer_1``)."""
    return f"${entity_type}{SEGMENT_SEPARATOR}{ENTITY_VERSION}"


def tenant_segment(tenant_id: str) -> str:
    """Build the tenant key segment (e.g. ``organizationid_acme``)."""
    return key_segment(TENANT_ATTRIBUTE, tenant_id)


def _segments(attributes: Sequence[str], item: Mapping[str, Any]) -> list[str]:
    return [key_segment(name, attribute_string(item, name)) for name in attributes]


def build_primary_key(config: EntityKeySchema, item: Mapping[str, Any], tenant_id: str) -> str:
    """Build the tenant-scoped partition key for a record."""
    return composite_key(ROOT_TOKEN, [tenant_segment(tenant_id), *_segments(config.pk, item)])


def build_sort_key(config: EntityKeySchema, item: Mapping[str, Any]) -> str:
    """Build the sort key for a record."""
    return composite_key(entity_token(config.entity_type), _segments(config.sk, item))


def build_index1_keys(
    config: EntityKeySchema, item: Mapping[str, Any], tenant_id: str
) -> tuple[str, str] | None:
    """
    Build index 1 keys for a record.

    Returns:
        ``(gsi1pk, gsi1sk)``, or None if the entity type has no index 1
    """
    if config.gsi1_pk is None:
        return None
    gsi1pk = composite_key(ROOT_TOKEN, [tenant_segment(tenant_id), *_segments(config.gsi1_pk, item)])
    gsi1sk = composite_key(entity_token(config.entity_type), _segments(config.gsi1_sk, item))
    return gsi1pk, gsi1sk


def build_index2_keys(
    config: EntityKeySchema, item: Mapping[str, Any], tenant_id: str
) -> tuple[str, str]:
    """Build index 2 keys ``(gsi2pk, gsi2sk)`` for a record."""
    gsi2sk = composite_key(
        entity_token(config.entity_type),
        [tenant_segment(tenant_id), *_segments(config.gsi2_sk, item)],
    )
    return ROOT_TOKEN, gsi2sk


def get_table_definition(table_name: str) -> dict[str, Any]:
    """
    Get the DynamoDB table definition for CreateTable.

    Returns a dictionary suitable for boto3 create_table().
    """
    return {
        "TableName": table_name,
        "BillingMode": "PAY_PER_REQUEST",
        "AttributeDefinitions": [
            {"AttributeName": PK, "AttributeType": "S"},
            {"AttributeName": SK, "AttributeType": "S"},
            {"AttributeName": GSI1PK, "AttributeType": "S"},
            {"AttributeName": GSI1SK, "AttributeType": "S"},
            {"AttributeName": GSI2PK, "AttributeType": "S"},
            {"AttributeName": GSI2SK, "AttributeType": "S"},
        ],
        "KeySchema": [
            {"AttributeName": PK, "KeyType": "HASH"},
            {"AttributeName": SK, "KeyType": "RANGE"},
        ],
        "GlobalSecondaryIndexes": [
            {
                "IndexName": GSI1_NAME,
                "KeySchema": [
                    {"AttributeName": GSI1PK, "KeyType": "HASH"},
                    {"AttributeName": GSI1SK, "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            },
            {
                "IndexName": GSI2_NAME,
                "KeySchema": [
                    {"AttributeName": GSI2PK, "KeyType": "HASH"},
                    {"AttributeName": GSI2SK, "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
    }
