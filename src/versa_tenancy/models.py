"""Core models for versa-tenancy."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from . import schema
from .exceptions import RecordDecodeError


class Outcome(str, Enum):
    """Terminal outcome of migrating one scanned item."""

    SKIPPED_NO_ENTITY = "skipped_no_entity"
    SKIPPED_TENANT_SCOPED = "skipped_tenant_scoped"
    SKIPPED_UNKNOWN_TYPE = "skipped_unknown_type"
    MIGRATED = "migrated"
    FAILED = "failed"

    @property
    def is_skip(self) -> bool:
        """True for the three classification skips."""
        return self.value.startswith("skipped_")


@dataclass(frozen=True)
class EntityRecord:
    """
    A scanned item decoded once from its DynamoDB attribute map.

    ``entity_type`` is the discriminator; ``attributes`` keeps the raw
    attribute map so business attributes are written back untouched.
    """

    entity_type: str | None
    tenant_id: str | None
    pk: str
    sk: str
    attributes: Mapping[str, Any]
    has_tenant: bool = False

    @classmethod
    def from_item(cls, item: Any) -> "EntityRecord":
        """
        Decode a raw scanned item.

        Raises:
            RecordDecodeError: If the item is not an attribute map
        """
        if not isinstance(item, Mapping):
            raise RecordDecodeError(item, f"expected attribute map, got {type(item).__name__}")

        entity_type = schema.attribute_string(item, schema.ENTITY_ATTRIBUTE) or None
        tenant_attr = item.get(schema.TENANT_ATTRIBUTE)
        present = isinstance(tenant_attr, Mapping) and "NULL" not in tenant_attr
        tenant_id = schema.attribute_string(item, schema.TENANT_ATTRIBUTE) if present else None
        # Any non-NULL value marks the record as migrated, except an empty string.
        has_tenant = present and tenant_attr != {"S": ""}
        return cls(
            entity_type=entity_type,
            tenant_id=tenant_id,
            pk=schema.attribute_string(item, schema.PK),
            sk=schema.attribute_string(item, schema.SK),
            attributes=item,
            has_tenant=has_tenant,
        )

    @property
    def legacy_key(self) -> dict[str, Any]:
        """Primary key of the record as stored, in DynamoDB format."""
        return {
            schema.PK: self.attributes[schema.PK],
            schema.SK: self.attributes[schema.SK],
        }


@dataclass
class MigrationReport:
    """
    Aggregated result of one migration run.

    Attributes:
        scanned: Items read from the table
        migrated: Items rewritten to the tenant-scoped format
        skipped: Items left untouched (no entity, already scoped, unknown type)
        errors: One message per item whose transaction failed, in scan order
    """

    scanned: int = 0
    migrated: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        """True if no item failed."""
        return not self.errors

    def record(self, outcome: Outcome, error: str | None = None) -> None:
        """Account for one item's terminal outcome."""
        self.scanned += 1
        if outcome is Outcome.MIGRATED:
            self.migrated += 1
        elif outcome.is_skip:
            self.skipped += 1
        else:
            self.errors.append(error or "Unknown migration failure")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "scanned": self.scanned,
            "migrated": self.migrated,
            "skipped": self.skipped,
            "errors": list(self.errors),
        }
