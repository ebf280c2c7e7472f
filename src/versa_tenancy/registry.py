"""
Entity key schema registry.

Declares, for every entity type ever persisted in the single table, which
attributes make up its primary key, sort key and secondary index keys. The
registry is built once at import time and exposed read-only.

Index 1 (``gsi1pk``/``gsi1sk``) only exists for entity types with a natural
secondary access pattern (e.g. customers by status, properties by customer).
Index 2 (``gsi2pk``/``gsi2sk``) exists for every type and enumerates all
records of a type within a tenant.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class EntityKeySchema:
    """
    Key layout for one entity type.

    Attributes:
        entity_type: Discriminator value stored in ``__edb_e__``
        pk: Attributes appended to the primary key after the tenant segment
        sk: Attributes appended to the sort key after the entity token
        gsi1_pk: Attributes of the index 1 partition key, or None when the
            entity type has no index 1
        gsi1_sk: Attributes of the index 1 sort key
        gsi2_sk: Attributes of the index 2 sort key after the tenant segment
    """

    entity_type: str
    pk: tuple[str, ...]
    sk: tuple[str, ...] = ()
    gsi1_pk: tuple[str, ...] | None = None
    gsi1_sk: tuple[str, ...] = ()
    gsi2_sk: tuple[str, ...] = ()

    @property
    def has_index1(self) -> bool:
        """True if records of this type are written to index 1."""
        return self.gsi1_pk is not None


# Lookup entities owned by every tenant
SHARED_ENTITY_TYPES: frozenset[str] = frozenset({"propertyType", "serviceType", "costType"})

_SCHEMAS: tuple[EntityKeySchema, ...] = (
    # Lookup entities
    EntityKeySchema("propertyType", pk=("propertyTypeId",), gsi2_sk=("propertyTypeId",)),
    EntityKeySchema("serviceType", pk=("serviceTypeId",), gsi2_sk=("serviceTypeId",)),
    EntityKeySchema("costType", pk=("costTypeId",), gsi2_sk=("costTypeId",)),
    # Core entities
    EntityKeySchema(
        "customer",
        pk=("customerId",),
        gsi1_pk=("status",),
        gsi1_sk=("customerId",),
        gsi2_sk=("customerId",),
    ),
    EntityKeySchema(
        "account",
        pk=("accountId",),
        gsi1_pk=("customerId",),
        gsi1_sk=("accountId",),
        gsi2_sk=("accountId",),
    ),
    EntityKeySchema(
        "delegate",
        pk=("delegateId",),
        gsi1_pk=("accountId",),
        gsi1_sk=("delegateId",),
        gsi2_sk=("delegateId",),
    ),
    EntityKeySchema(
        "property",
        pk=("propertyId",),
        gsi1_pk=("customerId",),
        gsi1_sk=("propertyId",),
        gsi2_sk=("propertyId",),
    ),
    # Plan entities
    EntityKeySchema(
        "plan",
        pk=("planId",),
        gsi1_pk=(),
        gsi1_sk=("planId",),
        gsi2_sk=("planId",),
    ),
    EntityKeySchema(
        "planService",
        pk=("planId",),
        sk=("serviceTypeId",),
        gsi2_sk=("planId",),
    ),
    # Property service entities
    EntityKeySchema(
        "propertyService",
        pk=("serviceId",),
        gsi1_pk=("propertyId",),
        gsi1_sk=("serviceId",),
        gsi2_sk=("serviceId",),
    ),
    EntityKeySchema(
        "cost",
        pk=("costId",),
        gsi1_pk=("serviceId",),
        gsi1_sk=("costId",),
        gsi2_sk=("costId",),
    ),
    # Employee entities
    EntityKeySchema(
        "employee",
        pk=("employeeId",),
        gsi1_pk=("status",),
        gsi1_sk=("employeeId",),
        gsi2_sk=("employeeId",),
    ),
    EntityKeySchema(
        "servicer",
        pk=("servicerId",),
        gsi1_pk=("employeeId",),
        gsi1_sk=("servicerId",),
        gsi2_sk=("servicerId",),
    ),
    EntityKeySchema(
        "capability",
        pk=("capabilityId",),
        gsi1_pk=("employeeId",),
        gsi1_sk=("capabilityId",),
        gsi2_sk=("capabilityId",),
    ),
    EntityKeySchema(
        "serviceSchedule",
        pk=("serviceScheduleId",),
        gsi1_pk=("servicerId",),
        gsi1_sk=("scheduledDate",),
        gsi2_sk=("serviceScheduleId",),
    ),
    # Billing entities
    EntityKeySchema(
        "invoice",
        pk=("invoiceId",),
        gsi1_pk=("customerId",),
        gsi1_sk=("invoiceDate",),
        gsi2_sk=("invoiceId",),
    ),
    EntityKeySchema(
        "paymentMethod",
        pk=("paymentMethodId",),
        gsi1_pk=("customerId",),
        gsi1_sk=("paymentMethodId",),
        gsi2_sk=("paymentMethodId",),
    ),
    EntityKeySchema(
        "invoiceSchedule",
        pk=("invoiceScheduleId",),
        gsi1_pk=("customerId",),
        gsi1_sk=("invoiceScheduleId",),
        gsi2_sk=("invoiceScheduleId",),
    ),
    # Payroll entities
    EntityKeySchema(
        "pay",
        pk=("payId",),
        gsi1_pk=("employeeId",),
        gsi1_sk=("payId",),
        gsi2_sk=("payId",),
    ),
    EntityKeySchema(
        "paySchedule",
        pk=("payScheduleId",),
        gsi1_pk=(),
        gsi1_sk=("payScheduleId",),
        gsi2_sk=("payScheduleId",),
    ),
)

ENTITY_SCHEMAS: Mapping[str, EntityKeySchema] = MappingProxyType(
    {schema.entity_type: schema for schema in _SCHEMAS}
)


def get_entity_schema(entity_type: str | None) -> EntityKeySchema | None:
    """Look up the key schema for an entity type (None if unregistered)."""
    if not entity_type:
        return None
    return ENTITY_SCHEMAS.get(entity_type)


def registered_entity_types() -> tuple[str, ...]:
    """Get all registered entity types in declaration order."""
    return tuple(schema.entity_type for schema in _SCHEMAS)
