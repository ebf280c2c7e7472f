"""Tenant resolution for migrated records."""

from collections.abc import Set

from .models import EntityRecord
from .registry import SHARED_ENTITY_TYPES
from .schema import GLOBAL_TENANT_ID


def resolve_tenant_id(
    entity_type: str,
    target_tenant_id: str,
    shared_types: Set[str] = SHARED_ENTITY_TYPES,
) -> str:
    """
    Decide which tenant owns a record of the given entity type.

    Shared lookup types belong to the global tenant; everything else
    belongs to the migration target tenant.
    """
    if entity_type in shared_types:
        return GLOBAL_TENANT_ID
    return target_tenant_id


def is_tenant_scoped(record: EntityRecord) -> bool:
    """
    True if the record already carries an ``organizationId``.

    Any non-NULL value counts, whatever its type, except an empty string:
    such records never had a tenant assigned and are migrated like any
    legacy record.
    """
    return record.has_tenant
