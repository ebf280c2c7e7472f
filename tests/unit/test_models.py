"""Tests for record decoding and the migration report."""

import json

import pytest

from versa_tenancy.exceptions import RecordDecodeError
from versa_tenancy.models import EntityRecord, MigrationReport, Outcome
from tests.fixtures.repositories import legacy_item


class TestEntityRecord:
    """Tests for EntityRecord.from_item."""

    def test_decodes_legacy_item(self):
        item = legacy_item(
            "customer",
            {"customerId": "cust-123", "status": "active"},
            "$versa#customerid_cust-123",
            "$customer_1",
        )
        record = EntityRecord.from_item(item)

        assert record.entity_type == "customer"
        assert record.tenant_id is None
        assert record.pk == "$versa#customerid_cust-123"
        assert record.sk == "$customer_1"
        assert record.attributes is item

    def test_missing_discriminator(self):
        record = EntityRecord.from_item({"pk": {"S": "p"}, "sk": {"S": "s"}})
        assert record.entity_type is None

    def test_null_tenant_is_absent(self):
        item = legacy_item("customer", {"organizationId": {"NULL": True}}, "p", "s")
        assert EntityRecord.from_item(item).tenant_id is None

    def test_legacy_key(self):
        record = EntityRecord.from_item(legacy_item("customer", {}, "p1", "s1"))
        assert record.legacy_key == {"pk": {"S": "p1"}, "sk": {"S": "s1"}}

    def test_rejects_non_mapping(self):
        with pytest.raises(RecordDecodeError, match="expected attribute map"):
            EntityRecord.from_item(["not", "a", "map"])


class TestMigrationReport:
    """Tests for MigrationReport accumulation."""

    def test_starts_empty(self):
        report = MigrationReport()
        assert report.to_dict() == {"scanned": 0, "migrated": 0, "skipped": 0, "errors": []}
        assert report.succeeded

    def test_record_outcomes(self):
        report = MigrationReport()
        report.record(Outcome.MIGRATED)
        report.record(Outcome.SKIPPED_NO_ENTITY)
        report.record(Outcome.SKIPPED_TENANT_SCOPED)
        report.record(Outcome.SKIPPED_UNKNOWN_TYPE)
        report.record(Outcome.FAILED, "boom")

        assert report.scanned == 5
        assert report.migrated == 1
        assert report.skipped == 3
        assert report.errors == ["boom"]
        assert not report.succeeded

    def test_to_dict_is_json_serializable(self):
        report = MigrationReport()
        report.record(Outcome.FAILED, "Failed to migrate customer (pk: x): err")
        payload = json.loads(json.dumps(report.to_dict()))
        assert payload["errors"] == ["Failed to migrate customer (pk: x): err"]

    def test_to_dict_copies_errors(self):
        report = MigrationReport()
        report.to_dict()["errors"].append("mutated")
        assert report.errors == []

    @pytest.mark.parametrize("outcome", list(Outcome))
    def test_every_outcome_lands_in_one_counter(self, outcome):
        report = MigrationReport()
        report.record(outcome, "boom")
        counted = report.migrated + report.skipped + len(report.errors)
        assert (report.scanned, counted) == (1, 1)
        assert (report.skipped == 1) == outcome.is_skip

    def test_outcome_is_skip(self):
        assert Outcome.SKIPPED_UNKNOWN_TYPE.is_skip
        assert not Outcome.MIGRATED.is_skip
        assert not Outcome.FAILED.is_skip
