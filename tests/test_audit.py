"""Tests for audit events and the audit logger."""

from uuid import uuid4

import pytest

from vehicle_ledger.audit import AuditLogger, create_correlation_id
from vehicle_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from vehicle_ledger.services.storage import AuditStorageInterface, InMemoryAuditStorage


class BrokenAuditStorage(AuditStorageInterface):
    async def append_event(self, event):
        raise RuntimeError("audit sheet deleted")

    async def get_events_by_correlation_id(self, correlation_id):
        return []


class TestAuditEvents:
    """AuditEvent and AuditEventBuilder."""

    def test_sheets_row_has_nine_columns(self):
        event = AuditEventBuilder.csv_parsed("fuel", 12, 0, uuid4())

        row = event.to_sheets_row()

        assert len(row) == 9
        assert row[2] == "csv_parsed"
        assert row[4] == "fuel"

    def test_log_dict_is_serializable(self):
        event = AuditEventBuilder.system_error("ValueError", "bad", {"row": 3})

        log_dict = event.to_log_dict()

        assert log_dict["event_type"] == "system_error"
        assert log_dict["severity"] == "error"
        assert log_dict["correlation_id"] is None

    def test_severity_follows_outcome(self):
        clean = AuditEventBuilder.import_completed("expense", 5, 0, uuid4())
        partial = AuditEventBuilder.import_completed("expense", 4, 1, uuid4())

        assert clean.severity == AuditSeverity.INFO
        assert partial.severity == AuditSeverity.WARNING
        assert partial.description == "Import completed: 4 imported, 1 failed"

    def test_csv_parsed_with_diagnostics_is_a_warning(self):
        event = AuditEventBuilder.csv_parsed("income", 3, 2, uuid4())

        assert event.severity == AuditSeverity.WARNING
        assert event.details == {"row_count": 3, "diagnostic_count": 2}


class TestAuditLogger:
    """Local logging plus optional persistence."""

    @pytest.mark.asyncio
    async def test_persists_events(self):
        storage = InMemoryAuditStorage()
        audit_logger = AuditLogger(storage)
        correlation_id = create_correlation_id()

        await audit_logger.log_import_started("fuel", 3, correlation_id)
        await audit_logger.log_row_import_failed("fuel", 2, "Row 2: bad", correlation_id)
        await audit_logger.log_import_completed("fuel", 2, 1, correlation_id)

        events = await storage.get_events_by_correlation_id(correlation_id)
        assert [e.event_type for e in events] == [
            AuditEventType.IMPORT_STARTED,
            AuditEventType.ROW_IMPORT_FAILED,
            AuditEventType.IMPORT_COMPLETED,
        ]

    @pytest.mark.asyncio
    async def test_without_storage_logs_locally(self):
        event = AuditEvent(event_type=AuditEventType.EXPORT_COMPLETED, description="done")

        assert await AuditLogger().log(event) is True

    @pytest.mark.asyncio
    async def test_storage_failure_does_not_raise(self):
        audit_logger = AuditLogger(BrokenAuditStorage())

        event = AuditEventBuilder.external_service_error("vehicle_roster", "timeout", None)

        assert await audit_logger.log(event) is False

    def test_correlation_ids_are_unique(self):
        assert create_correlation_id() != create_correlation_id()
