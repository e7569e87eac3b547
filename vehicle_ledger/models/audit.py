"""
Audit Models for Vehicle Ledger

Every import and export leaves a trail of events.
This provides:
1. Traceability of what was imported, from which file, and what failed
2. Debugging information when a batch partially fails
3. A record the user can consult after the fact

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Each stage of the interchange pipeline has its own event type.
    """
    # Import pipeline
    CSV_PARSED = "csv_parsed"
    VALIDATION_COMPLETED = "validation_completed"
    DUPLICATE_CHECK_FAILED = "duplicate_check_failed"
    IMPORT_STARTED = "import_started"
    ROW_IMPORT_FAILED = "row_import_failed"
    IMPORT_COMPLETED = "import_completed"

    # Export
    EXPORT_COMPLETED = "export_completed"

    # System events
    SYSTEM_ERROR = "system_error"
    EXTERNAL_SERVICE_ERROR = "external_service_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Which entry kind the event is about (fuel / expense / income)
    entry_kind: Optional[str] = Field(
        default=None,
        description="Entry kind being imported or exported"
    )

    # Correlation - ties together the events of one import
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., all events in one import)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )

    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entry_kind": self.entry_kind,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }

    def to_sheets_row(self) -> list:
        """
        Convert to a row suitable for Google Sheets storage.

        Returns columns in order:
        [event_id, timestamp, event_type, severity, entry_kind,
         correlation_id, description, details_json, error_message]
        """
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.entry_kind or "",
            str(self.correlation_id) if self.correlation_id else "",
            self.description,
            json.dumps(self.details) if self.details else "",
            self.error_message or "",
        ]


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.csv_parsed("fuel", 12, 0, correlation_id)
        event = AuditEventBuilder.import_completed("fuel", 11, 1, correlation_id)
    """

    @staticmethod
    def csv_parsed(
        entry_kind: str,
        row_count: int,
        diagnostic_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CSV_PARSED,
            severity=AuditSeverity.WARNING if diagnostic_count else AuditSeverity.INFO,
            entry_kind=entry_kind,
            correlation_id=correlation_id,
            description=f"CSV parsed: {row_count} rows",
            details={
                "row_count": row_count,
                "diagnostic_count": diagnostic_count,
            },
        )

    @staticmethod
    def validation_completed(
        entry_kind: str,
        candidate_count: int,
        error_count: int,
        warning_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_COMPLETED,
            severity=AuditSeverity.WARNING if error_count else AuditSeverity.INFO,
            entry_kind=entry_kind,
            correlation_id=correlation_id,
            description=(
                f"Validation completed: {candidate_count} valid, "
                f"{error_count} errors"
            ),
            details={
                "candidate_count": candidate_count,
                "error_count": error_count,
                "warning_count": warning_count,
            },
        )

    @staticmethod
    def duplicate_check_failed(
        entry_kind: str,
        error_message: str,
        correlation_id: Optional[UUID]
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DUPLICATE_CHECK_FAILED,
            severity=AuditSeverity.WARNING,
            entry_kind=entry_kind,
            correlation_id=correlation_id,
            description="Could not check for duplicates; continuing without warnings",
            error_message=error_message,
        )

    @staticmethod
    def import_started(
        entry_kind: str,
        total: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_STARTED,
            entry_kind=entry_kind,
            correlation_id=correlation_id,
            description=f"Import started: {total} entries",
            details={"total": total},
        )

    @staticmethod
    def row_import_failed(
        entry_kind: str,
        row: int,
        error_message: str,
        correlation_id: Optional[UUID]
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ROW_IMPORT_FAILED,
            severity=AuditSeverity.WARNING,
            entry_kind=entry_kind,
            correlation_id=correlation_id,
            description=f"Row {row} failed to import",
            details={"row": row},
            error_message=error_message,
        )

    @staticmethod
    def import_completed(
        entry_kind: str,
        success: int,
        failed: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_COMPLETED,
            severity=AuditSeverity.WARNING if failed else AuditSeverity.INFO,
            entry_kind=entry_kind,
            correlation_id=correlation_id,
            description=f"Import completed: {success} imported, {failed} failed",
            details={
                "success": success,
                "failed": failed,
            },
        )

    @staticmethod
    def export_completed(
        entry_kind: str,
        entry_count: int,
        filters: dict,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_COMPLETED,
            entry_kind=entry_kind,
            correlation_id=correlation_id,
            description=f"Exported {entry_count} {entry_kind} entries",
            details={
                "entry_count": entry_count,
                "filters": filters,
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )

    @staticmethod
    def external_service_error(
        service: str,
        error_message: str,
        correlation_id: Optional[UUID]
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTERNAL_SERVICE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"External service error: {service}",
            error_message=error_message,
            details={
                "service": service,
            },
            correlation_id=correlation_id,
        )
