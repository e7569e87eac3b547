"""
Audit Logger

DESIGN DECISION: Every import and export is logged.
This provides:
1. A trail of what each CSV file did to the ledger
2. The reason behind every failed row
3. Debugging capability when a batch only partly succeeds

The audit logger:
- Is async so it fits into the import flow without blocking it
- Gracefully handles failures (a broken audit sheet never fails an import)
- Supports correlation IDs to tie together the events of one import
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from vehicle_ledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from vehicle_ledger.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. The audit storage backend (for persistence), when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_csv_parsed(
        self,
        entry_kind: str,
        row_count: int,
        diagnostic_count: int,
        correlation_id: UUID,
    ) -> None:
        """Log the outcome of parsing an uploaded file."""
        await self.log(AuditEventBuilder.csv_parsed(
            entry_kind=entry_kind,
            row_count=row_count,
            diagnostic_count=diagnostic_count,
            correlation_id=correlation_id,
        ))

    async def log_validation_completed(
        self,
        entry_kind: str,
        candidate_count: int,
        error_count: int,
        warning_count: int,
        correlation_id: UUID,
    ) -> None:
        """Log the validation and duplicate check summary."""
        await self.log(AuditEventBuilder.validation_completed(
            entry_kind=entry_kind,
            candidate_count=candidate_count,
            error_count=error_count,
            warning_count=warning_count,
            correlation_id=correlation_id,
        ))

    async def log_duplicate_check_failed(
        self,
        entry_kind: str,
        error_message: str,
        correlation_id: Optional[UUID],
    ) -> None:
        await self.log(AuditEventBuilder.duplicate_check_failed(
            entry_kind=entry_kind,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    async def log_import_started(
        self,
        entry_kind: str,
        total: int,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.import_started(
            entry_kind=entry_kind,
            total=total,
            correlation_id=correlation_id,
        ))

    async def log_row_import_failed(
        self,
        entry_kind: str,
        row: int,
        error_message: str,
        correlation_id: Optional[UUID],
    ) -> None:
        """Log a single row the entry service refused or could not reach."""
        await self.log(AuditEventBuilder.row_import_failed(
            entry_kind=entry_kind,
            row=row,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    async def log_import_completed(
        self,
        entry_kind: str,
        success: int,
        failed: int,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.import_completed(
            entry_kind=entry_kind,
            success=success,
            failed=failed,
            correlation_id=correlation_id,
        ))

    async def log_export_completed(
        self,
        entry_kind: str,
        entry_count: int,
        filters: dict,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.export_completed(
            entry_kind=entry_kind,
            entry_count=entry_count,
            filters=filters,
            correlation_id=correlation_id,
        ))

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        await self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))

    async def log_external_service_error(
        self,
        service: str,
        error_message: str,
        correlation_id: Optional[UUID],
    ) -> None:
        """Log external service error."""
        await self.log(AuditEventBuilder.external_service_error(
            service=service,
            error_message=error_message,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., one CSV import).
    Pass it through all subsequent operations.
    """
    return uuid4()
