"""
Main Orchestrator for Vehicle Ledger CSV Interchange

This module ties together all the components and defines the
end-to-end flows for:
1. CSV Import (text → parse → validate → duplicate check → review → submit)
2. CSV Export (storage → filter → render)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing is submitted until the user has seen the preview
- Problems with user data come back as values, never as exceptions
- Every step is audited

This is the "glue" that ensures the system works correctly
even when individual components or collaborators misbehave.
"""

from typing import Optional
from uuid import UUID

import structlog

from vehicle_ledger.audit import AuditLogger, create_correlation_id
from vehicle_ledger.config import ImportSettings, get_settings
from vehicle_ledger.imports import BatchImporter, ProgressCallback
from vehicle_ledger.interchange import (
    export_entries,
    filter_entries,
    parse_csv,
)
from vehicle_ledger.models.entries import (
    DateRange,
    EntryKind,
    ExportFilters,
    ExportSummary,
    ImportPreview,
    ImportResult,
    RowValidationError,
)
from vehicle_ledger.services.storage import (
    EntryStorageInterface,
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsEntryStorage,
    GoogleSheetsVehicleRoster,
    InMemoryEntryStorage,
    InMemoryVehicleRoster,
    VehicleRosterInterface,
)
from vehicle_ledger.validation import DuplicateDetector, EntryValidator

logger = structlog.get_logger(__name__)

FILE_FIELD = "File"


class CsvImportFlow:
    """
    Orchestrates the CSV import flow.

    Flow:
    1. Prepare → load roster, parse, validate, check duplicates
    2. Review → caller shows errors and warnings (PAUSE)
    3. Commit → submit every candidate, one at a time

    Rows with errors never reach the commit phase.
    Duplicate warnings are advisory: flagged rows are still submitted.
    """

    def __init__(
        self,
        roster: VehicleRosterInterface,
        entry_storage: EntryStorageInterface,
        validator: Optional[EntryValidator] = None,
        detector: Optional[DuplicateDetector] = None,
        importer: Optional[BatchImporter] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[ImportSettings] = None,
    ):
        self._settings = settings or get_settings().imports
        self._roster = roster
        self._entry_storage = entry_storage
        self._validator = validator or EntryValidator(self._settings)
        self._detector = detector or DuplicateDetector(self._settings)
        self._importer = importer or BatchImporter(self._settings, audit_logger)
        self._audit_logger = audit_logger

    def _file_error(self, kind: EntryKind, message: str, correlation_id: UUID) -> ImportPreview:
        return ImportPreview(
            kind=kind,
            correlation_id=correlation_id,
            errors=[RowValidationError(row=0, field=FILE_FIELD, message=message)],
        )

    async def prepare_import(
        self,
        csv_text: str,
        kind: EntryKind,
        correlation_id: Optional[UUID] = None,
    ) -> ImportPreview:
        """
        Turn raw CSV text into a reviewable preview.

        Never raises for bad input: oversized files and an unreachable
        vehicle roster become a single file-level error (row 0).

        Returns:
            ImportPreview with candidates, row errors and duplicate warnings
        """
        correlation_id = correlation_id or create_correlation_id()

        size = len(csv_text.encode("utf-8"))
        if size > self._settings.max_upload_size_bytes:
            return self._file_error(
                kind,
                f"File is too large. Maximum size is {self._settings.max_upload_size_mb} MB.",
                correlation_id,
            )

        # Load the roster once for the whole file
        try:
            vehicles = await self._roster.list_vehicles()
        except Exception as e:
            logger.error("roster_unavailable", error=str(e))
            if self._audit_logger:
                await self._audit_logger.log_external_service_error(
                    service="vehicle_roster",
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            return self._file_error(kind, f"Could not load vehicles: {e}", correlation_id)

        parsed = parse_csv(csv_text)
        if self._audit_logger:
            await self._audit_logger.log_csv_parsed(
                entry_kind=kind.value,
                row_count=len(parsed.rows),
                diagnostic_count=parsed.diagnostic_count,
                correlation_id=correlation_id,
            )

        report = self._validator.validate_rows(parsed.rows, kind, vehicles)

        async def audit_duplicate_check_failure(error: Exception) -> None:
            if self._audit_logger:
                await self._audit_logger.log_duplicate_check_failed(
                    entry_kind=kind.value,
                    error_message=str(error),
                    correlation_id=correlation_id,
                )

        warnings = await self._detector.check_for_duplicates(
            report.candidates,
            kind,
            self._entry_storage,
            on_error=audit_duplicate_check_failure,
        )

        if self._audit_logger:
            await self._audit_logger.log_validation_completed(
                entry_kind=kind.value,
                candidate_count=len(report.candidates),
                error_count=report.error_count,
                warning_count=len(warnings),
                correlation_id=correlation_id,
            )

        return ImportPreview(
            kind=kind,
            correlation_id=correlation_id,
            vehicles=vehicles,
            rows_parsed=report.rows_checked,
            candidates=report.candidates,
            errors=report.errors,
            warnings=warnings,
            parse_diagnostics=parsed.diagnostics,
        )

    async def commit_import(
        self,
        preview: ImportPreview,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> ImportResult:
        """
        Submit the candidates of a reviewed preview.

        CRITICAL: This is called ONLY after the user has reviewed the preview.
        """
        correlation_id = preview.correlation_id
        kind = preview.kind.value

        if self._audit_logger:
            await self._audit_logger.log_import_started(
                entry_kind=kind,
                total=len(preview.candidates),
                correlation_id=correlation_id,
            )

        result = await self._importer.import_entries(
            preview.candidates,
            self._entry_storage.create_entry,
            progress_callback=progress_callback,
            roster=preview.vehicles,
            correlation_id=correlation_id,
        )

        if self._audit_logger:
            await self._audit_logger.log_import_completed(
                entry_kind=kind,
                success=result.success,
                failed=result.failed,
                correlation_id=correlation_id,
            )

        return result


class CsvExportFlow:
    """Renders stored entries as CSV files the import flow accepts."""

    def __init__(
        self,
        roster: VehicleRosterInterface,
        entry_storage: EntryStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._roster = roster
        self._entry_storage = entry_storage
        self._audit_logger = audit_logger

    async def export(
        self,
        kind: EntryKind,
        filters: Optional[ExportFilters] = None,
        correlation_id: Optional[UUID] = None,
    ) -> str:
        """
        Export one kind of entry as CSV text.

        Storage failures are audited, then propagate: there is no partial export.
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            vehicles = await self._roster.list_vehicles()
            entries = await self._entry_storage.list_entries(kind)
        except Exception as e:
            logger.error("export_failed", kind=kind.value, error=str(e))
            if self._audit_logger:
                await self._audit_logger.log_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    details={"entry_kind": kind.value},
                    correlation_id=correlation_id,
                )
            raise

        text = export_entries(entries, vehicles, kind, filters)

        if self._audit_logger:
            await self._audit_logger.log_export_completed(
                entry_kind=kind.value,
                entry_count=len(filter_entries(entries, filters)),
                filters=filters.model_dump(mode="json") if filters else {},
                correlation_id=correlation_id,
            )

        return text

    async def summarize(self) -> ExportSummary:
        """Entry counts per kind and the overall date range."""
        counts = {}
        dates = []
        for kind in EntryKind:
            entries = await self._entry_storage.list_entries(kind)
            counts[kind] = len(entries)
            dates.extend(entry.date for entry in entries)

        return ExportSummary(
            total_fuel_entries=counts[EntryKind.FUEL],
            total_expense_entries=counts[EntryKind.EXPENSE],
            total_income_entries=counts[EntryKind.INCOME],
            date_range=DateRange(start=min(dates), end=max(dates)) if dates else None,
        )


def create_app_components(
    use_storage: bool = True,
) -> tuple[CsvImportFlow, CsvExportFlow, Optional[GoogleSheetsClient]]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to initialize Google Sheets storage.
                    Set to False for testing without storage.

    Returns:
        (import_flow, export_flow, sheets_client)
    """
    sheets_client = None
    roster = None
    entry_storage = None
    audit_logger = None

    if use_storage:
        try:
            sheets_client = GoogleSheetsClient()
            roster = GoogleSheetsVehicleRoster(sheets_client)
            entry_storage = GoogleSheetsEntryStorage(sheets_client)
            audit_logger = AuditLogger(GoogleSheetsAuditStorage(sheets_client))
        except Exception as e:
            # Storage not configured - continue without it
            logger.warning("storage_not_configured", error=str(e))
            sheets_client = None
            roster = None
            entry_storage = None

    if roster is None or entry_storage is None:
        roster = InMemoryVehicleRoster()
        entry_storage = InMemoryEntryStorage()
        audit_logger = AuditLogger()  # Local-only logging

    import_flow = CsvImportFlow(
        roster=roster,
        entry_storage=entry_storage,
        audit_logger=audit_logger,
    )

    export_flow = CsvExportFlow(
        roster=roster,
        entry_storage=entry_storage,
        audit_logger=audit_logger,
    )

    return import_flow, export_flow, sheets_client
