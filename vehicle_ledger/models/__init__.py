"""
Data Models Package

This package contains all Pydantic models used in Vehicle Ledger.
Nothing untyped leaves the validator: past that point every record
is one of these schemas.
"""

from vehicle_ledger.models.entries import (
    ENTRY_MODELS,
    CategorizedEntry,
    DateRange,
    DuplicateWarning,
    Entry,
    EntryKind,
    ExpenseEntry,
    ExportFilters,
    ExportSummary,
    FuelEntry,
    ImportCandidate,
    ImportPreview,
    ImportProgress,
    ImportResult,
    IncomeEntry,
    LedgerEntry,
    ParseResult,
    RowImportStatus,
    RowRecord,
    RowValidationError,
    RowValidationResult,
    SubmitOutcome,
    ValidationReport,
    Vehicle,
)
from vehicle_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Entry models
    "ENTRY_MODELS",
    "CategorizedEntry",
    "DateRange",
    "DuplicateWarning",
    "Entry",
    "EntryKind",
    "ExpenseEntry",
    "ExportFilters",
    "ExportSummary",
    "FuelEntry",
    "ImportCandidate",
    "ImportPreview",
    "ImportProgress",
    "ImportResult",
    "IncomeEntry",
    "LedgerEntry",
    "ParseResult",
    "RowImportStatus",
    "RowRecord",
    "RowValidationError",
    "RowValidationResult",
    "SubmitOutcome",
    "ValidationReport",
    "Vehicle",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
