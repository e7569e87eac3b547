"""
Core Data Models for Vehicle Ledger

These models define the strict schemas for everything that flows through
the CSV interchange pipeline. They are designed to:
1. Keep untyped CSV rows from leaking past the validator
2. Provide a closed set of entry kinds
3. Be serializable for storage and logging
4. Make partial failure visible in return values, not exceptions

DESIGN DECISION: Money, distances and volumes are Decimal.
A value exported as "45.50" must come back as exactly 45.50.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Optional, TypeAlias, Union
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# A parsed CSV row keyed by header name. Ephemeral: lives for one import.
RowRecord: TypeAlias = dict[str, str]

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class EntryKind(str, Enum):
    """The three kinds of entries a user can log against a vehicle."""
    FUEL = "fuel"
    EXPENSE = "expense"
    INCOME = "income"


class RowImportStatus(str, Enum):
    """
    Lifecycle of a single row during a batch import.

    pending -> submitted -> succeeded | failed
    """
    PENDING = "pending"
    SUBMITTED = "submitted"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


# =============================================================================
# VEHICLES & ENTRIES
# =============================================================================

class Vehicle(BaseModel):
    """
    A vehicle from the user's roster.

    Only the identity and display name matter to the interchange pipeline.
    The name is the key used in CSV files.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1, description="Vehicle identifier")
    name: str = Field(..., min_length=1, max_length=200, description="Display name")


class LedgerEntry(BaseModel):
    """Fields shared by every entry kind."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[str] = Field(
        default=None,
        description="Storage identifier (set once persisted)"
    )
    vehicle_id: str = Field(
        ...,
        min_length=1,
        description="Resolved vehicle identifier"
    )
    currency: str = Field(
        default="HKD",
        min_length=1,
        max_length=10,
    )
    date: dt.date = Field(
        ...,
        description="Calendar date of the entry"
    )
    notes: str = Field(default="", max_length=2000)


class FuelEntry(LedgerEntry):
    """A fuel fill-up."""

    kind: Literal["fuel"] = "fuel"

    fuel_company: str = ""
    fuel_type: str = ""
    mileage: Decimal = Field(..., description="Odometer reading")
    distance_unit: str = "km"
    volume: Decimal = Field(..., description="Volume of fuel purchased")
    volume_unit: str = "liters"
    cost: Decimal = Field(..., description="Total cost of the fill-up")
    time: str = Field(default="12:00", pattern=TIME_PATTERN)
    location: str = ""
    partial_fuel_up: bool = False
    payment_type: str = ""
    tyre_pressure: Decimal = Decimal("0")
    tyre_pressure_unit: str = "psi"
    tags: list[str] = Field(default_factory=list)

    @field_validator('tags')
    @classmethod
    def drop_blank_tags(cls, v: list[str]) -> list[str]:
        """Tags are trimmed and blank tags are discarded."""
        return [tag.strip() for tag in v if tag and tag.strip()]


class CategorizedEntry(LedgerEntry):
    """Base for entries that carry a category and an amount."""

    category: str = Field(..., min_length=1, max_length=100)
    amount: Decimal = Field(...)


class ExpenseEntry(CategorizedEntry):
    """Money spent on a vehicle (service, parking, insurance...)."""

    kind: Literal["expense"] = "expense"


class IncomeEntry(CategorizedEntry):
    """Money earned with a vehicle (ride sharing, deliveries...)."""

    kind: Literal["income"] = "income"


Entry = Annotated[
    Union[FuelEntry, ExpenseEntry, IncomeEntry],
    Field(discriminator="kind"),
]

ENTRY_MODELS: dict[EntryKind, type[LedgerEntry]] = {
    EntryKind.FUEL: FuelEntry,
    EntryKind.EXPENSE: ExpenseEntry,
    EntryKind.INCOME: IncomeEntry,
}


class ImportCandidate(BaseModel):
    """
    A validated entry together with the CSV row it came from.

    The row number travels with the entry so warnings and submission
    failures can point the user at the right line of their file.
    """

    row: int = Field(..., ge=1, description="1-based data row number")
    entry: Entry


# =============================================================================
# PARSING & VALIDATION MODELS
# =============================================================================

class ParseResult(BaseModel):
    """Output of the record parser. Never an exception."""

    rows: list[RowRecord] = Field(default_factory=list)
    diagnostics: list[str] = Field(
        default_factory=list,
        description="Non-fatal problems noticed while parsing"
    )

    @property
    def diagnostic_count(self) -> int:
        return len(self.diagnostics)


class RowValidationError(BaseModel):
    """
    A single problem with a single field of a single row.

    Row 0 is reserved for file-level problems (e.g. roster unavailable).
    """

    row: int = Field(..., ge=0, description="1-based row number")
    field: str = Field(..., description="CSV column name")
    message: str = Field(..., description="Human-readable description")
    value: str = Field(default="", description="Original cell value")


class RowValidationResult(BaseModel):
    """
    Result of validating one row.

    If there is any error, entry is None. We never return a best-effort
    entry built from a malformed row.
    """

    entry: Optional[Entry] = None
    errors: list[RowValidationError] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.entry is not None and not self.errors


class ValidationReport(BaseModel):
    """Result of validating every row of a parsed file."""

    rows_checked: int = Field(default=0, ge=0)
    candidates: list[ImportCandidate] = Field(default_factory=list)
    errors: list[RowValidationError] = Field(default_factory=list)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def rows_with_errors(self) -> list[int]:
        """Sorted, de-duplicated row numbers that have at least one error."""
        return sorted({error.row for error in self.errors})


class DuplicateWarning(BaseModel):
    """
    Advisory notice that a candidate looks like an existing entry.

    Warnings never remove a candidate from the import.
    """

    row: int = Field(..., ge=1)
    message: str
    existing_entry: str = Field(
        ...,
        description="Short summary of the matching persisted entry"
    )


class ImportPreview(BaseModel):
    """
    Everything the user needs to review before committing an import.

    Produced by the prepare phase; consumed by the commit phase.
    """

    kind: EntryKind
    correlation_id: UUID = Field(
        default_factory=uuid4,
        description="Ties the prepare and commit audit events together"
    )
    vehicles: list[Vehicle] = Field(
        default_factory=list,
        description="Roster snapshot the rows were validated against"
    )
    rows_parsed: int = Field(default=0, ge=0)
    candidates: list[ImportCandidate] = Field(default_factory=list)
    errors: list[RowValidationError] = Field(default_factory=list)
    warnings: list[DuplicateWarning] = Field(default_factory=list)
    parse_diagnostics: list[str] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    @property
    def can_import(self) -> bool:
        return len(self.candidates) > 0


# =============================================================================
# BATCH IMPORT MODELS
# =============================================================================

class SubmitOutcome(BaseModel):
    """What the persistence collaborator says about one submission."""

    success: bool
    entry_id: Optional[str] = None
    error: Optional[str] = None


class ImportProgress(BaseModel):
    """Progress snapshot reported after every row."""

    percent_complete: int = Field(..., ge=0, le=100)
    current_item_label: str
    processed: int = Field(..., ge=0)
    total: int = Field(..., ge=0)


class ImportResult(BaseModel):
    """
    Terminal tally of a batch import.

    errors is None (not an empty tuple) when nothing failed, so the
    success path is a single `result.errors is None` check.
    """
    model_config = ConfigDict(frozen=True)

    success: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)
    errors: Optional[tuple[str, ...]] = None

    @field_validator('errors')
    @classmethod
    def empty_errors_are_omitted(cls, v: Optional[tuple[str, ...]]) -> Optional[tuple[str, ...]]:
        return v or None

    @property
    def total(self) -> int:
        return self.success + self.failed


# =============================================================================
# EXPORT MODELS
# =============================================================================

class ExportFilters(BaseModel):
    """
    Optional predicates applied before rendering an export.

    Category only applies to expense and income exports.
    """

    vehicle_id: Optional[str] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    category: Optional[str] = None

    @model_validator(mode='after')
    def validate_range(self) -> 'ExportFilters':
        """Validate date relationships."""
        if self.start_date and self.end_date:
            if self.end_date < self.start_date:
                raise ValueError("End date cannot be before start date")
        return self


class DateRange(BaseModel):
    start: dt.date
    end: dt.date


class ExportSummary(BaseModel):
    """Counts shown before the user picks what to export."""

    total_fuel_entries: int = Field(default=0, ge=0)
    total_expense_entries: int = Field(default=0, ge=0)
    total_income_entries: int = Field(default=0, ge=0)
    date_range: Optional[DateRange] = None

    @property
    def total_entries(self) -> int:
        return (
            self.total_fuel_entries
            + self.total_expense_entries
            + self.total_income_entries
        )
