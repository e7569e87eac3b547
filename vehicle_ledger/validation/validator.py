"""
Row Validation for CSV Imports

DESIGN DECISION: Every rule runs on every row, independently.
A row with three problems produces three errors, so the user can fix
the whole row in one pass instead of discovering problems one at a time.

Rules:
- REQUIRED FIELDS: a fixed list per entry kind; blank counts as missing
- NUMBERS: populated numeric cells must be finite numbers
- DATES: YYYY-MM-DD and a real calendar date
- TIMES: optional, HH:MM when present
- VEHICLE: the Car Name must match a vehicle in the roster

IMPORTANT: If a row has any error, no entry is produced for it.
We never import a best-effort guess of a malformed row.
"""

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from pydantic import ValidationError

from vehicle_ledger.config import ImportSettings, get_settings
from vehicle_ledger.interchange import columns as col
from vehicle_ledger.models.entries import (
    ENTRY_MODELS,
    Entry,
    EntryKind,
    FuelEntry,
    ImportCandidate,
    RowRecord,
    RowValidationError,
    RowValidationResult,
    ValidationReport,
    Vehicle,
)
from vehicle_ledger.validation.resolver import resolve_vehicle


NUMBER_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")

# Numbers beyond this decimal exponent (either sign) are rejected
MAX_NUMBER_EXPONENT = 15

VEHICLE_NOT_FOUND = "Vehicle not found. Please create the vehicle first."
INVALID_DATE = "Date must be in valid format (YYYY-MM-DD)"
INVALID_TIME = "Time must be in valid format (HH:MM)"

# Model field -> CSV column, for reporting model-level rejections
FIELD_COLUMNS = {
    "vehicle_id": col.CAR_NAME,
    "date": col.DATE,
    "time": col.TIME,
    "fuel_company": col.FUEL_COMPANY,
    "fuel_type": col.FUEL_TYPE,
    "mileage": col.MILEAGE,
    "distance_unit": col.DISTANCE_UNIT,
    "volume": col.VOLUME,
    "volume_unit": col.VOLUME_UNIT,
    "cost": col.COST,
    "currency": col.CURRENCY,
    "location": col.LOCATION,
    "partial_fuel_up": col.PARTIAL_FUEL_UP,
    "payment_type": col.PAYMENT_TYPE,
    "tyre_pressure": col.TYRE_PRESSURE,
    "tyre_pressure_unit": col.TYRE_PRESSURE_UNIT,
    "tags": col.TAGS,
    "notes": col.NOTES,
    "category": col.CATEGORY,
    "amount": col.AMOUNT,
}


def parse_number(value: str) -> Optional[Decimal]:
    """Parse a plain decimal number. Returns None if it isn't one."""
    if not value or not NUMBER_PATTERN.match(value.strip()):
        return None
    try:
        number = Decimal(value.strip())
    except InvalidOperation:
        return None
    if not number.is_finite() or abs(number.adjusted()) > MAX_NUMBER_EXPONENT:
        return None
    return number


def parse_date(value: str) -> Optional[date]:
    """Parse YYYY-MM-DD. Returns None for bad syntax or impossible dates."""
    if not value or not DATE_PATTERN.match(value.strip()):
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def parse_time(value: str) -> Optional[str]:
    """Parse H:MM or HH:MM into zero-padded HH:MM."""
    match = TIME_PATTERN.match(value.strip()) if value else None
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return f"{hours:02d}:{minutes:02d}"


def parse_flag(value: str) -> bool:
    """Yes/True (any case) means True; anything else is False."""
    return value.strip().lower() in col.TRUE_TOKENS if value else False


def parse_tags(value: str) -> list[str]:
    """Split a semicolon-separated tag cell, dropping blanks."""
    if not value:
        return []
    return [tag.strip() for tag in value.split(col.TAG_SEPARATOR) if tag.strip()]


class EntryValidator:
    """
    Validates parsed CSV rows and turns them into typed entries.

    The roster is supplied per call; the validator never loads it.
    """

    def __init__(self, settings: Optional[ImportSettings] = None):
        self._settings = settings or get_settings().imports

    def _error(self, row_number: int, field: str, message: str, value: str) -> RowValidationError:
        return RowValidationError(
            row=row_number,
            field=field,
            message=message,
            value=value or "",
        )

    def _check_required(
        self,
        row: RowRecord,
        row_number: int,
        kind: EntryKind,
    ) -> list[RowValidationError]:
        errors = []
        for field in col.REQUIRED_COLUMNS[kind]:
            value = row.get(field) or ""
            if not value.strip():
                errors.append(self._error(row_number, field, f"{field} is required", value))
        return errors

    def _check_vehicle(
        self,
        row: RowRecord,
        row_number: int,
        roster: list[Vehicle],
    ) -> tuple[Optional[str], list[RowValidationError]]:
        """
        Resolve the Car Name.

        A blank name is already reported by the required-field rule,
        so only a populated, unknown name is an error here.
        """
        name = (row.get(col.CAR_NAME) or "").strip()
        if not name:
            return None, []

        vehicle_id = resolve_vehicle(name, roster)
        if vehicle_id is None:
            return None, [self._error(row_number, col.CAR_NAME, VEHICLE_NOT_FOUND, name)]
        return vehicle_id, []

    def _check_formats(
        self,
        row: RowRecord,
        row_number: int,
        kind: EntryKind,
    ) -> list[RowValidationError]:
        errors = []

        for field in col.NUMERIC_COLUMNS[kind]:
            value = (row.get(field) or "").strip()
            if value and parse_number(value) is None:
                errors.append(
                    self._error(row_number, field, f"{field} must be a valid number", value)
                )

        date_value = (row.get(col.DATE) or "").strip()
        if date_value and parse_date(date_value) is None:
            errors.append(self._error(row_number, col.DATE, INVALID_DATE, date_value))

        if kind == EntryKind.FUEL:
            time_value = (row.get(col.TIME) or "").strip()
            if time_value and parse_time(time_value) is None:
                errors.append(self._error(row_number, col.TIME, INVALID_TIME, time_value))

        return errors

    def _build_entry(
        self,
        row: RowRecord,
        kind: EntryKind,
        vehicle_id: str,
    ) -> Entry:
        """Convert a row that passed every rule into a typed entry."""
        s = self._settings

        def cell(name: str) -> str:
            return (row.get(name) or "").strip()

        if kind == EntryKind.FUEL:
            return FuelEntry(
                vehicle_id=vehicle_id,
                fuel_company=cell(col.FUEL_COMPANY),
                fuel_type=cell(col.FUEL_TYPE),
                mileage=parse_number(cell(col.MILEAGE)),
                distance_unit=cell(col.DISTANCE_UNIT) or s.default_distance_unit,
                volume=parse_number(cell(col.VOLUME)),
                volume_unit=cell(col.VOLUME_UNIT) or s.default_volume_unit,
                cost=parse_number(cell(col.COST)),
                currency=cell(col.CURRENCY) or s.default_currency,
                date=parse_date(cell(col.DATE)),
                time=parse_time(cell(col.TIME)) or s.default_time,
                location=cell(col.LOCATION),
                partial_fuel_up=parse_flag(cell(col.PARTIAL_FUEL_UP)),
                payment_type=cell(col.PAYMENT_TYPE),
                tyre_pressure=parse_number(cell(col.TYRE_PRESSURE)) or Decimal("0"),
                tyre_pressure_unit=cell(col.TYRE_PRESSURE_UNIT) or s.default_tyre_pressure_unit,
                tags=parse_tags(cell(col.TAGS)),
                notes=cell(col.NOTES),
            )

        model = ENTRY_MODELS[kind]
        return model(
            vehicle_id=vehicle_id,
            category=cell(col.CATEGORY),
            amount=parse_number(cell(col.AMOUNT)),
            currency=cell(col.CURRENCY) or s.default_currency,
            date=parse_date(cell(col.DATE)),
            notes=cell(col.NOTES),
        )

    def _model_errors(
        self,
        exc: ValidationError,
        row: RowRecord,
        row_number: int,
    ) -> list[RowValidationError]:
        """Report schema-level rejections (e.g. over-long notes) per column."""
        errors = []
        for detail in exc.errors():
            field_name = str(detail["loc"][0]) if detail.get("loc") else "row"
            column = FIELD_COLUMNS.get(field_name, field_name)
            errors.append(
                self._error(row_number, column, f"{column}: {detail['msg']}", row.get(column, ""))
            )
        return errors

    def validate(
        self,
        row: RowRecord,
        row_index: int,
        kind: EntryKind,
        roster: list[Vehicle],
    ) -> RowValidationResult:
        """
        Validate one parsed row.

        Args:
            row: Header-keyed cells from the parser
            row_index: 0-based position of the row; errors report row_index + 1
            kind: Which entry kind the file contains
            roster: Vehicles to resolve Car Name against

        Returns:
            RowValidationResult with either an entry or the full list of errors
        """
        row_number = row_index + 1

        errors = self._check_required(row, row_number, kind)
        vehicle_id, vehicle_errors = self._check_vehicle(row, row_number, roster)
        errors.extend(vehicle_errors)
        errors.extend(self._check_formats(row, row_number, kind))

        if errors:
            return RowValidationResult(entry=None, errors=errors)

        try:
            entry = self._build_entry(row, kind, vehicle_id)
        except ValidationError as e:
            return RowValidationResult(entry=None, errors=self._model_errors(e, row, row_number))

        return RowValidationResult(entry=entry, errors=[])

    def validate_rows(
        self,
        rows: list[RowRecord],
        kind: EntryKind,
        roster: list[Vehicle],
    ) -> ValidationReport:
        """Validate every row of a parsed file."""
        candidates = []
        errors = []

        for index, row in enumerate(rows):
            result = self.validate(row, index, kind, roster)
            if result.entry is not None:
                candidates.append(ImportCandidate(row=index + 1, entry=result.entry))
            errors.extend(result.errors)

        return ValidationReport(
            rows_checked=len(rows),
            candidates=candidates,
            errors=errors,
        )

    def get_user_friendly_summary(self, report: ValidationReport) -> str:
        """
        Generate a user-friendly summary of a validation report.

        This is what we show above the review table.
        """
        if report.rows_checked == 0:
            return "⚠️ The file does not contain any data rows."

        if not report.errors:
            return f"✅ All {report.rows_checked} rows are valid and ready to import."

        lines = [
            f"❌ {len(report.rows_with_errors)} of {report.rows_checked} rows have problems:"
        ]
        for error in report.errors:
            lines.append(f"   • Row {error.row}, {error.field}: {error.message}")

        lines.append("")
        if report.candidates:
            lines.append(
                f"{len(report.candidates)} valid rows can still be imported. "
                "Rows with problems will be skipped."
            )
        else:
            lines.append("Please fix the issues above and upload the file again.")

        return "\n".join(lines)
