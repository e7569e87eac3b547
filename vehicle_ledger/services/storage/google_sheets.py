"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is used as the reference storage backend because:
1. Users can look at their fuel log directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

TRADEOFFS:
- Not suitable for high-volume data (a personal fuel log is small)
- No transactions (fine: every imported row is its own unit of work)
- Limited query capabilities (we filter in Python)

One worksheet per entry kind plus one for the vehicle roster.
"""

import json
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

import gspread
import structlog
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from vehicle_ledger.config import get_settings
from vehicle_ledger.models.audit import AuditEvent, AuditEventType, AuditSeverity
from vehicle_ledger.models.entries import (
    Entry,
    EntryKind,
    ExpenseEntry,
    FuelEntry,
    IncomeEntry,
    SubmitOutcome,
    Vehicle,
)
from vehicle_ledger.services.storage.interface import (
    AuditStorageInterface,
    EntryStorageInterface,
    StorageConnectionError,
    StorageError,
    VehicleRosterInterface,
)

logger = structlog.get_logger(__name__)


VEHICLE_COLUMNS = ["id", "name"]

FUEL_COLUMNS = [
    "id",
    "vehicle_id",
    "date",
    "time",
    "fuel_company",
    "fuel_type",
    "mileage",
    "distance_unit",
    "volume",
    "volume_unit",
    "cost",
    "currency",
    "location",
    "partial_fuel_up",
    "payment_type",
    "tyre_pressure",
    "tyre_pressure_unit",
    "tags_json",
    "notes",
]

# Expense and income sheets share a layout
CATEGORIZED_COLUMNS = [
    "id",
    "vehicle_id",
    "date",
    "category",
    "amount",
    "currency",
    "notes",
]

AUDIT_COLUMNS = [
    "event_id",
    "timestamp",
    "event_type",
    "severity",
    "entry_kind",
    "correlation_id",
    "description",
    "details_json",
    "error_message",
]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise StorageConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise StorageConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise StorageConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_worksheet(self, title: str, columns: list[str]) -> gspread.Worksheet:
        """Get or create a worksheet, writing the header row on creation."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=1000,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet

    def get_vehicles_sheet(self) -> gspread.Worksheet:
        return self.get_worksheet(self._settings.vehicles_sheet_name, VEHICLE_COLUMNS)

    def get_entries_sheet(self, kind: EntryKind) -> gspread.Worksheet:
        """Get the worksheet holding entries of one kind."""
        if kind == EntryKind.FUEL:
            return self.get_worksheet(self._settings.fuel_sheet_name, FUEL_COLUMNS)
        if kind == EntryKind.EXPENSE:
            return self.get_worksheet(self._settings.expense_sheet_name, CATEGORIZED_COLUMNS)
        return self.get_worksheet(self._settings.income_sheet_name, CATEGORIZED_COLUMNS)

    def get_audit_sheet(self) -> gspread.Worksheet:
        return self.get_worksheet(self._settings.audit_sheet_name, AUDIT_COLUMNS)


def _safe_get(row: list, index: int, default: str = "") -> str:
    """Handle missing trailing columns gracefully."""
    try:
        return row[index] if row[index] else default
    except IndexError:
        return default


class GoogleSheetsVehicleRoster(VehicleRosterInterface):
    """Vehicle roster stored as (id, name) rows."""

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    async def list_vehicles(self) -> list[Vehicle]:
        try:
            sheet = self._client.get_vehicles_sheet()
            all_rows = sheet.get_all_values()[1:]  # Skip header
        except Exception as e:
            raise StorageError(f"Failed to list vehicles: {e}")

        vehicles = []
        for row in all_rows:
            vehicle_id = _safe_get(row, 0)
            name = _safe_get(row, 1)
            if not vehicle_id or not name.strip():
                continue
            vehicles.append(Vehicle(id=vehicle_id, name=name))
        return vehicles


class GoogleSheetsEntryStorage(EntryStorageInterface):
    """
    Google Sheets implementation of entry storage.

    Entries are stored one per row. Tags are JSON-serialized so that
    tags containing separators survive storage unchanged.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _entry_to_row(self, entry: Entry) -> list:
        """Convert an entry to a spreadsheet row."""
        if isinstance(entry, FuelEntry):
            return [
                entry.id or "",
                entry.vehicle_id,
                entry.date.isoformat(),
                entry.time,
                entry.fuel_company,
                entry.fuel_type,
                str(entry.mileage),
                entry.distance_unit,
                str(entry.volume),
                entry.volume_unit,
                str(entry.cost),
                entry.currency,
                entry.location,
                str(entry.partial_fuel_up),
                entry.payment_type,
                str(entry.tyre_pressure),
                entry.tyre_pressure_unit,
                json.dumps(entry.tags),
                entry.notes,
            ]
        return [
            entry.id or "",
            entry.vehicle_id,
            entry.date.isoformat(),
            entry.category,
            str(entry.amount),
            entry.currency,
            entry.notes,
        ]

    def _row_to_entry(self, kind: EntryKind, row: list) -> Entry:
        """Convert a spreadsheet row to an entry of the given kind."""
        if kind == EntryKind.FUEL:
            tags_json = _safe_get(row, 17)
            return FuelEntry(
                id=_safe_get(row, 0),
                vehicle_id=_safe_get(row, 1),
                date=date.fromisoformat(_safe_get(row, 2)),
                time=_safe_get(row, 3, "12:00"),
                fuel_company=_safe_get(row, 4),
                fuel_type=_safe_get(row, 5),
                mileage=Decimal(_safe_get(row, 6)),
                distance_unit=_safe_get(row, 7, "km"),
                volume=Decimal(_safe_get(row, 8)),
                volume_unit=_safe_get(row, 9, "liters"),
                cost=Decimal(_safe_get(row, 10)),
                currency=_safe_get(row, 11, "HKD"),
                location=_safe_get(row, 12),
                partial_fuel_up=_safe_get(row, 13).lower() == "true",
                payment_type=_safe_get(row, 14),
                tyre_pressure=Decimal(_safe_get(row, 15, "0")),
                tyre_pressure_unit=_safe_get(row, 16, "psi"),
                tags=json.loads(tags_json) if tags_json else [],
                notes=_safe_get(row, 18),
            )

        model = ExpenseEntry if kind == EntryKind.EXPENSE else IncomeEntry
        return model(
            id=_safe_get(row, 0),
            vehicle_id=_safe_get(row, 1),
            date=date.fromisoformat(_safe_get(row, 2)),
            category=_safe_get(row, 3),
            amount=Decimal(_safe_get(row, 4)),
            currency=_safe_get(row, 5, "HKD"),
            notes=_safe_get(row, 6),
        )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def create_entry(self, entry: Entry) -> SubmitOutcome:
        """Append an entry to the worksheet for its kind."""
        stored = entry.model_copy(update={"id": entry.id or uuid4().hex})
        try:
            sheet = self._client.get_entries_sheet(EntryKind(stored.kind))
            sheet.append_row(self._entry_to_row(stored), value_input_option="RAW")
        except Exception as e:
            raise StorageError(f"Failed to save {stored.kind} entry: {e}")
        return SubmitOutcome(success=True, entry_id=stored.id)

    async def list_entries(self, kind: EntryKind) -> list[Entry]:
        """List every entry of one kind, oldest first."""
        try:
            sheet = self._client.get_entries_sheet(kind)
            all_rows = sheet.get_all_values()[1:]  # Skip header
        except Exception as e:
            raise StorageError(f"Failed to list {kind.value} entries: {e}")

        entries = []
        for index, row in enumerate(all_rows, start=2):
            if not row or not row[0]:  # Skip empty rows
                continue
            try:
                entries.append(self._row_to_entry(kind, row))
            except Exception as e:
                logger.warning(
                    "malformed_sheet_row_skipped",
                    kind=kind.value,
                    sheet_row=index,
                    error=str(e),
                )
        entries.sort(key=lambda e: e.date)
        return entries


class GoogleSheetsAuditStorage(AuditStorageInterface):
    """
    Google Sheets implementation of audit log storage.

    Audit events are append-only.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _row_to_event(self, row: list) -> AuditEvent:
        """Convert a spreadsheet row to an AuditEvent."""
        return AuditEvent(
            event_id=UUID(_safe_get(row, 0)),
            timestamp=datetime.fromisoformat(_safe_get(row, 1)),
            event_type=AuditEventType(_safe_get(row, 2)),
            severity=AuditSeverity(_safe_get(row, 3)),
            entry_kind=_safe_get(row, 4) or None,
            correlation_id=UUID(_safe_get(row, 5)) if _safe_get(row, 5) else None,
            description=_safe_get(row, 6),
            details=json.loads(_safe_get(row, 7)) if _safe_get(row, 7) else {},
            error_message=_safe_get(row, 8) or None,
        )

    async def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event."""
        try:
            sheet = self._client.get_audit_sheet()
            sheet.append_row(event.to_sheets_row(), value_input_option="RAW")
            return True
        except Exception as e:
            # Audit logging must not break the main flow
            logger.warning("audit_event_not_persisted", error=str(e))
            return False

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """Get events by correlation ID."""
        try:
            sheet = self._client.get_audit_sheet()
            all_rows = sheet.get_all_values()[1:]
        except Exception as e:
            raise StorageError(f"Failed to get audit events: {e}")

        events = []
        for row in all_rows:
            if row and len(row) > 5 and row[5] == str(correlation_id):
                try:
                    events.append(self._row_to_event(row))
                except Exception as e:
                    logger.warning("malformed_audit_row_skipped", error=str(e))

        # Sort chronologically
        events.sort(key=lambda e: e.timestamp)
        return events
