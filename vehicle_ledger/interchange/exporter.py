"""
CSV Export

Renders persisted entries using exactly the columns the importer reads.

GUARANTEE: For valid entries E, importing export_entries(E) yields E again
(vehicle ids come back through the name lookup, storage ids are not exported).
"""

import csv
import io
from datetime import date
from decimal import Decimal
from typing import Optional

from vehicle_ledger.interchange import columns as col
from vehicle_ledger.models.entries import (
    CategorizedEntry,
    Entry,
    EntryKind,
    ExportFilters,
    FuelEntry,
    Vehicle,
)
from vehicle_ledger.validation.resolver import vehicle_name

FILENAME_PREFIXES = {
    EntryKind.FUEL: "fuel_entries",
    EntryKind.EXPENSE: "expense_entries",
    EntryKind.INCOME: "income_entries",
}


def format_decimal(value: Decimal) -> str:
    """Plain notation, scale preserved: 45.50 stays "45.50", 1E+3 becomes "1000"."""
    return format(value, "f")


def filter_entries(
    entries: list[Entry],
    filters: Optional[ExportFilters] = None,
) -> list[Entry]:
    """
    Apply export filters.

    Returns a new list; the input list is never modified. The category
    filter is ignored for fuel entries, which have no category.
    """
    if filters is None:
        return list(entries)

    selected = []
    for entry in entries:
        if filters.vehicle_id and entry.vehicle_id != filters.vehicle_id:
            continue
        if filters.start_date and entry.date < filters.start_date:
            continue
        if filters.end_date and entry.date > filters.end_date:
            continue
        if (
            filters.category
            and isinstance(entry, CategorizedEntry)
            and entry.category != filters.category
        ):
            continue
        selected.append(entry)
    return selected


def _fuel_row(entry: FuelEntry, vehicles: list[Vehicle]) -> list[str]:
    return [
        vehicle_name(entry.vehicle_id, vehicles),
        entry.date.isoformat(),
        entry.time,
        entry.fuel_company,
        entry.fuel_type,
        format_decimal(entry.mileage),
        entry.distance_unit,
        format_decimal(entry.volume),
        entry.volume_unit,
        format_decimal(entry.cost),
        entry.currency,
        entry.location,
        "Yes" if entry.partial_fuel_up else "No",
        entry.payment_type,
        format_decimal(entry.tyre_pressure),
        entry.tyre_pressure_unit,
        f"{col.TAG_SEPARATOR} ".join(entry.tags),
        entry.notes,
    ]


def _categorized_row(entry: CategorizedEntry, vehicles: list[Vehicle]) -> list[str]:
    return [
        vehicle_name(entry.vehicle_id, vehicles),
        entry.date.isoformat(),
        entry.category,
        format_decimal(entry.amount),
        entry.currency,
        entry.notes,
    ]


def export_entries(
    entries: list[Entry],
    vehicles: list[Vehicle],
    kind: EntryKind,
    filters: Optional[ExportFilters] = None,
) -> str:
    """
    Render entries of one kind as CSV text.

    Args:
        entries: Persisted entries (entries of other kinds are skipped)
        vehicles: Roster used to turn vehicle ids back into names
        kind: Which column layout to use
        filters: Optional vehicle / date range / category predicates

    Returns:
        CSV text with a header row; header only if nothing is selected
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(col.columns_for(kind))

    for entry in filter_entries(entries, filters):
        if entry.kind != kind:
            continue
        if isinstance(entry, FuelEntry):
            writer.writerow(_fuel_row(entry, vehicles))
        else:
            writer.writerow(_categorized_row(entry, vehicles))

    return buffer.getvalue()


def export_filename(kind: EntryKind, today: Optional[date] = None) -> str:
    """Default download name, e.g. fuel_entries_2024-01-31.csv."""
    today = today or date.today()
    return f"{FILENAME_PREFIXES[kind]}_{today.isoformat()}.csv"
