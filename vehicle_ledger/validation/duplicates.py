"""
Duplicate Detection

Flags candidates that look like entries the user already has.

DESIGN DECISION: Vehicle and date must match exactly; numbers only need
to be close. Re-typed receipts drift by a few km or a rounding cent, but
two genuinely different fill-ups on the same day rarely land within the
window.

IMPORTANT: Detection is advisory. It never removes or changes a candidate,
and if the existing entries cannot be loaded we simply return no warnings.
"""

from decimal import Decimal
from typing import Awaitable, Callable, Optional

import structlog

from vehicle_ledger.config import ImportSettings, get_settings
from vehicle_ledger.models.entries import (
    CategorizedEntry,
    DuplicateWarning,
    Entry,
    EntryKind,
    FuelEntry,
    ImportCandidate,
)
from vehicle_ledger.services.storage import EntryStorageInterface

logger = structlog.get_logger(__name__)

DUPLICATE_MESSAGES = {
    EntryKind.FUEL: "Potential duplicate fuel entry detected",
    EntryKind.EXPENSE: "Potential duplicate expense detected",
    EntryKind.INCOME: "Potential duplicate income detected",
}


def _within(a: Decimal, b: Decimal, tolerance: float) -> bool:
    return abs(a - b) < Decimal(str(tolerance))


def _format_number(value: Decimal) -> str:
    return format(value.normalize(), "f") if value == value.to_integral() else format(value, "f")


def summarize_entry(entry: Entry) -> str:
    """Short human-readable description of a persisted entry."""
    if isinstance(entry, FuelEntry):
        return (
            f"{entry.date.isoformat()} - {_format_number(entry.mileage)}km"
            f" - ${_format_number(entry.cost)}"
        )
    return (
        f"{entry.date.isoformat()} - {entry.category}"
        f" - ${_format_number(entry.amount)}"
    )


class DuplicateDetector:
    """
    Compares candidates against existing entries of the same kind.

    Tolerances are strict upper bounds: a mileage difference of exactly
    the tolerance is NOT a duplicate.
    """

    def __init__(self, settings: Optional[ImportSettings] = None):
        self._settings = settings or get_settings().imports

    def is_duplicate(self, candidate: Entry, existing: Entry) -> bool:
        """Does an existing entry look like the same real-world event?"""
        if candidate.kind != existing.kind:
            return False
        if candidate.vehicle_id != existing.vehicle_id:
            return False
        if candidate.date != existing.date:
            return False

        if isinstance(candidate, FuelEntry):
            return (
                _within(candidate.mileage, existing.mileage, self._settings.duplicate_mileage_tolerance)
                and _within(candidate.cost, existing.cost, self._settings.duplicate_cost_tolerance)
            )

        if not isinstance(candidate, CategorizedEntry):
            return False
        return (
            candidate.category == existing.category
            and _within(candidate.amount, existing.amount, self._settings.duplicate_amount_tolerance)
        )

    def detect(
        self,
        candidates: list[ImportCandidate],
        existing: list[Entry],
    ) -> list[DuplicateWarning]:
        """
        Annotate candidates that match an existing entry.

        One warning per candidate, naming the first match.
        """
        warnings = []

        for candidate in candidates:
            match = next(
                (e for e in existing if self.is_duplicate(candidate.entry, e)),
                None,
            )
            if match is None:
                continue

            warnings.append(DuplicateWarning(
                row=candidate.row,
                message=DUPLICATE_MESSAGES[EntryKind(candidate.entry.kind)],
                existing_entry=summarize_entry(match),
            ))

        return warnings

    async def check_for_duplicates(
        self,
        candidates: list[ImportCandidate],
        kind: EntryKind,
        storage: EntryStorageInterface,
        on_error: Optional[Callable[[Exception], Awaitable[None]]] = None,
    ) -> list[DuplicateWarning]:
        """
        Load existing entries once and detect duplicates.

        A failed lookup degrades to "no warnings"; it never blocks the import.
        on_error, if given, is awaited with the lookup failure.
        """
        if not candidates:
            return []

        try:
            existing = await storage.list_entries(kind)
        except Exception as e:
            logger.warning(
                "duplicate_check_unavailable",
                kind=kind.value,
                error=str(e),
            )
            if on_error:
                await on_error(e)
            return []

        return self.detect(candidates, existing)
