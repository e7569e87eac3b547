"""Tests for duplicate detection."""

from datetime import date
from decimal import Decimal

import pytest

from vehicle_ledger.models.entries import EntryKind, ImportCandidate
from vehicle_ledger.services.storage import (
    EntryStorageInterface,
    InMemoryEntryStorage,
    StorageConnectionError,
)
from vehicle_ledger.validation import DuplicateDetector, summarize_entry


class UnreachableEntryStorage(EntryStorageInterface):
    """Entry storage whose every call fails."""

    async def create_entry(self, entry):
        raise StorageConnectionError("offline")

    async def list_entries(self, kind):
        raise StorageConnectionError("offline")


@pytest.fixture
def detector(settings) -> DuplicateDetector:
    return DuplicateDetector(settings)


class TestFuelDuplicates:
    """Vehicle + date exact, mileage and cost within tolerance."""

    def test_mileage_just_inside_window(self, detector, fuel_entry):
        """Test that a mileage difference of 9 is flagged."""
        candidate = fuel_entry.model_copy(update={"mileage": Decimal("15009")})

        assert detector.is_duplicate(candidate, fuel_entry)

    def test_mileage_at_window_edge(self, detector, fuel_entry):
        """Test that a mileage difference of exactly 10 is not flagged."""
        candidate = fuel_entry.model_copy(update={"mileage": Decimal("15010")})

        assert not detector.is_duplicate(candidate, fuel_entry)

    def test_cost_at_window_edge(self, detector, fuel_entry):
        candidate = fuel_entry.model_copy(update={"cost": Decimal("351")})

        assert not detector.is_duplicate(candidate, fuel_entry)

    def test_cost_inside_window(self, detector, fuel_entry):
        candidate = fuel_entry.model_copy(update={"cost": Decimal("350.99")})

        assert detector.is_duplicate(candidate, fuel_entry)

    def test_different_date(self, detector, fuel_entry):
        candidate = fuel_entry.model_copy(update={"date": date(2024, 1, 16)})

        assert not detector.is_duplicate(candidate, fuel_entry)

    def test_different_vehicle(self, detector, fuel_entry):
        candidate = fuel_entry.model_copy(update={"vehicle_id": "v2"})

        assert not detector.is_duplicate(candidate, fuel_entry)


class TestCategorizedDuplicates:
    """Vehicle + date + category exact, amount within tolerance."""

    def test_same_category_close_amount(self, detector, expense_entry):
        candidate = expense_entry.model_copy(update={"amount": Decimal("50.5")})

        assert detector.is_duplicate(candidate, expense_entry)

    def test_category_differs(self, detector, expense_entry):
        candidate = expense_entry.model_copy(update={"category": "Tolls"})

        assert not detector.is_duplicate(candidate, expense_entry)

    def test_amount_at_window_edge(self, detector, expense_entry):
        candidate = expense_entry.model_copy(update={"amount": Decimal("51")})

        assert not detector.is_duplicate(candidate, expense_entry)

    def test_kinds_never_match(self, detector, expense_entry, income_entry):
        """Test that an income entry is never a duplicate of an expense."""
        income = income_entry.model_copy(update={
            "vehicle_id": expense_entry.vehicle_id,
            "date": expense_entry.date,
            "category": expense_entry.category,
            "amount": expense_entry.amount,
        })

        assert not detector.is_duplicate(income, expense_entry)


class TestDetect:
    """Warnings produced for a batch of candidates."""

    def test_one_warning_per_candidate(self, detector, fuel_entry):
        """Test that two matching existing entries still give one warning."""
        existing = [
            fuel_entry,
            fuel_entry.model_copy(update={"mileage": Decimal("15001")}),
        ]
        candidates = [ImportCandidate(row=3, entry=fuel_entry)]

        warnings = detector.detect(candidates, existing)

        assert len(warnings) == 1
        assert warnings[0].row == 3
        assert warnings[0].message == "Potential duplicate fuel entry detected"
        assert warnings[0].existing_entry == "2024-01-15 - 15000km - $350"

    def test_no_existing_entries(self, detector, fuel_entry):
        assert detector.detect([ImportCandidate(row=1, entry=fuel_entry)], []) == []

    def test_candidates_are_not_modified(self, detector, expense_entry):
        candidates = [ImportCandidate(row=1, entry=expense_entry)]

        detector.detect(candidates, [expense_entry])

        assert len(candidates) == 1
        assert candidates[0].entry == expense_entry

    def test_expense_summary(self, expense_entry):
        assert summarize_entry(expense_entry) == "2024-01-20 - Parking - $50"

    def test_summary_keeps_fraction(self, fuel_entry):
        entry = fuel_entry.model_copy(update={"cost": Decimal("350.50")})

        assert summarize_entry(entry).endswith("$350.50")


class TestCheckForDuplicates:
    """Loading existing entries from storage."""

    @pytest.mark.asyncio
    async def test_reads_existing_entries_from_storage(self, detector, expense_entry):
        storage = InMemoryEntryStorage([expense_entry])
        candidates = [ImportCandidate(row=1, entry=expense_entry)]

        warnings = await detector.check_for_duplicates(candidates, EntryKind.EXPENSE, storage)

        assert [w.message for w in warnings] == ["Potential duplicate expense detected"]

    @pytest.mark.asyncio
    async def test_storage_failure_means_no_warnings(self, detector, fuel_entry):
        """Test that an unreachable entry service never blocks the import."""
        candidates = [ImportCandidate(row=1, entry=fuel_entry)]

        warnings = await detector.check_for_duplicates(
            candidates, EntryKind.FUEL, UnreachableEntryStorage()
        )

        assert warnings == []

    @pytest.mark.asyncio
    async def test_storage_failure_is_reported_to_hook(self, detector, fuel_entry):
        candidates = [ImportCandidate(row=1, entry=fuel_entry)]
        seen = []

        async def on_error(error):
            seen.append(error)

        warnings = await detector.check_for_duplicates(
            candidates, EntryKind.FUEL, UnreachableEntryStorage(), on_error=on_error
        )

        assert warnings == []
        assert [str(e) for e in seen] == ["offline"]

    @pytest.mark.asyncio
    async def test_hook_not_called_without_candidates(self, detector):
        seen = []

        async def on_error(error):
            seen.append(error)

        warnings = await detector.check_for_duplicates(
            [], EntryKind.FUEL, UnreachableEntryStorage(), on_error=on_error
        )

        assert warnings == []
        assert seen == []
