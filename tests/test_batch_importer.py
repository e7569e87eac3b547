"""Tests for the sequential batch importer."""

import asyncio
from datetime import date
from typing import Optional

import pytest

from vehicle_ledger.audit import AuditLogger
from vehicle_ledger.imports import BatchImporter, progress_label
from vehicle_ledger.models.audit import AuditEventType
from vehicle_ledger.models.entries import ImportCandidate, RowImportStatus, SubmitOutcome
from vehicle_ledger.services.storage import InMemoryAuditStorage


def candidates_for(entry, count: int) -> list[ImportCandidate]:
    """Distinct candidates (one day apart) numbered from row 1."""
    return [
        ImportCandidate(
            row=i,
            entry=entry.model_copy(update={"date": date(2024, 1, i)}),
        )
        for i in range(1, count + 1)
    ]


class RecordingSubmit:
    """Submit function that succeeds except where told otherwise."""

    def __init__(self, reject: Optional[dict] = None, raise_on: Optional[dict] = None):
        self.reject = reject or {}
        self.raise_on = raise_on or {}
        self.calls = []

    async def __call__(self, entry):
        index = len(self.calls) + 1
        self.calls.append(entry)
        if index in self.raise_on:
            raise self.raise_on[index]
        if index in self.reject:
            return SubmitOutcome(success=False, error=self.reject[index])
        return SubmitOutcome(success=True, entry_id=f"id-{index}")


@pytest.fixture
def importer(settings) -> BatchImporter:
    return BatchImporter(settings)


class TestImportEntries:
    """Tallies and continue-on-error behaviour."""

    @pytest.mark.asyncio
    async def test_all_rows_succeed(self, importer, fuel_entry):
        submit = RecordingSubmit()

        result = await importer.import_entries(candidates_for(fuel_entry, 3), submit)

        assert result.success == 3
        assert result.failed == 0
        assert result.errors is None
        assert len(submit.calls) == 3

    @pytest.mark.asyncio
    async def test_rejected_row_does_not_stop_batch(self, importer, fuel_entry):
        """Test that row 2 failing leaves rows 1 and 3 imported."""
        submit = RecordingSubmit(reject={2: "Mileage lower than previous entry"})

        result = await importer.import_entries(candidates_for(fuel_entry, 3), submit)

        assert result.success == 2
        assert result.failed == 1
        assert result.errors == ("Row 2: Mileage lower than previous entry",)
        assert len(submit.calls) == 3

    @pytest.mark.asyncio
    async def test_rejection_without_reason(self, importer, expense_entry):
        submit = RecordingSubmit(reject={1: None})

        result = await importer.import_entries(candidates_for(expense_entry, 1), submit)

        assert result.errors == ("Row 1: Failed to import",)

    @pytest.mark.asyncio
    async def test_raised_exception_is_network_error(self, importer, expense_entry):
        submit = RecordingSubmit(raise_on={2: ConnectionError("timed out")})

        result = await importer.import_entries(candidates_for(expense_entry, 3), submit)

        assert result.success == 2
        assert result.errors == ("Row 2: Network error - timed out",)

    @pytest.mark.asyncio
    async def test_malformed_outcome_counts_as_failure(self, importer, expense_entry):
        """Test that a submit returning None fails its row and the batch goes on."""
        calls = []

        async def submit(entry):
            calls.append(entry)
            if len(calls) == 1:
                return None
            return SubmitOutcome(success=True, entry_id="id-2")

        result = await importer.import_entries(candidates_for(expense_entry, 2), submit)

        assert result.success == 1
        assert result.failed == 1
        assert result.errors == ("Row 1: Failed to import",)
        assert importer.row_states == {1: RowImportStatus.FAILED, 2: RowImportStatus.SUCCEEDED}

    @pytest.mark.asyncio
    async def test_error_names_the_csv_row(self, importer, fuel_entry):
        """Test that messages use the candidate's row, not its position."""
        candidates = [ImportCandidate(row=7, entry=fuel_entry)]

        result = await importer.import_entries(candidates, RecordingSubmit(reject={1: "nope"}))

        assert result.errors == ("Row 7: nope",)

    @pytest.mark.asyncio
    async def test_empty_batch(self, importer):
        result = await importer.import_entries([], RecordingSubmit())

        assert result.success == 0
        assert result.failed == 0
        assert result.errors is None

    @pytest.mark.asyncio
    async def test_submissions_never_overlap(self, importer, fuel_entry):
        """Test that the next row waits for the previous submission."""
        in_flight = 0
        peak = 0

        async def submit(entry):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0)
            in_flight -= 1
            return SubmitOutcome(success=True)

        await importer.import_entries(candidates_for(fuel_entry, 4), submit)

        assert peak == 1

    @pytest.mark.asyncio
    async def test_row_states(self, importer, fuel_entry):
        submit = RecordingSubmit(reject={2: "bad"})

        await importer.import_entries(candidates_for(fuel_entry, 3), submit)

        assert importer.row_states == {
            1: RowImportStatus.SUCCEEDED,
            2: RowImportStatus.FAILED,
            3: RowImportStatus.SUCCEEDED,
        }


class TestProgress:
    """Progress reporting."""

    @pytest.mark.asyncio
    async def test_progress_after_every_row(self, importer, fuel_entry, roster):
        updates = []

        await importer.import_entries(
            candidates_for(fuel_entry, 3),
            RecordingSubmit(reject={2: "bad"}),
            progress_callback=updates.append,
            roster=roster,
        )

        assert [u.percent_complete for u in updates] == [33, 67, 100]
        assert [u.processed for u in updates] == [1, 2, 3]
        assert updates[0].current_item_label == "My Car - 2024-01-01"

    @pytest.mark.asyncio
    async def test_failing_callback_is_ignored(self, importer, expense_entry):
        def explode(progress):
            raise RuntimeError("UI went away")

        result = await importer.import_entries(
            candidates_for(expense_entry, 2),
            RecordingSubmit(),
            progress_callback=explode,
        )

        assert result.success == 2

    def test_label_for_categorized_entry(self, expense_entry, roster):
        assert progress_label(expense_entry, roster) == "My Car - Parking"

    def test_label_for_unknown_vehicle(self, income_entry):
        assert progress_label(income_entry, []) == "Unknown Vehicle - Ride Sharing"


class TestAudit:
    """Failed rows are recorded in the audit trail."""

    @pytest.mark.asyncio
    async def test_failed_row_is_audited(self, settings, fuel_entry):
        storage = InMemoryAuditStorage()
        importer = BatchImporter(settings, AuditLogger(storage))

        await importer.import_entries(
            candidates_for(fuel_entry, 2),
            RecordingSubmit(reject={1: "bad"}),
        )

        failed = [e for e in storage.events if e.event_type == AuditEventType.ROW_IMPORT_FAILED]
        assert len(failed) == 1
        assert failed[0].details == {"row": 1}
        assert failed[0].error_message == "Row 1: bad"
