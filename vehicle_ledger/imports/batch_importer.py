"""
Batch Importer

Submits validated candidates to the entry service one at a time.

DESIGN DECISION: A failing row never aborts the batch.
A rejected submission or a network error is recorded against its row and
the importer moves on. The caller always gets a complete tally back.

Rows are submitted strictly in file order: the next submission starts only
after the previous one has resolved. Progress is reported after every row.
"""

import asyncio
from typing import Awaitable, Callable, Optional
from uuid import UUID

import structlog

from vehicle_ledger.audit import AuditLogger
from vehicle_ledger.config import ImportSettings, get_settings
from vehicle_ledger.models.entries import (
    Entry,
    FuelEntry,
    ImportCandidate,
    ImportProgress,
    ImportResult,
    RowImportStatus,
    SubmitOutcome,
    Vehicle,
)
from vehicle_ledger.validation.resolver import vehicle_name

logger = structlog.get_logger(__name__)

SubmitFn = Callable[[Entry], Awaitable[SubmitOutcome]]
ProgressCallback = Callable[[ImportProgress], None]

DEFAULT_FAILURE = "Failed to import"


def progress_label(entry: Entry, roster: list[Vehicle]) -> str:
    """Label shown next to the progress bar while a row is being imported."""
    name = vehicle_name(entry.vehicle_id, roster)
    if isinstance(entry, FuelEntry):
        return f"{name} - {entry.date.isoformat()}"
    return f"{name} - {entry.category}"


class BatchImporter:
    """
    Sequential, continue-on-error importer.

    Each row moves pending -> submitted -> succeeded | failed. The final
    states of the last batch are kept in `row_states`.
    """

    def __init__(
        self,
        settings: Optional[ImportSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._settings = settings or get_settings().imports
        self._audit_logger = audit_logger
        self._row_states: dict[int, RowImportStatus] = {}

    @property
    def row_states(self) -> dict[int, RowImportStatus]:
        """Row number -> status for the most recent batch."""
        return dict(self._row_states)

    def _report_progress(
        self,
        callback: Optional[ProgressCallback],
        progress: ImportProgress,
    ) -> None:
        if callback is None:
            return
        try:
            callback(progress)
        except Exception as e:
            logger.warning(
                "progress_callback_failed",
                error=str(e),
                processed=progress.processed,
            )

    async def _record_failure(
        self,
        candidate: ImportCandidate,
        message: str,
        correlation_id: Optional[UUID],
    ) -> None:
        self._row_states[candidate.row] = RowImportStatus.FAILED
        logger.warning("row_import_failed", row=candidate.row, error=message)
        if self._audit_logger:
            await self._audit_logger.log_row_import_failed(
                entry_kind=candidate.entry.kind,
                row=candidate.row,
                error_message=message,
                correlation_id=correlation_id,
            )

    async def import_entries(
        self,
        candidates: list[ImportCandidate],
        submit: SubmitFn,
        progress_callback: Optional[ProgressCallback] = None,
        roster: Optional[list[Vehicle]] = None,
        correlation_id: Optional[UUID] = None,
    ) -> ImportResult:
        """
        Submit every candidate and tally the outcome.

        Args:
            candidates: Validated entries with their CSV row numbers
            submit: Async persistence call for one entry
            progress_callback: Called after every row; its errors are logged
            roster: Vehicles used to build progress labels
            correlation_id: Ties audit events of this batch together

        Returns:
            ImportResult with success + failed == len(candidates)
        """
        roster = roster or []
        total = len(candidates)
        success = 0
        failed = 0
        errors: list[str] = []

        self._row_states = {c.row: RowImportStatus.PENDING for c in candidates}
        logger.info("batch_import_started", total=total)

        for index, candidate in enumerate(candidates):
            if index > 0 and self._settings.row_delay_seconds > 0:
                await asyncio.sleep(self._settings.row_delay_seconds)

            self._row_states[candidate.row] = RowImportStatus.SUBMITTED

            try:
                outcome = await submit(candidate.entry)
            except Exception as e:
                failed += 1
                message = f"Row {candidate.row}: Network error - {e}"
                errors.append(message)
                await self._record_failure(candidate, message, correlation_id)
            else:
                if not isinstance(outcome, SubmitOutcome):
                    logger.warning("unexpected_submit_outcome", row=candidate.row, outcome=repr(outcome))
                    outcome = SubmitOutcome(success=False)

                if outcome.success:
                    success += 1
                    self._row_states[candidate.row] = RowImportStatus.SUCCEEDED
                else:
                    failed += 1
                    message = f"Row {candidate.row}: {outcome.error or DEFAULT_FAILURE}"
                    errors.append(message)
                    await self._record_failure(candidate, message, correlation_id)

            processed = index + 1
            self._report_progress(progress_callback, ImportProgress(
                percent_complete=round(100 * processed / total),
                current_item_label=progress_label(candidate.entry, roster),
                processed=processed,
                total=total,
            ))

        logger.info("batch_import_finished", success=success, failed=failed)

        return ImportResult(success=success, failed=failed, errors=errors)
