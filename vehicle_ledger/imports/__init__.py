"""Batch import package."""

from vehicle_ledger.imports.batch_importer import (
    BatchImporter,
    ProgressCallback,
    SubmitFn,
    progress_label,
)

__all__ = ["BatchImporter", "ProgressCallback", "SubmitFn", "progress_label"]
