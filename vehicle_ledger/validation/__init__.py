"""Validation package: row rules, vehicle resolution, duplicate detection."""

from vehicle_ledger.validation.resolver import (
    UNKNOWN_VEHICLE,
    resolve_vehicle,
    vehicle_name,
)
from vehicle_ledger.validation.validator import EntryValidator
from vehicle_ledger.validation.duplicates import DuplicateDetector, summarize_entry

__all__ = [
    "UNKNOWN_VEHICLE",
    "DuplicateDetector",
    "EntryValidator",
    "resolve_vehicle",
    "summarize_entry",
    "vehicle_name",
]
