"""
Storage Services Package

Provides abstract interfaces and concrete implementations for the
collaborators the interchange pipeline depends on. Google Sheets is
the reference backend; the in-memory backend is used for tests.
"""

from vehicle_ledger.services.storage.interface import (
    AuditStorageInterface,
    EntryStorageInterface,
    NotFoundError,
    StorageConnectionError,
    StorageError,
    VehicleRosterInterface,
)
from vehicle_ledger.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryEntryStorage,
    InMemoryVehicleRoster,
)
from vehicle_ledger.services.storage.google_sheets import (
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsEntryStorage,
    GoogleSheetsVehicleRoster,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "EntryStorageInterface",
    "VehicleRosterInterface",
    # Exceptions
    "NotFoundError",
    "StorageConnectionError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryEntryStorage",
    "InMemoryVehicleRoster",
    # Google Sheets implementation
    "GoogleSheetsAuditStorage",
    "GoogleSheetsClient",
    "GoogleSheetsEntryStorage",
    "GoogleSheetsVehicleRoster",
]
