"""Services package."""

from vehicle_ledger.services.storage import (
    AuditStorageInterface,
    EntryStorageInterface,
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsEntryStorage,
    GoogleSheetsVehicleRoster,
    InMemoryAuditStorage,
    InMemoryEntryStorage,
    InMemoryVehicleRoster,
    NotFoundError,
    StorageConnectionError,
    StorageError,
    VehicleRosterInterface,
)

__all__ = [
    "AuditStorageInterface",
    "EntryStorageInterface",
    "GoogleSheetsAuditStorage",
    "GoogleSheetsClient",
    "GoogleSheetsEntryStorage",
    "GoogleSheetsVehicleRoster",
    "InMemoryAuditStorage",
    "InMemoryEntryStorage",
    "InMemoryVehicleRoster",
    "NotFoundError",
    "StorageConnectionError",
    "StorageError",
    "VehicleRosterInterface",
]
