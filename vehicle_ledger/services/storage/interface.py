"""
Abstract Storage Interface

DESIGN DECISION: The interchange pipeline does not own persistence.
It talks to three narrow collaborators:
1. A vehicle roster (who can entries be logged against?)
2. An entry store (create one entry, list entries of a kind)
3. An audit store (append-only event log)

Keeping these abstract lets us:
- Use in-memory storage for testing
- Back the tracker with Google Sheets today and a database later
- Keep the import logic free of storage details
"""

from abc import ABC, abstractmethod
from uuid import UUID

from vehicle_ledger.models.audit import AuditEvent
from vehicle_ledger.models.entries import Entry, EntryKind, SubmitOutcome, Vehicle


class VehicleRosterInterface(ABC):
    """Read-only access to the user's vehicles."""

    @abstractmethod
    async def list_vehicles(self) -> list[Vehicle]:
        """
        List every vehicle of the current user.

        Returns:
            Vehicles in roster order

        Raises:
            StorageError: If the roster cannot be loaded
        """
        pass


class EntryStorageInterface(ABC):
    """
    Abstract interface for entry storage operations.

    Any storage implementation (Google Sheets, PostgreSQL, etc.)
    must implement these methods.
    """

    @abstractmethod
    async def create_entry(self, entry: Entry) -> SubmitOutcome:
        """
        Persist a single entry.

        Args:
            entry: A fully validated fuel, expense or income entry

        Returns:
            SubmitOutcome. An application-level rejection is reported
            with success=False rather than raised.

        Raises:
            StorageError: If the backend could not be reached
        """
        pass

    @abstractmethod
    async def list_entries(self, kind: EntryKind) -> list[Entry]:
        """
        List all persisted entries of one kind.

        Args:
            kind: fuel, expense or income

        Returns:
            Entries with their storage ids set

        Raises:
            StorageError: If the entries cannot be loaded
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one import).

        Returns:
            List of related events in chronological order
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class StorageConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
