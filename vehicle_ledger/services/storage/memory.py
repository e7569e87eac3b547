"""
In-Memory Storage Implementation

Used by the test suite and for local experiments. Behaves like the
real backends: entries get an id on creation and listing returns copies,
so callers can never mutate what is stored.
"""

from typing import Optional
from uuid import UUID, uuid4

from vehicle_ledger.models.audit import AuditEvent
from vehicle_ledger.models.entries import Entry, EntryKind, SubmitOutcome, Vehicle
from vehicle_ledger.services.storage.interface import (
    AuditStorageInterface,
    EntryStorageInterface,
    VehicleRosterInterface,
)


class InMemoryVehicleRoster(VehicleRosterInterface):
    """A fixed list of vehicles."""

    def __init__(self, vehicles: Optional[list[Vehicle]] = None):
        self._vehicles = list(vehicles or [])

    def add(self, vehicle: Vehicle) -> None:
        self._vehicles.append(vehicle)

    async def list_vehicles(self) -> list[Vehicle]:
        return [vehicle.model_copy() for vehicle in self._vehicles]


class InMemoryEntryStorage(EntryStorageInterface):
    """Entries kept in per-kind lists."""

    def __init__(self, entries: Optional[list[Entry]] = None):
        self._entries: dict[EntryKind, list[Entry]] = {kind: [] for kind in EntryKind}
        for entry in entries or []:
            self._store(entry)

    def _store(self, entry: Entry) -> Entry:
        stored = entry.model_copy(update={"id": entry.id or uuid4().hex})
        self._entries[EntryKind(stored.kind)].append(stored)
        return stored

    async def create_entry(self, entry: Entry) -> SubmitOutcome:
        stored = self._store(entry)
        return SubmitOutcome(success=True, entry_id=stored.id)

    async def list_entries(self, kind: EntryKind) -> list[Entry]:
        return [entry.model_copy() for entry in self._entries[kind]]


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    @property
    def events(self) -> list[AuditEvent]:
        return list(self._events)

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        events = [e for e in self._events if e.correlation_id == correlation_id]
        events.sort(key=lambda e: e.timestamp)
        return events
