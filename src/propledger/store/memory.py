"""In-memory stores for PropLedger entities."""

from dataclasses import dataclass, field
from datetime import datetime
from threading import Lock
from typing import Callable, Optional, TypeVar
from uuid import UUID

from propledger.engine.errors import AppendOnlyViolation, SequenceLockTimeout
from propledger.models import (
    HistoryAuditRecord,
    LifecycleEventRecord,
    Property,
    PropertyChangeRecord,
)
from propledger.models.property import address_key
from propledger.utils.time import utc_now

R = TypeVar("R")


def _newest_first(records: list[R], timestamp: Callable[[R], datetime]) -> list[R]:
    """Sort by timestamp descending; ties go to the most recently added record."""
    ordered = sorted(
        enumerate(records), key=lambda pair: (timestamp(pair[1]), pair[0]), reverse=True
    )
    return [record for _, record in ordered]


class PropertyStore:
    """Keyed map of registered properties."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._records: dict[UUID, Property] = {}

    def add(self, record: Property) -> Property:
        with self._lock:
            self._records[record.property_id] = record
        return record

    def update(self, record: Property) -> Property:
        with self._lock:
            self._records[record.property_id] = record
        return record

    def get(self, property_id: UUID) -> Optional[Property]:
        return self._records.get(property_id)

    def exists(self, property_id: UUID) -> bool:
        return property_id in self._records

    def all(self) -> list[Property]:
        """Return every property in registration order."""
        with self._lock:
            return list(self._records.values())

    def exists_by_address(
        self,
        endereco_completo: str,
        bairro: str,
        cep: str,
        cidade: str,
        estado: str,
        exclude_id: UUID | None = None,
    ) -> bool:
        """Check whether another property already sits at this address."""
        key = address_key(endereco_completo, bairro, cep, cidade, estado)
        return any(
            p.address_key() == key
            for p in self.all()
            if p.property_id != exclude_id
        )

    def count(self) -> int:
        return len(self._records)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()


class PropertyHistoryStore:
    """
    Append-only log of change records and lifecycle events.

    Records are keyed by their generated id; re-adding an id is an error.
    Reads scan the whole log and return newest first.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._changes: dict[UUID, PropertyChangeRecord] = {}
        self._events: dict[UUID, LifecycleEventRecord] = {}

    def add_change(self, change: PropertyChangeRecord) -> PropertyChangeRecord:
        with self._lock:
            if change.change_id in self._changes:
                raise AppendOnlyViolation("change", str(change.change_id))
            self._changes[change.change_id] = change
        return change

    def add_event(self, event: LifecycleEventRecord) -> LifecycleEventRecord:
        with self._lock:
            if event.event_id in self._events:
                raise AppendOnlyViolation("event", str(event.event_id))
            self._events[event.event_id] = event
        return event

    def changes_for(self, property_id: UUID) -> list[PropertyChangeRecord]:
        with self._lock:
            changes = [c for c in self._changes.values() if c.property_id == property_id]
        return _newest_first(changes, lambda c: c.change_date)

    def events_for(self, property_id: UUID) -> list[LifecycleEventRecord]:
        with self._lock:
            events = [e for e in self._events.values() if e.property_id == property_id]
        return _newest_first(events, lambda e: e.event_date)

    def get_change(self, change_id: UUID) -> Optional[PropertyChangeRecord]:
        return self._changes.get(change_id)

    def get_event(self, event_id: UUID) -> Optional[LifecycleEventRecord]:
        return self._events.get(event_id)

    def count_changes(self) -> int:
        return len(self._changes)

    def count_events(self) -> int:
        return len(self._events)

    def clear(self) -> None:
        with self._lock:
            self._changes.clear()
            self._events.clear()


class PropertyAuditStore:
    """Append-only log of history consultations."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._audits: dict[UUID, HistoryAuditRecord] = {}

    def add(self, audit: HistoryAuditRecord) -> HistoryAuditRecord:
        with self._lock:
            if audit.audit_id in self._audits:
                raise AppendOnlyViolation("audit", str(audit.audit_id))
            self._audits[audit.audit_id] = audit
        return audit

    def for_property(self, property_id: UUID) -> list[HistoryAuditRecord]:
        with self._lock:
            audits = [
                a for a in self._audits.values() if a.consulted_property_id == property_id
            ]
        return _newest_first(audits, lambda a: a.consultation_timestamp)

    def for_user(self, user_id: str) -> list[HistoryAuditRecord]:
        with self._lock:
            audits = [a for a in self._audits.values() if a.user_id == user_id]
        return _newest_first(audits, lambda a: a.consultation_timestamp)

    def get(self, audit_id: UUID) -> Optional[HistoryAuditRecord]:
        return self._audits.get(audit_id)

    def count(self) -> int:
        return len(self._audits)

    def clear(self) -> None:
        with self._lock:
            self._audits.clear()


@dataclass
class _DayCounter:
    last_sequence: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PropertyCodeSequence:
    """
    Per-day sequence counters for property codes.

    Each YYYYMMDD key has its own lock; a caller that cannot take it
    within the timeout gets SequenceLockTimeout.
    """

    def __init__(self, lock_timeout_seconds: float = 5.0) -> None:
        self.lock_timeout_seconds = lock_timeout_seconds
        self._guard = Lock()
        self._counters: dict[str, _DayCounter] = {}
        self._locks: dict[str, Lock] = {}

    def _day_lock(self, day: str) -> Lock:
        with self._guard:
            return self._locks.setdefault(day, Lock())

    def next(self, day: str) -> int:
        """Reserve and return the next sequence number for a day."""
        lock = self._day_lock(day)
        if not lock.acquire(timeout=self.lock_timeout_seconds):
            raise SequenceLockTimeout(day)
        try:
            now = utc_now()
            counter = self._counters.get(day)
            if counter is None:
                counter = _DayCounter(created_at=now)
                self._counters[day] = counter
            counter.last_sequence += 1
            counter.updated_at = now
            return counter.last_sequence
        finally:
            lock.release()

    def current(self, day: str) -> int:
        """Return the last number issued for a day without reserving one."""
        counter = self._counters.get(day)
        return counter.last_sequence if counter else 0

    def clear(self) -> None:
        with self._guard:
            self._counters.clear()
            self._locks.clear()


@dataclass
class Stores:
    """The set of stores backing one application instance."""

    properties: PropertyStore = field(default_factory=PropertyStore)
    history: PropertyHistoryStore = field(default_factory=PropertyHistoryStore)
    audits: PropertyAuditStore = field(default_factory=PropertyAuditStore)
    codes: PropertyCodeSequence = field(default_factory=PropertyCodeSequence)

    def clear(self) -> None:
        self.properties.clear()
        self.history.clear()
        self.audits.clear()
        self.codes.clear()
