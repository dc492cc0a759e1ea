"""In-memory storage for PropLedger."""

from propledger.store.memory import (
    PropertyAuditStore,
    PropertyCodeSequence,
    PropertyHistoryStore,
    PropertyStore,
    Stores,
)

__all__ = [
    "PropertyAuditStore",
    "PropertyCodeSequence",
    "PropertyHistoryStore",
    "PropertyStore",
    "Stores",
]
