"""PropLedger data models."""

from propledger.models.enums import (
    ChangeType,
    ExportFormat,
    LifecycleEventType,
    PropertyStatus,
    PropertyType,
)
from propledger.models.property import Property, PropertySummary
from propledger.models.history import (
    HistorySummary,
    LifecycleEventRecord,
    PropertyChangeRecord,
    PropertyHistory,
)
from propledger.models.audit import HistoryAuditRecord

__all__ = [
    "ChangeType",
    "ExportFormat",
    "HistoryAuditRecord",
    "HistorySummary",
    "LifecycleEventRecord",
    "LifecycleEventType",
    "Property",
    "PropertyChangeRecord",
    "PropertyHistory",
    "PropertyStatus",
    "PropertySummary",
    "PropertyType",
]
