"""History models - immutable change and lifecycle records."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from propledger.models.enums import ChangeType, LifecycleEventType, PropertyStatus

CHANGE_REASON_MAX_LENGTH = 500
EVENT_DESCRIPTION_MAX_LENGTH = 1000


class PropertyChangeRecord(BaseModel):
    """One field mutation of a property."""

    change_id: UUID
    property_id: UUID
    change_date: datetime
    user_responsible: str
    field_modified: str
    # None when the field had no value before
    previous_value: Optional[str] = None
    new_value: str
    change_reason: str
    # Status of the property once the change was applied
    property_status: PropertyStatus
    change_type: ChangeType

    model_config = {"frozen": True}


class LifecycleEventRecord(BaseModel):
    """A named occurrence in a property's life."""

    event_id: UUID
    property_id: UUID
    event_type: LifecycleEventType
    event_date: datetime
    event_description: str
    related_contract_id: Optional[str] = None
    related_tenant_id: Optional[str] = None
    event_impact: str

    model_config = {"frozen": True}


class HistorySummary(BaseModel):
    """Counts for a history query; the date span covers every change."""

    total_changes: int
    total_events: int
    first_change_date: Optional[datetime] = None
    last_change_date: Optional[datetime] = None


class PropertyHistory(BaseModel):
    """Result of a history query."""

    changes: list[PropertyChangeRecord]
    lifecycle_events: list[LifecycleEventRecord]
    summary: HistorySummary
