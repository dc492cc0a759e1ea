"""Audit record model - who consulted which history, and how."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from propledger.models.enums import ExportFormat


class HistoryAuditRecord(BaseModel):
    """Audit trail entry for a history consultation or export."""

    audit_id: UUID
    user_id: str
    consulted_property_id: UUID
    consultation_timestamp: datetime
    applied_filters: dict[str, Any] = Field(default_factory=dict)
    records_returned: int
    exported: bool = False
    export_format: Optional[ExportFormat] = None

    model_config = {"frozen": True}
