"""REST API router."""

from typing import Annotated, Any, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response

from propledger import __version__
from propledger.api.deps import get_actor, get_engine
from propledger.api.schemas import (
    ConfigResponse,
    Envelope,
    HealthResponse,
    HistoryExportRequest,
    HistoryFilters,
    LifecycleEventRequest,
    PropertyCreateRequest,
    PropertyResponse,
    PropertySummaryResponse,
    PropertyUpdateRequest,
)
from propledger.engine import PropLedgerEngine
from propledger.models import HistoryAuditRecord, LifecycleEventRecord, PropertyHistory

router = APIRouter(prefix="/api/internal")


def ok(data: Any) -> dict[str, Any]:
    """Wrap a payload in the success envelope."""
    return {"success": True, "data": data}


# ============================================================================
# Health & Config
# ============================================================================


@router.get("/health", response_model=Envelope[HealthResponse])
async def health_check():
    """Health check endpoint."""
    return ok(HealthResponse(status="healthy", version=__version__))


@router.get("/config", response_model=Envelope[ConfigResponse])
async def get_config(engine: PropLedgerEngine = Depends(get_engine)):
    """Get server configuration and metrics."""
    return ok(engine.get_config())


# ============================================================================
# Property Endpoints
# ============================================================================


@router.get("/property", response_model=Envelope[list[PropertySummaryResponse]])
async def list_properties(engine: PropLedgerEngine = Depends(get_engine)):
    """List properties."""
    return ok(engine.list_properties())


@router.post("/property", response_model=Envelope[PropertyResponse], status_code=201)
async def create_property(
    request: PropertyCreateRequest,
    engine: PropLedgerEngine = Depends(get_engine),
):
    """Register a new property."""
    return ok(engine.create_property(request))


@router.get("/property/{property_id}", response_model=Envelope[PropertyResponse])
async def get_property(
    property_id: UUID,
    engine: PropLedgerEngine = Depends(get_engine),
):
    """Get a property by ID."""
    return ok(engine.get_property(property_id))


@router.put("/property/{property_id}", response_model=Envelope[PropertyResponse])
async def update_property(
    property_id: UUID,
    request: PropertyUpdateRequest,
    engine: PropLedgerEngine = Depends(get_engine),
    actor: str = Depends(get_actor),
):
    """Update a property, recording each modified field in its history."""
    return ok(engine.update_property(property_id, request, actor))


# ============================================================================
# Property History Endpoints
# ============================================================================


@router.get("/property-history/{property_id}", response_model=Envelope[PropertyHistory])
async def query_history(
    property_id: UUID,
    filters: Annotated[HistoryFilters, Query()],
    engine: PropLedgerEngine = Depends(get_engine),
    actor: str = Depends(get_actor),
):
    """
    Query a property's change history and lifecycle events.

    Date filters apply to both changes and events; change type and
    responsible user apply to changes only. The query is audited.
    """
    return ok(engine.query_history(property_id, filters, actor))


@router.post(
    "/property-history/{property_id}/events",
    response_model=Envelope[LifecycleEventRecord],
    status_code=201,
)
async def register_lifecycle_event(
    property_id: UUID,
    request: LifecycleEventRequest,
    engine: PropLedgerEngine = Depends(get_engine),
):
    """Record a lifecycle event (contract link, tenant move, deletion marker)."""
    event = engine.register_lifecycle_event(
        property_id=property_id,
        event_type=request.event_type,
        event_description=request.event_description,
        event_impact=request.event_impact,
        related_contract_id=request.related_contract_id,
        related_tenant_id=request.related_tenant_id,
    )
    return ok(event)


@router.post("/property-history/{property_id}/export")
async def export_history(
    property_id: UUID,
    request: HistoryExportRequest,
    engine: PropLedgerEngine = Depends(get_engine),
    actor: str = Depends(get_actor),
):
    """Download a property's history as CSV or Excel."""
    export = engine.export_history(property_id, request, actor)
    return Response(
        content=export.content,
        media_type=export.content_type,
        headers={
            "Content-Disposition": f'attachment; filename="{export.filename}"',
            "X-Records-Exported": str(export.records),
        },
    )


@router.get(
    "/property-history/{property_id}/audit",
    response_model=Envelope[list[HistoryAuditRecord]],
)
async def list_audit(
    property_id: UUID,
    user_id: Optional[str] = Query(None),
    limit: Optional[int] = Query(None, ge=1),
    engine: PropLedgerEngine = Depends(get_engine),
):
    """List who consulted a property's history."""
    return ok(engine.list_audit(property_id, user_id=user_id, limit=limit))
