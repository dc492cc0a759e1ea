"""PropLedger core engine - property registry and history operations."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional
from uuid import UUID, uuid4

from propledger import __version__
from propledger.config import settings
from propledger.engine.changes import classify_field, diff_properties, stringify
from propledger.engine.errors import (
    DuplicateAddress,
    ExportFormatUnavailable,
    MaxRecordsReached,
    PropertyNotFound,
)
from propledger.engine.export import CHANGE_COLUMNS, CONTENT_TYPES, EXTENSIONS, RENDERERS
from propledger.models import (
    ChangeType,
    ExportFormat,
    HistoryAuditRecord,
    HistorySummary,
    LifecycleEventRecord,
    LifecycleEventType,
    Property,
    PropertyChangeRecord,
    PropertyHistory,
    PropertyStatus,
    PropertySummary,
)
from propledger.observability.metrics import metrics
from propledger.utils.time import day_stamp, end_of_day, start_of_day, utc_now

if TYPE_CHECKING:
    from propledger.api.schemas import (
        HistoryExportRequest,
        HistoryFilters,
        PropertyCreateRequest,
        PropertyUpdateRequest,
    )
    from propledger.store import Stores

logger = logging.getLogger(__name__)


@dataclass
class HistoryExport:
    """A rendered history export ready to be sent."""

    filename: str
    content_type: str
    content: bytes
    records: int


class PropLedgerEngine:
    """Core engine implementing PropLedger operations over the in-memory stores."""

    def __init__(self, stores: "Stores"):
        self.stores = stores
        self.properties = stores.properties
        self.history = stores.history
        self.audits = stores.audits
        self.codes = stores.codes

    def _get_property_or_raise(self, property_id: UUID) -> Property:
        prop = self.properties.get(property_id)
        if prop is None:
            raise PropertyNotFound(str(property_id))
        return prop

    def _generate_code(self) -> str:
        """Next code of the form PROP-YYYYMMDD-NNN for the current UTC day."""
        day = day_stamp(utc_now())
        sequence = self.codes.next(day)
        return f"PROP-{day}-{sequence:03d}"

    # =========================================================================
    # Property operations
    # =========================================================================

    def list_properties(self) -> list[PropertySummary]:
        """List every registered property."""
        return [PropertySummary.from_property(p) for p in self.properties.all()]

    def get_property(self, property_id: UUID) -> Property:
        """Get a property by ID."""
        return self._get_property_or_raise(property_id)

    def create_property(self, request: "PropertyCreateRequest") -> Property:
        """
        Register a new property.

        The address must be unique and the registry must have room. The new
        property starts as Disponível and gets a creation lifecycle event.
        """
        if self.properties.exists_by_address(
            request.endereco_completo,
            request.bairro,
            request.cep,
            request.cidade,
            request.estado,
        ):
            metrics.inc_counter("properties.rejected.duplicate_address")
            logger.info(f"Rejected property at duplicate address: {request.endereco_completo}")
            raise DuplicateAddress()

        if self.properties.count() >= settings.max_properties:
            logger.warning(f"Property registry full ({settings.max_properties} records)")
            raise MaxRecordsReached(settings.max_properties)

        prop = Property(
            property_id=uuid4(),
            codigo_propriedade=self._generate_code(),
            status=PropertyStatus.DISPONIVEL,
            data_cadastro=utc_now(),
            **request.model_dump(),
        )
        self.properties.add(prop)

        self.register_lifecycle_event(
            property_id=prop.property_id,
            event_type=LifecycleEventType.CRIACAO_PROPRIEDADE_SISTEMA,
            event_description=f"Propriedade {prop.codigo_propriedade} cadastrada no sistema",
            event_impact="Propriedade disponível para locação",
        )

        metrics.inc_counter("properties.created")
        logger.info(f"Created property {prop.codigo_propriedade} ({prop.property_id})")
        return prop

    def update_property(
        self,
        property_id: UUID,
        request: "PropertyUpdateRequest",
        actor: str,
    ) -> Property:
        """
        Apply an update and record one change per modified field.

        The address may not collide with any other property. An update that
        modifies nothing records nothing.
        """
        existing = self._get_property_or_raise(property_id)

        if self.properties.exists_by_address(
            request.endereco_completo,
            request.bairro,
            request.cep,
            request.cidade,
            request.estado,
            exclude_id=property_id,
        ):
            metrics.inc_counter("properties.rejected.duplicate_address")
            raise DuplicateAddress(on_update=True)

        updated = existing.model_copy(update=request.model_dump(exclude={"change_reason"}))
        self.properties.update(updated)

        reason = request.change_reason or settings.default_change_reason
        changed = diff_properties(existing, updated)
        for field_name, old, new in changed:
            self.register_change(
                property_id=property_id,
                user_responsible=actor,
                field_modified=field_name,
                previous_value=stringify(field_name, old),
                new_value=stringify(field_name, new) or "",
                change_reason=reason,
                property_status=updated.status,
                change_type=classify_field(field_name),
            )

        metrics.inc_counter("properties.updated")
        logger.info(
            f"Updated property {updated.codigo_propriedade}: "
            f"{len(changed)} field(s) changed by {actor}"
        )
        return updated

    # =========================================================================
    # History recording
    # =========================================================================

    def register_change(
        self,
        property_id: UUID,
        user_responsible: str,
        field_modified: str,
        previous_value: Optional[str],
        new_value: str,
        change_reason: str,
        property_status: PropertyStatus,
        change_type: ChangeType,
    ) -> PropertyChangeRecord:
        """Append a change record."""
        change = PropertyChangeRecord(
            change_id=uuid4(),
            property_id=property_id,
            change_date=utc_now(),
            user_responsible=user_responsible,
            field_modified=field_modified,
            previous_value=previous_value,
            new_value=new_value,
            change_reason=change_reason,
            property_status=property_status,
            change_type=change_type,
        )
        self.history.add_change(change)
        metrics.inc_counter("history.changes.recorded")
        return change

    def register_lifecycle_event(
        self,
        property_id: UUID,
        event_type: LifecycleEventType,
        event_description: str,
        event_impact: str,
        related_contract_id: Optional[str] = None,
        related_tenant_id: Optional[str] = None,
    ) -> LifecycleEventRecord:
        """Append a lifecycle event for an existing property."""
        self._get_property_or_raise(property_id)

        event = LifecycleEventRecord(
            event_id=uuid4(),
            property_id=property_id,
            event_type=event_type,
            event_date=utc_now(),
            event_description=event_description,
            related_contract_id=related_contract_id or None,
            related_tenant_id=related_tenant_id or None,
            event_impact=event_impact,
        )
        self.history.add_event(event)
        metrics.inc_counter("history.events.recorded")
        logger.debug(f"Lifecycle event {event_type.value} on property {property_id}")
        return event

    # =========================================================================
    # History queries
    # =========================================================================

    def _filtered_history(
        self,
        property_id: UUID,
        filters: "HistoryFilters",
    ) -> tuple[list[PropertyChangeRecord], list[LifecycleEventRecord]]:
        """Apply filters to a property's changes and events, newest first."""
        changes = self.history.changes_for(property_id)
        events = self.history.events_for(property_id)

        if filters.start_date:
            lower = start_of_day(filters.start_date)
            changes = [c for c in changes if c.change_date >= lower]
            events = [e for e in events if e.event_date >= lower]

        if filters.end_date:
            upper = end_of_day(filters.end_date)
            changes = [c for c in changes if c.change_date <= upper]
            events = [e for e in events if e.event_date <= upper]

        # Events carry no type tag or user, so only the date range applies to them
        if filters.change_type and filters.change_type != ChangeType.TODOS:
            changes = [c for c in changes if c.change_type == filters.change_type]

        if filters.responsible_user:
            wanted = filters.responsible_user.lower()
            changes = [c for c in changes if c.user_responsible.lower() == wanted]

        return changes, events

    def _record_audit(
        self,
        property_id: UUID,
        actor: str,
        applied_filters: dict[str, Any],
        records_returned: int,
        export_format: Optional[ExportFormat] = None,
    ) -> HistoryAuditRecord:
        audit = HistoryAuditRecord(
            audit_id=uuid4(),
            user_id=actor,
            consulted_property_id=property_id,
            consultation_timestamp=utc_now(),
            applied_filters=applied_filters,
            records_returned=records_returned,
            exported=export_format is not None,
            export_format=export_format,
        )
        return self.audits.add(audit)

    def query_history(
        self,
        property_id: UUID,
        filters: "HistoryFilters",
        actor: str,
    ) -> PropertyHistory:
        """
        Query a property's history.

        Totals count the filtered records; the first/last change dates span
        every change of the property regardless of filters. Each query is
        audited.
        """
        self._get_property_or_raise(property_id)

        with metrics.timed("history.query_ms"):
            changes, events = self._filtered_history(property_id, filters)
            all_changes = self.history.changes_for(property_id)

        summary = HistorySummary(
            total_changes=len(changes),
            total_events=len(events),
            first_change_date=all_changes[-1].change_date if all_changes else None,
            last_change_date=all_changes[0].change_date if all_changes else None,
        )

        self._record_audit(
            property_id=property_id,
            actor=actor,
            applied_filters={"property_id": str(property_id), **filters.applied()},
            records_returned=len(changes) + len(events),
        )

        metrics.inc_counter("history.queries")
        logger.info(
            f"History query on {property_id} by {actor}: "
            f"{len(changes)} change(s), {len(events)} event(s)"
        )
        return PropertyHistory(changes=changes, lifecycle_events=events, summary=summary)

    def export_history(
        self,
        property_id: UUID,
        request: "HistoryExportRequest",
        actor: str,
    ) -> HistoryExport:
        """Render a property's filtered history as a downloadable table."""
        prop = self._get_property_or_raise(property_id)

        # PDF layouts are accepted but not rendered
        if not request.export_format.is_tabular():
            raise ExportFormatUnavailable(request.export_format.value)
        renderer = RENDERERS[request.export_format]

        changes, events = self._filtered_history(property_id, request)
        columns = request.tabular_columns or list(CHANGE_COLUMNS)
        included_events = events if request.include_details else None

        content = renderer(changes, included_events, columns)
        records = len(changes) + len(included_events or [])

        applied = {"property_id": str(property_id), **request.applied()}
        self._record_audit(
            property_id=property_id,
            actor=actor,
            applied_filters=applied,
            records_returned=records,
            export_format=request.export_format,
        )

        metrics.inc_counter("history.exports")
        logger.info(
            f"History export {request.export_format.value} of {prop.codigo_propriedade} "
            f"by {actor}: {records} record(s)"
        )

        timestamp = utc_now().strftime("%Y%m%d_%H%M%S")
        return HistoryExport(
            filename=(
                f"historico_{prop.codigo_propriedade}_{timestamp}."
                f"{EXTENSIONS[request.export_format]}"
            ),
            content_type=CONTENT_TYPES[request.export_format],
            content=content,
            records=records,
        )

    def list_audit(
        self,
        property_id: UUID,
        user_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[HistoryAuditRecord]:
        """Audit trail of a property's history consultations, newest first."""
        self._get_property_or_raise(property_id)

        audits = self.audits.for_property(property_id)
        if user_id:
            audits = [a for a in audits if a.user_id == user_id]
        return audits[: settings.resolve_limit(limit)]

    # =========================================================================
    # Config
    # =========================================================================

    def get_config(self) -> dict[str, Any]:
        """Return server configuration and current metrics."""
        counts = {
            "properties": self.properties.count(),
            "changes": self.history.count_changes(),
            "lifecycle_events": self.history.count_events(),
            "audits": self.audits.count(),
        }
        for name, value in counts.items():
            metrics.set_gauge(f"store.{name}", value)

        return {
            "version": __version__,
            "environment": settings.env.value,
            "system_user": settings.system_user,
            "max_properties": settings.max_properties,
            "default_list_limit": settings.default_list_limit,
            "max_list_limit": settings.max_list_limit,
            "counts": counts,
            "metrics": metrics.snapshot(),
        }
