"""API request/response schemas."""

import re
from datetime import date, datetime
from typing import Any, Generic, Optional, TypeVar
from uuid import UUID

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from propledger.engine.export import CHANGE_COLUMNS
from propledger.models import (
    ChangeType,
    ExportFormat,
    LifecycleEventType,
    PropertyStatus,
    PropertyType,
)
from propledger.models.enums import VALID_ESTADOS
from propledger.models.history import CHANGE_REASON_MAX_LENGTH, EVENT_DESCRIPTION_MAX_LENGTH
from propledger.models.property import (
    AREA_MAX,
    AREA_MIN,
    BAIRRO_MAX_LENGTH,
    BANHEIROS_MAX,
    CIDADE_MAX_LENGTH,
    DESCRICAO_MAX_LENGTH,
    ENDERECO_MAX_LENGTH,
    QUARTOS_MAX,
    VAGAS_MAX,
)
from propledger.utils.time import utc_today

CEP_RE = re.compile(r"^\d{5}-\d{3}$")
# Street type and name, a comma, then the number
ENDERECO_RE = re.compile(r"^[A-Za-zÀ-ÿ\s]+\s+[A-Za-zÀ-ÿ\s]+,\s*\d+")
DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

T = TypeVar("T")


# ============================================================================
# Envelope
# ============================================================================


class Envelope(BaseModel, Generic[T]):
    """Success envelope wrapping every JSON payload."""

    success: bool = True
    data: T


class ErrorBody(BaseModel):
    """Error detail."""

    code: str
    message: str
    details: Optional[Any] = None


class ErrorEnvelope(BaseModel):
    """Failure envelope."""

    success: bool = False
    error: ErrorBody


# ============================================================================
# Property schemas
# ============================================================================


class PropertyFields(BaseModel):
    """Attributes shared by create and update payloads."""

    tipo_propriedade: PropertyType
    endereco_completo: str = Field(..., min_length=1, max_length=ENDERECO_MAX_LENGTH)
    cep: str
    bairro: str = Field(..., min_length=1, max_length=BAIRRO_MAX_LENGTH)
    cidade: str = Field(..., min_length=1, max_length=CIDADE_MAX_LENGTH)
    estado: str
    area_total: float = Field(..., ge=AREA_MIN, le=AREA_MAX)
    quartos: Optional[int] = Field(None, ge=0, le=QUARTOS_MAX)
    banheiros: Optional[int] = Field(None, ge=0, le=BANHEIROS_MAX)
    vagas_garagem: int = Field(0, ge=0, le=VAGAS_MAX)
    valor_aluguel: float = Field(..., gt=0)
    valor_condominio: Optional[float] = Field(None, ge=0)
    valor_iptu: Optional[float] = Field(None, ge=0)
    descricao: Optional[str] = Field(None, max_length=DESCRICAO_MAX_LENGTH)

    @field_validator("endereco_completo")
    @classmethod
    def validate_endereco(cls, v: str) -> str:
        if not ENDERECO_RE.match(v):
            raise ValueError("Endereço deve conter logradouro, número e seguir formato padrão")
        return v

    @field_validator("cep")
    @classmethod
    def validate_cep(cls, v: str) -> str:
        if not CEP_RE.match(v):
            raise ValueError("CEP deve estar no formato XXXXX-XXX")
        return v

    @field_validator("estado")
    @classmethod
    def validate_estado(cls, v: str) -> str:
        if v not in VALID_ESTADOS:
            raise ValueError("Informe uma UF válida")
        return v

    @field_validator("quartos")
    @classmethod
    def validate_quartos_for_type(cls, v: Optional[int], info: ValidationInfo) -> Optional[int]:
        """Commercial properties carry no bedroom count."""
        tipo = info.data.get("tipo_propriedade")
        if v is not None and tipo is not None and tipo.is_commercial():
            raise ValueError("Propriedades comerciais não devem ter número de quartos informado")
        return v


class PropertyCreateRequest(PropertyFields):
    """Create property request."""

    usuario_cadastro: str = Field(..., min_length=1)


class PropertyUpdateRequest(PropertyFields):
    """Update property request."""

    status: PropertyStatus
    change_reason: Optional[str] = Field(
        None,
        min_length=1,
        max_length=CHANGE_REASON_MAX_LENGTH,
        description="Reason recorded on every change this update produces",
    )


class PropertyResponse(BaseModel):
    """Full property."""

    property_id: UUID
    codigo_propriedade: str
    tipo_propriedade: PropertyType
    endereco_completo: str
    cep: str
    bairro: str
    cidade: str
    estado: str
    area_total: float
    quartos: Optional[int] = None
    banheiros: Optional[int] = None
    vagas_garagem: int
    valor_aluguel: float
    valor_condominio: Optional[float] = None
    valor_iptu: Optional[float] = None
    descricao: Optional[str] = None
    status: PropertyStatus
    data_cadastro: datetime
    usuario_cadastro: str


class PropertySummaryResponse(BaseModel):
    """Property list item."""

    property_id: UUID
    codigo_propriedade: str
    tipo_propriedade: PropertyType
    endereco_completo: str
    bairro: str
    cidade: str
    estado: str
    valor_aluguel: float
    status: PropertyStatus
    data_cadastro: datetime


# ============================================================================
# History schemas
# ============================================================================


class HistoryFilters(BaseModel):
    """Filters for a history query or export."""

    start_date: Optional[date] = Field(None, description="YYYY-MM-DD, inclusive")
    end_date: Optional[date] = Field(None, description="YYYY-MM-DD, inclusive")
    change_type: Optional[ChangeType] = None
    responsible_user: Optional[str] = Field(None, min_length=1)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def validate_date_format(cls, v: Any) -> Any:
        if v is None or isinstance(v, date):
            return v
        # Numbers and other JSON types would otherwise pass lax date parsing
        if not isinstance(v, str) or not DATE_RE.match(v):
            raise ValueError("Data deve estar no formato YYYY-MM-DD")
        return v

    @field_validator("start_date", "end_date")
    @classmethod
    def validate_not_future(cls, v: Optional[date]) -> Optional[date]:
        if v is not None and v > utc_today():
            raise ValueError("Data não pode ser posterior à data atual")
        return v

    @field_validator("end_date")
    @classmethod
    def validate_range(cls, v: Optional[date], info: ValidationInfo) -> Optional[date]:
        start = info.data.get("start_date")
        if v is not None and start is not None and start > v:
            raise ValueError("Data final deve ser posterior ou igual à data inicial")
        return v

    def applied(self) -> dict[str, Any]:
        """Filters actually set, in JSON-friendly form."""
        return self.model_dump(mode="json", exclude_none=True)


class CondensedCriteria(BaseModel):
    """Selection criteria for condensed reports."""

    apenas_alteracoes_principais: Optional[bool] = None
    eventos_criticos_apenas: Optional[bool] = None
    periodo_resumido: Optional[bool] = None


class HistoryExportRequest(HistoryFilters):
    """History export request."""

    export_format: ExportFormat
    include_details: bool = Field(True, description="Append lifecycle events")
    structured_sections: Optional[list[str]] = None
    tabular_columns: Optional[list[str]] = Field(
        None, description="Change columns to include, in order"
    )
    condensed_criteria: Optional[CondensedCriteria] = None

    @field_validator("tabular_columns")
    @classmethod
    def validate_columns(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        if v is None:
            return v
        if not v:
            raise ValueError("Informe ao menos uma coluna")
        unknown = [c for c in v if c not in CHANGE_COLUMNS]
        if unknown:
            raise ValueError(f"Colunas desconhecidas: {', '.join(unknown)}")
        return v


class LifecycleEventRequest(BaseModel):
    """Register lifecycle event request."""

    event_type: LifecycleEventType
    event_description: str = Field(..., min_length=1, max_length=EVENT_DESCRIPTION_MAX_LENGTH)
    event_impact: str = Field(..., min_length=1)
    related_contract_id: Optional[str] = None
    related_tenant_id: Optional[str] = None


# ============================================================================
# Health & Config
# ============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


class ConfigResponse(BaseModel):
    """Server configuration response."""

    version: str
    environment: str
    system_user: str
    max_properties: int
    default_list_limit: int
    max_list_limit: int
    counts: dict[str, int]
    metrics: dict[str, Any]
