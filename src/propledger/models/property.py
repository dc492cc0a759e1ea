"""Property model - a registered rental unit."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from propledger.models.enums import PropertyStatus, PropertyType

# Field bounds shared by request validation and the engine
ENDERECO_MAX_LENGTH = 200
BAIRRO_MAX_LENGTH = 100
CIDADE_MAX_LENGTH = 100
AREA_MIN = 0.01
AREA_MAX = 10000
QUARTOS_MAX = 20
BANHEIROS_MAX = 10
VAGAS_MAX = 20
DESCRICAO_MAX_LENGTH = 1000

# Attributes an update may modify, in the order changes are recorded
MUTABLE_FIELDS = (
    "tipo_propriedade",
    "endereco_completo",
    "cep",
    "bairro",
    "cidade",
    "estado",
    "area_total",
    "quartos",
    "banheiros",
    "vagas_garagem",
    "valor_aluguel",
    "valor_condominio",
    "valor_iptu",
    "descricao",
    "status",
)


class Property(BaseModel):
    """A rental property as held in the registry."""

    # Identity
    property_id: UUID
    codigo_propriedade: str

    tipo_propriedade: PropertyType

    # Address
    endereco_completo: str
    cep: str
    bairro: str
    cidade: str
    estado: str

    # Attributes
    area_total: float
    quartos: Optional[int] = None
    banheiros: Optional[int] = None
    vagas_garagem: int = 0

    # Values
    valor_aluguel: float
    valor_condominio: Optional[float] = None
    valor_iptu: Optional[float] = None

    descricao: Optional[str] = None
    status: PropertyStatus = PropertyStatus.DISPONIVEL

    # Registration metadata (immutable after creation)
    data_cadastro: datetime
    usuario_cadastro: str

    def address_key(self) -> tuple[str, str, str, str, str]:
        """Return the normalized address tuple used for uniqueness."""
        return address_key(
            self.endereco_completo, self.bairro, self.cep, self.cidade, self.estado
        )


class PropertySummary(BaseModel):
    """Lightweight property projection for list responses."""

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

    @classmethod
    def from_property(cls, prop: Property) -> "PropertySummary":
        return cls(**prop.model_dump(include=set(cls.model_fields)))


def address_key(
    endereco_completo: str, bairro: str, cep: str, cidade: str, estado: str
) -> tuple[str, str, str, str, str]:
    """Normalize an address: text fields folded to lower case, UF upper case, CEP exact."""
    return (
        endereco_completo.lower(),
        bairro.lower(),
        cep,
        cidade.lower(),
        estado.upper(),
    )
