"""PropLedger enumerations."""

from enum import Enum


class PropertyType(str, Enum):
    """Kind of rental property."""

    CASA = "Casa"
    APARTAMENTO = "Apartamento"
    KITNET = "Kitnet"
    LOJA = "Loja"
    SALA_COMERCIAL = "Sala Comercial"
    GALPAO = "Galpão"

    @classmethod
    def commercial_types(cls) -> set["PropertyType"]:
        """Return types where bedrooms do not apply."""
        return {cls.LOJA, cls.SALA_COMERCIAL, cls.GALPAO}

    def is_commercial(self) -> bool:
        """Check if the type is commercial."""
        return self in self.commercial_types()


class PropertyStatus(str, Enum):
    """Property availability status."""

    DISPONIVEL = "Disponível"
    OCUPADA = "Ocupada"
    MANUTENCAO = "Manutenção"
    INATIVA = "Inativa"


class ChangeType(str, Enum):
    """Classification tag of a recorded field change."""

    # Rent, condominium fee or property tax
    MUDANCAS_VALOR_ALUGUEL = "mudancas_valor_aluguel"
    ALTERACOES_STATUS_PROPRIEDADE = "alteracoes_status_propriedade"
    MODIFICACOES_DESCRICAO_PROPRIEDADE = "modificacoes_descricao_propriedade"
    # Type, address and physical attributes
    ATUALIZACOES_CARACTERISTICAS = "atualizacoes_caracteristicas"
    MUDANCAS_DADOS_CONTATO_PROPRIETARIO = "mudancas_dados_contato_proprietario"
    # Query wildcard, never stored on a record
    TODOS = "todos"


class LifecycleEventType(str, Enum):
    """Discrete occurrences in a property's life."""

    CRIACAO_PROPRIEDADE_SISTEMA = "criacao_propriedade_sistema"
    VINCULACAO_CONTRATO = "vinculacao_contrato"
    DESVINCULACAO_CONTRATO = "desvinculacao_contrato"
    ENTRADA_INQUILINO = "entrada_inquilino"
    SAIDA_INQUILINO = "saida_inquilino"
    EXCLUSAO_PROPRIEDADE = "exclusao_propriedade"


class ExportFormat(str, Enum):
    """History export formats."""

    PDF_ESTRUTURADO = "PDF_Estruturado"
    EXCEL_TABULAR = "Excel_Tabular"
    CSV_TABULAR = "CSV_Tabular"
    PDF_RESUMIDO = "PDF_Resumido"

    def is_tabular(self) -> bool:
        """Check if the format renders as a table."""
        return self in {ExportFormat.EXCEL_TABULAR, ExportFormat.CSV_TABULAR}


# Brazilian state abbreviations (UF)
VALID_ESTADOS = frozenset(
    {
        "AC", "AL", "AP", "AM", "BA", "CE", "DF", "ES", "GO",
        "MA", "MT", "MS", "MG", "PA", "PB", "PR", "PE", "PI",
        "RJ", "RN", "RS", "RO", "RR", "SC", "SP", "SE", "TO",
    }
)
