"""Field-level diffing and change classification."""

from enum import Enum
from typing import Any, Optional

from propledger.models import ChangeType, Property
from propledger.models.property import MUTABLE_FIELDS

MONETARY_FIELDS = frozenset({"valor_aluguel", "valor_condominio", "valor_iptu"})

FIELD_CHANGE_TYPES: dict[str, ChangeType] = {
    "valor_aluguel": ChangeType.MUDANCAS_VALOR_ALUGUEL,
    "valor_condominio": ChangeType.MUDANCAS_VALOR_ALUGUEL,
    "valor_iptu": ChangeType.MUDANCAS_VALOR_ALUGUEL,
    "status": ChangeType.ALTERACOES_STATUS_PROPRIEDADE,
    "descricao": ChangeType.MODIFICACOES_DESCRICAO_PROPRIEDADE,
}


def classify_field(field_name: str) -> ChangeType:
    """Return the change type recorded for a modified field."""
    return FIELD_CHANGE_TYPES.get(field_name, ChangeType.ATUALIZACOES_CARACTERISTICAS)


def stringify(field_name: str, value: Any) -> Optional[str]:
    """Render a field value the way history records store it."""
    if value is None:
        return None
    if isinstance(value, Enum):
        return value.value
    if field_name in MONETARY_FIELDS:
        return f"{float(value):.2f}"
    return str(value)


def diff_properties(before: Property, after: Property) -> list[tuple[str, Any, Any]]:
    """
    List (field, old, new) for every mutable field that differs.

    Registration metadata and identity never appear here.
    """
    changed = []
    for name in MUTABLE_FIELDS:
        old = getattr(before, name)
        new = getattr(after, name)
        if old != new:
            changed.append((name, old, new))
    return changed
