"""
Request validation tests.
"""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from conftest import property_payload
from propledger.api.schemas import (
    HistoryExportRequest,
    HistoryFilters,
    PropertyCreateRequest,
    PropertyUpdateRequest,
)
from propledger.models import ChangeType, ExportFormat, PropertyStatus, PropertyType
from propledger.utils.time import utc_today


def error_fields(exc: ValidationError) -> set:
    return {err["loc"][0] for err in exc.errors() if err["loc"]}


def test_valid_property_payload():
    request = PropertyCreateRequest(**property_payload())

    assert request.tipo_propriedade == PropertyType.APARTAMENTO
    assert request.vagas_garagem == 1


@pytest.mark.parametrize(
    "field,value",
    [
        ("cep", "01234567"),
        ("cep", "1234-567"),
        ("estado", "XX"),
        ("estado", "sp"),
        ("endereco_completo", "123"),
        ("endereco_completo", "Rua das Flores"),
        ("area_total", 0),
        ("area_total", 10001),
        ("quartos", 21),
        ("banheiros", 11),
        ("vagas_garagem", -1),
        ("valor_aluguel", 0),
        ("valor_condominio", -1),
        ("descricao", "x" * 1001),
        ("tipo_propriedade", "Castelo"),
    ],
)
def test_invalid_property_fields(field, value):
    with pytest.raises(ValidationError) as exc_info:
        PropertyCreateRequest(**property_payload(**{field: value}))

    assert field in error_fields(exc_info.value)


def test_commercial_property_rejects_bedrooms():
    with pytest.raises(ValidationError) as exc_info:
        PropertyCreateRequest(**property_payload(tipo_propriedade="Loja", quartos=1))

    assert "quartos" in error_fields(exc_info.value)


def test_commercial_property_without_bedrooms():
    request = PropertyCreateRequest(
        **property_payload(tipo_propriedade="Sala Comercial", quartos=None)
    )

    assert request.quartos is None
    assert request.tipo_propriedade.is_commercial()


def test_update_requires_status():
    with pytest.raises(ValidationError) as exc_info:
        PropertyUpdateRequest(**property_payload())

    assert "status" in error_fields(exc_info.value)


def test_update_change_reason_is_bounded():
    payload = property_payload(status="Ocupada", change_reason="x" * 501)

    with pytest.raises(ValidationError):
        PropertyUpdateRequest(**payload)

    request = PropertyUpdateRequest(**property_payload(status="Ocupada"))
    assert request.status == PropertyStatus.OCUPADA
    assert request.change_reason is None


# ============================================================================
# History filters
# ============================================================================


def test_filters_parse_dates():
    filters = HistoryFilters(start_date="2024-01-01", end_date="2024-01-31")

    assert filters.start_date.isoformat() == "2024-01-01"
    assert filters.applied() == {"start_date": "2024-01-01", "end_date": "2024-01-31"}


@pytest.mark.parametrize(
    "value", ["01/01/2024", "2024-1-1", "20240101", 0, 20240101, 1704067200.0, True]
)
def test_filters_reject_malformed_dates(value):
    with pytest.raises(ValidationError):
        HistoryFilters(start_date=value)


def test_filters_reject_future_dates():
    tomorrow = (utc_today() + timedelta(days=1)).isoformat()

    with pytest.raises(ValidationError):
        HistoryFilters(end_date=tomorrow)


def test_filters_reject_inverted_range():
    with pytest.raises(ValidationError) as exc_info:
        HistoryFilters(start_date="2024-02-01", end_date="2024-01-01")

    assert error_fields(exc_info.value) == {"end_date"}


def test_filters_same_day_range_is_valid():
    filters = HistoryFilters(start_date="2024-01-01", end_date="2024-01-01")

    assert filters.start_date == filters.end_date


def test_filters_change_type_includes_wildcard():
    assert HistoryFilters(change_type="todos").change_type == ChangeType.TODOS

    with pytest.raises(ValidationError):
        HistoryFilters(change_type="qualquer")


def test_export_request_validates_columns():
    request = HistoryExportRequest(
        export_format="CSV_Tabular",
        tabular_columns=["change_date", "new_value"],
    )
    assert request.export_format == ExportFormat.CSV_TABULAR
    assert request.include_details is True

    with pytest.raises(ValidationError):
        HistoryExportRequest(export_format="CSV_Tabular", tabular_columns=["senha"])

    with pytest.raises(ValidationError):
        HistoryExportRequest(export_format="CSV_Tabular", tabular_columns=[])


def test_export_request_rejects_unknown_format():
    with pytest.raises(ValidationError):
        HistoryExportRequest(export_format="Word")
