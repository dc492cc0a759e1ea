"""Tabular rendering of property history (CSV and Excel)."""

import csv
import io
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from propledger.models import ExportFormat, LifecycleEventRecord, PropertyChangeRecord

CHANGE_COLUMNS: dict[str, str] = {
    "change_date": "Data da Alteração",
    "change_type": "Tipo de Alteração",
    "field_modified": "Campo Modificado",
    "previous_value": "Valor Anterior",
    "new_value": "Novo Valor",
    "change_reason": "Motivo",
    "user_responsible": "Responsável",
    "property_status": "Status da Propriedade",
    "change_id": "ID da Alteração",
}

EVENT_COLUMNS: dict[str, str] = {
    "event_date": "Data do Evento",
    "event_type": "Tipo de Evento",
    "event_description": "Descrição",
    "event_impact": "Impacto",
    "related_contract_id": "Contrato Relacionado",
    "related_tenant_id": "Inquilino Relacionado",
    "event_id": "ID do Evento",
}

CONTENT_TYPES = {
    ExportFormat.CSV_TABULAR: "text/csv; charset=utf-8",
    ExportFormat.EXCEL_TABULAR: (
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    ),
}

EXTENSIONS = {
    ExportFormat.CSV_TABULAR: "csv",
    ExportFormat.EXCEL_TABULAR: "xlsx",
}


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, Enum):
        return value.value
    return str(value)


def _rows(records: Iterable[Any], columns: list[str]) -> list[list[Any]]:
    return [[_cell(getattr(record, column)) for column in columns] for record in records]


def render_csv(
    changes: list[PropertyChangeRecord],
    events: Optional[list[LifecycleEventRecord]],
    change_columns: list[str],
) -> bytes:
    """Render changes, then events after a blank row, as UTF-8 CSV with BOM."""
    buffer = io.StringIO()
    # BOM so spreadsheet tools detect UTF-8
    buffer.write("\ufeff")
    writer = csv.writer(buffer)

    writer.writerow([CHANGE_COLUMNS[c] for c in change_columns])
    writer.writerows(_rows(changes, change_columns))

    if events is not None:
        event_columns = list(EVENT_COLUMNS)
        writer.writerow([])
        writer.writerow([EVENT_COLUMNS[c] for c in event_columns])
        writer.writerows(_rows(events, event_columns))

    return buffer.getvalue().encode("utf-8")


def _write_sheet(sheet, headers: list[str], rows: list[list[Any]]) -> None:
    header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
    header_font = Font(bold=True, color="FFFFFF")

    for col_num, header in enumerate(headers, 1):
        cell = sheet.cell(row=1, column=col_num)
        cell.value = header
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal="center", vertical="center")

    for row_num, row in enumerate(rows, 2):
        for col_num, value in enumerate(row, 1):
            sheet.cell(row=row_num, column=col_num).value = value

    for col_num in range(1, len(headers) + 1):
        sheet.column_dimensions[get_column_letter(col_num)].width = 22


def render_excel(
    changes: list[PropertyChangeRecord],
    events: Optional[list[LifecycleEventRecord]],
    change_columns: list[str],
) -> bytes:
    """Render changes (and events on a second sheet) as an xlsx workbook."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Alteracoes"
    _write_sheet(
        ws,
        [CHANGE_COLUMNS[c] for c in change_columns],
        _rows(changes, change_columns),
    )

    if events is not None:
        event_columns = list(EVENT_COLUMNS)
        _write_sheet(
            wb.create_sheet("Eventos"),
            [EVENT_COLUMNS[c] for c in event_columns],
            _rows(events, event_columns),
        )

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


RENDERERS = {
    ExportFormat.CSV_TABULAR: render_csv,
    ExportFormat.EXCEL_TABULAR: render_excel,
}
