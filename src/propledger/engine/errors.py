"""PropLedger engine errors."""

from typing import Any, Optional


class PropLedgerError(Exception):
    """Base error for PropLedger operations."""

    status_code = 500

    def __init__(
        self,
        message: str,
        code: str = "PROPLEDGER_ERROR",
        details: Optional[Any] = None,
    ):
        self.message = message
        self.code = code
        self.details = details
        super().__init__(message)


class PropertyNotFound(PropLedgerError):
    """Property does not exist."""

    status_code = 404

    def __init__(self, property_id: str):
        super().__init__("Propriedade não encontrada", "NOT_FOUND")
        self.property_id = property_id


class DuplicateAddress(PropLedgerError):
    """Another property is registered at the same address."""

    status_code = 409

    def __init__(self, on_update: bool = False):
        subject = "outra propriedade" if on_update else "uma propriedade"
        super().__init__(
            f"Já existe {subject} cadastrada com este endereço completo, "
            "bairro, CEP, cidade e estado",
            "DUPLICATE_ADDRESS",
        )


class MaxRecordsReached(PropLedgerError):
    """Property registry is full."""

    status_code = 507

    def __init__(self, limit: int):
        super().__init__("Limite máximo de propriedades atingido", "MAX_RECORDS_REACHED")
        self.limit = limit


class ExportFormatUnavailable(PropLedgerError):
    """Export format is recognized but cannot be rendered."""

    status_code = 501

    def __init__(self, export_format: str):
        super().__init__(
            f"Formato de exportação indisponível: {export_format}",
            "EXPORT_FORMAT_UNAVAILABLE",
        )
        self.export_format = export_format


class SequenceLockTimeout(PropLedgerError):
    """Property code sequence stayed locked past the timeout."""

    status_code = 503

    def __init__(self, day: str):
        super().__init__(
            "Sistema ocupado, tente novamente em alguns segundos",
            "LOCK_TIMEOUT",
        )
        self.day = day


class AppendOnlyViolation(PropLedgerError):
    """Attempt to overwrite an existing history record."""

    status_code = 409

    def __init__(self, kind: str, record_id: str):
        super().__init__(
            f"{kind} record already exists: {record_id}",
            "APPEND_ONLY_VIOLATION",
        )
        self.kind = kind
        self.record_id = record_id
