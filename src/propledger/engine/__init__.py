"""PropLedger engine - property registry and history operations."""

from propledger.engine.errors import (
    AppendOnlyViolation,
    DuplicateAddress,
    ExportFormatUnavailable,
    MaxRecordsReached,
    PropertyNotFound,
    PropLedgerError,
    SequenceLockTimeout,
)
from propledger.engine.core import HistoryExport, PropLedgerEngine

__all__ = [
    "AppendOnlyViolation",
    "DuplicateAddress",
    "ExportFormatUnavailable",
    "HistoryExport",
    "MaxRecordsReached",
    "PropLedgerEngine",
    "PropLedgerError",
    "PropertyNotFound",
    "SequenceLockTimeout",
]
