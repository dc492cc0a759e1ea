"""PropLedger - rental property registry with change history and audit trail."""

__version__ = "0.1.0"
