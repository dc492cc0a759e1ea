"""Observability helpers for PropLedger."""

from propledger.observability.metrics import metrics

__all__ = ["metrics"]
