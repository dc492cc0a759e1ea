"""REST API for PropLedger."""
