"""API dependencies."""

from fastapi import Depends, Header, Request

from propledger.config import settings
from propledger.engine import PropLedgerEngine
from propledger.store import PropertyCodeSequence, Stores


def build_stores() -> Stores:
    """Create the empty stores for one application instance."""
    return Stores(codes=PropertyCodeSequence(settings.code_lock_timeout_seconds))


def get_stores(request: Request) -> Stores:
    """Get the stores owned by the running application."""
    return request.app.state.stores


def get_engine(stores: Stores = Depends(get_stores)) -> PropLedgerEngine:
    """Get an engine bound to the application stores."""
    return PropLedgerEngine(stores)


async def get_actor(
    x_user_id: str | None = Header(None, alias="X-User-ID"),
) -> str:
    """
    Resolve the acting user for change and audit records.

    No authentication is performed: the header is taken as given, and
    requests without it act as the configured system user.
    """
    if x_user_id and x_user_id.strip():
        return x_user_id.strip()
    return settings.system_user
