"""PropLedger main application."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from propledger import __version__
from propledger.api.deps import build_stores
from propledger.api.errors import register_error_handlers
from propledger.api.router import router
from propledger.config import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("propledger")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting PropLedger server...")
    logger.info(f"Environment: {settings.env.value}")
    logger.info(f"Acting user for unattributed requests: {settings.system_user}")
    logger.info(f"Property registry capacity: {settings.max_properties}")

    yield

    stores = app.state.stores
    logger.info(
        f"Shutting down PropLedger server: {stores.properties.count()} properties, "
        f"{stores.history.count_changes()} changes, {stores.audits.count()} audits in memory"
    )


# Create FastAPI application
app = FastAPI(
    title="PropLedger",
    description="Rental property registry with change history and audit trail",
    version=__version__,
    lifespan=lifespan,
)

# In-memory stores live as long as the process
app.state.stores = build_stores()

# CORS (explicit allowlist)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allowed_methods,
    allow_headers=settings.cors_allowed_headers,
)

register_error_handlers(app)

# Include API router
app.include_router(router)


def main():
    """Entry point for the application."""
    uvicorn.run(
        "propledger.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
