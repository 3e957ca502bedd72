"""
FastAPI application factory.

* Builds settings, collections and the document store once, at startup,
  and hands them to the routes through ``app.state``.
* Closes the store on shutdown.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from jobrules.api.dependencies import build_store
from jobrules.api.middleware import build_limiter
from jobrules.api.routes import admin, events
from jobrules.config import Settings
from jobrules.infrastructure.store import DocumentStore

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None, store: Optional[DocumentStore] = None
) -> FastAPI:
    settings = settings or Settings()
    logging.basicConfig(level=settings.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await app.state.store.aclose()
        logger.info("Document store closed")

    app = FastAPI(
        title="Job Request Rules",
        description=(
            "Reacts to job-request document events: restricts each new "
            "job request to its client and driver, and upserts an "
            "idempotent notification when the driver accepts or rejects."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.collections = settings.collections()
    app.state.store = store or build_store(settings)
    logger.info(
        "Using %s store for database %s",
        settings.store_backend,
        settings.appwrite_database_id,
    )

    # Rate limiter
    app.state.limiter = build_limiter(settings.rate_limit)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # Routers
    app.include_router(events.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
