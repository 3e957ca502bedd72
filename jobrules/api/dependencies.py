"""FastAPI dependency injection helpers."""

from __future__ import annotations

from fastapi import Request

from jobrules.config import Collections, Settings
from jobrules.handlers.access_tightener import AccessTightener
from jobrules.handlers.notification_projector import NotificationProjector
from jobrules.infrastructure.appwrite import AppwriteDocumentStore
from jobrules.infrastructure.database import build_engine, build_session_factory
from jobrules.infrastructure.repositories import (
    JobRequestRepository,
    NotificationRepository,
)
from jobrules.infrastructure.sql_store import SqlDocumentStore
from jobrules.infrastructure.store import DocumentStore


def build_store(settings: Settings) -> DocumentStore:
    """Construct the configured store once, at process entry."""
    if settings.store_backend == "sql":
        engine = build_engine(settings.database_url)
        return SqlDocumentStore(build_session_factory(engine))
    if settings.store_backend == "appwrite":
        return AppwriteDocumentStore(
            settings.appwrite_endpoint,
            settings.appwrite_function_project_id,
            settings.appwrite_api_key,
            timeout=settings.store_timeout_seconds,
        )
    raise ValueError(f"Unknown store backend: {settings.store_backend!r}")


def get_collections(request: Request) -> Collections:
    return request.app.state.collections


def get_access_tightener(request: Request) -> AccessTightener:
    collections: Collections = request.app.state.collections
    return AccessTightener(
        JobRequestRepository(
            request.app.state.store,
            collections.database_id,
            collections.job_requests_id,
        )
    )


def get_notification_projector(request: Request) -> NotificationProjector:
    collections: Collections = request.app.state.collections
    return NotificationProjector(
        NotificationRepository(
            request.app.state.store,
            collections.database_id,
            collections.notifications_id,
        )
    )


def get_request_id(request: Request) -> str | None:
    """Correlation id for logs; never used for business logic."""
    return request.headers.get("x-appwrite-execution-id") or request.headers.get(
        "x-request-id"
    )
