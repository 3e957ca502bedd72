"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) for the SQL document
store, and an ``httpx.MockTransport`` standing in for the Appwrite REST
API, so tests run without Docker / PostgreSQL / Appwrite.
"""

from __future__ import annotations

import json
from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.pool import StaticPool

from jobrules.config import Collections
from jobrules.infrastructure.appwrite import AppwriteDocumentStore
from jobrules.infrastructure.database import (
    Base,
    build_engine,
    build_session_factory,
)
from jobrules.infrastructure.models import DocumentModel  # noqa: F401  (registers table)
from jobrules.infrastructure.sql_store import SqlDocumentStore

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

OPEN_PERMISSIONS = ['read("users")', 'update("users")']


# ── Fake Appwrite API ─────────────────────────────────────────────────


class FakeAppwrite:
    """
    In-memory imitation of the Appwrite databases endpoints used by
    ``AppwriteDocumentStore``: create (409 on duplicate id), get and
    patch (404 when missing).
    """

    API_KEY = "server-key"

    def __init__(self):
        self.documents: dict[tuple[str, str, str], dict] = {}
        self.requests: list[httpx.Request] = []
        self.fail_status: int | None = None
        self.unreachable = False

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)
        if request.headers.get("X-Appwrite-Key") != self.API_KEY:
            return httpx.Response(401, json={"message": "Unauthorized", "code": 401})
        if self.fail_status:
            return httpx.Response(
                self.fail_status, json={"message": "Server error", "code": self.fail_status}
            )

        parts = request.url.path.strip("/").split("/")
        # v1 / databases / {db} / collections / {col} / documents [/ {id}]
        db, col = parts[2], parts[4]
        body = json.loads(request.content) if request.content else {}

        if request.method == "POST":
            key = (db, col, body["documentId"])
            if key in self.documents:
                return httpx.Response(
                    409,
                    json={
                        "message": "Document with the requested ID already exists.",
                        "code": 409,
                        "type": "document_already_exists",
                    },
                )
            self.documents[key] = {
                "$id": key[2],
                "$collectionId": col,
                "$databaseId": db,
                "$permissions": list(body.get("permissions", [])),
                **body.get("data", {}),
            }
            return httpx.Response(201, json=self.documents[key])

        key = (db, col, parts[6])
        if key not in self.documents:
            return httpx.Response(
                404,
                json={"message": "Document with the requested ID could not be found.", "code": 404},
            )
        if request.method == "PATCH":
            doc = self.documents[key]
            doc.update(body.get("data", {}))
            if "permissions" in body:
                doc["$permissions"] = list(body["permissions"])
        return httpx.Response(200, json=self.documents[key])


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest.fixture
def collections() -> Collections:
    return Collections(
        database_id="main",
        job_requests_id="job_requests",
        notifications_id="notifications",
    )


@pytest_asyncio.fixture
async def sql_store() -> AsyncGenerator[SqlDocumentStore, None]:
    """Create tables, yield a store, then drop everything."""
    engine = build_engine(TEST_DB_URL, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield SqlDocumentStore(build_session_factory(engine))

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def fake_appwrite() -> FakeAppwrite:
    return FakeAppwrite()


@pytest_asyncio.fixture
async def appwrite_store(
    fake_appwrite: FakeAppwrite,
) -> AsyncGenerator[AppwriteDocumentStore, None]:
    store = AppwriteDocumentStore(
        "http://appwrite.test/v1",
        "project-1",
        FakeAppwrite.API_KEY,
        transport=fake_appwrite.transport(),
    )
    yield store
    await store.aclose()


@pytest.fixture
def seed_job_request(collections: Collections):
    """Write a job request as the app would, before any rule has run."""

    async def _seed(store, doc: dict) -> None:
        data = {k: v for k, v in doc.items() if k != "$id"}
        await store.create_document(
            collections.database_id,
            collections.job_requests_id,
            doc["$id"],
            data,
            OPEN_PERMISSIONS,
        )

    return _seed
