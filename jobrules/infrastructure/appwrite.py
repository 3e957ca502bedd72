"""
Appwrite databases REST client.

Authenticates with the project's server API key, which bypasses
per-document permissions -- required because the rules rewrite the
permission lists of documents the key's owner is not listed on.

Status mapping
--------------
* 409            -> ``CreateResult.conflict()`` (create only)
* 404            -> ``DocumentNotFoundError``
* other non-2xx  -> ``StoreError``
* transport      -> ``StoreUnavailableError``
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from jobrules.domain.errors import (
    DocumentNotFoundError,
    StoreError,
    StoreUnavailableError,
)

from .store import CreateResult, Document, DocumentStore

logger = logging.getLogger(__name__)

_SYSTEM_ATTRIBUTES = (
    "$id",
    "$collectionId",
    "$databaseId",
    "$createdAt",
    "$updatedAt",
    "$permissions",
    "$sequence",
)


def _to_document(body: dict[str, Any], collection_id: str) -> Document:
    return Document(
        id=body.get("$id", ""),
        collection_id=body.get("$collectionId", collection_id),
        data={k: v for k, v in body.items() if k not in _SYSTEM_ATTRIBUTES},
        permissions=list(body.get("$permissions") or []),
    )


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        return body.get("message") or response.text
    return response.text


class AppwriteDocumentStore(DocumentStore):
    def __init__(
        self,
        endpoint: str,
        project_id: str,
        api_key: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client = httpx.AsyncClient(
            base_url=endpoint.rstrip("/"),
            headers={
                "X-Appwrite-Project": project_id,
                "X-Appwrite-Key": api_key,
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @staticmethod
    def _path(database_id: str, collection_id: str, document_id: str = "") -> str:
        path = f"/databases/{database_id}/collections/{collection_id}/documents"
        return f"{path}/{document_id}" if document_id else path

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return await self.client.request(method, url, **kwargs)
        except httpx.TransportError as exc:
            logger.warning("Appwrite %s %s failed: %r", method, url, exc)
            raise StoreUnavailableError(
                f"Appwrite unreachable ({type(exc).__name__}): {exc}"
            ) from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response, document_id: str) -> None:
        if response.is_success:
            return
        message = _error_message(response)
        logger.warning(
            "Appwrite answered %s for document %s: %s",
            response.status_code,
            document_id,
            message,
        )
        if response.status_code == 404:
            raise DocumentNotFoundError(f"Document {document_id} not found: {message}")
        raise StoreError(f"Appwrite error {response.status_code}: {message}")

    async def get_document(
        self, database_id: str, collection_id: str, document_id: str
    ) -> Document:
        response = await self._send(
            "GET", self._path(database_id, collection_id, document_id)
        )
        self._raise_for_status(response, document_id)
        return _to_document(response.json(), collection_id)

    async def create_document(
        self,
        database_id: str,
        collection_id: str,
        document_id: str,
        data: dict[str, Any],
        permissions: list[str],
    ) -> CreateResult:
        try:
            response = await self._send(
                "POST",
                self._path(database_id, collection_id),
                json={
                    "documentId": document_id,
                    "data": data,
                    "permissions": permissions,
                },
            )
        except StoreUnavailableError as exc:
            return CreateResult.failed(exc)

        if response.status_code == 409:
            logger.debug("Document %s already exists in %s", document_id, collection_id)
            return CreateResult.conflict()
        try:
            self._raise_for_status(response, document_id)
        except StoreError as exc:
            return CreateResult.failed(exc)
        return CreateResult.created(_to_document(response.json(), collection_id))

    async def update_document(
        self,
        database_id: str,
        collection_id: str,
        document_id: str,
        data: dict[str, Any],
        permissions: list[str] | None = None,
    ) -> Document:
        body: dict[str, Any] = {"data": data}
        if permissions is not None:
            body["permissions"] = permissions
        response = await self._send(
            "PATCH", self._path(database_id, collection_id, document_id), json=body
        )
        self._raise_for_status(response, document_id)
        return _to_document(response.json(), collection_id)

    async def aclose(self) -> None:
        await self.client.aclose()
