"""
Document store abstraction.

The rules only need four things from a store: read a document, create
one if its id is free, patch an existing one (optionally replacing its
permission list) and close.  Each call is atomic for a single document;
there are no multi-document transactions.

``create_document`` does not raise on an id conflict.  It returns a
``CreateResult`` so callers branch on an explicit case instead of
inspecting error codes.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

from jobrules.domain.errors import StoreError


@dataclass
class Document:
    id: str
    collection_id: str
    data: dict[str, Any] = field(default_factory=dict)
    permissions: list[str] = field(default_factory=list)


class CreateStatus(str, enum.Enum):
    CREATED = "CREATED"
    CONFLICT = "CONFLICT"
    FAILED = "FAILED"


@dataclass(frozen=True)
class CreateResult:
    status: CreateStatus
    document: Optional[Document] = None
    error: Optional[StoreError] = None

    @classmethod
    def created(cls, document: Document) -> CreateResult:
        return cls(CreateStatus.CREATED, document=document)

    @classmethod
    def conflict(cls) -> CreateResult:
        return cls(CreateStatus.CONFLICT)

    @classmethod
    def failed(cls, error: StoreError) -> CreateResult:
        return cls(CreateStatus.FAILED, error=error)


class DocumentStore(ABC):
    @abstractmethod
    async def get_document(
        self, database_id: str, collection_id: str, document_id: str
    ) -> Document:
        """Raise ``DocumentNotFoundError`` if absent."""

    @abstractmethod
    async def create_document(
        self,
        database_id: str,
        collection_id: str,
        document_id: str,
        data: dict[str, Any],
        permissions: list[str],
    ) -> CreateResult: ...

    @abstractmethod
    async def update_document(
        self,
        database_id: str,
        collection_id: str,
        document_id: str,
        data: dict[str, Any],
        permissions: list[str] | None = None,
    ) -> Document:
        """
        Merge *data* into the document.  ``permissions=None`` keeps the
        current list; any list (even empty) replaces it.
        """

    async def aclose(self) -> None:
        return None
