"""
SQL-backed document store.

Each operation runs in its own short transaction.  Updates take a row
lock (``SELECT ... FOR UPDATE`` where the dialect supports it) so two
concurrent patches of the same document serialise.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from jobrules.domain.errors import (
    DocumentNotFoundError,
    StoreError,
    StoreUnavailableError,
)

from .models import DocumentModel
from .store import CreateResult, Document, DocumentStore

logger = logging.getLogger(__name__)


def _to_document(row: DocumentModel) -> Document:
    return Document(
        id=row.document_id,
        collection_id=row.collection_id,
        data=dict(row.data or {}),
        permissions=list(row.permissions or []),
    )


class SqlDocumentStore(DocumentStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def get_document(
        self, database_id: str, collection_id: str, document_id: str
    ) -> Document:
        try:
            async with self.session_factory() as session:
                row = await session.get(
                    DocumentModel, (database_id, collection_id, document_id)
                )
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(f"Store read failed: {exc}") from exc
        if row is None:
            raise DocumentNotFoundError(
                f"Document {document_id} not found in {collection_id}"
            )
        return _to_document(row)

    async def create_document(
        self,
        database_id: str,
        collection_id: str,
        document_id: str,
        data: dict[str, Any],
        permissions: list[str],
    ) -> CreateResult:
        row = DocumentModel(
            database_id=database_id,
            collection_id=collection_id,
            document_id=document_id,
            data=dict(data),
            permissions=list(permissions),
        )
        async with self.session_factory() as session:
            try:
                session.add(row)
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                return await self._classify_rejected_create(
                    session, (database_id, collection_id, document_id), exc
                )
            except SQLAlchemyError as exc:
                await session.rollback()
                return CreateResult.failed(
                    StoreUnavailableError(f"Store create failed: {exc}")
                )
        return CreateResult.created(_to_document(row))

    @staticmethod
    async def _classify_rejected_create(
        session: AsyncSession, key: tuple[str, str, str], exc: IntegrityError
    ) -> CreateResult:
        """A rejected insert is a conflict only if the key is actually taken."""
        _, collection_id, document_id = key
        try:
            existing = await session.get(DocumentModel, key)
        except SQLAlchemyError as read_exc:
            return CreateResult.failed(
                StoreUnavailableError(f"Store create failed: {read_exc}")
            )
        if existing is not None:
            logger.debug("Create conflict on %s/%s", collection_id, document_id)
            return CreateResult.conflict()
        logger.warning(
            "Create of %s/%s rejected by a constraint: %s",
            collection_id,
            document_id,
            exc.orig,
        )
        return CreateResult.failed(StoreError(f"Store rejected document: {exc.orig}"))

    async def update_document(
        self,
        database_id: str,
        collection_id: str,
        document_id: str,
        data: dict[str, Any],
        permissions: list[str] | None = None,
    ) -> Document:
        async with self.session_factory() as session:
            try:
                result = await session.execute(
                    select(DocumentModel)
                    .where(
                        DocumentModel.database_id == database_id,
                        DocumentModel.collection_id == collection_id,
                        DocumentModel.document_id == document_id,
                    )
                    .with_for_update()
                )
                row = result.scalar_one_or_none()
                if row is None:
                    raise DocumentNotFoundError(
                        f"Document {document_id} not found in {collection_id}"
                    )
                # JSON columns are replaced, not mutated, so the change is tracked
                if data:
                    row.data = {**(row.data or {}), **data}
                if permissions is not None:
                    row.permissions = list(permissions)
                await session.commit()
            except SQLAlchemyError as exc:
                await session.rollback()
                raise StoreUnavailableError(f"Store update failed: {exc}") from exc
        return _to_document(row)
