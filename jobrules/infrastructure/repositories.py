"""
Repository Pattern -- the rules talk to collections, not to the store.

Each repository receives a ``DocumentStore`` plus the ids addressing its
collection, and exposes only the writes a rule needs.
"""

from __future__ import annotations

import enum
import logging
from typing import Any

from jobrules.domain.entities import Notification
from jobrules.domain.permissions import Permission, to_wire

from .store import CreateStatus, Document, DocumentStore

logger = logging.getLogger(__name__)


class UpsertOutcome(str, enum.Enum):
    CREATED = "CREATED"
    UPDATED = "UPDATED"


class JobRequestRepository:
    def __init__(self, store: DocumentStore, database_id: str, collection_id: str):
        self.store = store
        self.database_id = database_id
        self.collection_id = collection_id

    async def get(self, job_request_id: str) -> Document:
        return await self.store.get_document(
            self.database_id, self.collection_id, job_request_id
        )

    async def restrict_access(
        self, job_request_id: str, permissions: list[Permission]
    ) -> Document:
        """Replace the permission list; no attribute is touched."""
        return await self.store.update_document(
            self.database_id,
            self.collection_id,
            job_request_id,
            {},
            to_wire(permissions),
        )


class NotificationRepository:
    def __init__(self, store: DocumentStore, database_id: str, collection_id: str):
        self.store = store
        self.database_id = database_id
        self.collection_id = collection_id

    async def get(self, notification_id: str) -> Document:
        return await self.store.get_document(
            self.database_id, self.collection_id, notification_id
        )

    async def upsert(
        self, notification: Notification, permissions: list[Permission]
    ) -> UpsertOutcome:
        """
        Two-phase upsert: try to create at the notification's id, and only
        if that id is already taken, overwrite the existing document with
        the same fields and permissions.

        A concurrent duplicate may win the create; this call then falls
        back to the update, and both writers converge on the same fields.
        """
        data: dict[str, Any] = notification.to_document()
        wire = to_wire(permissions)

        result = await self.store.create_document(
            self.database_id, self.collection_id, notification.id, data, wire
        )
        if result.status == CreateStatus.CREATED:
            return UpsertOutcome.CREATED
        if result.status == CreateStatus.FAILED:
            raise result.error

        logger.info("Notification %s exists, refreshing it", notification.id)
        await self.store.update_document(
            self.database_id, self.collection_id, notification.id, data, wire
        )
        return UpsertOutcome.UPDATED
