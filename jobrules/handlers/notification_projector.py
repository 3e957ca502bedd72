"""
Notification Projector
======================

Triggered on every job-request update.  When the request sits in a
terminal status (ACCEPTED / REJECTED), upserts the client's notification
at ``{jobRequestId}_{status}``; every other snapshot is skipped.

Skips are not errors
--------------------
A missing id, clientId or status, or a non-terminal status such as
PENDING, returns a ``skip`` outcome and writes nothing.  Only a payload
that cannot be parsed at all is a 400.

Idempotency
-----------
The notification id is the idempotency key, and every field except
``createdAt`` is derived deterministically from the snapshot.
Redelivered or concurrent invocations therefore either create the one
notification or refresh it in place (see
``NotificationRepository.upsert``).  A refresh also reissues
``readState = UNREAD``.
"""

from __future__ import annotations

import logging
from datetime import datetime

from jobrules.domain.entities import Notification, is_terminal
from jobrules.domain.errors import ClientInputError, RuleError
from jobrules.domain.events import parse_job_request
from jobrules.domain.permissions import notification_permissions
from jobrules.infrastructure.repositories import (
    NotificationRepository,
    UpsertOutcome,
)

from .outcome import Outcome

logger = logging.getLogger(__name__)


class NotificationProjector:
    def __init__(self, notifications: NotificationRepository, clock=None):
        self.notifications = notifications
        self.clock = clock

    async def apply(self, payload) -> Outcome:
        job_request = parse_job_request(payload)

        if not job_request.id or not job_request.client_id or not job_request.status:
            return Outcome.skip("missing id, clientId or status", job_request.id)
        if not is_terminal(job_request.status):
            return Outcome.skip(
                f"status {job_request.status} needs no notification", job_request.id
            )

        now: datetime | None = self.clock() if self.clock else None
        notification = Notification.from_job_request(job_request, now=now)
        upserted = await self.notifications.upsert(
            notification, notification_permissions(job_request.client_id)
        )
        detail = "created" if upserted == UpsertOutcome.CREATED else "refreshed"
        return Outcome.ok(notification.id, detail)

    async def handle(self, payload, request_id: str | None = None) -> Outcome:
        try:
            outcome = await self.apply(payload)
        except ClientInputError as exc:
            logger.warning("[%s] Notification rejected: %s", request_id, exc.message)
            return Outcome.error(exc.message, exc.status_code)
        except RuleError as exc:
            logger.exception("[%s] Failed to upsert notification", request_id)
            return Outcome.error(exc.message, exc.status_code)

        logger.info(
            "[%s] Notification %s: %s (%s)",
            request_id,
            outcome.document_id,
            outcome.kind.value,
            outcome.detail,
        )
        return outcome
