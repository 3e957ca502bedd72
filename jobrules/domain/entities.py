"""
Notification entity derived from a job request.

Every field except ``created_at`` is a deterministic function of the
job request, so two projections of the same snapshot converge no matter
which one the store applies last.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .enums import (
    NOTIFICATION_TITLES,
    NOTIFICATION_TYPES,
    JobRequestStatus,
    NotificationType,
    ReadState,
)
from .events import JobRequest


def is_terminal(status: str | None) -> bool:
    return status in NOTIFICATION_TYPES


def notification_id(job_request_id: str, status: str) -> str:
    """Idempotency key: one notification per (job request, terminal status)."""
    return f"{job_request_id}_{status}"


def notification_body(status: str, estimated_pickup_at: str | None) -> str:
    if status == JobRequestStatus.ACCEPTED.value and estimated_pickup_at:
        return f"ETA pickup: {estimated_pickup_at}"
    return ""


@dataclass
class Notification:
    id: str
    user_id: str
    job_request_id: str
    type: NotificationType
    title: str
    body: str
    read_state: ReadState = ReadState.UNREAD
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @classmethod
    def from_job_request(
        cls, job_request: JobRequest, now: datetime | None = None
    ) -> Notification:
        """Project a job request in a terminal status.  Raises ``ValueError`` otherwise."""
        status = job_request.status
        if not is_terminal(status):
            raise ValueError(f"No notification for status {status!r}")
        return cls(
            id=notification_id(job_request.id, status),
            user_id=job_request.client_id,
            job_request_id=job_request.id,
            type=NOTIFICATION_TYPES[status],
            title=NOTIFICATION_TITLES[status],
            body=notification_body(status, job_request.estimated_pickup_at),
            created_at=now or datetime.now(timezone.utc),
        )

    def to_document(self) -> dict[str, Any]:
        """Attribute map stored in the notifications collection."""
        return {
            "userId": self.user_id,
            "jobRequestId": self.job_request_id,
            "type": self.type.value,
            "title": self.title,
            "body": self.body,
            # the collection names its read-state attribute "status"
            "status": self.read_state.value,
            "createdAt": self.created_at.isoformat(timespec="milliseconds").replace(
                "+00:00", "Z"
            ),
        }
