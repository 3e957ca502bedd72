"""Domain enumerations and status-to-notification rules."""

import enum


class JobRequestStatus(str, enum.Enum):
    """Statuses the rules distinguish.  Job requests may carry others."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class NotificationType(str, enum.Enum):
    JOB_ACCEPTED = "JOB_ACCEPTED"
    JOB_REJECTED = "JOB_REJECTED"


class ReadState(str, enum.Enum):
    UNREAD = "UNREAD"
    READ = "READ"


class PermissionAction(str, enum.Enum):
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


# Terminal statuses -> notification type and title
NOTIFICATION_TYPES: dict[str, NotificationType] = {
    JobRequestStatus.ACCEPTED.value: NotificationType.JOB_ACCEPTED,
    JobRequestStatus.REJECTED.value: NotificationType.JOB_REJECTED,
}

NOTIFICATION_TITLES: dict[str, str] = {
    JobRequestStatus.ACCEPTED.value: "Trip accepted",
    JobRequestStatus.REJECTED.value: "Trip rejected",
}
