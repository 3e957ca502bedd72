"""
Access Tightener
================

Triggered once per job-request creation.  Replaces the new document's
permission list so only its client and driver can reach it:

* client -- read, update, delete
* driver -- read, update

Preconditions (checked in order)
--------------------------------
1. The payload parses          -> else ``MalformedPayloadError`` (400)
2. The document has an id      -> else ``MissingIdError`` (400)
3. clientId and driverId set   -> else ``MissingPrincipalError`` (400)

Rewriting the same list twice is a no-op in effect, so redelivered
events need no deduplication.  Store failures are reported as 500 and
left to the dispatcher's redelivery; nothing is retried here.
"""

from __future__ import annotations

import logging

from jobrules.domain.errors import (
    ClientInputError,
    MissingIdError,
    MissingPrincipalError,
    RuleError,
)
from jobrules.domain.events import parse_job_request
from jobrules.domain.permissions import job_request_permissions
from jobrules.infrastructure.repositories import JobRequestRepository

from .outcome import Outcome

logger = logging.getLogger(__name__)


class AccessTightener:
    def __init__(self, job_requests: JobRequestRepository):
        self.job_requests = job_requests

    async def apply(self, payload) -> str:
        """Restrict access on the created document.  Returns its id."""
        job_request = parse_job_request(payload)
        if not job_request.id:
            raise MissingIdError("no id")
        if not job_request.client_id or not job_request.driver_id:
            raise MissingPrincipalError("missing client/driver")

        permissions = job_request_permissions(
            job_request.client_id, job_request.driver_id
        )
        await self.job_requests.restrict_access(job_request.id, permissions)
        return job_request.id

    async def handle(self, payload, request_id: str | None = None) -> Outcome:
        try:
            job_request_id = await self.apply(payload)
        except ClientInputError as exc:
            logger.warning("[%s] ACL rejected: %s", request_id, exc.message)
            return Outcome.error(exc.message, exc.status_code)
        except RuleError as exc:
            logger.exception("[%s] Failed to set ACL", request_id)
            return Outcome.error(exc.message, exc.status_code)

        logger.info("[%s] ACL set for job request %s", request_id, job_request_id)
        return Outcome.ok(job_request_id)
