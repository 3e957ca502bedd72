"""
Event endpoints
===============

POST /api/v1/events/job-requests/create -- tighten access on a new job request
POST /api/v1/events/job-requests/update -- project the client notification
POST /api/v1/events                     -- route by the X-Appwrite-Event header

The body is the raw document snapshot.  ok and skip answer 200; errors
answer with the outcome's status code (400 for bad input, 500 for store
failures) so the dispatcher can decide whether to redeliver.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from jobrules.api.dependencies import (
    get_access_tightener,
    get_collections,
    get_notification_projector,
    get_request_id,
)
from jobrules.api.schemas import OutcomeResponse
from jobrules.config import Collections
from jobrules.domain.events import HANDLED_ACTIONS, parse_event_name
from jobrules.handlers.access_tightener import AccessTightener
from jobrules.handlers.notification_projector import NotificationProjector
from jobrules.handlers.outcome import Outcome

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["events"])


def _respond(outcome: Outcome) -> JSONResponse:
    body = OutcomeResponse.from_outcome(outcome)
    return JSONResponse(
        status_code=outcome.status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


@router.post(
    "/job-requests/create",
    response_model=OutcomeResponse,
    summary="Restrict a new job request to its client and driver",
)
async def job_request_created(
    request: Request,
    tightener: AccessTightener = Depends(get_access_tightener),
    request_id: Optional[str] = Depends(get_request_id),
):
    payload = await request.body()
    return _respond(await tightener.handle(payload, request_id))


@router.post(
    "/job-requests/update",
    response_model=OutcomeResponse,
    summary="Upsert the client notification for a decided job request",
)
async def job_request_updated(
    request: Request,
    projector: NotificationProjector = Depends(get_notification_projector),
    request_id: Optional[str] = Depends(get_request_id),
):
    payload = await request.body()
    return _respond(await projector.handle(payload, request_id))


@router.post(
    "",
    response_model=OutcomeResponse,
    summary="Dispatch a document event by its declared trigger",
)
async def dispatch_event(
    request: Request,
    collections: Collections = Depends(get_collections),
    tightener: AccessTightener = Depends(get_access_tightener),
    projector: NotificationProjector = Depends(get_notification_projector),
    request_id: Optional[str] = Depends(get_request_id),
):
    event = request.headers.get("x-appwrite-event", "")
    collection_id, action = parse_event_name(event)

    if collection_id != collections.job_requests_id or action not in HANDLED_ACTIONS:
        logger.debug("[%s] Ignoring event %r", request_id, event)
        return _respond(Outcome.skip(f"event {event!r} is not handled"))

    payload = await request.body()
    if action == "create":
        return _respond(await tightener.handle(payload, request_id))
    return _respond(await projector.handle(payload, request_id))
