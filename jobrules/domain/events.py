"""
Trigger-event parsing.

The dispatcher delivers the full job-request document as it exists at
trigger time.  Parsing is the single validation step shared by both
rules: it either yields a typed ``JobRequest`` or raises
``MalformedPayloadError``.  Missing ids are *not* a parse failure --
each rule decides for itself whether that is an error or a skip.
"""

from __future__ import annotations

import json
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import MalformedPayloadError

HANDLED_ACTIONS = ("create", "update")


class JobRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: Optional[str] = Field(None, alias="$id")
    client_id: Optional[str] = Field(None, alias="clientId")
    driver_id: Optional[str] = Field(None, alias="driverId")
    status: Optional[str] = None
    estimated_pickup_at: Optional[str] = Field(None, alias="estimatedPickupAt")


def parse_job_request(payload: Union[str, bytes, dict[str, Any], None]) -> JobRequest:
    """Parse a raw event payload.  An empty payload is an empty document."""
    if isinstance(payload, (bytes, bytearray)):
        try:
            payload = payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedPayloadError("payload is not UTF-8") from exc

    if payload is None or (isinstance(payload, str) and not payload.strip()):
        payload = "{}"

    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise MalformedPayloadError(f"payload is not valid JSON: {exc.msg}") from exc

    if not isinstance(payload, dict):
        raise MalformedPayloadError("payload must be a JSON object")

    try:
        return JobRequest.model_validate(payload)
    except ValidationError as exc:
        raise MalformedPayloadError(
            f"payload has invalid fields: {exc.error_count()} error(s)"
        ) from exc


def parse_event_name(event: str) -> tuple[Optional[str], Optional[str]]:
    """
    Split ``databases.<db>.collections.<col>.documents.<id>.<action>``
    into ``(collection_id, action)``.  Unknown shapes yield ``(None, None)``.
    """
    parts = event.split(".")
    if len(parts) != 7 or parts[0] != "databases":
        return None, None
    if parts[2] != "collections" or parts[4] != "documents":
        return None, None
    return parts[3], parts[6]
