"""Pydantic response schemas for the event API."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from jobrules.handlers.outcome import Outcome


class OutcomeResponse(BaseModel):
    outcome: str
    detail: Optional[str] = None
    document_id: Optional[str] = Field(None, serialization_alias="documentId")

    @classmethod
    def from_outcome(cls, outcome: Outcome) -> OutcomeResponse:
        return cls(
            outcome=outcome.kind.value,
            detail=outcome.detail,
            document_id=outcome.document_id,
        )


class HealthResponse(BaseModel):
    status: str = "ok"
