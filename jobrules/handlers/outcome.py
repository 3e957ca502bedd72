"""Tri-state result returned to the event dispatcher."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional


class OutcomeKind(str, enum.Enum):
    OK = "ok"
    SKIP = "skip"
    ERROR = "error"


@dataclass(frozen=True)
class Outcome:
    kind: OutcomeKind
    status_code: int = 200
    detail: Optional[str] = None
    document_id: Optional[str] = None

    @classmethod
    def ok(cls, document_id: str, detail: str | None = None) -> Outcome:
        return cls(OutcomeKind.OK, document_id=document_id, detail=detail)

    @classmethod
    def skip(cls, reason: str, document_id: str | None = None) -> Outcome:
        return cls(OutcomeKind.SKIP, detail=reason, document_id=document_id)

    @classmethod
    def error(cls, message: str, status_code: int) -> Outcome:
        return cls(OutcomeKind.ERROR, status_code=status_code, detail=message)
