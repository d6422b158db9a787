"""
Pydantic Schemas - Data Validation Models

Defines the typed values that flow through the indexing worker:
- Indexing API request payloads
- Per-URL submission outcomes
- Run summaries

Usage:
    from utils.schemas import SubmissionOutcome

    outcome = SubmissionOutcome.quota_exceeded(url, detail="429 Quota exceeded")
    if outcome.status is OutcomeStatus.CONFIRMED:
        ...
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class UrlNotification(BaseModel):
    """Indexing API `urlNotifications.publish` request body."""

    url: str = Field(..., min_length=1, description="URL to notify")
    type: str = Field(default="URL_UPDATED", description="Notification type")


class OutcomeStatus(str, Enum):
    """Classification of a single submission."""

    CONFIRMED = "confirmed"
    QUOTA_EXCEEDED = "quota_exceeded"
    TRANSIENT_FAILURE = "transient_failure"


class SubmissionOutcome(BaseModel):
    """Result of submitting one URL.

    Remote failures are reported through `status`, never raised.
    """

    url: str
    status: OutcomeStatus
    detail: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None

    @classmethod
    def confirmed(cls, url: str, metadata: dict[str, Any]) -> "SubmissionOutcome":
        return cls(url=url, status=OutcomeStatus.CONFIRMED, metadata=metadata)

    @classmethod
    def quota_exceeded(cls, url: str, detail: Optional[str] = None) -> "SubmissionOutcome":
        return cls(url=url, status=OutcomeStatus.QUOTA_EXCEEDED, detail=detail)

    @classmethod
    def transient_failure(cls, url: str, detail: str) -> "SubmissionOutcome":
        return cls(url=url, status=OutcomeStatus.TRANSIENT_FAILURE, detail=detail)

    @property
    def is_confirmed(self) -> bool:
        return self.status is OutcomeStatus.CONFIRMED


class RunReport(BaseModel):
    """Summary of one processing run.

    `stop_reason` is None when the run walked off the end of the pending queue.
    """

    start_cursor: int = Field(..., description="Resume index the run started from")
    final_cursor: int = Field(..., description="Cursor position when the run stopped")
    pending_before: int = Field(..., description="Pending queue size when loaded")
    pending_after: int = Field(default=0, description="Pending queue size after flush")
    confirmed: list[str] = Field(default_factory=list, description="URLs confirmed this run")
    stop_reason: Optional[OutcomeStatus] = None
    recycled: bool = False
