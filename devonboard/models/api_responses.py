"""
API Response Models

Pydantic models for sync results and consistent API response structures.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from enum import Enum


class SubscriberOutcome(str, Enum):
    """What happened for one subscribing source during a sync."""

    AUTO_APPLIED = "auto_applied"  # Record written, suggested updates applied
    PENDING_REVIEW = "pending_review"  # Record written, queued for manual review
    SKIPPED = "skipped"  # No steps or path filter mismatch, no record
    FAILED = "failed"  # Storage or resolution error


class SubscriberSyncResult(BaseModel):
    """Result of processing a change for a single subscribing source."""

    source_id: str
    plan_id: str
    outcome: SubscriberOutcome
    change_record_id: Optional[str] = None
    severity: Optional[int] = None
    steps_updated: List[str] = Field(
        default_factory=list, description="IDs of steps whose instructions changed"
    )
    reason: Optional[str] = Field(None, description="Skip or failure reason")


class SyncReport(BaseModel):
    """
    Summary of one ``sync_change`` call.
    """

    repository_address: str
    file_path: str
    revision_id: str
    subscribers_matched: int = 0
    results: List[SubscriberSyncResult] = Field(default_factory=list)

    @property
    def records_written(self) -> int:
        return sum(1 for r in self.results if r.change_record_id is not None)

    @property
    def steps_updated(self) -> int:
        return sum(len(r.steps_updated) for r in self.results)

    @property
    def pending_review(self) -> int:
        return sum(
            1 for r in self.results if r.outcome == SubscriberOutcome.PENDING_REVIEW
        )

    @property
    def failures(self) -> List[SubscriberSyncResult]:
        return [r for r in self.results if r.outcome == SubscriberOutcome.FAILED]


class FileSyncStatus(BaseModel):
    """Webhook-level status for one changed file."""

    file_path: str
    revision_id: str
    status: str = Field(..., description="Status: success, skipped or error")
    records_written: int = 0
    steps_updated: int = 0
    pending_review: int = 0
    reason: Optional[str] = None


class WebhookResponse(BaseModel):
    """Response model for the GitHub webhook endpoint."""

    success: bool
    message: str
    files: List[FileSyncStatus] = Field(default_factory=list)
