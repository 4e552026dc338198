"""
Source Change Models

Audit records written by the sync pipeline, one per detected change and
subscribing source.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator

# Severity at or above which a change always goes to manual review
AUTO_APPLY_SEVERITY_THRESHOLD = 7


class ChangeKind(str, Enum):
    """Type of detected change."""

    CONTENT = "content"  # Text changed, layout intact
    STRUCTURE = "structure"  # Headings added, removed or reordered
    DELETION = "deletion"  # Content emptied


class ChangeDiff(BaseModel):
    """Structured diff metadata stored with a change record."""

    file: str = Field(..., description="Path of the changed file in the origin")
    commit: str = Field(..., description="Origin revision that introduced the change")
    summary: str = Field("", description="Human-readable summary of the change")


class SourceChangeRecord(BaseModel):
    """
    Audit entry for one detected change applied against one source.

    Records are immutable once written; only ``processed_at`` is set later,
    either when updates are auto-applied or when a reviewer signs off.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    source_id: str
    detected_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    change_type: ChangeKind = ChangeKind.CONTENT
    old_content: str = ""
    new_content: str = ""
    diff: ChangeDiff
    affected_steps: List[str] = Field(
        default_factory=list, description="IDs of affected onboarding steps"
    )
    severity: int = Field(..., ge=1, le=10)
    auto_applied: bool = False
    processed_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _check_auto_applied_severity(self) -> "SourceChangeRecord":
        if self.auto_applied and self.severity >= AUTO_APPLY_SEVERITY_THRESHOLD:
            raise ValueError(
                f"auto_applied change records need severity below "
                f"{AUTO_APPLY_SEVERITY_THRESHOLD}, got {self.severity}"
            )
        return self

    @property
    def is_pending_review(self) -> bool:
        return self.processed_at is None
