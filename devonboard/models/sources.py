"""
Documentation Source Models

A documentation source binds one onboarding plan to one origin location
(a GitHub repository, a wiki space, a shared document, ...).
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator


class OriginKind(str, Enum):
    """Where the canonical documentation lives."""

    GITHUB = "github"  # Repository-hosted
    NOTION = "notion"  # Wiki-hosted
    CONFLUENCE = "confluence"  # Wiki-hosted
    GDOCS = "gdocs"  # Document-hosted
    SLACK = "slack"  # Chat-hosted
    LINEAR = "linear"  # Issue-tracker-hosted


class SyncCadence(str, Enum):
    """How often a source is checked for changes."""

    REALTIME = "realtime"  # Immediately, driven by webhooks
    HOURLY = "hourly"
    DAILY = "daily"


def normalize_origin_address(address: str) -> str:
    """
    Normalize an origin address so equivalent spellings compare equal.

    Trailing slashes and a trailing ``.git`` suffix are dropped, so
    ``https://github.com/acme/app.git/`` and ``https://github.com/acme/app``
    identify the same repository.
    """
    normalized = address.strip().rstrip("/")
    if normalized.endswith(".git"):
        normalized = normalized[: -len(".git")]
    return normalized


class DocumentationSource(BaseModel):
    """Subscription of one plan to one documentation origin."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    organization_id: str = Field(..., description="Owning organization")
    plan_id: str = Field(..., description="Onboarding plan receiving updates")
    origin_kind: OriginKind = Field(..., description="Kind of origin system")
    origin_address: str = Field(
        ..., min_length=1, description="Origin address, e.g. repository URL"
    )
    source_name: Optional[str] = Field(None, description="Display name")
    path_filters: List[str] = Field(
        default_factory=list,
        description="Glob patterns or directory prefixes; empty means every path",
    )
    is_active: bool = Field(True, description="Inactive sources are never synced")
    last_synced_at: Optional[datetime] = None
    last_content_hash: Optional[str] = Field(
        None, description="Fingerprint of the last synced content"
    )
    sync_cadence: SyncCadence = SyncCadence.REALTIME
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: Optional[datetime] = None

    @field_validator("origin_address")
    @classmethod
    def _normalize_address(cls, value: str) -> str:
        return normalize_origin_address(value)
