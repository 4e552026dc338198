"""
GitHub Webhook Models

Push event payload models and signature verification.
"""

import hashlib
import hmac
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from devonboard.ai_core.classification import is_documentation_file


class PushRepository(BaseModel):
    model_config = ConfigDict(extra="ignore")

    html_url: Optional[str] = None
    full_name: Optional[str] = None


class PushCommit(BaseModel):
    """A commit listed in a push event."""

    model_config = ConfigDict(extra="ignore")

    id: str
    message: str = ""
    added: List[str] = Field(default_factory=list)
    modified: List[str] = Field(default_factory=list)
    removed: List[str] = Field(default_factory=list)

    @property
    def changed_files(self) -> List[str]:
        return [*self.modified, *self.added, *self.removed]

    def documentation_files(self) -> List[str]:
        """Changed documentation files that still exist after the commit."""
        return [
            path
            for path in self.changed_files
            if is_documentation_file(path) and path not in self.removed
        ]


class PushEvent(BaseModel):
    """GitHub ``push`` event payload (only the fields we use)."""

    model_config = ConfigDict(extra="ignore")

    ref: Optional[str] = None  # e.g., refs/heads/main
    repository: PushRepository = Field(default_factory=PushRepository)
    commits: List[PushCommit] = Field(default_factory=list)

    @property
    def repository_url(self) -> Optional[str]:
        return self.repository.html_url

    def documentation_changes(self) -> List[Tuple[str, str]]:
        """(commit_id, file_path) pairs to sync, in push order."""
        return [
            (commit.id, path)
            for commit in self.commits
            for path in commit.documentation_files()
        ]


def verify_signature(payload: bytes, signature: Optional[str], secret: str) -> bool:
    """
    Verify a GitHub webhook ``X-Hub-Signature-256`` header.

    Args:
        payload: Raw request body
        signature: Header value ("sha256=<hexdigest>")
        secret: Shared webhook secret

    Returns:
        True if the signature matches
    """
    if not signature:
        return False

    digest = hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()
    return hmac.compare_digest(signature, f"sha256={digest}")
