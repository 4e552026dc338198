"""
GitHub Integration Module

Provides GitHub API access for documentation change detection.
"""

from devonboard.integrations.github.client import (
    GitHubContentFetcher,
    InvalidRepositoryURLError,
    parse_github_url,
)
from devonboard.integrations.github.webhook import (
    PushCommit,
    PushEvent,
    verify_signature,
)

__all__ = [
    "GitHubContentFetcher",
    "InvalidRepositoryURLError",
    "parse_github_url",
    "PushCommit",
    "PushEvent",
    "verify_signature",
]
