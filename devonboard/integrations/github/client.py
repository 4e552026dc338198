"""
GitHub Content Client

Responsibilities:
- Repository URL parsing
- File content retrieval at a given revision
- Parent revision lookup (to fetch the "before" version of a change)
"""

import asyncio
import logging
import re
from typing import Dict, Optional, Tuple

from github import Github
from github.Repository import Repository
from github.GithubException import GithubException, UnknownObjectException

from devonboard.config import get_settings

logger = logging.getLogger(__name__)

_GITHUB_URL_PATTERNS = [
    re.compile(r"github\.com/([^/]+)/([^/]+?)(?:\.git)?/?$"),
    re.compile(r"github\.com:([^/]+)/([^/]+?)(?:\.git)?/?$"),
]


class InvalidRepositoryURLError(ValueError):
    """Raised when a repository address is not a recognizable GitHub URL."""

    pass


def parse_github_url(url: str) -> Tuple[str, str]:
    """
    Extract owner and repo name from a GitHub URL.

    Handles https (``https://github.com/owner/repo``, optional ``.git``) and
    ssh (``git@github.com:owner/repo.git``) forms.

    Returns:
        (owner, repo)

    Raises:
        InvalidRepositoryURLError: If the URL does not point at a repository
    """
    candidate = (url or "").strip()
    for pattern in _GITHUB_URL_PATTERNS:
        match = pattern.search(candidate)
        if match:
            return match.group(1), match.group(2)

    raise InvalidRepositoryURLError(f"Invalid GitHub URL: {url}")


class GitHubContentFetcher:
    """
    Fetches documentation file contents from GitHub.

    PyGithub is blocking, so calls run in a worker thread.
    """

    def __init__(self, client: Optional[Github] = None):
        """
        Args:
            client: PyGithub client (created from settings.github_token if not provided)
        """
        if client is None:
            token = get_settings().github_token
            client = Github(token) if token else Github()
        self.client = client
        self._repos: Dict[str, Repository] = {}

    def _get_repo(self, repository_address: str) -> Repository:
        owner, name = parse_github_url(repository_address)
        full_name = f"{owner}/{name}"
        if full_name not in self._repos:
            self._repos[full_name] = self.client.get_repo(full_name)
        return self._repos[full_name]

    def _read_content(
        self, repository_address: str, file_path: str, revision_id: str
    ) -> Optional[str]:
        repo = self._get_repo(repository_address)
        try:
            content = repo.get_contents(file_path, ref=revision_id)
        except UnknownObjectException:
            return None

        if isinstance(content, list):
            # Path is a directory
            logger.warning(f"{file_path} is a directory at {revision_id}")
            return None

        return content.decoded_content.decode("utf-8")

    def _read_parent(self, repository_address: str, revision_id: str) -> Optional[str]:
        repo = self._get_repo(repository_address)
        try:
            commit = repo.get_commit(revision_id)
        except UnknownObjectException:
            return None

        parents = commit.parents
        return parents[0].sha if parents else None

    async def get_content_at(
        self, repository_address: str, file_path: str, revision_id: str
    ) -> Optional[str]:
        """
        Get file content at a revision.

        Args:
            repository_address: Repository URL
            file_path: Path of the file in the repository
            revision_id: Commit SHA (or any git ref)

        Returns:
            Decoded UTF-8 content, or None if the file does not exist there

        Raises:
            InvalidRepositoryURLError: If the repository address is not a GitHub URL
            GithubException: On other GitHub API errors
        """
        try:
            content = await asyncio.to_thread(
                self._read_content, repository_address, file_path, revision_id
            )
        except GithubException as e:
            logger.error(
                f"GitHub API error fetching {file_path}@{revision_id}: {e}"
            )
            raise

        if content is None:
            logger.info(f"{file_path} not found at {revision_id}")
        return content

    async def get_parent_revision(
        self, repository_address: str, revision_id: str
    ) -> Optional[str]:
        """
        Get the first parent of a commit.

        Returns:
            Parent commit SHA, or None for root commits and unknown revisions
        """
        return await asyncio.to_thread(
            self._read_parent, repository_address, revision_id
        )
