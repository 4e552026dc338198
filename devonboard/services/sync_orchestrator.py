"""
Documentation Sync Orchestrator

Propagates one changed documentation file to every onboarding plan that
tracks its repository:

1. Resolve active sources subscribed to the repository
2. Fetch the file before and after the change (once per file)
3. Per subscriber: load steps, classify the change, write an audit record
4. Apply suggested instruction updates when the change is safe to auto-apply

Subscribers are processed concurrently and independently; a failure for one
never stops the others.
"""

import asyncio
import hashlib
import logging
import weakref
from datetime import datetime, timezone
from fnmatch import fnmatch
from typing import Dict, List, Optional, Tuple

from devonboard.ai_core.classification import (
    ChangeClassifier,
    SuggestedUpdate,
    Verdict,
    detect_change_kind,
)
from devonboard.config import Settings, get_settings
from devonboard.integrations.github import GitHubContentFetcher
from devonboard.models.api_responses import (
    SubscriberOutcome,
    SubscriberSyncResult,
    SyncReport,
)
from devonboard.models.changes import (
    AUTO_APPLY_SEVERITY_THRESHOLD,
    ChangeDiff,
    ChangeKind,
    SourceChangeRecord,
)
from devonboard.models.sources import DocumentationSource, OriginKind
from devonboard.models.steps import OnboardingStep
from devonboard.services.record_store import RecordStore

logger = logging.getLogger(__name__)


class ContentUnavailableError(Exception):
    """
    Raised when the changed file's new content cannot be fetched.
    Nothing is persisted for the file in that case.
    """

    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def matches_path_filters(source: DocumentationSource, file_path: str) -> bool:
    """
    Check a file against a source's path filters.

    A filter matches as a glob pattern (``docs/*.md``) or as a directory
    prefix (``docs/`` or ``docs``). No filters means every path matches.
    """
    if not source.path_filters:
        return True

    for path_filter in source.path_filters:
        prefix = path_filter.rstrip("/")
        if fnmatch(file_path, path_filter):
            return True
        if prefix and (file_path == prefix or file_path.startswith(f"{prefix}/")):
            return True
    return False


class SyncOrchestrator:
    """
    Orchestrates documentation change detection and onboarding step updates.
    """

    def __init__(
        self,
        classifier: ChangeClassifier,
        store: RecordStore,
        fetcher: GitHubContentFetcher,
        settings: Optional[Settings] = None,
    ):
        """
        Args:
            classifier: Change classifier shared by all subscribers
            store: Record store for sources, steps and change records
            fetcher: Content fetcher for the origin repository
            settings: Application settings (defaults to get_settings())
        """
        settings = settings or get_settings()
        self.classifier = classifier
        self.store = store
        self.fetcher = fetcher

        # Records cannot claim auto_applied at or above the record threshold
        self.auto_apply_threshold = min(
            settings.auto_apply_severity_threshold, AUTO_APPLY_SEVERITY_THRESHOLD
        )
        self.max_concurrent_subscribers = max(1, settings.max_concurrent_subscribers)

        # Serializes step updates per plan within this process; a lock is
        # dropped once no sync holds or waits on it
        self._plan_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

    def _plan_lock(self, plan_id: str) -> asyncio.Lock:
        lock = self._plan_locks.get(plan_id)
        if lock is None:
            lock = self._plan_locks[plan_id] = asyncio.Lock()
        return lock

    async def sync_change(
        self, repository_address: str, file_path: str, revision_id: str
    ) -> SyncReport:
        """
        Main sync entry point: processes one changed documentation file.

        Args:
            repository_address: Repository URL the change was pushed to
            file_path: Path of the changed file
            revision_id: Commit that changed the file

        Returns:
            SyncReport with one result per matched subscriber

        Raises:
            ContentUnavailableError: If the new file content cannot be fetched
        """
        logger.info(
            f"Processing change: repo={repository_address} file={file_path} "
            f"commit={revision_id}"
        )
        report = SyncReport(
            repository_address=repository_address,
            file_path=file_path,
            revision_id=revision_id,
        )

        # Step 1: Find plans tracking this repository
        sources = await self.store.list_active_sources(
            repository_address, OriginKind.GITHUB
        )
        if not sources:
            logger.info("No active plans tracking this repository")
            return report

        report.subscribers_matched = len(sources)
        logger.info(f"Found {len(sources)} source(s) tracking this repository")

        # Step 2: Fetch file contents once for all subscribers
        old_content, new_content = await self._fetch_contents(
            repository_address, file_path, revision_id
        )
        change_kind = detect_change_kind(old_content, new_content)
        content_hash = hashlib.sha256(new_content.encode("utf-8")).hexdigest()

        # Step 3: Process each subscriber, bounded concurrency
        semaphore = asyncio.Semaphore(self.max_concurrent_subscribers)

        async def process(source: DocumentationSource) -> SubscriberSyncResult:
            async with semaphore:
                return await self._process_subscriber(
                    source,
                    file_path,
                    revision_id,
                    old_content,
                    new_content,
                    change_kind,
                    content_hash,
                )

        report.results = list(
            await asyncio.gather(*(process(source) for source in sources))
        )

        logger.info(
            f"Sync complete for {file_path}: {report.records_written} record(s), "
            f"{report.steps_updated} step(s) updated, "
            f"{report.pending_review} pending review, "
            f"{len(report.failures)} failure(s)"
        )
        return report

    async def _fetch_contents(
        self, repository_address: str, file_path: str, revision_id: str
    ) -> Tuple[str, str]:
        """
        Fetch file contents before and after the change.

        Returns:
            (old_content, new_content); old_content is "" for new files

        Raises:
            ContentUnavailableError: If the new content cannot be fetched
        """
        logger.info("Fetching file contents...")

        try:
            new_content = await self.fetcher.get_content_at(
                repository_address, file_path, revision_id
            )
        except Exception as e:
            raise ContentUnavailableError(
                f"Failed to fetch {file_path}@{revision_id}: {e}"
            ) from e

        if new_content is None:
            raise ContentUnavailableError(
                f"{file_path} does not exist at {revision_id}"
            )

        old_content = ""
        try:
            parent_revision = await self.fetcher.get_parent_revision(
                repository_address, revision_id
            )
            if parent_revision:
                old_content = (
                    await self.fetcher.get_content_at(
                        repository_address, file_path, parent_revision
                    )
                    or ""
                )
        except Exception as e:
            logger.info(f"Could not fetch previous version of {file_path}: {e}")

        if not old_content:
            logger.info(f"No previous version of {file_path} (new file)")

        logger.info(
            f"Old content: {len(old_content)} chars, new content: {len(new_content)} chars"
        )
        return old_content, new_content

    async def _process_subscriber(
        self,
        source: DocumentationSource,
        file_path: str,
        revision_id: str,
        old_content: str,
        new_content: str,
        change_kind: ChangeKind,
        content_hash: str,
    ) -> SubscriberSyncResult:
        """
        Process a change for one subscribing source.

        Never raises: failures are logged and reported as FAILED results. A
        change record that was already written stays in place.
        """
        result = SubscriberSyncResult(
            source_id=source.id,
            plan_id=source.plan_id,
            outcome=SubscriberOutcome.SKIPPED,
        )

        try:
            if not matches_path_filters(source, file_path):
                logger.info(
                    f"Source {source.id}: {file_path} outside path filters, skipping"
                )
                result.reason = "File outside source path filters"
                return result

            steps = await self.store.list_steps(source.plan_id)
            if not steps:
                logger.info(f"Plan {source.plan_id}: no steps found, skipping")
                result.reason = "Plan has no onboarding steps"
                return result

            logger.info(f"Plan {source.plan_id}: analyzing impact on {len(steps)} steps")
            verdict = await self.classifier.classify(
                file_path, old_content, new_content, steps
            )

            steps_by_title = {step.title: step for step in steps}
            auto_applied = self._is_auto_applicable(verdict)

            logger.info(
                f"Plan {source.plan_id}: severity {verdict.severity}/10, "
                f"{len(verdict.affected_step_titles)} affected, "
                f"auto-update {'YES' if auto_applied else 'NO'}"
            )

            # Step 4: Log the change, regardless of the auto-update decision
            record = await self.store.insert_change_record(
                SourceChangeRecord(
                    source_id=source.id,
                    change_type=change_kind,
                    old_content=old_content,
                    new_content=new_content,
                    diff=ChangeDiff(
                        file=file_path, commit=revision_id, summary=verdict.summary
                    ),
                    affected_steps=self._resolve_step_ids(
                        verdict.affected_step_titles, steps_by_title
                    ),
                    severity=verdict.severity,
                    auto_applied=auto_applied,
                )
            )
            result.change_record_id = record.id
            result.severity = verdict.severity

            await self._mark_source_synced(source, content_hash)

            if not auto_applied:
                # Step 6: Leave unprocessed, queued for manual review
                logger.info(
                    f"Plan {source.plan_id}: manual review required "
                    f"(severity: {verdict.severity}). Summary: {verdict.summary}"
                )
                result.outcome = SubscriberOutcome.PENDING_REVIEW
                return result

            # Step 5: Auto-update steps, then mark the change processed
            async with self._plan_lock(source.plan_id):
                result.steps_updated = await self._apply_updates(
                    verdict.suggested_updates, steps_by_title
                )
            await self.store.mark_change_processed(record.id, _utcnow())
            result.outcome = SubscriberOutcome.AUTO_APPLIED
            return result

        except Exception as e:
            logger.error(
                f"Failed to process source {source.id} (plan {source.plan_id}): {e}",
                exc_info=True,
            )
            result.outcome = SubscriberOutcome.FAILED
            result.reason = str(e)
            return result

    def _is_auto_applicable(self, verdict: Verdict) -> bool:
        """The severity threshold always wins over the LLM's auto-update flag."""
        if verdict.should_auto_update and verdict.severity >= self.auto_apply_threshold:
            logger.warning(
                f"Ignoring auto-update flag for severity {verdict.severity} "
                f"(threshold {self.auto_apply_threshold})"
            )
            return False
        return verdict.should_auto_update

    def _resolve_step_ids(
        self, titles: List[str], steps_by_title: Dict[str, OnboardingStep]
    ) -> List[str]:
        """Map step titles to IDs; unknown titles are dropped."""
        step_ids: List[str] = []
        for title in titles:
            step = steps_by_title.get(title)
            if step is None:
                logger.debug(f"Dropping unknown affected step title: '{title}'")
                continue
            if step.id not in step_ids:
                step_ids.append(step.id)
        return step_ids

    async def _apply_updates(
        self,
        updates: List[SuggestedUpdate],
        steps_by_title: Dict[str, OnboardingStep],
    ) -> List[str]:
        """
        Replace the instructions of each suggested step.

        Only ``content.instructions`` changes; code, commands and verification
        steps are kept. Unknown titles and failing updates are skipped.

        Returns:
            IDs of steps whose instructions changed
        """
        logger.info(f"Auto-updating {len(updates)} step(s)...")
        updated_ids: List[str] = []

        for update in updates:
            step = steps_by_title.get(update.step_title)
            if step is None:
                logger.info(f"Step not found: '{update.step_title}', skipping update")
                continue

            try:
                # Re-read under the plan lock so concurrent syncs see each other
                current = await self.store.get_step(step.id) or step

                if current.content.instructions == update.new_instructions:
                    logger.info(f"Step already up to date: '{step.title}'")
                    continue

                content = current.content.model_copy(
                    update={"instructions": update.new_instructions}
                )
                await self.store.update_step_content(step.id, content, _utcnow())
                if step.id not in updated_ids:
                    updated_ids.append(step.id)

                logger.info(f"Updated: '{step.title}'. Reason: {update.reason}")

            except Exception as e:
                logger.error(f"Failed to update '{step.title}': {e}")

        return updated_ids

    async def _mark_source_synced(
        self, source: DocumentationSource, content_hash: str
    ) -> None:
        try:
            await self.store.mark_source_synced(source.id, content_hash, _utcnow())
        except Exception as e:
            logger.warning(f"Failed to record sync state for source {source.id}: {e}")
