"""
API Dependencies

Services are built once when the application starts and stored on
``app.state``; routes reach them through these providers.
"""

import logging
from typing import Tuple

from fastapi import Request

from devonboard.ai_core.classification import ChangeClassifier
from devonboard.config import Settings, get_settings
from devonboard.integrations.github import GitHubContentFetcher
from devonboard.services.record_store import InMemoryRecordStore, RecordStore
from devonboard.services.sync_orchestrator import SyncOrchestrator

logger = logging.getLogger(__name__)


def build_services(settings: Settings) -> Tuple[RecordStore, SyncOrchestrator]:
    """Construct the record store, classifier and orchestrator for the process."""
    store = InMemoryRecordStore()
    orchestrator = SyncOrchestrator(
        classifier=ChangeClassifier(settings=settings),
        store=store,
        fetcher=GitHubContentFetcher(),
        settings=settings,
    )
    logger.info("Sync services initialized")
    return store, orchestrator


def get_record_store(request: Request) -> RecordStore:
    return request.app.state.record_store


def get_orchestrator(request: Request) -> SyncOrchestrator:
    return request.app.state.orchestrator


def get_app_settings() -> Settings:
    return get_settings()
