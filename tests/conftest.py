import sys
from pathlib import Path

# Add project root and the tests directory (for helpers) to Python path
tests_dir = Path(__file__).parent
sys.path.insert(0, str(tests_dir.parent))
sys.path.insert(0, str(tests_dir))

import pytest

from devonboard.config import Settings
from devonboard.services.record_store import InMemoryRecordStore


@pytest.fixture
def settings() -> Settings:
    return Settings(
        github_token="",
        github_webhook_secret="",
        classifier_max_content_chars=2000,
        auto_apply_severity_threshold=7,
        max_concurrent_subscribers=4,
    )


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()
