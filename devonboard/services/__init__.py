# Application services
from devonboard.services.record_store import (
    InMemoryRecordStore,
    RecordStore,
    RecordStoreError,
)
from devonboard.services.sync_orchestrator import (
    ContentUnavailableError,
    SyncOrchestrator,
)

__all__ = [
    "InMemoryRecordStore",
    "RecordStore",
    "RecordStoreError",
    "ContentUnavailableError",
    "SyncOrchestrator",
]
