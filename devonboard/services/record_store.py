"""
Record Store

Storage interface for documentation sources, onboarding steps and change
records, plus an in-memory implementation.

Every operation is atomic per row; nothing here spans rows in a transaction.
Records are handed out as copies so callers never mutate stored state.
"""

import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, List, Optional

from devonboard.models.changes import SourceChangeRecord
from devonboard.models.sources import (
    DocumentationSource,
    OriginKind,
    normalize_origin_address,
)
from devonboard.models.steps import OnboardingStep, StepContent


class RecordStoreError(Exception):
    """
    Raised when a record store operation fails (missing row, constraint
    violation, backend error).
    """

    pass


class RecordStore(ABC):
    """Record store operations consumed by the sync pipeline and the API."""

    # Sources

    @abstractmethod
    async def add_source(self, source: DocumentationSource) -> DocumentationSource:
        ...

    @abstractmethod
    async def get_source(self, source_id: str) -> Optional[DocumentationSource]:
        ...

    @abstractmethod
    async def list_sources(
        self,
        organization_id: Optional[str] = None,
        plan_id: Optional[str] = None,
    ) -> List[DocumentationSource]:
        ...

    @abstractmethod
    async def list_active_sources(
        self, origin_address: str, origin_kind: OriginKind
    ) -> List[DocumentationSource]:
        ...

    @abstractmethod
    async def mark_source_synced(
        self, source_id: str, content_hash: str, synced_at: datetime
    ) -> None:
        ...

    @abstractmethod
    async def deactivate_source(self, source_id: str) -> DocumentationSource:
        ...

    @abstractmethod
    async def delete_source(self, source_id: str) -> None:
        ...

    # Steps

    @abstractmethod
    async def add_step(self, step: OnboardingStep) -> OnboardingStep:
        ...

    @abstractmethod
    async def get_step(self, step_id: str) -> Optional[OnboardingStep]:
        ...

    @abstractmethod
    async def list_steps(self, plan_id: str) -> List[OnboardingStep]:
        ...

    @abstractmethod
    async def update_step_content(
        self, step_id: str, content: StepContent, updated_at: datetime
    ) -> OnboardingStep:
        ...

    # Change records

    @abstractmethod
    async def insert_change_record(
        self, record: SourceChangeRecord
    ) -> SourceChangeRecord:
        ...

    @abstractmethod
    async def get_change_record(self, record_id: str) -> Optional[SourceChangeRecord]:
        ...

    @abstractmethod
    async def list_change_records(
        self,
        source_id: Optional[str] = None,
        pending_only: bool = False,
    ) -> List[SourceChangeRecord]:
        ...

    @abstractmethod
    async def mark_change_processed(
        self, record_id: str, processed_at: datetime
    ) -> SourceChangeRecord:
        ...


class InMemoryRecordStore(RecordStore):
    """
    Thread-safe in-memory record store.

    Used for local runs and tests. Data does not persist across restarts.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._sources: Dict[str, DocumentationSource] = {}
        self._steps: Dict[str, OnboardingStep] = {}
        self._changes: Dict[str, SourceChangeRecord] = {}

    # Sources

    async def add_source(self, source: DocumentationSource) -> DocumentationSource:
        with self._lock:
            if source.id in self._sources:
                raise RecordStoreError(f"Source {source.id} already exists")
            self._sources[source.id] = source.model_copy(deep=True)
            return source.model_copy(deep=True)

    async def get_source(self, source_id: str) -> Optional[DocumentationSource]:
        with self._lock:
            source = self._sources.get(source_id)
            return source.model_copy(deep=True) if source else None

    async def list_sources(
        self,
        organization_id: Optional[str] = None,
        plan_id: Optional[str] = None,
    ) -> List[DocumentationSource]:
        with self._lock:
            sources = [
                s.model_copy(deep=True)
                for s in self._sources.values()
                if (organization_id is None or s.organization_id == organization_id)
                and (plan_id is None or s.plan_id == plan_id)
            ]
        return sorted(sources, key=lambda s: s.created_at, reverse=True)

    async def list_active_sources(
        self, origin_address: str, origin_kind: OriginKind
    ) -> List[DocumentationSource]:
        address = normalize_origin_address(origin_address)
        with self._lock:
            return [
                s.model_copy(deep=True)
                for s in self._sources.values()
                if s.is_active
                and s.origin_kind == origin_kind
                and s.origin_address == address
            ]

    async def mark_source_synced(
        self, source_id: str, content_hash: str, synced_at: datetime
    ) -> None:
        with self._lock:
            source = self._require(self._sources, source_id, "Source")
            self._sources[source_id] = source.model_copy(
                update={
                    "last_content_hash": content_hash,
                    "last_synced_at": synced_at,
                    "updated_at": synced_at,
                }
            )

    async def deactivate_source(self, source_id: str) -> DocumentationSource:
        with self._lock:
            source = self._require(self._sources, source_id, "Source")
            updated = source.model_copy(
                update={"is_active": False, "updated_at": datetime.now(timezone.utc)}
            )
            self._sources[source_id] = updated
            return updated.model_copy(deep=True)

    async def delete_source(self, source_id: str) -> None:
        with self._lock:
            self._require(self._sources, source_id, "Source")
            del self._sources[source_id]

    # Steps

    async def add_step(self, step: OnboardingStep) -> OnboardingStep:
        with self._lock:
            if step.id in self._steps:
                raise RecordStoreError(f"Step {step.id} already exists")
            for existing in self._steps.values():
                if existing.plan_id == step.plan_id and existing.title == step.title:
                    raise RecordStoreError(
                        f"Plan {step.plan_id} already has a step titled '{step.title}'"
                    )
            self._steps[step.id] = step.model_copy(deep=True)
            return step.model_copy(deep=True)

    async def get_step(self, step_id: str) -> Optional[OnboardingStep]:
        with self._lock:
            step = self._steps.get(step_id)
            return step.model_copy(deep=True) if step else None

    async def list_steps(self, plan_id: str) -> List[OnboardingStep]:
        with self._lock:
            steps = [
                s.model_copy(deep=True)
                for s in self._steps.values()
                if s.plan_id == plan_id
            ]
        return sorted(steps, key=lambda s: s.order_index)

    async def update_step_content(
        self, step_id: str, content: StepContent, updated_at: datetime
    ) -> OnboardingStep:
        with self._lock:
            step = self._require(self._steps, step_id, "Step")
            updated = step.model_copy(
                update={"content": content.model_copy(deep=True), "updated_at": updated_at}
            )
            self._steps[step_id] = updated
            return updated.model_copy(deep=True)

    # Change records

    async def insert_change_record(
        self, record: SourceChangeRecord
    ) -> SourceChangeRecord:
        with self._lock:
            if record.id in self._changes:
                raise RecordStoreError(f"Change record {record.id} already exists")
            if record.source_id not in self._sources:
                raise RecordStoreError(f"Source {record.source_id} not found")
            self._changes[record.id] = record.model_copy(deep=True)
            return record.model_copy(deep=True)

    async def get_change_record(self, record_id: str) -> Optional[SourceChangeRecord]:
        with self._lock:
            record = self._changes.get(record_id)
            return record.model_copy(deep=True) if record else None

    async def list_change_records(
        self,
        source_id: Optional[str] = None,
        pending_only: bool = False,
    ) -> List[SourceChangeRecord]:
        with self._lock:
            records = [
                r.model_copy(deep=True)
                for r in self._changes.values()
                if (source_id is None or r.source_id == source_id)
                and (not pending_only or r.processed_at is None)
            ]
        return sorted(records, key=lambda r: r.detected_at, reverse=True)

    async def mark_change_processed(
        self, record_id: str, processed_at: datetime
    ) -> SourceChangeRecord:
        with self._lock:
            record = self._require(self._changes, record_id, "Change record")
            if record.processed_at is not None:
                # processed_at is set exactly once
                return record.model_copy(deep=True)
            updated = record.model_copy(update={"processed_at": processed_at})
            self._changes[record_id] = updated
            return updated.model_copy(deep=True)

    @staticmethod
    def _require(table: dict, key: str, kind: str):
        row = table.get(key)
        if row is None:
            raise RecordStoreError(f"{kind} {key} not found")
        return row
