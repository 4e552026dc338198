"""
Change History Routes

Audit history of detected changes and the manual review queue.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from devonboard.api.dependencies import get_record_store
from devonboard.models.changes import SourceChangeRecord
from devonboard.services.record_store import RecordStore, RecordStoreError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[SourceChangeRecord])
async def list_changes(
    source_id: Optional[str] = Query(None, description="Filter by source"),
    pending_only: bool = Query(False, description="Only changes awaiting review"),
    store: RecordStore = Depends(get_record_store),
):
    """List change records, newest first."""
    return await store.list_change_records(
        source_id=source_id, pending_only=pending_only
    )


@router.post("/{record_id}/review", response_model=SourceChangeRecord)
async def mark_reviewed(
    record_id: str,
    store: RecordStore = Depends(get_record_store),
):
    """Mark a change as reviewed, removing it from the review queue."""
    try:
        record = await store.mark_change_processed(
            record_id, datetime.now(timezone.utc)
        )
    except RecordStoreError as e:
        raise HTTPException(status_code=404, detail=str(e))

    logger.info(f"Change {record_id} marked as reviewed")
    return record
