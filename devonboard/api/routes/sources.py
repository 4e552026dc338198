"""
Documentation Source Routes

Subscriber setup: register, list, disable and delete documentation sources.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from devonboard.api.dependencies import get_record_store
from devonboard.models.sources import DocumentationSource, OriginKind, SyncCadence
from devonboard.services.record_store import RecordStore, RecordStoreError

logger = logging.getLogger(__name__)

router = APIRouter()


class SourceCreateRequest(BaseModel):
    """Request to track a documentation source for a plan."""

    organization_id: str = Field(..., description="Owning organization")
    plan_id: str = Field(..., description="Plan receiving updates")
    origin_kind: OriginKind = Field(..., description="github, notion, confluence, ...")
    origin_address: str = Field(..., description="e.g., https://github.com/acme/app")
    source_name: Optional[str] = Field(None, description="Display name")
    path_filters: List[str] = Field(
        default_factory=list, description="Glob patterns or directory prefixes"
    )
    sync_cadence: SyncCadence = SyncCadence.REALTIME


@router.get("", response_model=List[DocumentationSource])
async def list_sources(
    organization_id: str = Query(..., description="Organization ID"),
    plan_id: Optional[str] = Query(None, description="Filter by plan"),
    store: RecordStore = Depends(get_record_store),
):
    """List documentation sources of an organization, newest first."""
    return await store.list_sources(organization_id=organization_id, plan_id=plan_id)


@router.post("", response_model=DocumentationSource, status_code=201)
async def create_source(
    request: SourceCreateRequest,
    store: RecordStore = Depends(get_record_store),
):
    """Start tracking a documentation source."""
    source = DocumentationSource(**request.model_dump())
    try:
        created = await store.add_source(source)
    except RecordStoreError as e:
        logger.error(f"Failed to create source: {e}")
        raise HTTPException(status_code=409, detail=str(e))

    logger.info(
        f"Tracking {created.origin_kind.value} source {created.origin_address} "
        f"for plan {created.plan_id}"
    )
    return created


@router.patch("/{source_id}/deactivate", response_model=DocumentationSource)
async def deactivate_source(
    source_id: str,
    store: RecordStore = Depends(get_record_store),
):
    """Stop syncing a source without deleting its history."""
    try:
        return await store.deactivate_source(source_id)
    except RecordStoreError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{source_id}")
async def delete_source(
    source_id: str,
    store: RecordStore = Depends(get_record_store),
):
    """Permanently delete a source."""
    try:
        await store.delete_source(source_id)
    except RecordStoreError as e:
        raise HTTPException(status_code=404, detail=str(e))

    logger.info(f"Deleted source {source_id}")
    return {"success": True, "message": "Documentation source deleted successfully"}
