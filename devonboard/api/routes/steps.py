"""
Onboarding Step Routes

Steps of an onboarding plan. Change analysis joins its output to these steps
by title, so a plan cannot hold two steps with the same title.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from devonboard.api.dependencies import get_record_store
from devonboard.models.steps import OnboardingStep, StepContent, StepKind
from devonboard.services.record_store import RecordStore, RecordStoreError

logger = logging.getLogger(__name__)

router = APIRouter()


class StepCreateRequest(BaseModel):
    """Request to add a step to a plan."""

    title: str = Field(
        ..., min_length=1, max_length=200, description="Unique within the plan"
    )
    description: Optional[str] = None
    order_index: int = Field(..., ge=0, description="Position within the plan")
    step_type: StepKind = Field(
        ..., description="setup, documentation, task or verification"
    )
    content: StepContent
    dependencies: List[str] = Field(
        default_factory=list, description="IDs of prerequisite steps"
    )
    estimated_duration: int = Field(30, ge=1, description="Estimated minutes")


class StepListResponse(BaseModel):
    data: List[OnboardingStep]
    count: int


@router.get("/{plan_id}/steps", response_model=StepListResponse)
async def list_steps(
    plan_id: str,
    store: RecordStore = Depends(get_record_store),
):
    """Get all steps of a plan, in order."""
    steps = await store.list_steps(plan_id)
    return StepListResponse(data=steps, count=len(steps))


@router.post("/{plan_id}/steps", response_model=OnboardingStep, status_code=201)
async def create_step(
    plan_id: str,
    request: StepCreateRequest,
    store: RecordStore = Depends(get_record_store),
):
    """Add a step to a plan."""
    step = OnboardingStep(plan_id=plan_id, **request.model_dump())
    try:
        created = await store.add_step(step)
    except RecordStoreError as e:
        logger.error(f"Failed to create step for plan {plan_id}: {e}")
        raise HTTPException(status_code=409, detail=str(e))

    logger.info(f"Added step '{created.title}' to plan {plan_id}")
    return created
