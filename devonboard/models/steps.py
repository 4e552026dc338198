"""
Onboarding Step Models

Steps are the units of guidance an onboarding plan is made of. The change
pipeline joins classifier output to steps by title, so titles must be unique
within a plan.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field


class StepKind(str, Enum):
    """Type of onboarding step."""

    SETUP = "setup"
    DOCUMENTATION = "documentation"
    TASK = "task"
    VERIFICATION = "verification"


class StepContent(BaseModel):
    """Content block of an onboarding step."""

    instructions: str = Field(..., description="Free-text instructions (markdown)")
    code: Optional[str] = Field(None, description="Optional code sample")
    commands: List[str] = Field(default_factory=list, description="Ordered commands")
    verification_steps: List[str] = Field(
        default_factory=list, description="Ordered verification checks"
    )


class OnboardingStep(BaseModel):
    """A single step of an onboarding plan."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    plan_id: str = Field(..., description="Owning plan")
    title: str = Field(..., min_length=1, description="Unique within the plan")
    description: Optional[str] = None
    order_index: int = Field(0, ge=0, description="Position within the plan")
    step_type: StepKind = StepKind.TASK
    content: StepContent
    dependencies: List[str] = Field(
        default_factory=list, description="IDs of prerequisite steps"
    )
    estimated_duration: int = Field(0, ge=0, description="Estimated minutes")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
