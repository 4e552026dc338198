"""
Test builders and stub collaborators shared by the test suite.
"""

from typing import Dict, List, Optional, Tuple

from devonboard.ai_core.classification import Verdict
from devonboard.models.sources import DocumentationSource, OriginKind
from devonboard.models.steps import OnboardingStep, StepContent, StepKind
from devonboard.services.record_store import InMemoryRecordStore

REPO_URL = "https://github.com/acme/platform"


def make_step(
    plan_id: str,
    title: str,
    order_index: int = 0,
    instructions: Optional[str] = None,
    commands: Optional[List[str]] = None,
) -> OnboardingStep:
    return OnboardingStep(
        plan_id=plan_id,
        title=title,
        order_index=order_index,
        step_type=StepKind.SETUP,
        content=StepContent(
            instructions=instructions or f"Instructions for {title}",
            code="npm --version",
            commands=commands or ["npm install"],
            verification_steps=["node_modules exists"],
        ),
        estimated_duration=10,
    )


def make_source(
    plan_id: str,
    origin_address: str = REPO_URL,
    origin_kind: OriginKind = OriginKind.GITHUB,
    is_active: bool = True,
    path_filters: Optional[List[str]] = None,
) -> DocumentationSource:
    return DocumentationSource(
        organization_id="org-1",
        plan_id=plan_id,
        origin_kind=origin_kind,
        origin_address=origin_address,
        is_active=is_active,
        path_filters=path_filters or [],
    )


async def seed_plan(
    store: InMemoryRecordStore,
    plan_id: str,
    step_titles: List[str],
    origin_address: str = REPO_URL,
    path_filters: Optional[List[str]] = None,
) -> Tuple[DocumentationSource, Dict[str, OnboardingStep]]:
    """Add a source tracking origin_address and the plan's steps."""
    source = await store.add_source(
        make_source(plan_id, origin_address, path_filters=path_filters)
    )
    steps = {}
    for i, title in enumerate(step_titles):
        steps[title] = await store.add_step(make_step(plan_id, title, order_index=i))
    return source, steps


def make_verdict(
    severity: int,
    affected: Optional[List[str]] = None,
    should_auto_update: bool = True,
    updates: Optional[Dict[str, str]] = None,
    summary: str = "Bootstrap command added",
) -> Verdict:
    """Build a verdict; updates maps step title -> new instructions."""
    return Verdict.model_validate(
        {
            "severity": severity,
            "affected_step_titles": affected or [],
            "should_auto_update": should_auto_update,
            "summary": summary,
            "suggested_updates": [
                {"step_title": title, "new_instructions": text, "reason": "docs changed"}
                for title, text in (updates or {}).items()
            ],
        }
    )


class StubFetcher:
    """Content fetcher serving fixed contents keyed by revision."""

    def __init__(
        self,
        contents: Dict[str, object],
        parents: Optional[Dict[str, str]] = None,
    ):
        self.contents = contents
        self.parents = parents or {}
        self.calls: List[Tuple[str, str, str]] = []

    async def get_content_at(self, repository_address, file_path, revision_id):
        self.calls.append((repository_address, file_path, revision_id))
        content = self.contents.get(revision_id)
        if isinstance(content, Exception):
            raise content
        return content

    async def get_parent_revision(self, repository_address, revision_id):
        return self.parents.get(revision_id)


class StubClassifier:
    """Classifier returning preset verdicts, optionally per plan."""

    def __init__(self, verdict: Verdict, per_plan: Optional[Dict[str, Verdict]] = None):
        self.verdict = verdict
        self.per_plan = per_plan or {}
        self.calls = []

    async def classify(self, file_path, old_content, new_content, current_steps):
        self.calls.append((file_path, old_content, new_content, current_steps))
        plan_id = current_steps[0].plan_id if current_steps else None
        return self.per_plan.get(plan_id, self.verdict)
