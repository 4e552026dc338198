"""
Documentation Change Classifier

Responsibilities:
- Documentation file taxonomy (which changed files are worth analyzing)
- Change kind detection (content / structure / deletion)
- LLM change analysis: severity, affected steps, auto-update eligibility and
  suggested instruction updates for one plan's onboarding steps
- Conservative fallback when the analysis cannot be obtained
"""

import logging
import re
from pathlib import PurePosixPath
from typing import Iterable, List, Optional

from pydantic import BaseModel, Field
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.output_parsers import PydanticOutputParser
from langchain_core.prompts import ChatPromptTemplate

from devonboard.ai_core.prompts.change_analysis import (
    CHANGE_ANALYSIS_SYSTEM_PROMPT,
    CHANGE_ANALYSIS_USER_PROMPT,
    STEP_PREVIEW_CHARS,
    TRUNCATION_NOTE,
)
from devonboard.config import Settings, get_settings
from devonboard.models.changes import ChangeKind
from devonboard.models.steps import OnboardingStep

logger = logging.getLogger(__name__)


# Documentation file taxonomy

DOC_EXTENSIONS = {".md", ".markdown", ".txt"}
DOC_FILE_NAMES = {"readme", "contributing", "setup", "install", "onboarding"}
# Extensions allowed on the well-known names above (setup.py is code, not docs)
DOC_NAME_EXTENSIONS = {"", ".md", ".markdown", ".txt", ".rst", ".adoc"}
DOC_DIRECTORY = "docs"

_HEADING_PATTERN = re.compile(r"^ {0,3}#{1,6}\s+\S")
_FENCE_PATTERN = re.compile(r"^ {0,3}(`{3,}|~{3,})")


def is_documentation_file(file_path: str) -> bool:
    """
    Quick check if a file path is likely documentation.

    Matches:
    - Markdown and plain-text files (``.md``, ``.markdown``, ``.txt``)
    - README, CONTRIBUTING, SETUP, INSTALL and ONBOARDING files, any case
    - Anything inside a ``docs`` directory

    Args:
        file_path: Repository-relative path (e.g., "docs/setup/linux.rst")

    Returns:
        True if the file should be treated as documentation
    """
    if not file_path:
        return False

    path = PurePosixPath(file_path.replace("\\", "/"))
    suffix = path.suffix.lower()

    if suffix in DOC_EXTENSIONS:
        return True

    if path.stem.lower() in DOC_FILE_NAMES and suffix in DOC_NAME_EXTENSIONS:
        return True

    return any(part.lower() == DOC_DIRECTORY for part in path.parts[:-1])


def filter_documentation_files(file_paths: Iterable[str]) -> List[str]:
    """Keep only documentation files, preserving order."""
    return [path for path in file_paths if is_documentation_file(path)]


def should_sync(modified_files: Iterable[str]) -> bool:
    """Determine if a set of changed files should trigger a sync."""
    doc_files = filter_documentation_files(modified_files)

    if not doc_files:
        logger.info("No documentation files changed, skipping")
        return False

    logger.info(f"Documentation files changed: {doc_files}")
    return True


def _headings(content: str) -> List[str]:
    """Markdown headings in order, ignoring lines inside fenced code blocks."""
    headings = []
    fence = None

    for line in content.splitlines():
        fence_match = _FENCE_PATTERN.match(line)
        if fence_match:
            marker = fence_match.group(1)
            if fence is None:
                fence = marker
            elif marker[0] == fence[0] and len(marker) >= len(fence):
                fence = None
            continue

        if fence is None and _HEADING_PATTERN.match(line):
            headings.append(line.strip())

    return headings


def detect_change_kind(old_content: str, new_content: str) -> ChangeKind:
    """
    Classify the shape of a change without looking at its meaning.

    - DELETION: the file had content and is now empty
    - STRUCTURE: markdown headings were added, removed or reordered
    - CONTENT: everything else
    """
    if old_content.strip() and not new_content.strip():
        return ChangeKind.DELETION

    if _headings(old_content) != _headings(new_content):
        return ChangeKind.STRUCTURE

    return ChangeKind.CONTENT


# Structured output


class SuggestedUpdate(BaseModel):
    """Replacement instructions for one affected onboarding step."""

    step_title: str = Field(..., description="Exact title of the step to update")
    new_instructions: str = Field(
        ..., description="Updated instructions for the step, in markdown"
    )
    reason: str = Field(..., description="Why this update is needed")


class Verdict(BaseModel):
    """Result of change analysis - structured output from LLM."""

    severity: int = Field(
        ...,
        ge=1,
        le=10,
        description="1-3 cosmetic, 4-6 clarifying, 7-9 process-impacting, 10 breaking",
    )
    affected_step_titles: List[str] = Field(
        default_factory=list,
        description="Exact titles of the onboarding steps affected by the change",
    )
    should_auto_update: bool = Field(
        ...,
        description="True only if severity is below 7 and the change is additive",
    )
    summary: str = Field(..., description="Brief description of what changed")
    suggested_updates: List[SuggestedUpdate] = Field(
        default_factory=list,
        description="One entry per affected step that can be updated",
    )


def create_default_llm(settings: Settings) -> BaseChatModel:
    """Build the gen_ai_hub proxied chat model used in production."""
    from gen_ai_hub.proxy.langchain.openai import ChatOpenAI
    from gen_ai_hub.proxy.core.proxy_clients import get_proxy_client

    proxy_client = get_proxy_client("gen-ai-hub")
    return ChatOpenAI(
        proxy_model_name=settings.openai_model,
        proxy_client=proxy_client,
        temperature=settings.temperature,
        max_tokens=settings.classifier_max_tokens,
    )


class ChangeClassifier:
    """
    Analyzes documentation changes and determines their impact on onboarding steps.

    The classifier never raises for LLM problems: if the call fails or its
    output does not fit the Verdict model, the most conservative verdict is
    returned so the change still reaches a human.
    """

    def __init__(
        self,
        llm: Optional[BaseChatModel] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Args:
            llm: Chat model to use (defaults to the gen_ai_hub proxied ChatOpenAI)
            settings: Application settings (defaults to get_settings())
        """
        settings = settings or get_settings()
        self.max_content_chars = settings.classifier_max_content_chars
        self.llm = llm if llm is not None else create_default_llm(settings)

        self.parser = PydanticOutputParser(pydantic_object=Verdict)
        self.prompt = ChatPromptTemplate.from_messages(
            [
                ("system", CHANGE_ANALYSIS_SYSTEM_PROMPT),
                ("human", CHANGE_ANALYSIS_USER_PROMPT),
            ]
        )
        self.chain = self.prompt | self.llm | self.parser

        logger.info("ChangeClassifier initialized with structured output (Pydantic)")

    async def classify(
        self,
        file_path: str,
        old_content: str,
        new_content: str,
        current_steps: List[OnboardingStep],
    ) -> Verdict:
        """
        Analyze if a documentation change affects onboarding steps.

        Args:
            file_path: Path of the changed file
            old_content: Content before the change ("" for new files)
            new_content: Content after the change
            current_steps: Steps of the plan whose impact is assessed

        Returns:
            Verdict; titles in it are not guaranteed to exist in current_steps

        Raises:
            ValueError: If file_path is empty
        """
        if not file_path:
            raise ValueError("file_path must not be empty")

        if not current_steps:
            logger.info(f"No onboarding steps to assess for {file_path}, skipping analysis")
            return self._no_op_verdict()

        logger.info(f"Analyzing {file_path} against {len(current_steps)} steps...")

        try:
            verdict = await self.chain.ainvoke(
                self._build_prompt_inputs(
                    file_path, old_content, new_content, current_steps
                )
            )
        except Exception as e:
            logger.error(f"Change analysis failed for {file_path}: {e}", exc_info=True)
            return self._conservative_verdict()

        logger.info(
            f"Analysis complete for {file_path}: severity={verdict.severity}, "
            f"affected={len(verdict.affected_step_titles)}, "
            f"auto_update={verdict.should_auto_update}"
        )
        return verdict

    def _build_prompt_inputs(
        self,
        file_path: str,
        old_content: str,
        new_content: str,
        current_steps: List[OnboardingStep],
    ) -> dict:
        limit = self.max_content_chars
        return {
            "file_path": file_path,
            "old_content": old_content[:limit],
            "old_truncation_note": TRUNCATION_NOTE if len(old_content) > limit else "",
            "new_content": new_content[:limit],
            "new_truncation_note": TRUNCATION_NOTE if len(new_content) > limit else "",
            "current_steps": self._format_steps(current_steps),
            "format_instructions": self.parser.get_format_instructions(),
        }

    def _format_steps(self, steps: List[OnboardingStep]) -> str:
        """Format onboarding steps for the LLM prompt."""
        formatted = []
        for i, step in enumerate(steps, 1):
            instructions = step.content.instructions
            preview = instructions[:STEP_PREVIEW_CHARS]
            if len(instructions) > STEP_PREVIEW_CHARS:
                preview += "..."
            formatted.append(
                f'{i}. "{step.title}" ({step.step_type.value}): {preview}'
            )
        return "\n".join(formatted)

    def _no_op_verdict(self) -> Verdict:
        return Verdict(
            severity=1,
            affected_step_titles=[],
            should_auto_update=False,
            summary="No onboarding steps to assess",
            suggested_updates=[],
        )

    def _conservative_verdict(self) -> Verdict:
        """Severity 10 verdict used whenever the analysis cannot be trusted."""
        return Verdict(
            severity=10,
            affected_step_titles=[],
            should_auto_update=False,
            summary="Failed to analyze changes - manual review required",
            suggested_updates=[],
        )
