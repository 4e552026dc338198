"""Prompts package."""

from devonboard.ai_core.prompts.change_analysis import (
    CHANGE_ANALYSIS_SYSTEM_PROMPT,
    CHANGE_ANALYSIS_USER_PROMPT,
)

__all__ = [
    "CHANGE_ANALYSIS_SYSTEM_PROMPT",
    "CHANGE_ANALYSIS_USER_PROMPT",
]
