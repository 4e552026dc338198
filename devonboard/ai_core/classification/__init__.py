from devonboard.ai_core.classification.change_classifier import (
    ChangeClassifier,
    SuggestedUpdate,
    Verdict,
    detect_change_kind,
    filter_documentation_files,
    is_documentation_file,
    should_sync,
)

__all__ = [
    "ChangeClassifier",
    "SuggestedUpdate",
    "Verdict",
    "detect_change_kind",
    "filter_documentation_files",
    "is_documentation_file",
    "should_sync",
]
