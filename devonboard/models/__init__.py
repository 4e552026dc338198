# Shared data models
from devonboard.models.sources import (
    DocumentationSource,
    OriginKind,
    SyncCadence,
    normalize_origin_address,
)
from devonboard.models.steps import OnboardingStep, StepContent, StepKind
from devonboard.models.changes import (
    AUTO_APPLY_SEVERITY_THRESHOLD,
    ChangeDiff,
    ChangeKind,
    SourceChangeRecord,
)
from devonboard.models.api_responses import (
    SubscriberOutcome,
    SubscriberSyncResult,
    SyncReport,
)

__all__ = [
    "DocumentationSource",
    "OriginKind",
    "SyncCadence",
    "normalize_origin_address",
    "OnboardingStep",
    "StepContent",
    "StepKind",
    "AUTO_APPLY_SEVERITY_THRESHOLD",
    "ChangeDiff",
    "ChangeKind",
    "SourceChangeRecord",
    "SubscriberOutcome",
    "SubscriberSyncResult",
    "SyncReport",
]
