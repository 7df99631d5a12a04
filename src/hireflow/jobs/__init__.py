"""Resume evaluation and application lifecycle."""

from .analyzer import (
    ResumeAnalyzer,
    ResumeEvaluation,
    skill_match_percent
)
from .experience import (
    ExperienceMention,
    extract_experience_years,
    find_mentions
)
from .extractor import TextExtractor
from .transitions import (
    TRANSITIONS,
    TERMINAL_STATUSES,
    allowed_transitions,
    check_transition
)
from .application import (
    ApplicationWorkflow,
    ApplicationStats,
    JobDeletionResult,
    JobStats,
    SubmissionResult
)

__all__ = [
    "ResumeAnalyzer",
    "ResumeEvaluation",
    "skill_match_percent",
    "ExperienceMention",
    "extract_experience_years",
    "find_mentions",
    "TextExtractor",
    "TRANSITIONS",
    "TERMINAL_STATUSES",
    "allowed_transitions",
    "check_transition",
    "ApplicationWorkflow",
    "ApplicationStats",
    "JobDeletionResult",
    "JobStats",
    "SubmissionResult"
]
