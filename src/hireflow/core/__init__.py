"""Core models and error types."""

from .models import (
    Actor,
    ActorRole,
    Application,
    ApplicationStatus,
    JobRequirement,
    JobStatus,
    JobType,
)
from .errors import (
    CascadeIncomplete,
    DocumentUnreadable,
    DuplicateApplication,
    HireflowError,
    InvalidTransition,
    NotFound,
    PermissionDenied,
)

__all__ = [
    "Actor",
    "ActorRole",
    "Application",
    "ApplicationStatus",
    "JobRequirement",
    "JobStatus",
    "JobType",
    "CascadeIncomplete",
    "DocumentUnreadable",
    "DuplicateApplication",
    "HireflowError",
    "InvalidTransition",
    "NotFound",
    "PermissionDenied",
]
