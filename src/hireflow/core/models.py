"""Core data models for Hireflow."""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field


def _new_id() -> str:
    return uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ApplicationStatus(str, Enum):
    """Hiring stages an application moves through."""
    APPLIED = "applied"
    INTERVIEWING = "interviewing"
    UNDER_CONSIDERATION = "underConsideration"
    SELECTED = "selected"
    REJECTED = "rejected"


class JobStatus(str, Enum):
    """Whether a job is accepting applications."""
    OPEN = "open"
    CLOSED = "closed"


class JobType(str, Enum):
    """Employment type of a job posting."""
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CONTRACT = "contract"
    INTERNSHIP = "internship"


class ActorRole(str, Enum):
    """Roles of the people calling into the workflow."""
    ADMIN = "admin"
    EMPLOYER = "employer"
    CANDIDATE = "candidate"


class Actor(BaseModel):
    """Whoever is requesting an operation."""
    id: str = Field(..., description="Actor identifier")
    role: ActorRole = Field(ActorRole.CANDIDATE, description="Actor role")


class JobRequirement(BaseModel):
    """Job posting as seen by the evaluation engine."""
    id: str = Field(default_factory=_new_id, description="Job identifier")
    title: str = Field(..., min_length=1, description="Job title")
    description: str = Field("", description="Job description")
    requirements: str = Field("", description="Free-text requirements")
    salary: Optional[float] = Field(None, ge=0, description="Offered salary")
    required_skills: List[str] = Field(default_factory=list, description="Required skills, in order")
    required_experience_months: int = Field(0, ge=0, description="Required experience in months")
    job_type: JobType = Field(JobType.FULL_TIME, description="Employment type")
    status: JobStatus = Field(JobStatus.OPEN, description="Open or closed")
    owner_id: Optional[str] = Field(None, description="Employer that posted the job")
    created_at: datetime = Field(default_factory=_utcnow, description="Posting time")


class Application(BaseModel):
    """A candidate's admitted application to a job."""
    id: str = Field(default_factory=_new_id, description="Application identifier")
    candidate_id: str = Field(..., description="Applying candidate")
    job_id: str = Field(..., description="Job applied to")
    resume_handle: str = Field(..., description="Handle of the stored resume file")
    skill_match: int = Field(..., ge=0, le=100, description="Skill match percentage")
    experience_match: bool = Field(..., description="Whether the experience check passed")
    priority: int = Field(..., ge=1, le=5, description="Review priority")
    status: ApplicationStatus = Field(ApplicationStatus.APPLIED, description="Hiring stage")
    created_at: datetime = Field(default_factory=_utcnow, description="Creation time")
