"""API models for request/response schemas."""

from typing import Dict, List, Optional, Any
from pydantic import BaseModel, Field
from datetime import datetime

from hireflow.core.models import Application, ApplicationStatus, JobStatus, JobType


class JobCreateRequest(BaseModel):
    """Request to post a new job."""
    title: str = Field(..., min_length=1, description="Job title")
    description: str = Field(..., min_length=1, description="Job description")
    requirements: str = Field(..., min_length=1, description="Free-text requirements")
    salary: Optional[float] = Field(None, ge=0, description="Offered salary")
    required_skills: List[str] = Field(default_factory=list, description="Required skills")
    required_experience_months: int = Field(0, ge=0, description="Required experience in months")
    job_type: JobType = Field(JobType.FULL_TIME, description="Employment type")


class JobUpdateRequest(BaseModel):
    """Partial update of a posted job. Omitted or null fields are left unchanged."""
    title: Optional[str] = Field(None, min_length=1, description="Job title")
    description: Optional[str] = Field(None, min_length=1, description="Job description")
    requirements: Optional[str] = Field(None, min_length=1, description="Free-text requirements")
    salary: Optional[float] = Field(None, ge=0, description="Offered salary")
    required_skills: Optional[List[str]] = Field(None, description="Required skills")
    required_experience_months: Optional[int] = Field(None, ge=0, description="Required experience in months")
    job_type: Optional[JobType] = Field(None, description="Employment type")
    status: Optional[JobStatus] = Field(None, description="Open or closed")


class SubmissionResponse(BaseModel):
    """Response to a resume submission."""
    skill_match: int = Field(..., description="Skill match percentage")
    experience_match: bool = Field(..., description="Whether the experience check passed")
    message: str = Field(..., description="Outcome message")
    application: Optional[Application] = Field(None, description="Created application, if admitted")


class StatusUpdateRequest(BaseModel):
    """Request to move an application to another status."""
    status: str = Field(..., description="Requested status")


class JobDeletionResponse(BaseModel):
    """Response to a job deletion."""
    message: str = Field(..., description="Result message")
    job_id: str = Field(..., description="Deleted job")
    deleted_applications: int = Field(..., description="Applications removed with the job")
    job_deleted: bool = Field(..., description="Whether the job record itself was removed")


class ApplicationStatsResponse(BaseModel):
    """Application counts per status."""
    total: int = Field(..., description="Total applications")
    by_status: Dict[ApplicationStatus, int] = Field(..., description="Count per status")


class JobStatsEntry(BaseModel):
    """Applicant counts for one job."""
    job_id: str = Field(..., description="Job identifier")
    title: str = Field(..., description="Job title")
    job_type: JobType = Field(..., description="Employment type")
    application_count: int = Field(..., description="Number of applications")
    status_counts: Dict[ApplicationStatus, int] = Field(..., description="Count per status")


class HealthCheck(BaseModel):
    """Health check response."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Check timestamp")
    version: str = Field(..., description="Service version")
    storage: str = Field(..., description="Storage back end")


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    timestamp: datetime = Field(..., description="Error timestamp")
