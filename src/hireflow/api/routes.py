"""API routes for Hireflow."""

from typing import List, Optional
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, File, Form, Header, HTTPException, UploadFile
from fastapi.responses import JSONResponse

from hireflow import __version__
from hireflow.api.models import (
    ApplicationStatsResponse, HealthCheck, JobCreateRequest, JobDeletionResponse,
    JobStatsEntry, JobUpdateRequest, StatusUpdateRequest, SubmissionResponse
)
from hireflow.core.models import Actor, ActorRole, Application, JobRequirement
from hireflow.jobs.application import ApplicationWorkflow
from hireflow.utils.logging import get_logger

logger = get_logger(__name__)

# Global instance (initialized in main.py)
workflow: Optional[ApplicationWorkflow] = None

# Create routers
applications_router = APIRouter(prefix="/applications", tags=["applications"])
jobs_router = APIRouter(prefix="/jobs", tags=["jobs"])
health_router = APIRouter(prefix="/health", tags=["health"])


def get_workflow() -> ApplicationWorkflow:
    if workflow is None:
        raise HTTPException(status_code=503, detail="Application workflow not initialized")
    return workflow


async def get_actor(
    x_actor_id: Optional[str] = Header(None),
    x_actor_role: ActorRole = Header(ActorRole.CANDIDATE)
) -> Actor:
    """Identify the caller from request headers. Authentication happens upstream."""
    if not x_actor_id:
        raise HTTPException(status_code=401, detail="Missing X-Actor-Id header")
    return Actor(id=x_actor_id, role=x_actor_role)


async def require_admin(actor: Actor = Depends(get_actor)) -> Actor:
    if actor.role != ActorRole.ADMIN:
        raise HTTPException(status_code=403, detail="Administrator access required")
    return actor


async def require_staff(actor: Actor = Depends(get_actor)) -> Actor:
    if actor.role not in (ActorRole.ADMIN, ActorRole.EMPLOYER):
        raise HTTPException(status_code=403, detail="Employer or administrator access required")
    return actor


# --- applications ------------------------------------------------------------

@applications_router.post("", response_model=SubmissionResponse, status_code=201)
def submit_application(
    job_id: str = Form(...),
    resume: UploadFile = File(...),
    actor: Actor = Depends(get_actor),
    service: ApplicationWorkflow = Depends(get_workflow)
):
    """Submit a resume for a job. Answers 400 when the admission gate is not cleared.

    Extraction, file storage and persistence are blocking, so this runs in the threadpool.
    """
    document = resume.file.read()

    logger.info(
        "Application submission received",
        candidate_id=actor.id,
        job_id=job_id,
        filename=resume.filename,
        size_bytes=len(document)
    )

    result = service.submit_application(actor.id, job_id, document, filename=resume.filename)
    body = SubmissionResponse(
        skill_match=result.skill_match,
        experience_match=result.experience_match,
        message=result.message,
        application=result.application
    )
    return JSONResponse(
        status_code=201 if result.created else 400,
        content=body.model_dump(mode="json")
    )


@applications_router.get("", response_model=List[Application])
def list_applications(
    job_id: Optional[str] = None,
    actor: Actor = Depends(require_admin),
    service: ApplicationWorkflow = Depends(get_workflow)
):
    """All applications, highest priority first."""
    return service.list_applications(job_id=job_id)


@applications_router.get("/mine", response_model=List[Application])
def list_my_applications(
    actor: Actor = Depends(get_actor),
    service: ApplicationWorkflow = Depends(get_workflow)
):
    return service.list_candidate_applications(actor.id)


@applications_router.get("/stats", response_model=ApplicationStatsResponse)
def get_application_stats(
    actor: Actor = Depends(require_admin),
    service: ApplicationWorkflow = Depends(get_workflow)
):
    stats = service.get_stats()
    return ApplicationStatsResponse(total=stats.total, by_status=stats.by_status)


@applications_router.get("/{application_id}", response_model=Application)
def get_application(
    application_id: str,
    actor: Actor = Depends(require_staff),
    service: ApplicationWorkflow = Depends(get_workflow)
):
    return service.get_application(application_id)


@applications_router.patch("/{application_id}/status", response_model=Application)
def update_application_status(
    application_id: str,
    request: StatusUpdateRequest,
    actor: Actor = Depends(get_actor),
    service: ApplicationWorkflow = Depends(get_workflow)
):
    """Move an application along the hiring pipeline."""
    return service.transition_status(application_id, request.status, actor)


@applications_router.delete("/{application_id}")
def delete_application(
    application_id: str,
    actor: Actor = Depends(require_admin),
    service: ApplicationWorkflow = Depends(get_workflow)
):
    service.delete_application(application_id)
    return {"message": "Application deleted successfully"}


# --- jobs --------------------------------------------------------------------

@jobs_router.get("", response_model=List[JobRequirement])
def list_jobs(service: ApplicationWorkflow = Depends(get_workflow)):
    """Jobs currently accepting applications."""
    return service.list_open_jobs()


@jobs_router.post("", response_model=JobRequirement, status_code=201)
def create_job(
    request: JobCreateRequest,
    actor: Actor = Depends(require_staff),
    service: ApplicationWorkflow = Depends(get_workflow)
):
    job = JobRequirement(**request.model_dump(), owner_id=actor.id)
    return service.post_job(job)


@jobs_router.patch("/{job_id}", response_model=JobRequirement)
def update_job(
    job_id: str,
    request: JobUpdateRequest,
    actor: Actor = Depends(require_staff),
    service: ApplicationWorkflow = Depends(get_workflow)
):
    """Edit a job posting. Only the owning employer or an administrator may edit."""
    return service.update_job(job_id, request.model_dump(exclude_none=True), actor)


@jobs_router.get("/stats", response_model=List[JobStatsEntry])
def get_job_stats(
    actor: Actor = Depends(require_admin),
    service: ApplicationWorkflow = Depends(get_workflow)
):
    return [
        JobStatsEntry(
            job_id=entry.job_id,
            title=entry.title,
            job_type=entry.job_type,
            application_count=entry.application_count,
            status_counts=entry.status_counts
        )
        for entry in service.get_job_stats()
    ]


@jobs_router.delete("/{job_id}", response_model=JobDeletionResponse)
def delete_job(
    job_id: str,
    actor: Actor = Depends(require_admin),
    service: ApplicationWorkflow = Depends(get_workflow)
):
    result = service.delete_job(job_id)
    return JobDeletionResponse(
        message="Job and all associated applications deleted successfully",
        job_id=result.job_id,
        deleted_applications=result.deleted_applications,
        job_deleted=result.job_deleted,
    )


# --- health ------------------------------------------------------------------

@health_router.get("", response_model=HealthCheck)
def health_check():
    return HealthCheck(
        status="healthy" if workflow is not None else "starting",
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        storage=type(workflow.applications).__name__ if workflow is not None else "none"
    )


all_routers = [
    applications_router,
    jobs_router,
    health_router,
]
