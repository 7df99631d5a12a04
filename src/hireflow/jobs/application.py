"""Application lifecycle workflow: admission, status transitions, deletion and stats."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from hireflow.config import settings
from hireflow.core.errors import CascadeIncomplete, InvalidTransition, NotFound, PermissionDenied
from hireflow.core.models import (
    Actor,
    ActorRole,
    Application,
    ApplicationStatus,
    JobRequirement,
    JobStatus,
    JobType,
)
from hireflow.jobs.analyzer import ResumeAnalyzer, ResumeEvaluation
from hireflow.jobs.extractor import TextExtractor
from hireflow.jobs.transitions import INITIAL_STATUS, check_transition
from hireflow.storage.base import ApplicationRepository, JobRepository, ResumeStore
from hireflow.utils.logging import get_logger, log_evaluation

logger = get_logger(__name__)

ADMITTED_MESSAGE = "Application submitted successfully"
REJECTED_MESSAGE = "Your skills or experience do not meet the job requirements"

EDITABLE_JOB_FIELDS = frozenset({
    "title",
    "description",
    "requirements",
    "salary",
    "required_skills",
    "required_experience_months",
    "job_type",
    "status",
})


@dataclass
class SubmissionResult:
    """What a candidate learns after submitting a resume."""
    skill_match: int
    experience_match: bool
    message: str
    application: Optional[Application] = None

    @property
    def created(self) -> bool:
        return self.application is not None


@dataclass
class JobDeletionResult:
    """Outcome of deleting a job together with its applications."""
    job_id: str
    deleted_applications: int
    job_deleted: bool = True


@dataclass
class ApplicationStats:
    """Application counts over the whole portal."""
    total: int
    by_status: Dict[ApplicationStatus, int]

    def to_dict(self) -> Dict[str, int]:
        counts = {status.value: count for status, count in self.by_status.items()}
        return {"total": self.total, **counts}


@dataclass
class JobStats:
    """Applicant counts for one job."""
    job_id: str
    title: str
    job_type: JobType
    application_count: int
    status_counts: Dict[ApplicationStatus, int] = field(default_factory=dict)


def _full_counts(counts: Dict[ApplicationStatus, int]) -> Dict[ApplicationStatus, int]:
    return {status: counts.get(status, 0) for status in ApplicationStatus}


class ApplicationWorkflow:
    """Admits resumes into applications and moves them through the hiring stages."""

    def __init__(
        self,
        jobs: JobRepository,
        applications: ApplicationRepository,
        resume_store: ResumeStore,
        extractor: Optional[TextExtractor] = None,
        analyzer: Optional[ResumeAnalyzer] = None,
        min_skill_match: Optional[int] = None,
        requires_experience: Optional[bool] = None
    ):
        self.logger = logger.bind(component="application_workflow")
        self.jobs = jobs
        self.applications = applications
        self.resume_store = resume_store
        self.extractor = extractor or TextExtractor()
        self.analyzer = analyzer or ResumeAnalyzer()

        # Admission gate
        self.min_skill_match = (
            settings.admission_min_skill_match if min_skill_match is None else min_skill_match
        )
        self.requires_experience = (
            settings.admission_requires_experience if requires_experience is None else requires_experience
        )

    # --- admission ---------------------------------------------------------

    def is_admitted(self, evaluation: ResumeEvaluation) -> bool:
        """Whether an evaluation clears the admission gate."""
        if evaluation.skill_match_percent < self.min_skill_match:
            return False
        return evaluation.experience_match or not self.requires_experience

    def submit_application(
        self,
        candidate_id: str,
        job_id: str,
        resume_document: bytes,
        filename: Optional[str] = None
    ) -> SubmissionResult:
        """
        Evaluate a resume and, if it clears the gate, create an application.

        Args:
            candidate_id: Applying candidate
            job_id: Job being applied to
            resume_document: Raw resume bytes (PDF or UTF-8 text)
            filename: Original file name, used for the stored file's extension

        Returns:
            Match figures, message and the created application (None if rejected)

        Raises:
            NotFound: the job does not exist
            DocumentUnreadable: no text could be extracted from the resume
            DuplicateApplication: the candidate already applied to this job
        """
        job = self.jobs.get(job_id)
        text = self.extractor.extract(resume_document)
        evaluation = self.analyzer.evaluate(
            text, job.required_skills, job.required_experience_months
        )

        if not self.is_admitted(evaluation):
            self.logger.info(
                "Submission rejected at admission gate",
                candidate_id=candidate_id,
                job_id=job_id,
                **log_evaluation(evaluation)
            )
            return SubmissionResult(
                skill_match=evaluation.skill_match_percent,
                experience_match=evaluation.experience_match,
                message=REJECTED_MESSAGE,
            )

        handle = self.resume_store.save(resume_document, filename)
        application = Application(
            candidate_id=candidate_id,
            job_id=job.id,
            resume_handle=handle,
            skill_match=evaluation.skill_match_percent,
            experience_match=evaluation.experience_match,
            priority=evaluation.priority,
            status=INITIAL_STATUS,
        )

        try:
            application = self.applications.add(application)
        except Exception:
            self.resume_store.release(handle)
            raise

        self.logger.info(
            "Application created",
            application_id=application.id,
            candidate_id=candidate_id,
            job_id=job_id,
            **log_evaluation(evaluation)
        )

        return SubmissionResult(
            skill_match=evaluation.skill_match_percent,
            experience_match=evaluation.experience_match,
            message=ADMITTED_MESSAGE,
            application=application,
        )

    # --- status transitions ------------------------------------------------

    def can_manage(self, actor: Actor, job_id: str) -> bool:
        """Administrators manage every job; employers manage the jobs they own."""
        if actor.role == ActorRole.ADMIN:
            return True
        if actor.role == ActorRole.EMPLOYER:
            try:
                return self.jobs.get(job_id).owner_id == actor.id
            except NotFound:
                return False
        return False

    def transition_status(
        self,
        application_id: str,
        requested_status: Union[ApplicationStatus, str],
        actor: Actor
    ) -> Application:
        """
        Move an application to a new status.

        The write is a single compare-and-set on the status that was read. When
        another request changed the status first, this request loses and fails
        against the status now stored; it is never applied on top.

        Raises:
            NotFound: the application does not exist
            PermissionDenied: the actor does not manage the job
            InvalidTransition: the requested status is not reachable, or the
                status changed after it was read
        """
        current = self.applications.get(application_id)

        if not self.can_manage(actor, current.job_id):
            self.logger.warning(
                "Status change refused",
                application_id=application_id,
                actor_id=actor.id,
                actor_role=actor.role.value
            )
            raise PermissionDenied(actor.id, f"change the status of application {application_id}")

        target = check_transition(current.status, requested_status)
        updated = self.applications.compare_and_set_status(application_id, current.status, target)
        if updated is None:
            now_current = self.applications.get(application_id)
            self.logger.info(
                "Status change lost to a concurrent update",
                application_id=application_id,
                read_status=current.status.value,
                current_status=now_current.status.value,
                requested_status=target.value
            )
            raise InvalidTransition(now_current.status, target)

        self.logger.info(
            "Application status changed",
            application_id=application_id,
            from_status=current.status.value,
            to_status=updated.status.value,
            actor_id=actor.id
        )
        return updated

    # --- deletion ----------------------------------------------------------

    def _remove(self, application: Application) -> bool:
        """Release the resume, then delete the record. False when the record was already gone.

        Releasing first means a failed release leaves the record in place for a retry.
        """
        self.resume_store.release(application.resume_handle)
        return self.applications.delete(application.id)

    def delete_application(self, application_id: str) -> None:
        """
        Delete one application and its stored resume.

        Raises:
            NotFound: no application with this id
        """
        application = self.applications.get(application_id)
        if not self._remove(application):
            raise NotFound("application", application_id)
        self.logger.info("Application deleted", application_id=application_id, job_id=application.job_id)

    def delete_job(self, job_id: str) -> JobDeletionResult:
        """
        Delete a job after deleting every application that references it.

        Applications that disappear during the cascade are skipped. Completed
        deletions are kept if a later one fails.

        Raises:
            NotFound: the job does not exist; nothing is deleted
            CascadeIncomplete: an application deletion failed part way
        """
        self.jobs.get(job_id)

        deleted = 0
        for application in self.applications.list(job_id=job_id):
            try:
                if self._remove(application):
                    deleted += 1
            except Exception as e:
                self.logger.error(
                    "Job deletion cascade failed",
                    job_id=job_id,
                    application_id=application.id,
                    deleted_applications=deleted,
                    error=str(e)
                )
                raise CascadeIncomplete(job_id, deleted) from e

        job_deleted = self.jobs.delete(job_id)

        self.logger.info(
            "Job deleted",
            job_id=job_id,
            deleted_applications=deleted,
            job_deleted=job_deleted
        )
        return JobDeletionResult(job_id=job_id, deleted_applications=deleted, job_deleted=job_deleted)

    # --- reads -------------------------------------------------------------

    def post_job(self, job: JobRequirement) -> JobRequirement:
        job = self.jobs.add(job)
        self.logger.info("Job posted", job_id=job.id, title=job.title)
        return job

    def update_job(self, job_id: str, changes: Dict[str, Any], actor: Actor) -> JobRequirement:
        """
        Apply field changes to a posted job. ``None`` values are ignored.

        Raises:
            NotFound: the job does not exist
            PermissionDenied: the actor does not manage the job
            ValueError: a change names a field that cannot be edited
        """
        job = self.jobs.get(job_id)
        if not self.can_manage(actor, job_id):
            raise PermissionDenied(actor.id, f"update job {job_id}")

        unknown = set(changes) - EDITABLE_JOB_FIELDS
        if unknown:
            raise ValueError(f"Job fields cannot be edited: {', '.join(sorted(unknown))}")

        updates = {key: value for key, value in changes.items() if value is not None}
        updated = JobRequirement.model_validate({**job.model_dump(), **updates})
        updated = self.jobs.update(updated)

        self.logger.info("Job updated", job_id=job_id, fields=sorted(updates), actor_id=actor.id)
        return updated

    def list_open_jobs(self) -> List[JobRequirement]:
        return self.jobs.list(status=JobStatus.OPEN)

    def get_application(self, application_id: str) -> Application:
        return self.applications.get(application_id)

    def list_applications(self, job_id: Optional[str] = None) -> List[Application]:
        """Applications for review, highest priority first."""
        return sorted(
            self.applications.list(job_id=job_id),
            key=lambda application: application.priority,
            reverse=True
        )

    def list_candidate_applications(self, candidate_id: str) -> List[Application]:
        """A candidate's applications, newest first."""
        return sorted(
            self.applications.list(candidate_id=candidate_id),
            key=lambda application: application.created_at,
            reverse=True
        )

    # --- aggregation views -------------------------------------------------

    def get_stats(self) -> ApplicationStats:
        """Application counts per status, computed from the stored applications."""
        counts = _full_counts(self.applications.count_by_status())
        return ApplicationStats(total=sum(counts.values()), by_status=counts)

    def get_job_stats(self) -> List[JobStats]:
        """Per-job applicant counts and status breakdowns, busiest job first."""
        stats = []
        for job in self.jobs.list():
            counts = _full_counts(self.applications.count_by_status(job_id=job.id))
            stats.append(JobStats(
                job_id=job.id,
                title=job.title,
                job_type=job.job_type,
                application_count=sum(counts.values()),
                status_counts=counts,
            ))
        return sorted(stats, key=lambda s: s.application_count, reverse=True)
