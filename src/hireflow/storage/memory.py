"""Thread-safe in-memory repositories for development and testing."""

import threading
from collections import Counter
from typing import Dict, List, Optional, Tuple

from hireflow.core.errors import DuplicateApplication, NotFound
from hireflow.core.models import Application, ApplicationStatus, JobRequirement, JobStatus
from hireflow.storage.base import ApplicationRepository, JobRepository


class InMemoryJobRepository(JobRepository):
    """Job storage backed by a dict. Returns copies, never the stored objects."""

    def __init__(self):
        self._jobs: Dict[str, JobRequirement] = {}
        self._lock = threading.Lock()

    def add(self, job: JobRequirement) -> JobRequirement:
        with self._lock:
            self._jobs[job.id] = job.model_copy(deep=True)
        return job.model_copy(deep=True)

    def get(self, job_id: str) -> JobRequirement:
        with self._lock:
            job = self._jobs.get(job_id)
        if job is None:
            raise NotFound("job", job_id)
        return job.model_copy(deep=True)

    def list(self, status: Optional[JobStatus] = None) -> List[JobRequirement]:
        with self._lock:
            jobs = [job.model_copy(deep=True) for job in self._jobs.values()]
        if status is not None:
            jobs = [job for job in jobs if job.status == status]
        return sorted(jobs, key=lambda job: job.created_at)

    def update(self, job: JobRequirement) -> JobRequirement:
        with self._lock:
            if job.id not in self._jobs:
                raise NotFound("job", job.id)
            self._jobs[job.id] = job.model_copy(deep=True)
        return job.model_copy(deep=True)

    def delete(self, job_id: str) -> bool:
        with self._lock:
            return self._jobs.pop(job_id, None) is not None


class InMemoryApplicationRepository(ApplicationRepository):
    """Application storage whose lock makes insert and compare-and-set atomic."""

    def __init__(self):
        self._applications: Dict[str, Application] = {}
        self._keys: Dict[Tuple[str, str], str] = {}
        self._lock = threading.Lock()

    def add(self, application: Application) -> Application:
        key = (application.candidate_id, application.job_id)
        with self._lock:
            if key in self._keys:
                raise DuplicateApplication(application.candidate_id, application.job_id)
            self._applications[application.id] = application.model_copy()
            self._keys[key] = application.id
        return application.model_copy()

    def get(self, application_id: str) -> Application:
        with self._lock:
            application = self._applications.get(application_id)
        if application is None:
            raise NotFound("application", application_id)
        return application.model_copy()

    def compare_and_set_status(
        self,
        application_id: str,
        expected: ApplicationStatus,
        new: ApplicationStatus
    ) -> Optional[Application]:
        with self._lock:
            application = self._applications.get(application_id)
            if application is None:
                raise NotFound("application", application_id)
            if application.status != expected:
                return None
            updated = application.model_copy(update={"status": new})
            self._applications[application_id] = updated
        return updated.model_copy()

    def delete(self, application_id: str) -> bool:
        with self._lock:
            application = self._applications.pop(application_id, None)
            if application is None:
                return False
            self._keys.pop((application.candidate_id, application.job_id), None)
        return True

    def list(
        self,
        job_id: Optional[str] = None,
        candidate_id: Optional[str] = None
    ) -> List[Application]:
        with self._lock:
            applications = list(self._applications.values())
        return [
            application.model_copy()
            for application in applications
            if (job_id is None or application.job_id == job_id)
            and (candidate_id is None or application.candidate_id == candidate_id)
        ]

    def count_by_status(self, job_id: Optional[str] = None) -> Dict[ApplicationStatus, int]:
        return dict(Counter(application.status for application in self.list(job_id=job_id)))
