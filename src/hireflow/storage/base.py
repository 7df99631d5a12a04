"""Persistence interfaces used by the application workflow."""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from hireflow.core.models import Application, ApplicationStatus, JobRequirement, JobStatus


class JobRepository(ABC):
    """Storage for job postings."""

    @abstractmethod
    def add(self, job: JobRequirement) -> JobRequirement:
        """Persist a new job."""

    @abstractmethod
    def get(self, job_id: str) -> JobRequirement:
        """Fetch a job, raising NotFound when it does not exist."""

    @abstractmethod
    def list(self, status: Optional[JobStatus] = None) -> List[JobRequirement]:
        """List jobs, optionally restricted to one status, oldest first."""

    @abstractmethod
    def update(self, job: JobRequirement) -> JobRequirement:
        """Replace a stored job, raising NotFound when it does not exist."""

    @abstractmethod
    def delete(self, job_id: str) -> bool:
        """Remove a job. Returns False when nothing was removed."""


class ApplicationRepository(ABC):
    """Storage for applications with a unique (candidate, job) key."""

    @abstractmethod
    def add(self, application: Application) -> Application:
        """
        Insert an application atomically.

        Raises:
            DuplicateApplication: the (candidate, job) pair is already stored
        """

    @abstractmethod
    def get(self, application_id: str) -> Application:
        """Fetch an application, raising NotFound when it does not exist."""

    @abstractmethod
    def compare_and_set_status(
        self,
        application_id: str,
        expected: ApplicationStatus,
        new: ApplicationStatus
    ) -> Optional[Application]:
        """
        Set ``status`` to ``new`` only if it currently equals ``expected``.

        Returns:
            The updated application, or None when the stored status differed

        Raises:
            NotFound: the application does not exist
        """

    @abstractmethod
    def delete(self, application_id: str) -> bool:
        """Remove an application. Returns False when nothing was removed."""

    @abstractmethod
    def list(
        self,
        job_id: Optional[str] = None,
        candidate_id: Optional[str] = None
    ) -> List[Application]:
        """List applications matching the given filters."""

    @abstractmethod
    def count_by_status(self, job_id: Optional[str] = None) -> Dict[ApplicationStatus, int]:
        """Count applications per status. Statuses with no applications may be absent."""


class ResumeStore(ABC):
    """Storage for uploaded resume files."""

    @abstractmethod
    def save(self, document: bytes, filename: Optional[str] = None) -> str:
        """Store a document and return its handle."""

    @abstractmethod
    def release(self, handle: str) -> bool:
        """Delete a stored document. Returns False when it was already gone."""
