"""Error types raised by the evaluation engine and application workflow."""

from typing import Any, Dict, Optional, Union

from hireflow.core.models import ApplicationStatus


class HireflowError(Exception):
    """Base class for every error the engine surfaces to callers."""

    code = "hireflow_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        """Structured details for logging and API responses."""
        return {}


class DocumentUnreadable(HireflowError):
    """Resume text could not be extracted from the supplied document."""

    code = "document_unreadable"

    def __init__(self, reason: str):
        super().__init__(f"Resume document is unreadable: {reason}")
        self.reason = reason

    def to_dict(self) -> Dict[str, Any]:
        return {"reason": self.reason}


class DuplicateApplication(HireflowError):
    """The candidate has already applied to this job."""

    code = "duplicate_application"

    def __init__(self, candidate_id: str, job_id: str):
        super().__init__(f"Candidate {candidate_id} has already applied to job {job_id}")
        self.candidate_id = candidate_id
        self.job_id = job_id

    def to_dict(self) -> Dict[str, Any]:
        return {"candidate_id": self.candidate_id, "job_id": self.job_id}


class InvalidTransition(HireflowError):
    """Requested status is not reachable from the current status."""

    code = "invalid_transition"

    def __init__(self, current: ApplicationStatus, requested: Union[ApplicationStatus, str]):
        requested_value = requested.value if isinstance(requested, ApplicationStatus) else str(requested)
        super().__init__(f"Invalid status transition from {current.value} to {requested_value}")
        self.current = current
        self.requested = requested_value

    def to_dict(self) -> Dict[str, Any]:
        return {"current": self.current.value, "requested": self.requested}


class NotFound(HireflowError):
    """A referenced job or application does not exist."""

    code = "not_found"

    def __init__(self, entity: str, identifier: str):
        super().__init__(f"{entity.capitalize()} not found: {identifier}")
        self.entity = entity
        self.identifier = identifier

    def to_dict(self) -> Dict[str, Any]:
        return {"entity": self.entity, "identifier": self.identifier}


class PermissionDenied(HireflowError):
    """The actor may not perform the requested operation."""

    code = "permission_denied"

    def __init__(self, actor_id: Optional[str], action: str):
        super().__init__(f"Actor {actor_id} is not allowed to {action}")
        self.actor_id = actor_id
        self.action = action

    def to_dict(self) -> Dict[str, Any]:
        return {"actor_id": self.actor_id, "action": self.action}


class CascadeIncomplete(HireflowError):
    """A job deletion stopped part way through removing its applications.

    Nothing already removed is restored. ``deleted`` counts the applications
    removed before the failure; calling ``delete_job`` again finishes the work.
    """

    code = "cascade_incomplete"

    def __init__(self, job_id: str, deleted: int):
        super().__init__(
            f"Deleting job {job_id} stopped after removing {deleted} application(s)"
        )
        self.job_id = job_id
        self.deleted = deleted

    def to_dict(self) -> Dict[str, Any]:
        return {"job_id": self.job_id, "deleted_applications": self.deleted}
