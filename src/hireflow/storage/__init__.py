"""Persistence layer: job/application repositories and resume file storage."""

from typing import Optional, Tuple

from .base import ApplicationRepository, JobRepository, ResumeStore
from .files import LocalResumeStore
from .memory import InMemoryApplicationRepository, InMemoryJobRepository
from .sql import Database, SqlApplicationRepository, SqlJobRepository


def create_repositories(
    database_url: Optional[str] = None,
    echo: bool = False
) -> Tuple[JobRepository, ApplicationRepository]:
    """Build SQL repositories for ``database_url``, or in-memory ones when it is empty."""
    if not database_url:
        return InMemoryJobRepository(), InMemoryApplicationRepository()

    db = Database(database_url, echo=echo)
    db.ensure_tables()
    return SqlJobRepository(db), SqlApplicationRepository(db)


__all__ = [
    "ApplicationRepository",
    "JobRepository",
    "ResumeStore",
    "LocalResumeStore",
    "InMemoryApplicationRepository",
    "InMemoryJobRepository",
    "Database",
    "SqlApplicationRepository",
    "SqlJobRepository",
    "create_repositories",
]
