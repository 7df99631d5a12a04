"""Shared fixtures and builders for the Hireflow test suite."""

from pathlib import Path
from typing import List, Optional

import pytest

from hireflow.core.models import Actor, ActorRole, JobRequirement
from hireflow.jobs.application import ApplicationWorkflow
from hireflow.storage import (
    InMemoryApplicationRepository,
    InMemoryJobRepository,
    LocalResumeStore,
)

BACKEND_SKILLS = ["Python", "Django", "PostgreSQL", "Docker"]

STRONG_RESUME = (
    "Senior backend engineer. 3 years building Python and Django services "
    "on PostgreSQL, shipped with Docker."
)
WEAK_RESUME = "Frontend developer with React and CSS. 1 year of experience."


def make_job(
    title: str = "Backend Engineer",
    skills: Optional[List[str]] = None,
    experience_months: int = 2,
    owner_id: Optional[str] = "employer-1"
) -> JobRequirement:
    return JobRequirement(
        title=title,
        description="Build and run APIs",
        requirements="Backend experience",
        required_skills=list(BACKEND_SKILLS if skills is None else skills),
        required_experience_months=experience_months,
        owner_id=owner_id,
    )


def make_workflow(resume_dir: Path, **kwargs) -> ApplicationWorkflow:
    return ApplicationWorkflow(
        jobs=InMemoryJobRepository(),
        applications=InMemoryApplicationRepository(),
        resume_store=LocalResumeStore(str(resume_dir)),
        **kwargs
    )


def stored_files(resume_dir: Path) -> List[Path]:
    if not resume_dir.exists():
        return []
    return sorted(p for p in resume_dir.iterdir() if p.is_file())


@pytest.fixture
def resume_dir(tmp_path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def workflow(resume_dir) -> ApplicationWorkflow:
    return make_workflow(resume_dir)


@pytest.fixture
def job(workflow) -> JobRequirement:
    return workflow.post_job(make_job())


@pytest.fixture
def admin() -> Actor:
    return Actor(id="admin-1", role=ActorRole.ADMIN)


@pytest.fixture
def candidate() -> Actor:
    return Actor(id="candidate-1", role=ActorRole.CANDIDATE)
