"""Tests for the SQLAlchemy repositories."""

import pytest

from hireflow.core.errors import DuplicateApplication, InvalidTransition, NotFound
from hireflow.core.models import Actor, ActorRole, ApplicationStatus, JobStatus
from hireflow.jobs.application import ApplicationWorkflow
from hireflow.storage import (
    Database,
    LocalResumeStore,
    SqlApplicationRepository,
    SqlJobRepository,
    create_repositories,
)
from tests.conftest import STRONG_RESUME, WEAK_RESUME, make_job, stored_files

S = ApplicationStatus
ADMIN = Actor(id="admin-1", role=ActorRole.ADMIN)


@pytest.fixture
def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'hireflow.db'}")
    db.ensure_tables()
    yield db
    db.dispose()


@pytest.fixture
def sql_workflow(database, resume_dir) -> ApplicationWorkflow:
    return ApplicationWorkflow(
        jobs=SqlJobRepository(database),
        applications=SqlApplicationRepository(database),
        resume_store=LocalResumeStore(str(resume_dir)),
    )


@pytest.fixture
def sql_job(sql_workflow):
    return sql_workflow.post_job(make_job())


class TestSqlJobRepository:
    """Job persistence."""

    def test_round_trip(self, database):
        repository = SqlJobRepository(database)
        job = make_job()
        job.salary = 85000.0

        repository.add(job)

        assert repository.get(job.id) == job

    def test_list_by_status(self, database):
        repository = SqlJobRepository(database)
        open_job = repository.add(make_job(title="Open"))
        closed = make_job(title="Closed")
        closed.status = JobStatus.CLOSED
        repository.add(closed)

        assert [j.id for j in repository.list(status=JobStatus.OPEN)] == [open_job.id]
        assert len(repository.list()) == 2

    def test_update_and_delete(self, database):
        repository = SqlJobRepository(database)
        job = repository.add(make_job())
        job.status = JobStatus.CLOSED

        repository.update(job)

        assert repository.get(job.id).status == JobStatus.CLOSED
        assert repository.delete(job.id) is True
        assert repository.delete(job.id) is False
        with pytest.raises(NotFound):
            repository.get(job.id)


class TestSqlApplicationRepository:
    """Application persistence through the workflow."""

    def test_submission_persists(self, sql_workflow, sql_job, database):
        result = sql_workflow.submit_application("candidate-1", sql_job.id, STRONG_RESUME.encode())

        # A separate repository over the same database sees the row
        stored = SqlApplicationRepository(database).get(result.application.id)
        assert stored == result.application
        assert stored.created_at.tzinfo is not None

    def test_rejection_writes_nothing(self, sql_workflow, sql_job, resume_dir):
        result = sql_workflow.submit_application("candidate-1", sql_job.id, WEAK_RESUME.encode())

        assert not result.created
        assert sql_workflow.list_applications() == []
        assert stored_files(resume_dir) == []

    def test_duplicate_is_rejected_by_constraint(self, sql_workflow, sql_job, resume_dir):
        sql_workflow.submit_application("candidate-1", sql_job.id, STRONG_RESUME.encode())

        with pytest.raises(DuplicateApplication):
            sql_workflow.submit_application("candidate-1", sql_job.id, STRONG_RESUME.encode())

        assert len(sql_workflow.list_applications()) == 1
        assert len(stored_files(resume_dir)) == 1

    def test_compare_and_set(self, sql_workflow, sql_job, database):
        application = sql_workflow.submit_application("candidate-1", sql_job.id, STRONG_RESUME.encode()).application
        repository = SqlApplicationRepository(database)

        updated = repository.compare_and_set_status(application.id, S.APPLIED, S.INTERVIEWING)
        assert updated.status == S.INTERVIEWING

        # The expected status is stale now
        assert repository.compare_and_set_status(application.id, S.APPLIED, S.INTERVIEWING) is None
        assert repository.get(application.id).status == S.INTERVIEWING

        with pytest.raises(NotFound):
            repository.compare_and_set_status("missing", S.APPLIED, S.INTERVIEWING)

    def test_compare_and_set_result_comes_from_its_own_transaction(self, sql_workflow, sql_job, database):
        application = sql_workflow.submit_application("candidate-1", sql_job.id, STRONG_RESUME.encode()).application
        repository = SqlApplicationRepository(database)
        real_scope = database.session_scope
        scopes = []

        def counting_scope():
            scopes.append(1)
            return real_scope()

        database.session_scope = counting_scope

        def separate_read(application_id):
            raise AssertionError("result must not be re-read in a new session")

        repository.get = separate_read

        updated = repository.compare_and_set_status(application.id, S.APPLIED, S.INTERVIEWING)

        assert updated.status == S.INTERVIEWING
        assert updated.id == application.id
        assert updated.created_at.tzinfo is not None
        assert len(scopes) == 1

    def test_transitions(self, sql_workflow, sql_job):
        application = sql_workflow.submit_application("candidate-1", sql_job.id, STRONG_RESUME.encode()).application

        sql_workflow.transition_status(application.id, S.INTERVIEWING, ADMIN)
        sql_workflow.transition_status(application.id, S.REJECTED, ADMIN)

        with pytest.raises(InvalidTransition):
            sql_workflow.transition_status(application.id, S.INTERVIEWING, ADMIN)
        assert sql_workflow.get_application(application.id).status == S.REJECTED

    def test_stats_and_cascade(self, sql_workflow, sql_job, resume_dir):
        other = sql_workflow.post_job(make_job(title="Data Engineer"))
        for i in range(3):
            sql_workflow.submit_application(f"candidate-{i}", sql_job.id, STRONG_RESUME.encode())
        sql_workflow.submit_application("candidate-x", other.id, STRONG_RESUME.encode())

        stats = sql_workflow.get_stats()
        assert stats.total == 4
        assert stats.by_status[S.APPLIED] == 4
        assert stats.by_status[S.SELECTED] == 0
        assert [entry.application_count for entry in sql_workflow.get_job_stats()] == [3, 1]

        result = sql_workflow.delete_job(sql_job.id)

        assert result.deleted_applications == 3
        assert sql_workflow.get_stats().total == 1
        assert len(stored_files(resume_dir)) == 1


class TestCreateRepositories:
    """Backend selection."""

    def test_empty_url_gives_memory_repositories(self):
        jobs, applications = create_repositories(None)

        assert type(jobs).__name__ == "InMemoryJobRepository"
        assert type(applications).__name__ == "InMemoryApplicationRepository"

    def test_sqlite_url_creates_tables(self):
        jobs, applications = create_repositories("sqlite://")
        job = jobs.add(make_job())

        assert isinstance(applications, SqlApplicationRepository)
        assert jobs.get(job.id).title == job.title
        assert applications.list() == []
