"""
SQLAlchemy-backed repositories.

- ``Database`` owns the engine and session factory and exposes ``session_scope()``.
- The (candidate_id, job_id) pair carries a UNIQUE constraint, so concurrent
  inserts for the same pair are serialized by the database itself.
- Status changes are a single ``UPDATE ... WHERE status = :expected``.
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Dict, Iterator, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    create_engine,
    delete,
    func,
    select,
    update,
)
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from hireflow.core.errors import DuplicateApplication, NotFound
from hireflow.core.models import (
    Application,
    ApplicationStatus,
    JobRequirement,
    JobStatus,
    JobType,
)
from hireflow.storage.base import ApplicationRepository, JobRepository
from hireflow.utils.logging import get_logger

logger = get_logger(__name__)


# --- ORM models --------------------------------------------------------------

class Base(DeclarativeBase):
    pass


class JobRow(Base):
    __tablename__ = "jobs"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    requirements: Mapped[str] = mapped_column(Text, nullable=False, default="")
    salary: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    required_skills: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    required_experience_months: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    job_type: Mapped[str] = mapped_column(String(32), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    owner_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<JobRow id={self.id} title={self.title!r} status={self.status}>"


class ApplicationRow(Base):
    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("candidate_id", "job_id", name="uq_applications_candidate_job"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    candidate_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    job_id: Mapped[str] = mapped_column(String(64), ForeignKey("jobs.id"), nullable=False, index=True)
    resume_handle: Mapped[str] = mapped_column(Text, nullable=False)

    # copied from the evaluation at creation, never recomputed
    skill_match: Mapped[int] = mapped_column(Integer, nullable=False)
    experience_match: Mapped[bool] = mapped_column(Boolean, nullable=False)
    priority: Mapped[int] = mapped_column(Integer, nullable=False)

    status: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<ApplicationRow id={self.id} job_id={self.job_id} status={self.status}>"


# --- engine & session --------------------------------------------------------

class Database:
    """Engine plus session factory for one database URL."""

    def __init__(self, url: str, echo: bool = False):
        engine_kwargs: Dict = {"echo": echo, "future": True}
        if url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if url in ("sqlite://", "sqlite:///:memory:"):
                # A single shared connection, otherwise each session sees an empty database.
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs["pool_pre_ping"] = True

        self.url = url
        self.engine = create_engine(url, **engine_kwargs)
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            class_=Session,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
        )

    def ensure_tables(self) -> None:
        """Create tables if needed."""
        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """
        Transactional session scope.
        Example:
            with db.session_scope() as s:
                s.add(obj)
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        self.engine.dispose()


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _job_from_row(row: JobRow) -> JobRequirement:
    return JobRequirement(
        id=row.id,
        title=row.title,
        description=row.description,
        requirements=row.requirements,
        salary=row.salary,
        required_skills=list(row.required_skills or []),
        required_experience_months=row.required_experience_months,
        job_type=JobType(row.job_type),
        status=JobStatus(row.status),
        owner_id=row.owner_id,
        created_at=_as_utc(row.created_at),
    )


def _application_from_row(row: ApplicationRow) -> Application:
    return Application(
        id=row.id,
        candidate_id=row.candidate_id,
        job_id=row.job_id,
        resume_handle=row.resume_handle,
        skill_match=row.skill_match,
        experience_match=row.experience_match,
        priority=row.priority,
        status=ApplicationStatus(row.status),
        created_at=_as_utc(row.created_at),
    )


# --- repositories ------------------------------------------------------------

class SqlJobRepository(JobRepository):

    def __init__(self, db: Database):
        self.db = db

    def add(self, job: JobRequirement) -> JobRequirement:
        with self.db.session_scope() as session:
            session.add(JobRow(
                id=job.id,
                title=job.title,
                description=job.description,
                requirements=job.requirements,
                salary=job.salary,
                required_skills=list(job.required_skills),
                required_experience_months=job.required_experience_months,
                job_type=job.job_type.value,
                status=job.status.value,
                owner_id=job.owner_id,
                created_at=job.created_at,
            ))
        return job

    def get(self, job_id: str) -> JobRequirement:
        with self.db.session_scope() as session:
            row = session.get(JobRow, job_id)
            if row is None:
                raise NotFound("job", job_id)
            return _job_from_row(row)

    def list(self, status: Optional[JobStatus] = None) -> List[JobRequirement]:
        q = select(JobRow).order_by(JobRow.created_at)
        if status is not None:
            q = q.where(JobRow.status == status.value)
        with self.db.session_scope() as session:
            return [_job_from_row(row) for row in session.execute(q).scalars().all()]

    def update(self, job: JobRequirement) -> JobRequirement:
        with self.db.session_scope() as session:
            row = session.get(JobRow, job.id)
            if row is None:
                raise NotFound("job", job.id)
            row.title = job.title
            row.description = job.description
            row.requirements = job.requirements
            row.salary = job.salary
            row.required_skills = list(job.required_skills)
            row.required_experience_months = job.required_experience_months
            row.job_type = job.job_type.value
            row.status = job.status.value
            row.owner_id = job.owner_id
        return job

    def delete(self, job_id: str) -> bool:
        with self.db.session_scope() as session:
            result = session.execute(delete(JobRow).where(JobRow.id == job_id))
            return result.rowcount > 0


class SqlApplicationRepository(ApplicationRepository):

    def __init__(self, db: Database):
        self.db = db

    def add(self, application: Application) -> Application:
        try:
            with self.db.session_scope() as session:
                session.add(ApplicationRow(
                    id=application.id,
                    candidate_id=application.candidate_id,
                    job_id=application.job_id,
                    resume_handle=application.resume_handle,
                    skill_match=application.skill_match,
                    experience_match=application.experience_match,
                    priority=application.priority,
                    status=application.status.value,
                    created_at=application.created_at,
                ))
        except IntegrityError as e:
            if self._exists(application.candidate_id, application.job_id):
                raise DuplicateApplication(application.candidate_id, application.job_id) from e
            raise
        return application

    def _exists(self, candidate_id: str, job_id: str) -> bool:
        q = select(ApplicationRow.id).where(
            ApplicationRow.candidate_id == candidate_id,
            ApplicationRow.job_id == job_id,
        ).limit(1)
        with self.db.session_scope() as session:
            return session.execute(q).first() is not None

    def get(self, application_id: str) -> Application:
        with self.db.session_scope() as session:
            row = session.get(ApplicationRow, application_id)
            if row is None:
                raise NotFound("application", application_id)
            return _application_from_row(row)

    def compare_and_set_status(
        self,
        application_id: str,
        expected: ApplicationStatus,
        new: ApplicationStatus
    ) -> Optional[Application]:
        stmt = (
            update(ApplicationRow)
            .where(ApplicationRow.id == application_id, ApplicationRow.status == expected.value)
            .values(status=new.value)
        )
        with self.db.session_scope() as session:
            if session.execute(stmt).rowcount == 1:
                # Read back inside the transaction that holds the row lock
                row = session.execute(
                    select(ApplicationRow).where(ApplicationRow.id == application_id)
                ).scalar_one()
                return _application_from_row(row)
            if session.get(ApplicationRow, application_id) is None:
                raise NotFound("application", application_id)

        logger.debug(
            "Status compare-and-set lost",
            application_id=application_id,
            expected=expected.value
        )
        return None

    def delete(self, application_id: str) -> bool:
        with self.db.session_scope() as session:
            result = session.execute(delete(ApplicationRow).where(ApplicationRow.id == application_id))
            return result.rowcount > 0

    def list(
        self,
        job_id: Optional[str] = None,
        candidate_id: Optional[str] = None
    ) -> List[Application]:
        q = select(ApplicationRow).order_by(ApplicationRow.created_at)
        if job_id is not None:
            q = q.where(ApplicationRow.job_id == job_id)
        if candidate_id is not None:
            q = q.where(ApplicationRow.candidate_id == candidate_id)
        with self.db.session_scope() as session:
            return [_application_from_row(row) for row in session.execute(q).scalars().all()]

    def count_by_status(self, job_id: Optional[str] = None) -> Dict[ApplicationStatus, int]:
        q = select(ApplicationRow.status, func.count()).group_by(ApplicationRow.status)
        if job_id is not None:
            q = q.where(ApplicationRow.job_id == job_id)
        with self.db.session_scope() as session:
            return {ApplicationStatus(status): count for status, count in session.execute(q).all()}
