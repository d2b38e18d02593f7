"""
Shared test fixtures for the SmartHire test suite.

Sets environment variables before any smarthire imports to prevent config
failures, then provides model factories and in-memory repositories that
honour the same contracts as the MongoDB ones (including the unique
(job, applicant) constraint and the versioned stage update).
"""

import os

# === Set environment BEFORE any smarthire imports ===
os.environ.setdefault("APP_ENVIRONMENT", "testing")
os.environ.setdefault("DB_NAME", "smarthire_test")

from typing import Any, Optional

import pytest
from bson import ObjectId

from smarthire.core.matching import MatchScorer, RecommendationRanker
from smarthire.core.workflow import WorkflowEngine
from smarthire.data.models import (
    Application,
    CandidateProfile,
    Job,
    Notification,
    StageEntry,
    User,
    utc_now,
)
from smarthire.data.repositories import DuplicateRecordError
from smarthire.utils.constants import UserRole


# ---------------------------------------------------------------------------
# In-memory repositories
# ---------------------------------------------------------------------------


class InMemoryRepository:
    """Dict-backed stand-in for BaseRepository."""

    collection_name = "memory"

    def __init__(self) -> None:
        self.documents: dict[ObjectId, Any] = {}

    def create(self, model):
        model.id = model.id or ObjectId()
        now = utc_now()
        model.created_at = now
        model.updated_at = now
        self.documents[model.id] = model.model_copy(deep=True)
        return model

    def get_by_id(self, id_value):
        stored = self.documents.get(ObjectId(id_value))
        return stored.model_copy(deep=True) if stored is not None else None

    def delete(self, id_value) -> bool:
        return self.documents.pop(ObjectId(id_value), None) is not None

    def count(self, query: Optional[dict] = None) -> int:
        return len(self.documents)


class InMemoryApplicationRepository(InMemoryRepository):
    collection_name = "applications"

    def create(self, model: Application) -> Application:
        # Unique (job_id, applicant_id) index
        if self._find(model.job_id, model.applicant_id) is not None:
            raise DuplicateRecordError(
                self.collection_name,
                {"job_id": model.job_id, "applicant_id": model.applicant_id},
            )
        return super().create(model)

    def _find(self, job_id, applicant_id) -> Optional[Application]:
        for app in self.documents.values():
            if app.job_id == ObjectId(job_id) and app.applicant_id == ObjectId(applicant_id):
                return app
        return None

    def get_by_job_and_applicant(self, job_id, applicant_id) -> Optional[Application]:
        found = self._find(job_id, applicant_id)
        return found.model_copy(deep=True) if found else None

    def application_exists(self, job_id, applicant_id) -> bool:
        return self._find(job_id, applicant_id) is not None

    def get_by_job(self, job_id) -> list[Application]:
        apps = [a for a in self.documents.values() if a.job_id == ObjectId(job_id)]
        return [a.model_copy(deep=True) for a in sorted(apps, key=lambda a: a.match_score, reverse=True)]

    def get_by_applicant(self, applicant_id) -> list[Application]:
        apps = [a for a in self.documents.values() if a.applicant_id == ObjectId(applicant_id)]
        # Later inserts win ties on created_at
        apps.reverse()
        return [a.model_copy(deep=True) for a in sorted(apps, key=lambda a: a.created_at, reverse=True)]

    def apply_stage_change(
        self,
        application_id,
        expected_stage: str,
        expected_version: int,
        entry: StageEntry,
        extra_fields: Optional[dict[str, Any]] = None,
    ) -> Optional[Application]:
        stored = self.documents.get(ObjectId(application_id))
        if stored is None or stored.current_stage != expected_stage or stored.version != expected_version:
            return None
        stored.current_stage = entry.stage
        stored.stage_history = [*stored.stage_history, entry]
        for field, value in (extra_fields or {}).items():
            setattr(stored, field, value)
        stored.version = stored.version + 1
        stored.updated_at = utc_now()
        return stored.model_copy(deep=True)


class InMemoryJobRepository(InMemoryRepository):
    collection_name = "jobs"

    def get_all_jobs(self) -> list[Job]:
        return [j.model_copy(deep=True) for j in self.documents.values()]

    def add_applicant(self, job_id, applicant_id) -> bool:
        job = self.documents.get(ObjectId(job_id))
        if job is None:
            return False
        if ObjectId(applicant_id) not in job.applicants:
            job.applicants = [*job.applicants, ObjectId(applicant_id)]
        return True


class InMemoryUserRepository(InMemoryRepository):
    collection_name = "users"

    def get_skills(self, user_id) -> Optional[list[str]]:
        user = self.documents.get(ObjectId(user_id))
        return list(user.profile.skills) if user is not None else None


class InMemoryNotificationRepository(InMemoryRepository):
    collection_name = "notifications"

    def for_user(self, user_id) -> list[Notification]:
        return [n for n in self.documents.values() if n.user_id == ObjectId(user_id)]


class RecordingNotificationService:
    """Captures workflow notifications; can be told to fail."""

    def __init__(self) -> None:
        self.events: list[tuple] = []
        self.fail = False

    def notify_new_application(self, job, applicant):
        if self.fail:
            raise RuntimeError("mail server down")
        self.events.append(("new_application", job.id, applicant.id))

    def notify_stage_changed(self, application, job, stage):
        if self.fail:
            raise RuntimeError("mail server down")
        self.events.append(("stage_changed", application.id, stage))


class RecordingEmailSender:
    def __init__(self, result: bool = True) -> None:
        self.sent: list[tuple] = []
        self.result = result

    def send(self, to_email, to_name, message, notification_type="system") -> bool:
        self.sent.append((to_email, to_name, message, notification_type))
        return self.result


# ---------------------------------------------------------------------------
# Model factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_job():
    """Factory that returns a callable to build Job models."""

    def _factory(
        title: str = "Backend Engineer",
        description: str = "",
        requirements: str = "",
        required_skills: Optional[list[str]] = None,
        posted_by: Optional[ObjectId] = None,
        **kwargs,
    ) -> Job:
        return Job(
            id=kwargs.pop("id", ObjectId()),
            title=title,
            description=description,
            requirements=requirements,
            required_skills=required_skills or [],
            posted_by=posted_by or ObjectId(),
            **kwargs,
        )

    return _factory


@pytest.fixture
def make_user():
    """Factory that returns a callable to build User models."""

    def _factory(
        name: str = "Jane Smith",
        email: Optional[str] = None,
        role: UserRole = UserRole.CANDIDATE,
        skills: Optional[list[str]] = None,
        **kwargs,
    ) -> User:
        user_id = kwargs.pop("id", ObjectId())
        return User(
            id=user_id,
            name=name,
            email=email or f"user-{user_id}@example.com",
            role=role,
            profile=CandidateProfile(skills=skills or []),
            **kwargs,
        )

    return _factory


# ---------------------------------------------------------------------------
# Repositories and wired components
# ---------------------------------------------------------------------------


@pytest.fixture
def application_repo():
    return InMemoryApplicationRepository()


@pytest.fixture
def job_repo():
    return InMemoryJobRepository()


@pytest.fixture
def user_repo():
    return InMemoryUserRepository()


@pytest.fixture
def notification_repo():
    return InMemoryNotificationRepository()


@pytest.fixture
def notifier():
    return RecordingNotificationService()


@pytest.fixture
def email_sender():
    return RecordingEmailSender()


@pytest.fixture
def recruiter(make_user, user_repo):
    return user_repo.create(make_user(name="Rita Recruiter", role=UserRole.RECRUITER))


@pytest.fixture
def candidate(make_user, user_repo):
    return user_repo.create(make_user(name="Carl Candidate", skills=["Java", " SQL "]))


@pytest.fixture
def job(make_job, job_repo, recruiter):
    return job_repo.create(
        make_job(
            title="Java Developer",
            required_skills=["Java", "Spring Boot", "SQL"],
            posted_by=recruiter.id,
        )
    )


@pytest.fixture
def engine(application_repo, job_repo, user_repo, notifier):
    """WorkflowEngine wired to in-memory collaborators."""
    return WorkflowEngine(
        application_repository=application_repo,
        job_repository=job_repo,
        user_repository=user_repo,
        notification_service=notifier,
        scorer=MatchScorer(),
    )


@pytest.fixture
def submitted(engine, job, candidate):
    """An application freshly submitted in the applied stage."""
    return engine.submit_application(job.id, candidate.id, "uploads/resume-1.pdf")


@pytest.fixture
def ranker(job_repo, user_repo):
    return RecommendationRanker(
        scorer=MatchScorer(),
        job_repository=job_repo,
        user_repository=user_repo,
        limit=10,
    )
