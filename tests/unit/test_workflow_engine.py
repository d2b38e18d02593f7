"""
Tests for smarthire.core.workflow.workflow_engine: application lifecycle.

All collaborators are in-memory doubles from conftest; no database needed.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest
from bson import ObjectId

from smarthire.core.exceptions import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from smarthire.utils.constants import ApplicationStage as S
from smarthire.utils.constants import INITIAL_STAGE_COMMENT, AuditAction, OfferStatus


def walk(engine, application_id, actor_id, *stages):
    app = None
    for stage in stages:
        app = engine.transition_stage(application_id, stage, actor_id=actor_id)
    return app


# ── submit_application ──────────────────────────────────────────────────────


class TestSubmitApplication:
    def test_initial_state(self, submitted, job, candidate):
        assert submitted.id is not None
        assert submitted.current_stage == S.APPLIED.value
        assert submitted.job_id == job.id
        assert submitted.applicant_id == candidate.id
        assert len(submitted.stage_history) == 1
        assert submitted.stage_history[0].stage == S.APPLIED.value
        assert submitted.stage_history[0].comments == INITIAL_STAGE_COMMENT
        assert submitted.version == 0

    def test_match_score_from_profile(self, submitted):
        # Java + SQL against Java, Spring Boot, SQL
        assert submitted.match_score == 67

    def test_explicit_match_score(self, engine, job, candidate):
        app = engine.submit_application(job.id, candidate.id, "r.pdf", match_score=12)
        assert app.match_score == 12

    def test_match_score_out_of_range(self, engine, job, candidate):
        with pytest.raises(ValidationError):
            engine.submit_application(job.id, candidate.id, "r.pdf", match_score=101)

    def test_registers_applicant_on_job(self, submitted, job_repo, job, candidate):
        assert candidate.id in job_repo.get_by_id(job.id).applicants

    def test_notifies_job_owner(self, submitted, notifier, job, candidate):
        assert notifier.events == [("new_application", job.id, candidate.id)]

    def test_duplicate_is_conflict(self, engine, submitted, job, candidate, application_repo):
        with pytest.raises(ConflictError):
            engine.submit_application(job.id, candidate.id, "again.pdf")
        assert application_repo.count() == 1
        # Existing record untouched
        assert application_repo.get_by_id(submitted.id).resume == submitted.resume

    def test_storage_race_is_conflict(self, engine, submitted, job, candidate, application_repo, monkeypatch):
        # Simulate a concurrent request that passed the pre-check
        monkeypatch.setattr(application_repo, "application_exists", lambda *a: False)
        with pytest.raises(ConflictError):
            engine.submit_application(job.id, candidate.id, "again.pdf")
        assert application_repo.count() == 1

    def test_unknown_job(self, engine, candidate):
        with pytest.raises(NotFoundError) as exc_info:
            engine.submit_application(ObjectId(), candidate.id, "r.pdf")
        assert exc_info.value.resource == "job"

    def test_unknown_applicant(self, engine, job):
        with pytest.raises(NotFoundError) as exc_info:
            engine.submit_application(job.id, ObjectId(), "r.pdf")
        assert exc_info.value.resource == "applicant"

    @pytest.mark.parametrize("bad_id", ["nope", "", None, 42])
    def test_malformed_ids(self, engine, candidate, bad_id):
        with pytest.raises(ValidationError):
            engine.submit_application(bad_id, candidate.id, "r.pdf")

    def test_missing_resume(self, engine, job, candidate):
        with pytest.raises(ValidationError):
            engine.submit_application(job.id, candidate.id, "  ")

    def test_notification_failure_is_swallowed(self, engine, notifier, job, candidate, application_repo):
        notifier.fail = True
        app = engine.submit_application(job.id, candidate.id, "r.pdf")
        assert application_repo.get_by_id(app.id) is not None

    def test_registration_failure_rolls_back(self, engine, job, candidate, job_repo, application_repo, monkeypatch):
        def broken(*args):
            raise RuntimeError("write failed")

        monkeypatch.setattr(job_repo, "add_applicant", broken)
        with pytest.raises(RuntimeError):
            engine.submit_application(job.id, candidate.id, "r.pdf")
        assert application_repo.count() == 0
        assert not application_repo.application_exists(job.id, candidate.id)

    def test_job_vanishing_before_registration_rolls_back(
        self, engine, job, candidate, job_repo, application_repo, monkeypatch
    ):
        monkeypatch.setattr(job_repo, "add_applicant", lambda *a: False)
        with pytest.raises(NotFoundError):
            engine.submit_application(job.id, candidate.id, "r.pdf")
        assert application_repo.count() == 0

    def test_failed_rollback_keeps_registration_error(
        self, engine, job, candidate, job_repo, application_repo, monkeypatch
    ):
        def broken_registration(*args):
            raise RuntimeError("registration failed")

        def broken_delete(*args):
            raise ConnectionError("db down")

        monkeypatch.setattr(job_repo, "add_applicant", broken_registration)
        monkeypatch.setattr(application_repo, "delete", broken_delete)
        with patch("smarthire.core.workflow.workflow_engine.audit_log") as audit:
            with pytest.raises(RuntimeError, match="registration failed"):
                engine.submit_application(job.id, candidate.id, "r.pdf")

        action, details = audit.call_args.args
        assert action == AuditAction.APPLICATION_SUBMISSION_ROLLED_BACK.value
        assert details["removed"] is False


# ── transition_stage ────────────────────────────────────────────────────────


class TestTransitionStage:
    def test_skip_stage_is_rejected(self, engine, submitted, recruiter, application_repo):
        with pytest.raises(InvalidTransitionError) as exc_info:
            engine.transition_stage(submitted.id, S.TECHNICAL, actor_id=recruiter.id)

        error = exc_info.value
        assert isinstance(error, ValidationError)
        assert (error.current, error.requested) == ("applied", "technical")
        assert "applied" in error.message and "technical" in error.message
        stored = application_repo.get_by_id(submitted.id)
        assert stored.current_stage == S.APPLIED.value
        assert len(stored.stage_history) == 1

    def test_rejected_transition_logs_stage_value(self, engine, submitted, recruiter, monkeypatch):
        logger = MagicMock()
        monkeypatch.setattr(engine, "_logger", logger, raising=False)
        with pytest.raises(InvalidTransitionError):
            engine.transition_stage(submitted.id, S.TECHNICAL, actor_id=recruiter.id)
        message = logger.info.call_args.args[0]
        assert "applied -> technical" in message
        assert "ApplicationStage" not in message

    def test_reject_then_nothing(self, engine, submitted, recruiter):
        app = engine.transition_stage(submitted.id, S.REJECTED, actor_id=recruiter.id)
        assert app.current_stage == S.REJECTED.value
        assert app.is_closed

        for stage in S:
            with pytest.raises(InvalidTransitionError):
                engine.transition_stage(submitted.id, stage, actor_id=recruiter.id)

    def test_entry_appended(self, engine, submitted, recruiter):
        app = engine.transition_stage(
            submitted.id, "screening", actor_id=recruiter.id, comments="Looks good"
        )
        entry = app.last_entry
        assert entry.stage == S.SCREENING.value
        assert entry.updated_by == recruiter.id
        assert entry.comments == "Looks good"
        assert app.version == 1

    def test_full_pipeline_history_grows(self, engine, submitted, recruiter):
        stages = [S.SCREENING, S.TECHNICAL, S.INTERVIEW, S.HR_REVIEW, S.OFFER, S.HIRED]
        lengths = [1]
        for stage in stages:
            app = engine.transition_stage(submitted.id, stage, actor_id=recruiter.id)
            lengths.append(len(app.stage_history))

        assert lengths == sorted(lengths)
        assert lengths[-1] == 7
        assert app.stage_history[0].stage == S.APPLIED.value
        assert [e.stage for e in app.stage_history[1:]] == [s.value for s in stages]

    def test_interview_payload_stamped(self, engine, submitted, recruiter):
        walk(engine, submitted.id, recruiter.id, S.SCREENING, S.TECHNICAL)
        when = datetime(2030, 5, 1, 10, 0, tzinfo=timezone.utc)
        app = engine.transition_stage(
            submitted.id,
            S.INTERVIEW,
            actor_id=recruiter.id,
            interview={"scheduled_at": when, "link": "https://meet.example.com/x"},
        )
        assert app.interview.scheduled_at == when
        assert app.interview.link == "https://meet.example.com/x"
        assert app.interview.scheduled_by == recruiter.id

    def test_interview_payload_ignored_for_other_stages(self, engine, submitted, recruiter):
        app = engine.transition_stage(
            submitted.id, S.SCREENING, actor_id=recruiter.id, interview={"link": "x"}
        )
        assert app.interview is None

    def test_offer_status_forced_pending(self, engine, submitted, recruiter):
        walk(engine, submitted.id, recruiter.id, S.SCREENING, S.TECHNICAL, S.INTERVIEW, S.HR_REVIEW)
        app = engine.transition_stage(
            submitted.id,
            S.OFFER,
            actor_id=recruiter.id,
            offer={"salary": 90000, "currency": "eur", "status": "accepted"},
        )
        assert app.offer.status == OfferStatus.PENDING.value
        assert app.offer.salary == 90000
        assert app.offer.currency == "EUR"

    @pytest.mark.parametrize("status", ["declined", "PENDING_REVIEW", 7])
    def test_unrecognised_offer_status_still_pending(self, engine, submitted, recruiter, status):
        walk(engine, submitted.id, recruiter.id, S.SCREENING, S.TECHNICAL, S.INTERVIEW, S.HR_REVIEW)
        app = engine.transition_stage(
            submitted.id, S.OFFER, actor_id=recruiter.id, offer={"salary": 1000, "status": status}
        )
        assert app.current_stage == S.OFFER.value
        assert app.offer.status == OfferStatus.PENDING.value
        assert app.offer.salary == 1000

    def test_invalid_offer_payload(self, engine, submitted, recruiter):
        walk(engine, submitted.id, recruiter.id, S.SCREENING, S.TECHNICAL, S.INTERVIEW, S.HR_REVIEW)
        with pytest.raises(ValidationError):
            engine.transition_stage(submitted.id, S.OFFER, actor_id=recruiter.id, offer={"salary": -1})

    def test_unknown_stage_name(self, engine, submitted, recruiter):
        with pytest.raises(InvalidTransitionError):
            engine.transition_stage(submitted.id, "promoted", actor_id=recruiter.id)

    def test_missing_application(self, engine, recruiter):
        with pytest.raises(NotFoundError):
            engine.transition_stage(ObjectId(), S.SCREENING, actor_id=recruiter.id)

    def test_system_transition_without_actor(self, engine, submitted):
        app = engine.transition_stage(submitted.id, S.WITHDRAWN)
        assert app.last_entry.updated_by is None

    def test_notifies_applicant(self, engine, submitted, recruiter, notifier):
        engine.transition_stage(submitted.id, S.SCREENING, actor_id=recruiter.id)
        assert notifier.events[-1] == ("stage_changed", submitted.id, S.SCREENING)

    def test_notification_failure_is_swallowed(self, engine, submitted, recruiter, notifier):
        notifier.fail = True
        app = engine.transition_stage(submitted.id, S.SCREENING, actor_id=recruiter.id)
        assert app.current_stage == S.SCREENING.value

    def test_concurrent_modification_is_conflict(
        self, engine, submitted, recruiter, application_repo, monkeypatch
    ):
        stale = application_repo.get_by_id(submitted.id)
        engine.transition_stage(submitted.id, S.SCREENING, actor_id=recruiter.id)

        # Second request still sees the pre-screening state
        monkeypatch.setattr(application_repo, "get_by_id", lambda _id: stale)
        with pytest.raises(ConflictError):
            engine.transition_stage(submitted.id, S.REJECTED, actor_id=recruiter.id)

        monkeypatch.undo()
        stored = application_repo.get_by_id(submitted.id)
        assert stored.current_stage == S.SCREENING.value
        assert len(stored.stage_history) == 2


# ── Queries ─────────────────────────────────────────────────────────────────


class TestQueries:
    def test_get_application(self, engine, submitted):
        assert engine.get_application(str(submitted.id)).id == submitted.id

    def test_get_missing_application(self, engine):
        with pytest.raises(NotFoundError):
            engine.get_application(ObjectId())

    def test_application_for_job_and_candidate(self, engine, submitted, job, candidate):
        found = engine.get_application_for(str(job.id), candidate.id)
        assert found.id == submitted.id

    def test_application_for_pair_without_one(self, engine, job, make_user, user_repo):
        other = user_repo.create(make_user(skills=["go"]))
        with pytest.raises(NotFoundError) as exc_info:
            engine.get_application_for(job.id, other.id)
        assert exc_info.value.resource == "application"

    def test_job_applications_by_score(self, engine, job, make_user, user_repo):
        for skills in (["java"], ["java", "sql", "spring boot"], []):
            user = user_repo.create(make_user(skills=skills))
            engine.submit_application(job.id, user.id, "r.pdf")

        scores = [a.match_score for a in engine.list_job_applications(job.id)]
        assert scores == [100, 33, 0]

    def test_job_applications_unknown_job(self, engine):
        with pytest.raises(NotFoundError):
            engine.list_job_applications(ObjectId())

    def test_candidate_applications_newest_first(self, engine, candidate, make_job, job_repo, recruiter):
        first = job_repo.create(make_job(title="First", posted_by=recruiter.id))
        second = job_repo.create(make_job(title="Second", posted_by=recruiter.id))
        a1 = engine.submit_application(first.id, candidate.id, "r.pdf")
        a2 = engine.submit_application(second.id, candidate.id, "r.pdf")

        listed = engine.list_candidate_applications(candidate.id)
        assert [a.id for a in listed] == [a2.id, a1.id]
