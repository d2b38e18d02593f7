"""
Application workflow engine.

Submits applications and moves them through the hiring pipeline. Every
stage change is validated against the transition table, appended to the
application's stage history and guarded by the application's version
so concurrent requests cannot both apply.
"""

from typing import Any, Callable, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import ValidationError as PydanticValidationError

from smarthire.core.exceptions import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from smarthire.core.matching.match_scorer import MatchScorer, get_match_scorer
from smarthire.data.models import (
    Application,
    InterviewDetails,
    OfferDetails,
    StageEntry,
)
from smarthire.data.repositories.base import DuplicateRecordError
from smarthire.utils.constants import (
    MATCH_SCORE_MAX,
    MATCH_SCORE_MIN,
    ApplicationStage,
    AuditAction,
    OfferStatus,
)
from smarthire.utils.logger import LoggerMixin, audit_log

from .transitions import validate_transition


def _to_object_id(value: Any, label: str) -> ObjectId:
    """Parse an id, raising a ValidationError naming the field."""
    if isinstance(value, ObjectId):
        return value
    if value is None:
        raise ValidationError(f"Missing {label} id", field=f"{label}_id")
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValidationError(f"Invalid {label} id: {value}", field=f"{label}_id") from None


class WorkflowEngine(LoggerMixin):
    """
    Runs the application lifecycle.

    Collaborators are injected so the engine can run against any store;
    the defaults are the MongoDB repositories and the shared services.
    """

    def __init__(
        self,
        application_repository=None,
        job_repository=None,
        user_repository=None,
        notification_service=None,
        scorer: Optional[MatchScorer] = None,
    ):
        self._application_repository = application_repository
        self._job_repository = job_repository
        self._user_repository = user_repository
        self._notification_service = notification_service
        self.scorer = scorer or get_match_scorer()

    # -------------------------------------------------------------------------
    # Collaborators
    # -------------------------------------------------------------------------

    @property
    def applications(self):
        if self._application_repository is None:
            from smarthire.data.repositories import get_application_repository

            self._application_repository = get_application_repository()
        return self._application_repository

    @property
    def jobs(self):
        if self._job_repository is None:
            from smarthire.data.repositories import get_job_repository

            self._job_repository = get_job_repository()
        return self._job_repository

    @property
    def users(self):
        if self._user_repository is None:
            from smarthire.data.repositories import get_user_repository

            self._user_repository = get_user_repository()
        return self._user_repository

    @property
    def notifications(self):
        if self._notification_service is None:
            from smarthire.services.notification_service import get_notification_service

            self._notification_service = get_notification_service()
        return self._notification_service

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    def submit_application(
        self,
        job_id: str | ObjectId,
        applicant_id: str | ObjectId,
        resume: str,
        match_score: Optional[int] = None,
    ) -> Application:
        """
        Submit a candidate's application for a job.

        Steps run in order: duplicate pre-check, lookups, scoring, insert,
        registration on the job, notification. If registration fails the
        inserted application is deleted again before the error propagates.

        Args:
            job_id: Job being applied for
            applicant_id: Candidate applying
            resume: Reference returned by the resume storage
            match_score: Precomputed score; computed from the profile if None

        Returns:
            The stored application in the applied stage

        Raises:
            ValidationError: malformed ids, empty resume or score out of range
            ConflictError: the candidate already applied for this job
            NotFoundError: unknown job or applicant
        """
        job_oid = _to_object_id(job_id, "job")
        applicant_oid = _to_object_id(applicant_id, "applicant")

        if not resume or not str(resume).strip():
            raise ValidationError("A resume is required", field="resume")
        if match_score is not None and not MATCH_SCORE_MIN <= match_score <= MATCH_SCORE_MAX:
            raise ValidationError(
                f"Match score must be between {MATCH_SCORE_MIN} and {MATCH_SCORE_MAX}",
                field="match_score",
            )

        if self.applications.application_exists(job_oid, applicant_oid):
            raise self._duplicate_error(job_oid, applicant_oid)

        job = self.jobs.get_by_id(job_oid)
        if job is None:
            raise NotFoundError("job", job_oid)

        applicant = self.users.get_by_id(applicant_oid)
        if applicant is None:
            raise NotFoundError("applicant", applicant_oid)

        if match_score is None:
            match_score = self.scorer.score(job, applicant.skills)

        application = Application.submitted(
            job_id=job_oid,
            applicant_id=applicant_oid,
            resume=str(resume),
            match_score=match_score,
        )

        try:
            application = self.applications.create(application)
        except DuplicateRecordError as e:
            # Lost a race with a concurrent submission
            raise self._duplicate_error(job_oid, applicant_oid) from e

        try:
            if not self.jobs.add_applicant(job_oid, applicant_oid):
                raise NotFoundError("job", job_oid)
        except Exception as registration_error:
            removed = self._discard_application(application.id)
            self.logger.error(
                f"Registering applicant {applicant_oid} on job {job_oid} failed: "
                f"{registration_error}; application {application.id} "
                f"{'removed' if removed else 'left orphaned'}"
            )
            audit_log(
                AuditAction.APPLICATION_SUBMISSION_ROLLED_BACK.value,
                {
                    "application_id": str(application.id),
                    "job_id": str(job_oid),
                    "applicant_id": str(applicant_oid),
                    "removed": removed,
                },
            )
            raise

        self._notify(
            "new_application",
            lambda: self.notifications.notify_new_application(job, applicant),
        )

        self.logger.info(
            f"Application {application.id} submitted for job {job_oid} "
            f"by {applicant_oid} (match {match_score})"
        )
        audit_log(
            AuditAction.APPLICATION_SUBMITTED.value,
            {
                "application_id": str(application.id),
                "job_id": str(job_oid),
                "applicant_id": str(applicant_oid),
                "match_score": match_score,
            },
        )
        return application

    @staticmethod
    def _duplicate_error(job_id: ObjectId, applicant_id: ObjectId) -> ConflictError:
        return ConflictError(
            "You have already applied for this job",
            job_id=str(job_id),
            applicant_id=str(applicant_id),
        )

    def _discard_application(self, application_id: ObjectId) -> bool:
        """Delete a half-submitted application; False if it could not be removed."""
        try:
            self.applications.delete(application_id)
            return True
        except Exception as e:
            self.logger.error(f"Orphaned application {application_id} could not be removed: {e}")
            return False

    # -------------------------------------------------------------------------
    # Stage Transitions
    # -------------------------------------------------------------------------

    def transition_stage(
        self,
        application_id: str | ObjectId,
        target_stage: ApplicationStage | str,
        actor_id: Optional[str | ObjectId] = None,
        comments: Optional[str] = None,
        interview: Optional[InterviewDetails | dict[str, Any]] = None,
        offer: Optional[OfferDetails | dict[str, Any]] = None,
    ) -> Application:
        """
        Move an application to another stage.

        Interview details are only kept when moving to the interview stage,
        and are stamped with the acting user. Offer details are only kept
        when moving to the offer stage, and always start as pending.

        Raises:
            ValidationError: malformed ids or payloads
            InvalidTransitionError: the move is not allowed from the current stage
            NotFoundError: unknown application
            ConflictError: the application changed since it was read
        """
        application_oid = _to_object_id(application_id, "application")
        actor_oid = _to_object_id(actor_id, "actor") if actor_id is not None else None

        application = self.applications.get_by_id(application_oid)
        if application is None:
            raise NotFoundError("application", application_oid)

        current = application.stage
        if not validate_transition(current, target_stage):
            self.logger.info(
                f"Rejected transition {current.value} -> "
                f"{getattr(target_stage, 'value', target_stage)} "
                f"on application {application_oid}"
            )
            raise InvalidTransitionError(current, target_stage)

        target = ApplicationStage.parse(target_stage)
        entry = StageEntry(stage=target, updated_by=actor_oid, comments=comments or "")

        extra_fields: dict[str, Any] = {}
        if target is ApplicationStage.INTERVIEW and interview is not None:
            details = self._parse_payload(InterviewDetails, interview, "interview")
            details = details.model_copy(update={"scheduled_by": actor_oid})
            extra_fields["interview"] = details.model_dump(exclude_none=True)
        if target is ApplicationStage.OFFER and offer is not None:
            if isinstance(offer, dict):
                offer = {key: value for key, value in offer.items() if key != "status"}
            details = self._parse_payload(OfferDetails, offer, "offer")
            details = details.model_copy(update={"status": OfferStatus.PENDING.value})
            extra_fields["offer"] = details.model_dump(exclude_none=True)

        updated = self.applications.apply_stage_change(
            application_oid,
            expected_stage=current.value,
            expected_version=application.version,
            entry=entry,
            extra_fields=extra_fields,
        )
        if updated is None:
            raise ConflictError(
                "Application was modified by another request; reload and retry",
                application_id=str(application_oid),
            )

        self._notify(
            "stage_changed",
            lambda: self._send_stage_notification(updated, target),
        )

        self.logger.info(
            f"Application {application_oid} moved {current.value} -> {target.value}"
        )
        audit_log(
            AuditAction.APPLICATION_STAGE_CHANGED.value,
            {
                "application_id": str(application_oid),
                "from_stage": current.value,
                "to_stage": target.value,
                "actor_id": str(actor_oid) if actor_oid else None,
                "version": updated.version,
            },
        )
        return updated

    @staticmethod
    def _parse_payload(model: type, payload: Any, name: str):
        try:
            return model.model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid {name} details: {e}", field=name) from None

    def _send_stage_notification(self, application: Application, stage: ApplicationStage) -> None:
        job = self.jobs.get_by_id(application.job_id)
        if job is None:
            raise NotFoundError("job", application.job_id)
        self.notifications.notify_stage_changed(application, job, stage)

    def _notify(self, event: str, send: Callable[[], Any]) -> None:
        """Deliver a notification; failures are logged and never propagate."""
        try:
            send()
        except Exception as e:
            self.logger.warning(f"Notification '{event}' failed: {e}")

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_application(self, application_id: str | ObjectId) -> Application:
        application_oid = _to_object_id(application_id, "application")
        application = self.applications.get_by_id(application_oid)
        if application is None:
            raise NotFoundError("application", application_oid)
        return application

    def get_application_for(
        self,
        job_id: str | ObjectId,
        applicant_id: str | ObjectId,
    ) -> Application:
        """The single application a candidate made for a job."""
        job_oid = _to_object_id(job_id, "job")
        applicant_oid = _to_object_id(applicant_id, "applicant")
        application = self.applications.get_by_job_and_applicant(job_oid, applicant_oid)
        if application is None:
            raise NotFoundError("application", f"{job_oid}/{applicant_oid}")
        return application

    def list_job_applications(self, job_id: str | ObjectId) -> list[Application]:
        """Applications for a job, highest match score first."""
        job_oid = _to_object_id(job_id, "job")
        if self.jobs.get_by_id(job_oid) is None:
            raise NotFoundError("job", job_oid)
        return self.applications.get_by_job(job_oid)

    def list_candidate_applications(self, applicant_id: str | ObjectId) -> list[Application]:
        """A candidate's applications, newest first."""
        applicant_oid = _to_object_id(applicant_id, "applicant")
        return self.applications.get_by_applicant(applicant_oid)


# Singleton instance
_workflow_engine: Optional[WorkflowEngine] = None


def get_workflow_engine() -> WorkflowEngine:
    """Get the workflow engine singleton instance."""
    global _workflow_engine
    if _workflow_engine is None:
        _workflow_engine = WorkflowEngine()
    return _workflow_engine
