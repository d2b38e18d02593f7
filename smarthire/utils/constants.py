"""
Application-wide constants for SmartHire.

This module contains the constant values and enumerations shared by the
workflow engine, the matching engine and the persistence layer.
"""

from enum import Enum
from typing import Final


# =============================================================================
# Application Constants
# =============================================================================

APP_NAME: Final[str] = "SmartHire"
APP_DISPLAY_NAME: Final[str] = "SmartHire Hiring Pipeline"
VERSION: Final[str] = "0.1.0"


# =============================================================================
# Resume Uploads
# =============================================================================

SUPPORTED_RESUME_FORMATS: Final[tuple[str, ...]] = (".pdf",)

RESUME_CONTENT_TYPES: Final[tuple[str, ...]] = (
    "application/pdf",
    "application/x-pdf",
)

RESUME_FILE_PREFIX: Final[str] = "resume"


# =============================================================================
# Matching Constants
# =============================================================================

MATCH_SCORE_MIN: Final[int] = 0
MATCH_SCORE_MAX: Final[int] = 100

# Maximum number of jobs returned by a recommendation request
RECOMMENDATION_LIMIT: Final[int] = 10


# =============================================================================
# Workflow Constants
# =============================================================================

INITIAL_STAGE_COMMENT: Final[str] = "Application submitted"


# =============================================================================
# Enums
# =============================================================================


class ApplicationStage(str, Enum):
    """Stage of an application in the hiring pipeline."""

    APPLIED = "applied"
    SCREENING = "screening"
    TECHNICAL = "technical"
    INTERVIEW = "interview"
    HR_REVIEW = "hr_review"
    OFFER = "offer"
    HIRED = "hired"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"

    @property
    def label(self) -> str:
        """Human-readable stage name."""
        if self is ApplicationStage.HR_REVIEW:
            return "HR Review"
        return self.value.replace("_", " ").title()

    @classmethod
    def parse(cls, value: "str | ApplicationStage") -> "ApplicationStage":
        """
        Convert a stage name or value to a member.

        Accepts the enum value ("hr_review"), the member name ("HR_REVIEW")
        or a member instance. Raises ValueError for anything else.
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        try:
            return cls(text.lower())
        except ValueError:
            pass
        try:
            return cls[text.upper()]
        except KeyError:
            raise ValueError(f"Unknown application stage: {value!r}") from None


class OfferStatus(str, Enum):
    """Acceptance status of an offer."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class UserRole(str, Enum):
    """Role of a platform user."""

    CANDIDATE = "candidate"
    RECRUITER = "recruiter"
    ADMIN = "admin"


class NotificationType(str, Enum):
    """Category of a user notification."""

    APPLICATION_UPDATE = "application_update"
    INTERVIEW = "interview"
    OFFER = "offer"
    SYSTEM = "system"

    @classmethod
    def for_stage(cls, stage: ApplicationStage) -> "NotificationType":
        """Notification category used when an application enters a stage."""
        if stage == ApplicationStage.INTERVIEW:
            return cls.INTERVIEW
        if stage == ApplicationStage.OFFER:
            return cls.OFFER
        return cls.APPLICATION_UPDATE


class AuditAction(str, Enum):
    """Types of workflow actions written to the audit log."""

    APPLICATION_SUBMITTED = "application_submitted"
    APPLICATION_STAGE_CHANGED = "application_stage_changed"
    APPLICATION_SUBMISSION_ROLLED_BACK = "application_submission_rolled_back"
    RECOMMENDATIONS_GENERATED = "recommendations_generated"
    ACCESS_DENIED = "access_denied"


# Subject lines used for notification emails
EMAIL_SUBJECTS: Final[dict[str, str]] = {
    NotificationType.APPLICATION_UPDATE.value: "Application Update - SmartHire",
    NotificationType.INTERVIEW.value: "Interview Scheduled - SmartHire",
    NotificationType.OFFER.value: "Offer Received - SmartHire",
    NotificationType.SYSTEM.value: "SmartHire Notification",
}
