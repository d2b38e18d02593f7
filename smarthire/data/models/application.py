"""
Application data models for SmartHire.

An application is one candidate's pursuit of one job. Its stage only
moves through validated transitions and every move is appended to
``stage_history``, which doubles as the audit trail.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from smarthire.utils.constants import (
    INITIAL_STAGE_COMMENT,
    MATCH_SCORE_MAX,
    MATCH_SCORE_MIN,
    ApplicationStage,
    OfferStatus,
)

from .base import BaseDocument, EmbeddedModel, PyObjectId, utc_now


class StageEntry(EmbeddedModel):
    """One entry in an application's stage history."""

    stage: ApplicationStage
    entered_at: datetime = Field(default_factory=utc_now)
    updated_by: Optional[PyObjectId] = None  # None for system-initiated entries
    comments: str = ""


class InterviewDetails(EmbeddedModel):
    """Interview schedule attached when an application reaches the interview stage."""

    scheduled_at: Optional[datetime] = None
    link: Optional[str] = None
    notes: Optional[str] = None
    scheduled_by: Optional[PyObjectId] = None


class OfferDetails(EmbeddedModel):
    """Offer terms attached when an application reaches the offer stage."""

    salary: Optional[float] = Field(default=None, ge=0)
    currency: str = "USD"
    joining_date: Optional[datetime] = None
    status: OfferStatus = OfferStatus.PENDING

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return v.strip().upper() or "USD"


class Application(BaseDocument):
    """
    Application document.

    Unique per (job_id, applicant_id); the database enforces this with a
    compound unique index. ``version`` increases with every stage change
    and guards concurrent transitions.
    """

    job_id: PyObjectId
    applicant_id: PyObjectId
    resume: str = Field(..., min_length=1)

    current_stage: ApplicationStage = ApplicationStage.APPLIED
    stage_history: list[StageEntry] = Field(default_factory=list)

    interview: Optional[InterviewDetails] = None
    offer: Optional[OfferDetails] = None

    # Snapshot taken at submission, never recomputed
    match_score: int = Field(default=0, ge=MATCH_SCORE_MIN, le=MATCH_SCORE_MAX)

    version: int = Field(default=0, ge=0)

    @classmethod
    def submitted(
        cls,
        job_id: PyObjectId,
        applicant_id: PyObjectId,
        resume: str,
        match_score: int = 0,
    ) -> "Application":
        """Build a freshly submitted application in the initial stage."""
        return cls(
            job_id=job_id,
            applicant_id=applicant_id,
            resume=resume,
            current_stage=ApplicationStage.APPLIED,
            stage_history=[
                StageEntry(
                    stage=ApplicationStage.APPLIED,
                    comments=INITIAL_STAGE_COMMENT,
                )
            ],
            match_score=match_score,
        )

    @property
    def stage(self) -> ApplicationStage:
        """Current stage as an enum member."""
        return ApplicationStage(self.current_stage)

    @property
    def last_entry(self) -> Optional[StageEntry]:
        return self.stage_history[-1] if self.stage_history else None

    @property
    def is_closed(self) -> bool:
        """Check if the application reached a terminal stage."""
        return self.current_stage in (
            ApplicationStage.HIRED.value,
            ApplicationStage.REJECTED.value,
            ApplicationStage.WITHDRAWN.value,
        )

    class Settings:
        """MongoDB collection settings."""

        name = "applications"
        indexes = [
            [("job_id", 1), ("applicant_id", 1)],  # Compound unique index
            "applicant_id",
            "current_stage",
            "match_score",
        ]


class ApplicationCreate(BaseModel):
    """Schema for submitting a new application."""

    job_id: str
    applicant_id: str
    resume: str = Field(..., min_length=1)


class StageChangeRequest(BaseModel):
    """Schema for a stage transition request."""

    stage: ApplicationStage
    comments: Optional[str] = None
    interview: Optional[InterviewDetails] = None
    offer: Optional[OfferDetails] = None

    @field_validator("stage", mode="before")
    @classmethod
    def parse_stage(cls, v: object) -> ApplicationStage:
        return ApplicationStage.parse(v)
