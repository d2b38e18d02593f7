"""
User data models for SmartHire.

Only the parts the core reads are modelled here: identity, role and the
candidate's declared skills. Credentials live with the auth service.
"""

from typing import Optional

from pydantic import Field, field_validator

from smarthire.utils.constants import UserRole

from .base import BaseDocument, EmbeddedModel


class CandidateProfile(EmbeddedModel):
    """Self-declared profile of a candidate."""

    headline: Optional[str] = None
    skills: list[str] = Field(default_factory=list)
    experience_years: Optional[float] = Field(default=None, ge=0)
    resume: Optional[str] = None

    @field_validator("skills", mode="before")
    @classmethod
    def drop_blank_skills(cls, v: Optional[list[str]]) -> list[str]:
        if not v:
            return []
        return [s for s in v if s and s.strip()]


class User(BaseDocument):
    """Platform user: candidate, recruiter or admin."""

    name: str
    email: str
    role: UserRole = UserRole.CANDIDATE
    company_name: Optional[str] = None
    profile: CandidateProfile = Field(default_factory=CandidateProfile)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @property
    def skills(self) -> list[str]:
        return list(self.profile.skills)

    def has_role(self, *roles: UserRole | str) -> bool:
        """Check whether the user holds any of the given roles."""
        allowed = {getattr(r, "value", r) for r in roles}
        return getattr(self.role, "value", self.role) in allowed

    class Settings:
        """MongoDB collection settings."""

        name = "users"
        indexes = ["email"]
