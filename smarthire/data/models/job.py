"""
Job posting data models for SmartHire.

Jobs are owned by recruiters. The matching engine only reads them; the
workflow engine additionally registers applicants on them.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .base import BaseDocument, PyObjectId


def _clean_skill_list(values: Optional[list[str]]) -> list[str]:
    """Strip whitespace and drop blank entries, keeping the recruiter's casing."""
    if not values:
        return []
    return [v.strip() for v in values if v and v.strip()]


class Job(BaseDocument):
    """
    Job posting document.

    A job either declares a structured list of required skills, or only
    carries free text (title, description, requirements). The shape decides
    which scoring strategy the matcher uses.
    """

    title: str
    description: str = ""
    requirements: str = ""
    company_name: Optional[str] = None
    location: Optional[str] = None
    employment_type: str = "Full-time"
    salary: Optional[float] = Field(default=None, ge=0)

    posted_by: PyObjectId
    required_skills: list[str] = Field(default_factory=list)
    applicants: list[PyObjectId] = Field(default_factory=list)

    @field_validator("required_skills", mode="before")
    @classmethod
    def clean_required_skills(cls, v: Optional[list[str]]) -> list[str]:
        return _clean_skill_list(v)

    @property
    def has_structured_skills(self) -> bool:
        """True when the recruiter declared an explicit skill list."""
        return bool(self.required_skills)

    @property
    def free_text(self) -> str:
        """Title, description and requirements joined for text matching."""
        return f"{self.title or ''} {self.description or ''} {self.requirements or ''}"

    @property
    def applicant_count(self) -> int:
        return len(self.applicants)

    class Settings:
        """MongoDB collection settings."""

        name = "jobs"
        indexes = [
            "posted_by",
            "created_at",
        ]


class JobCreate(BaseModel):
    """Schema for creating a new job posting."""

    title: str = Field(..., min_length=1)
    description: str = ""
    requirements: str = ""
    company_name: Optional[str] = None
    location: Optional[str] = None
    employment_type: str = "Full-time"
    salary: Optional[float] = Field(default=None, ge=0)
    required_skills: list[str] = Field(default_factory=list)

    @field_validator("required_skills", mode="before")
    @classmethod
    def clean_required_skills(cls, v: Optional[list[str]]) -> list[str]:
        return _clean_skill_list(v)
