"""
Job repository for SmartHire.

Provides data access operations for job posting documents.
"""

from typing import Optional

from bson import ObjectId

from smarthire.data.models.base import utc_now
from smarthire.data.models.job import Job, JobCreate
from smarthire.utils.logger import get_logger

from .base import BaseRepository

logger = get_logger(__name__)


class JobRepository(BaseRepository[Job]):
    """Repository for job posting document operations."""

    @property
    def collection_name(self) -> str:
        return "jobs"

    @property
    def model_class(self) -> type[Job]:
        return Job

    def create_from_schema(self, data: JobCreate, posted_by: str | ObjectId) -> Job:
        """Create a job from a create schema on behalf of a recruiter."""
        job = Job(posted_by=self._to_object_id(posted_by), **data.model_dump())
        return self.create(job)

    def get_all_jobs(self) -> list[Job]:
        """Every job, oldest first, for scoring."""
        return self.find({}, limit=0, sort_by="created_at", sort_order=1)

    def get_by_recruiter(self, recruiter_id: str | ObjectId) -> list[Job]:
        return self.find(
            {"posted_by": self._to_object_id(recruiter_id)},
            limit=0,
        )

    # -------------------------------------------------------------------------
    # Applicant Registration
    # -------------------------------------------------------------------------

    def add_applicant(self, job_id: str | ObjectId, applicant_id: str | ObjectId) -> bool:
        """
        Register an applicant on a job.

        Uses ``$addToSet`` so repeating the call is harmless. Returns False
        when the job does not exist.
        """
        collection = self._get_sync_collection()
        result = collection.update_one(
            {"_id": self._to_object_id(job_id)},
            {
                "$addToSet": {"applicants": self._to_object_id(applicant_id)},
                "$set": {"updated_at": utc_now()},
            },
        )
        return result.matched_count > 0


# Singleton instance
_job_repository: Optional[JobRepository] = None


def get_job_repository() -> JobRepository:
    """Get the job repository singleton instance."""
    global _job_repository
    if _job_repository is None:
        _job_repository = JobRepository()
    return _job_repository
