"""
Application repository for SmartHire.

Provides data access for application documents, including the
conditional stage update used by the workflow engine.
"""

from typing import Any, Optional

from bson import ObjectId
from pymongo.results import UpdateResult

from smarthire.data.models.application import Application, StageEntry
from smarthire.data.models.base import utc_now
from smarthire.utils.logger import get_logger

from .base import BaseRepository

logger = get_logger(__name__)


class ApplicationRepository(BaseRepository[Application]):
    """Repository for application document operations."""

    @property
    def collection_name(self) -> str:
        return "applications"

    @property
    def model_class(self) -> type[Application]:
        return Application

    # -------------------------------------------------------------------------
    # Query Operations
    # -------------------------------------------------------------------------

    def get_by_job_and_applicant(
        self,
        job_id: str | ObjectId,
        applicant_id: str | ObjectId,
    ) -> Optional[Application]:
        """Get the application for a (job, applicant) pair, if any."""
        return self.find_one(
            {
                "job_id": self._to_object_id(job_id),
                "applicant_id": self._to_object_id(applicant_id),
            }
        )

    def application_exists(
        self,
        job_id: str | ObjectId,
        applicant_id: str | ObjectId,
    ) -> bool:
        return self.exists(
            {
                "job_id": self._to_object_id(job_id),
                "applicant_id": self._to_object_id(applicant_id),
            }
        )

    def get_by_job(self, job_id: str | ObjectId) -> list[Application]:
        """All applications for a job, best match first."""
        return self.find(
            {"job_id": self._to_object_id(job_id)},
            limit=0,
            sort_by="match_score",
            sort_order=-1,
        )

    def get_by_applicant(self, applicant_id: str | ObjectId) -> list[Application]:
        """All applications of a candidate, newest first."""
        return self.find(
            {"applicant_id": self._to_object_id(applicant_id)},
            limit=0,
            sort_by="created_at",
            sort_order=-1,
        )

    def get_stage_counts_for_job(self, job_id: str | ObjectId) -> dict[str, int]:
        """Count applications of a job per current stage."""
        collection = self._get_sync_collection()
        pipeline = [
            {"$match": {"job_id": self._to_object_id(job_id)}},
            {"$group": {"_id": "$current_stage", "count": {"$sum": 1}}},
        ]
        return {r["_id"]: r["count"] for r in collection.aggregate(pipeline)}

    # -------------------------------------------------------------------------
    # Update Operations
    # -------------------------------------------------------------------------

    def apply_stage_change(
        self,
        application_id: str | ObjectId,
        expected_stage: str,
        expected_version: int,
        entry: StageEntry,
        extra_fields: Optional[dict[str, Any]] = None,
    ) -> Optional[Application]:
        """
        Move an application to ``entry.stage`` if it is still unchanged.

        The update only matches when the stored stage and version equal the
        ones the caller read, so two concurrent transitions cannot both
        succeed. Returns the updated application, or None when the document
        was modified (or removed) in the meantime.
        """
        collection = self._get_sync_collection()
        fields: dict[str, Any] = {
            "current_stage": entry.stage,
            "updated_at": utc_now(),
        }
        if extra_fields:
            fields.update(extra_fields)

        result: UpdateResult = collection.update_one(
            {
                "_id": self._to_object_id(application_id),
                "current_stage": expected_stage,
                "version": expected_version,
            },
            {
                "$set": fields,
                "$push": {"stage_history": entry.model_dump(exclude_none=True)},
                "$inc": {"version": 1},
            },
        )

        if result.matched_count == 0:
            logger.warning(
                f"Stage change on application {application_id} lost a race "
                f"(expected {expected_stage} v{expected_version})"
            )
            return None

        logger.debug(f"Application {application_id} moved to {entry.stage}")
        return self.get_by_id(application_id)


# Singleton instance
_application_repository: Optional[ApplicationRepository] = None


def get_application_repository() -> ApplicationRepository:
    """Get the application repository singleton instance."""
    global _application_repository
    if _application_repository is None:
        _application_repository = ApplicationRepository()
    return _application_repository
