"""
Job recommendations for candidates.

Ranks every job by its match score against a candidate's skills. Scores
are recomputed on each call; nothing is cached.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Union

from bson import ObjectId
from bson.errors import InvalidId

from smarthire.core.exceptions import NotFoundError, ValidationError
from smarthire.data.models import Job
from smarthire.utils.config import get_settings
from smarthire.utils.constants import AuditAction
from smarthire.utils.logger import LoggerMixin, audit_log

from .match_scorer import MatchScorer, get_match_scorer

SkillsInput = Union[str, Iterable[str], None]


@dataclass
class RecommendedJob:
    """A job paired with its match score for one candidate."""

    job: Job
    score: int


def parse_skills(skills: SkillsInput) -> Optional[list[str]]:
    """
    Turn caller-supplied skills into a list.

    Accepts a comma-separated string ("python, sql") or an iterable of
    strings. Returns None when nothing was supplied, so callers can fall
    back to the stored profile.
    """
    if skills is None:
        return None
    if isinstance(skills, str):
        parts = [part.strip() for part in skills.split(",")]
    else:
        parts = [str(part).strip() for part in skills if part is not None]
    parts = [part for part in parts if part]
    return parts or None


class RecommendationRanker(LoggerMixin):
    """Ranks jobs for a candidate by skill match."""

    def __init__(
        self,
        scorer: Optional[MatchScorer] = None,
        job_repository=None,
        user_repository=None,
        limit: Optional[int] = None,
    ):
        """
        Initialize the ranker.

        Args:
            scorer: Match scorer, defaults to the shared instance
            job_repository: Source of jobs, defaults to the MongoDB repository
            user_repository: Source of candidate profiles
            limit: Default number of recommendations returned
        """
        self.scorer = scorer or get_match_scorer()
        self._job_repository = job_repository
        self._user_repository = user_repository
        self.limit = limit if limit is not None else get_settings().matching.recommendation_limit

    @property
    def job_repository(self):
        if self._job_repository is None:
            from smarthire.data.repositories import get_job_repository

            self._job_repository = get_job_repository()
        return self._job_repository

    @property
    def user_repository(self):
        if self._user_repository is None:
            from smarthire.data.repositories import get_user_repository

            self._user_repository = get_user_repository()
        return self._user_repository

    def rank_jobs(
        self,
        jobs: Iterable[Job],
        skills: Optional[Iterable[str]],
        limit: Optional[int] = None,
    ) -> list[RecommendedJob]:
        """
        Score and order jobs, best match first.

        Ties keep the order the jobs were given in.
        """
        limit = self.limit if limit is None else limit
        skill_list = list(skills or [])
        scored = [RecommendedJob(job=job, score=self.scorer.score(job, skill_list)) for job in jobs]
        # sorted() is stable
        scored = sorted(scored, key=lambda r: r.score, reverse=True)
        return scored[:limit] if limit > 0 else []

    def recommend(
        self,
        candidate_id: Optional[str] = None,
        skills: SkillsInput = None,
        limit: Optional[int] = None,
    ) -> list[RecommendedJob]:
        """
        Recommend jobs for a candidate.

        Explicit ``skills`` take precedence; otherwise the candidate's
        profile skills are used.

        Raises:
            ValidationError: neither skills nor a valid candidate id given
            NotFoundError: the candidate does not exist
        """
        skill_list = parse_skills(skills)
        source = "request"

        if skill_list is None:
            if candidate_id is None:
                raise ValidationError("Either skills or a candidate id is required")
            try:
                ObjectId(candidate_id)
            except (InvalidId, TypeError):
                raise ValidationError(f"Invalid candidate id: {candidate_id}") from None
            profile_skills = self.user_repository.get_skills(candidate_id)
            if profile_skills is None:
                raise NotFoundError("candidate", candidate_id)
            skill_list = profile_skills
            source = "profile"

        jobs = self.job_repository.get_all_jobs()
        ranked = self.rank_jobs(jobs, skill_list, limit)

        self.logger.info(
            f"Ranked {len(jobs)} jobs for {candidate_id or 'anonymous'} "
            f"using {len(skill_list)} {source} skills"
        )
        audit_log(
            AuditAction.RECOMMENDATIONS_GENERATED.value,
            {
                "candidate_id": str(candidate_id) if candidate_id else None,
                "skill_source": source,
                "jobs_scored": len(jobs),
                "returned": len(ranked),
            },
            audit_type="MATCHING",
        )
        return ranked


# Singleton instance
_ranker: Optional[RecommendationRanker] = None


def get_recommendation_ranker() -> RecommendationRanker:
    """Get the recommendation ranker singleton instance."""
    global _ranker
    if _ranker is None:
        _ranker = RecommendationRanker()
    return _ranker
