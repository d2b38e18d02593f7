"""
Skill match scoring.

Scores how well a candidate's declared skills fit a job, as an integer
percentage. Jobs with a structured skill list are scored against that
list; jobs that only carry free text are scored by looking for the
candidate's skills inside the posting text.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from smarthire.data.models import Job
from smarthire.utils.constants import MATCH_SCORE_MAX, MATCH_SCORE_MIN
from smarthire.utils.logger import get_logger

logger = get_logger(__name__)


class JobShape(str, Enum):
    """How a job describes its requirements."""

    STRUCTURED = "structured"
    FREEFORM = "freeform"


@dataclass
class MatchEvaluation:
    """Result of scoring one job against a set of skills."""

    score: int = 0
    strategy: JobShape = JobShape.FREEFORM
    matched_terms: list[str] = field(default_factory=list)
    unmatched_terms: list[str] = field(default_factory=list)

    @property
    def total_terms(self) -> int:
        return len(self.matched_terms) + len(self.unmatched_terms)


def normalize_skills(skills: Optional[Iterable[str]]) -> list[str]:
    """Lowercase and strip skills, dropping blanks. Order is kept."""
    if not skills:
        return []
    normalized = []
    for skill in skills:
        if skill is None:
            continue
        value = str(skill).strip().lower()
        if value:
            normalized.append(value)
    return normalized


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def _percentage(matched: int, total: int) -> int:
    if total == 0:
        return MATCH_SCORE_MIN
    score = round_half_up(matched / total * 100)
    return max(MATCH_SCORE_MIN, min(MATCH_SCORE_MAX, score))


def score_structured_skills(
    required_skills: Iterable[str],
    candidate_skills: Iterable[str],
) -> MatchEvaluation:
    """
    Score a candidate against a job's required skill list.

    A required skill counts as matched if some candidate skill equals it
    or either one contains the other ("react" matches "react.js").
    The score is the matched share of required skills.
    """
    required = normalize_skills(required_skills)
    candidate = normalize_skills(candidate_skills)
    evaluation = MatchEvaluation(strategy=JobShape.STRUCTURED)

    if not required or not candidate:
        evaluation.unmatched_terms = required
        return evaluation

    for skill in required:
        if any(c == skill or skill in c or c in skill for c in candidate):
            evaluation.matched_terms.append(skill)
        else:
            evaluation.unmatched_terms.append(skill)

    evaluation.score = _percentage(len(evaluation.matched_terms), len(required))
    return evaluation


def score_freeform_text(
    job_text: str,
    candidate_skills: Iterable[str],
) -> MatchEvaluation:
    """
    Score a candidate against the free text of a job posting.

    Each candidate skill is matched if it appears anywhere in the text.
    The score is the matched share of the candidate's skills.
    """
    candidate = normalize_skills(candidate_skills)
    blob = (job_text or "").lower()
    evaluation = MatchEvaluation(strategy=JobShape.FREEFORM)

    if not candidate or not blob.strip():
        evaluation.unmatched_terms = candidate
        return evaluation

    for skill in candidate:
        if skill in blob:
            evaluation.matched_terms.append(skill)
        else:
            evaluation.unmatched_terms.append(skill)

    evaluation.score = _percentage(len(evaluation.matched_terms), len(candidate))
    return evaluation


class MatchScorer:
    """Scores candidates' skills against jobs."""

    @staticmethod
    def classify_job(job: Job) -> JobShape:
        """Decide which scoring strategy a job needs."""
        if normalize_skills(job.required_skills):
            return JobShape.STRUCTURED
        return JobShape.FREEFORM

    def evaluate(self, job: Job, skills: Optional[Iterable[str]]) -> MatchEvaluation:
        """
        Score a job against a candidate's skills with details.

        Args:
            job: Job to score
            skills: Candidate's declared skills, any casing

        Returns:
            MatchEvaluation with the score, strategy and matched terms
        """
        shape = self.classify_job(job)
        if shape is JobShape.STRUCTURED:
            evaluation = score_structured_skills(job.required_skills, skills or [])
        else:
            evaluation = score_freeform_text(job.free_text, skills or [])

        logger.debug(
            f"Scored job {job.id} ({shape.value}): {evaluation.score} "
            f"[{len(evaluation.matched_terms)}/{evaluation.total_terms}]"
        )
        return evaluation

    def score(self, job: Job, skills: Optional[Iterable[str]]) -> int:
        """Score a job against a candidate's skills (0-100)."""
        return self.evaluate(job, skills).score


# Singleton instance
_match_scorer: Optional[MatchScorer] = None


def get_match_scorer() -> MatchScorer:
    """Get the match scorer singleton instance."""
    global _match_scorer
    if _match_scorer is None:
        _match_scorer = MatchScorer()
    return _match_scorer
