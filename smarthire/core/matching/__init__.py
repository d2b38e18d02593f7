"""Skill matching and job recommendation module."""

from .match_scorer import (
    JobShape,
    MatchEvaluation,
    MatchScorer,
    get_match_scorer,
    normalize_skills,
    round_half_up,
    score_freeform_text,
    score_structured_skills,
)
from .recommender import (
    RecommendationRanker,
    RecommendedJob,
    get_recommendation_ranker,
    parse_skills,
)

__all__ = [
    "JobShape",
    "MatchEvaluation",
    "MatchScorer",
    "get_match_scorer",
    "normalize_skills",
    "round_half_up",
    "score_freeform_text",
    "score_structured_skills",
    "RecommendationRanker",
    "RecommendedJob",
    "get_recommendation_ranker",
    "parse_skills",
]
