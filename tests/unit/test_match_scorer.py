"""
Tests for smarthire.core.matching.match_scorer: skill match scoring.
"""

import pytest

from smarthire.core.matching.match_scorer import (
    JobShape,
    MatchScorer,
    normalize_skills,
    round_half_up,
    score_freeform_text,
    score_structured_skills,
)


@pytest.fixture
def scorer():
    return MatchScorer()


# ── Helpers ─────────────────────────────────────────────────────────────────


class TestNormalizeSkills:
    def test_lowercases_and_strips(self):
        assert normalize_skills([" Python ", "SQL"]) == ["python", "sql"]

    def test_drops_blanks(self):
        assert normalize_skills(["", "  ", None, "go"]) == ["go"]

    def test_none(self):
        assert normalize_skills(None) == []


class TestRoundHalfUp:
    @pytest.mark.parametrize(
        "value, expected",
        [(12.5, 13), (66.666, 67), (33.333, 33), (0.5, 1), (99.49, 99), (100.0, 100)],
    )
    def test_rounding(self, value, expected):
        assert round_half_up(value) == expected


# ── Structured strategy ─────────────────────────────────────────────────────


class TestStructuredSkills:
    def test_two_of_three_required(self):
        result = score_structured_skills(["Java", "Spring Boot", "SQL"], ["java", "sql"])
        assert result.score == 67
        assert result.matched_terms == ["java", "sql"]
        assert result.unmatched_terms == ["spring boot"]

    def test_substring_either_direction(self):
        # "react" is inside "react.js"; "node.js" contains "node"
        result = score_structured_skills(["React", "Node"], ["react.js", "node.js"])
        assert result.score == 100

    def test_half_rounds_up(self):
        required = [f"skill{i}" for i in range(8)]
        result = score_structured_skills(required, ["skill0"])
        # 1/8 = 12.5%
        assert result.score == 13

    def test_empty_candidate_skills(self):
        result = score_structured_skills(["java"], [])
        assert result.score == 0
        assert result.unmatched_terms == ["java"]

    def test_none_matched(self):
        assert score_structured_skills(["rust"], ["python"]).score == 0


# ── Freeform strategy ───────────────────────────────────────────────────────


class TestFreeformText:
    def test_all_skills_in_text(self):
        text = "Frontend role React developer with Node.js experience"
        assert score_freeform_text(text, ["react", "node"]).score == 100

    def test_share_of_candidate_skills(self):
        text = "We need python and docker"
        result = score_freeform_text(text, ["Python", "Docker", "Go", "Rust"])
        assert result.score == 50
        assert result.unmatched_terms == ["go", "rust"]

    def test_empty_text(self):
        assert score_freeform_text("   ", ["python"]).score == 0

    def test_empty_skills(self):
        assert score_freeform_text("python shop", []).score == 0


# ── MatchScorer ─────────────────────────────────────────────────────────────


class TestMatchScorer:
    def test_classify_structured(self, scorer, make_job):
        assert scorer.classify_job(make_job(required_skills=["java"])) is JobShape.STRUCTURED

    def test_classify_freeform(self, scorer, make_job):
        assert scorer.classify_job(make_job(required_skills=[])) is JobShape.FREEFORM

    def test_scenario_structured(self, scorer, make_job):
        job = make_job(required_skills=["Java", "Spring Boot", "SQL"])
        assert scorer.score(job, ["java", "sql"]) == 67

    def test_scenario_freeform(self, scorer, make_job):
        job = make_job(
            title="Full Stack Engineer",
            description="React developer with Node.js experience",
        )
        evaluation = scorer.evaluate(job, ["react", "node"])
        assert evaluation.score == 100
        assert evaluation.strategy is JobShape.FREEFORM

    def test_freeform_uses_title_and_requirements(self, scorer, make_job):
        job = make_job(title="Kotlin Engineer", requirements="Must know Gradle")
        assert scorer.score(job, ["kotlin", "gradle"]) == 100

    def test_structured_ignores_free_text(self, scorer, make_job):
        job = make_job(description="python python python", required_skills=["Java"])
        assert scorer.score(job, ["python"]) == 0

    def test_empty_skills_score_zero(self, scorer, make_job):
        assert scorer.score(make_job(required_skills=["java"]), []) == 0
        assert scorer.score(make_job(description="java"), None) == 0

    def test_deterministic(self, scorer, make_job):
        job = make_job(required_skills=["Go", "Kubernetes", "AWS"])
        skills = ["go", "aws", "terraform"]
        assert len({scorer.score(job, skills) for _ in range(5)}) == 1

    @pytest.mark.parametrize(
        "skills",
        [[], ["x"], ["java", "sql", "spring", "boot", "java"], ["a" * 50]],
    )
    def test_score_in_range(self, scorer, make_job, skills):
        for job in (make_job(required_skills=["java", "sql"]), make_job(description="java sql")):
            assert 0 <= scorer.score(job, skills) <= 100
