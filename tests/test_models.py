"""Tests for Pydantic data models."""

import pytest
from pydantic import ValidationError

from resumemate.models.document import RoleEntry, SkillGroup, TailoredDocument
from resumemate.models.profile import CandidateProfile, TargetProfile
from resumemate.models.quality import IssueKind, QualityIssue
from resumemate.models.raw import RawSuggestions
from resumemate.models.scoring import CATEGORY_WEIGHTS, ScoreLabel


class TestProfiles:
    def test_candidate_minimal(self):
        profile = CandidateProfile()
        assert profile.skills == []
        assert profile.name is None

    def test_target_is_frozen(self, sample_target):
        with pytest.raises(ValidationError):
            sample_target.title = "Changed"

    def test_target_lists_default_empty(self):
        target = TargetProfile(title="Engineer")
        assert target.required_skills == []
        assert target.keywords == []


class TestTailoredDocument:
    def test_bullet_count(self, sample_document):
        assert sample_document.bullet_count() == 3

    def test_skill_items_flattens_groups(self):
        doc = TailoredDocument(
            skills=[SkillGroup(category="A", items=["x", "y"]), SkillGroup(category="B", items=["z"])]
        )
        assert doc.skill_items() == ["x", "y", "z"]

    def test_role_period_defaults_empty(self):
        assert RoleEntry(company="Acme", title="Engineer").period == ""


class TestScoringModels:
    def test_weights_sum_to_one(self):
        assert sum(CATEGORY_WEIGHTS.values()) == pytest.approx(1.0)

    @pytest.mark.parametrize(
        "score,label",
        [(100, ScoreLabel.STRONG), (75, ScoreLabel.STRONG), (74, ScoreLabel.MODERATE),
         (50, ScoreLabel.MODERATE), (49, ScoreLabel.WEAK), (0, ScoreLabel.WEAK)],
    )
    def test_label_cutoffs(self, score, label):
        assert ScoreLabel.from_score(score) is label


class TestQualityIssue:
    def test_kind_values(self):
        assert IssueKind.BANNED_PHRASE.value == "banned-phrase"
        assert IssueKind.DANGLING_BULLET.value == "dangling-bullet"

    def test_issue_is_frozen(self):
        issue = QualityIssue(kind=IssueKind.DUPLICATE, location="experience[0].bullets", detail="x")
        assert issue.auto_fixed is True
        with pytest.raises(ValidationError):
            issue.detail = "changed"


class TestRawSuggestions:
    def test_aliases_and_coercion(self, raw_suggestions):
        raw = RawSuggestions.model_validate(raw_suggestions)
        assert raw.tailored_resume.education[0].year == "2018"
        assert raw.experience_gaps[0].severity == "high"

    def test_cover_letter_string_is_split(self, raw_suggestions):
        raw_suggestions["coverLetter"] = "Dear Team,\n\nBody paragraph.\n\nBest regards,\nJordan"
        raw = RawSuggestions.model_validate(raw_suggestions)
        assert raw.cover_letter.paragraphs == ["Dear Team,", "Body paragraph.", "Best regards,\nJordan"]

    def test_skills_mapping_becomes_groups(self, raw_suggestions):
        raw_suggestions["tailoredResume"]["skills"] = {"Languages": "Python, Go", "Tools": ["Docker"]}
        doc = RawSuggestions.model_validate(raw_suggestions).to_document()
        assert [g.category for g in doc.skills] == ["Languages", "Tools"]
        assert doc.skills[0].items == ["Python", "Go"]

    def test_feedback_string_is_split_into_lines(self, raw_suggestions):
        raw_suggestions["recruiterFeedback"] = "- First point\n- Second point"
        raw = RawSuggestions.model_validate(raw_suggestions)
        assert raw.recruiter_feedback == ["First point", "Second point"]

    def test_to_document_maps_overview(self, raw_suggestions):
        doc = RawSuggestions.model_validate(raw_suggestions).to_document()
        assert doc.overview == "Good fit for the platform role."
        assert doc.cover_letter[0] == "Dear Hiring Manager,"
        assert doc.experience[0].company == "Acme Corp"

    def test_missing_resume_fails(self, raw_suggestions):
        del raw_suggestions["tailoredResume"]
        with pytest.raises(ValidationError):
            RawSuggestions.model_validate(raw_suggestions)

    def test_bad_severity_fails(self, raw_suggestions):
        raw_suggestions["experienceGaps"][0]["severity"] = "urgent"
        with pytest.raises(ValidationError):
            RawSuggestions.model_validate(raw_suggestions)
