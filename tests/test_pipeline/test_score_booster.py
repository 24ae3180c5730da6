"""Tests for the score booster."""

from resumemate.config import BoosterConfig
from resumemate.pipeline.score_booster import SKILL_BULLET_TEMPLATE, _add_skill_bullet, boost, missing_labels
from resumemate.pipeline.scorer import score_document


class TestBoost:
    def test_injects_missing_required_skills(self, sample_document, sample_candidate, sample_target):
        result = boost(sample_document, sample_candidate, sample_target)

        assert result.score_before.score == 55
        assert result.target_score == 70
        assert result.score_after.score == 93
        assert result.boosted
        assert result.shortfall == 0
        assert result.actions == ["Injected 3 missing skill(s): Kubernetes, GraphQL, Terraform"]
        core = result.document.skills[0]
        assert core.category == "Core Skills"
        assert core.items[-3:] == ["Kubernetes", "GraphQL", "Terraform"]

    def test_reconciles_after_injection(self, sample_document, sample_candidate, sample_target):
        doc = boost(sample_document, sample_candidate, sample_target).document
        assert all(item.found for item in doc.keyword_checklist)
        assert doc.experience_gaps == []
        assert "No Kubernetes experience shown" not in doc.recruiter_feedback

    def test_improvement_guaranteed(self, sample_document, sample_candidate, sample_target):
        result = boost(sample_document, sample_candidate, sample_target)
        assert result.score_after.score >= result.score_before.score + BoosterConfig().min_improvement

    def test_already_on_target(self, sample_document, sample_candidate, sample_target):
        config = BoosterConfig(min_improvement=0, score_floor=0)
        result = boost(sample_document, sample_candidate, sample_target, config)
        assert not result.boosted
        assert result.actions == []
        assert result.document.model_dump() == sample_document.model_dump()

    def test_weaves_summary_and_reports_shortfall(self, sample_document, sample_candidate, sample_target):
        result = boost(sample_document, sample_candidate, sample_target, BoosterConfig(min_improvement=100))
        assert result.target_score == 100
        assert result.actions[1] == "Wove 1 keyword(s) into summary"
        assert result.document.summary.endswith("with expertise in CI/CD.")
        assert result.shortfall == 100 - result.score_after.score
        assert result.shortfall > 0

    def test_passes_disabled(self, sample_document, sample_candidate, sample_target):
        result = boost(sample_document, sample_candidate, sample_target, BoosterConfig(max_passes=0))
        assert result.actions == []
        assert result.score_after.score == score_document(sample_document, sample_target).score
        assert result.shortfall == 5

    def test_emergency_injection_below_floor(self, sample_document, sample_candidate, sample_target):
        config = BoosterConfig(max_passes=0, score_floor=100)
        result = boost(sample_document, sample_candidate, sample_target, config)
        extra = result.document.skills[-1]
        assert extra.category == "Additional Skills"
        assert extra.items == ["Kubernetes", "GraphQL", "Terraform", "CI/CD"]
        assert result.actions == ["Emergency keyword injection: 4 term(s)"]

    def test_input_not_mutated(self, sample_document, sample_candidate, sample_target):
        before = sample_document.model_dump()
        boost(sample_document, sample_candidate, sample_target)
        assert sample_document.model_dump() == before


class TestHelpers:
    def test_missing_labels(self, sample_document):
        assert missing_labels(sample_document, ["Python", "Kubernetes", "k8s"]) == ["Kubernetes"]

    def test_bullet_template(self):
        assert SKILL_BULLET_TEMPLATE.format(skill="GraphQL").startswith("Applied GraphQL")


class TestSkillBullet:
    def test_appends_bullet_for_first_missing_required_skill(self, sample_document, sample_target):
        updated, action = _add_skill_bullet(sample_document, sample_target, BoosterConfig())

        bullets = updated.experience[0].bullets
        assert len(bullets) == len(sample_document.experience[0].bullets) + 1
        assert bullets[-1] == SKILL_BULLET_TEMPLATE.format(skill="Kubernetes")
        assert action == f'Added skill-aligned bullet: "{bullets[-1]}"'
        assert len(sample_document.experience[0].bullets) == 3

    def test_full_role_gets_no_bullet(self, sample_document, sample_target):
        doc = sample_document.model_copy(deep=True)
        doc.experience[0].bullets.extend(f"Shipped release {n} on schedule" for n in range(3))
        config = BoosterConfig()
        assert len(doc.experience[0].bullets) == config.max_bullets_per_role

        updated, action = _add_skill_bullet(doc, sample_target, config)

        assert action is None
        assert updated.experience[0].bullets == doc.experience[0].bullets

    def test_nothing_missing(self, sample_document, sample_target):
        target = sample_target.model_copy(update={"required_skills": ["Python"]})
        _, action = _add_skill_bullet(sample_document, target, BoosterConfig())
        assert action is None
