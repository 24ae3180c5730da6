"""Tests for the quality gate repair pass."""

from resumemate.config import QualityConfig
from resumemate.models.document import RoleEntry, SkillGroup, TailoredDocument
from resumemate.models.quality import IssueKind
from resumemate.pipeline.bullet_dedupe import (
    dedupe_bullets,
    diversify_endings,
    ending_of,
    is_near_duplicate,
)
from resumemate.pipeline.quality_gate import (
    enforce_cover_letter,
    fix_dangling,
    remove_banned_phrases,
    repair,
    shorten_label,
)

SHORT = "Built REST APIs with Django and PostgreSQL serving partner teams"
LONG = "Built REST APIs with Django and PostgreSQL serving partner teams, 40% faster"


def _doc(bullets=None, cover_letter=None, skills=None) -> TailoredDocument:
    return TailoredDocument(
        summary="Backend engineer.",
        experience=[RoleEntry(company="Acme Corp", title="Engineer", period="2021 – Present", bullets=bullets or [])],
        cover_letter=cover_letter or [],
        skills=skills or [],
    )


class TestDedupe:
    def test_near_duplicate_by_jaccard(self):
        assert is_near_duplicate(SHORT, LONG)
        assert not is_near_duplicate(SHORT, "Mentored 4 engineers through code reviews")

    def test_keeps_stronger_bullet_in_first_slot(self):
        assert dedupe_bullets([SHORT, "Mentored 4 engineers", LONG]) == [LONG, "Mentored 4 engineers"]

    def test_case_and_punctuation_duplicates(self):
        assert dedupe_bullets(["Built APIs.", "built apis"]) == ["Built APIs."]

    def test_repair_reports_duplicates(self):
        fixed, issues = repair(_doc(bullets=[SHORT, "Mentored 4 engineers through code reviews", LONG]))
        assert fixed.experience[0].bullets == [LONG, "Mentored 4 engineers through code reviews"]
        assert any(i.kind is IssueKind.DUPLICATE and i.location == "experience[0].bullets" for i in issues)


class TestEndingDiversity:
    BULLETS = [
        "Migrated billing services to AWS and improved reliability for the team",
        "Rebuilt the deploy pipeline and improved reliability for the team",
    ]

    def test_ending_of(self):
        assert ending_of("Cut costs by 20% for the whole team.") == "20% for the whole team"

    def test_repeated_ending_rewritten(self):
        result = diversify_endings(self.BULLETS)
        assert result[0] == self.BULLETS[0]
        assert result[1] != self.BULLETS[1]
        assert ending_of(result[0]) != ending_of(result[1])

    def test_rewrite_is_deterministic(self):
        assert diversify_endings(self.BULLETS) == diversify_endings(list(self.BULLETS))

    def test_distinct_endings_untouched(self):
        bullets = ["Shipped the billing service", "Mentored 4 engineers"]
        assert diversify_endings(bullets) == bullets


class TestBannedPhrases:
    def test_phrase_removed(self):
        cleaned, removed = remove_banned_phrases("Led the migration in a fast-paced environment.")
        assert cleaned == "Led the migration."
        assert removed == ["in a fast-paced environment"]

    def test_case_insensitive(self):
        cleaned, removed = remove_banned_phrases("Shipped features, Leveraging Best Practices.")
        assert cleaned == "Shipped features."
        assert removed == ["leveraging best practices"]

    def test_phrase_only_text_kept(self):
        assert remove_banned_phrases("Various projects") == ("Various projects", [])

    def test_repair_covers_cover_letter(self):
        letter = ["Dear Team,", "I am eager to contribute to Initech.", "Best regards,\nJordan"]
        fixed, issues = repair(_doc(cover_letter=letter))
        assert "eager to contribute" not in " ".join(fixed.cover_letter)
        assert any(i.kind is IssueKind.BANNED_PHRASE for i in issues)


class TestDangling:
    def test_trailing_connector_removed(self):
        assert fix_dangling("Migrated services to Kubernetes, resulting in.") == "Migrated services to Kubernetes."
        assert fix_dangling("Improved uptime, leading to") == "Improved uptime."

    def test_complete_bullet_unchanged(self):
        assert fix_dangling("Built dashboards for finance") == "Built dashboards for finance"

    def test_repair_reports_dangling(self):
        fixed, issues = repair(_doc(bullets=["Automated nightly reports, which led to"]))
        assert fixed.experience[0].bullets == ["Automated nightly reports."]
        assert [i.kind for i in issues] == [IssueKind.DANGLING_BULLET]


class TestCoverLetter:
    def test_duplicate_greeting_removed(self):
        paragraphs, notes = enforce_cover_letter(
            ["Dear Hiring Manager,", "I am applying for the role.", "Dear Hiring Manager,", "Best regards,\nJordan"]
        )
        assert paragraphs == ["Dear Hiring Manager,", "I am applying for the role.", "Best regards,\nJordan"]
        assert notes == ["Removed duplicate greeting"]

    def test_greeting_moved_first(self):
        paragraphs, notes = enforce_cover_letter(["I am applying.", "Dear Team,", "Best regards,\nJordan"])
        assert paragraphs[0] == "Dear Team,"
        assert notes

    def test_body_merged_to_max(self):
        paragraphs, notes = enforce_cover_letter(["Dear Team,", "A.", "B.", "C.", "D.", "Best regards,\nJ"], 5)
        assert len(paragraphs) == 5
        assert paragraphs[3] == "C. D."
        assert paragraphs[-1] == "Best regards,\nJ"
        assert notes[0].startswith("Merged 2 body paragraphs")

    def test_empty_paragraphs_dropped(self):
        paragraphs, _ = enforce_cover_letter(["Dear Team,", "  ", "Body.", "Best regards"])
        assert paragraphs == ["Dear Team,", "Body.", "Best regards"]

    def test_reorder_noted_alongside_other_fixes(self):
        paragraphs, notes = enforce_cover_letter(["", "I am applying.", "Dear Team,", "Best regards,\nJordan"])
        assert paragraphs == ["Dear Team,", "I am applying.", "Best regards,\nJordan"]
        assert notes == ["Dropped 1 empty paragraph(s)", "Moved greeting to the start and signoff to the end"]

    def test_early_signoff_moved_last(self):
        paragraphs, notes = enforce_cover_letter(["Dear Team,", "Best regards", "Body."])
        assert paragraphs == ["Dear Team,", "Body.", "Best regards"]
        assert notes == ["Moved greeting to the start and signoff to the end"]

    def test_duplicate_signoff_is_not_a_reorder(self):
        _, notes = enforce_cover_letter(["Dear Team,", "Body.", "Best regards", "Regards"])
        assert notes == ["Removed duplicate signoff"]


class TestSkillLabels:
    def test_sentence_truncated(self):
        config = QualityConfig()
        assert shorten_label("Strong communication skills with cross-functional stakeholders", config) == (
            "Strong communication skills"
        )
        assert shorten_label(" Python ", config) == "Python"

    def test_repair_shortens_and_drops_empty_groups(self):
        skills = [
            SkillGroup(category="Core", items=["Python", "Designing resilient event-driven systems for payments"]),
            SkillGroup(category="Empty", items=[]),
        ]
        fixed, issues = repair(_doc(skills=skills))
        assert [g.category for g in fixed.skills] == ["Core"]
        assert fixed.skills[0].items == ["Python", "Designing resilient event-driven"]
        assert {i.location for i in issues} == {"skills.Core", "skills.Empty"}


class TestRepair:
    def test_does_not_mutate_input(self, sample_document):
        before = sample_document.model_dump()
        repair(sample_document.model_copy(update={"cover_letter": ["Dear A,", "Dear B,", "Body."]}))
        assert sample_document.model_dump() == before

    def test_idempotent(self, sample_document):
        messy = sample_document.model_copy(deep=True)
        messy.experience[0].bullets.append(messy.experience[0].bullets[0].upper())
        messy.cover_letter.insert(2, "Dear Hiring Manager,")
        once, _ = repair(messy)
        twice, issues = repair(once)
        assert twice.model_dump() == once.model_dump()
        assert issues == []

    def test_clean_document_unchanged(self, sample_document):
        fixed, issues = repair(sample_document)
        assert fixed.model_dump() == sample_document.model_dump()
        assert issues == []

    def test_factual_fields_preserved(self, sample_document):
        doc = sample_document.model_copy(deep=True)
        doc.experience[0].bullets.append("Owned on-call rotation, ensuring")
        fixed, _ = repair(doc)
        role = fixed.experience[0]
        assert (role.company, role.title, role.period) == ("Acme Corp", "Senior Backend Engineer", "2021 – Present")
        assert fixed.education == sample_document.education
