"""Pydantic models for the raw structured suggestions returned by a generation source.

The payload shape is owned by the external service (camelCase keys, loosely
typed values). Coercion of common deviations happens in ``mode="before"``
validators here; anything still malformed fails validation.
"""

from __future__ import annotations

import re
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from resumemate.models.document import (
    BulletRewrite,
    EducationEntry,
    ExperienceGap,
    KeywordCheck,
    ProjectBlock,
    RoleEntry,
    SkillGroup,
    TailoredDocument,
)


def _as_lines(value: Any) -> Any:
    if isinstance(value, str):
        return [line.strip(" -•*\t") for line in value.splitlines() if line.strip(" -•*\t")]
    return value


def _as_paragraphs(value: Any) -> Any:
    if isinstance(value, str):
        return [p.strip() for p in re.split(r"\n\s*\n", value) if p.strip()]
    return value


class RawModel(BaseModel):
    model_config = {"populate_by_name": True, "extra": "ignore"}


class RawSkillGroup(RawModel):
    category: str
    items: list[str]

    @field_validator("items", mode="before")
    @classmethod
    def _split_items(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [item.strip() for item in re.split(r"[,;\n]", value) if item.strip()]
        return value


class RawRole(RawModel):
    company: str
    title: str
    period: str = ""
    bullets: list[str] = Field(default_factory=list)

    @field_validator("period", mode="before")
    @classmethod
    def _period_default(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("bullets", mode="before")
    @classmethod
    def _split_bullets(cls, value: Any) -> Any:
        return _as_lines(value)


class RawEducation(RawModel):
    school: str
    degree: str
    year: str | None = None

    @field_validator("year", mode="before")
    @classmethod
    def _year_as_text(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value


class RawProject(RawModel):
    name: str
    bullets: list[str] = Field(default_factory=list)

    @field_validator("bullets", mode="before")
    @classmethod
    def _split_bullets(cls, value: Any) -> Any:
        return _as_lines(value)


class RawTailoredResume(RawModel):
    name: str = ""
    headline: str = ""
    summary: str
    skills: list[RawSkillGroup]
    experience: list[RawRole]
    education: list[RawEducation] = Field(default_factory=list)
    projects: list[RawProject] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)

    @field_validator("name", "headline", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("skills", mode="before")
    @classmethod
    def _skills_mapping(cls, value: Any) -> Any:
        # {"Languages": ["Python", ...]} -> [{"category": "Languages", "items": [...]}]
        if isinstance(value, dict):
            return [{"category": k, "items": v} for k, v in value.items()]
        return value

    @field_validator("projects", "certifications", "education", mode="before")
    @classmethod
    def _optional_lists(cls, value: Any) -> Any:
        return [] if value is None else value


class RawCoverLetter(RawModel):
    paragraphs: list[str]

    @field_validator("paragraphs", mode="before")
    @classmethod
    def _split(cls, value: Any) -> Any:
        return _as_paragraphs(value)


class RawKeywordCheck(RawModel):
    keyword: str
    found: bool
    section: str | None = None
    suggestion: str | None = None


class RawGap(RawModel):
    gap: str
    suggestion: str = ""
    severity: Literal["high", "medium", "low"] = "medium"

    @field_validator("severity", mode="before")
    @classmethod
    def _lower(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value


class RawBulletRewrite(RawModel):
    original: str
    rewritten: str
    section: str = ""
    notes: str = ""


class RawSuggestions(RawModel):
    """Top-level payload: {"summary", "tailoredResume", "coverLetter", ...}."""

    summary: str = ""
    tailored_resume: RawTailoredResume = Field(alias="tailoredResume")
    cover_letter: RawCoverLetter = Field(alias="coverLetter")
    keyword_checklist: list[RawKeywordCheck] = Field(default_factory=list, alias="keywordChecklist")
    recruiter_feedback: list[str] = Field(default_factory=list, alias="recruiterFeedback")
    bullet_rewrites: list[RawBulletRewrite] = Field(default_factory=list, alias="bulletRewrites")
    experience_gaps: list[RawGap] = Field(default_factory=list, alias="experienceGaps")
    next_actions: list[str] = Field(default_factory=list, alias="nextActions")

    @field_validator("cover_letter", mode="before")
    @classmethod
    def _letter_text(cls, value: Any) -> Any:
        if isinstance(value, (str, list)):
            return {"paragraphs": value}
        return value

    @field_validator("recruiter_feedback", "next_actions", mode="before")
    @classmethod
    def _lines(cls, value: Any) -> Any:
        return [] if value is None else _as_lines(value)

    @field_validator("summary", mode="before")
    @classmethod
    def _summary_text(cls, value: Any) -> Any:
        return "" if value is None else value

    def to_document(self) -> TailoredDocument:
        resume = self.tailored_resume
        return TailoredDocument(
            name=resume.name,
            headline=resume.headline,
            summary=resume.summary,
            skills=[SkillGroup(category=g.category, items=list(g.items)) for g in resume.skills],
            experience=[
                RoleEntry(company=r.company, title=r.title, period=r.period, bullets=list(r.bullets))
                for r in resume.experience
            ],
            education=[
                EducationEntry(school=e.school, degree=e.degree, year=e.year) for e in resume.education
            ],
            projects=[ProjectBlock(name=p.name, bullets=list(p.bullets)) for p in resume.projects],
            certifications=list(resume.certifications),
            cover_letter=list(self.cover_letter.paragraphs),
            overview=self.summary,
            keyword_checklist=[KeywordCheck(**k.model_dump()) for k in self.keyword_checklist],
            experience_gaps=[ExperienceGap(**g.model_dump()) for g in self.experience_gaps],
            recruiter_feedback=list(self.recruiter_feedback),
            next_actions=list(self.next_actions),
            bullet_rewrites=[BulletRewrite(**b.model_dump()) for b in self.bullet_rewrites],
        )
