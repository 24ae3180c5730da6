"""Pydantic models for the tailored document produced by the gateway."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class SkillGroup(BaseModel):
    category: str
    items: list[str] = Field(default_factory=list)


class RoleEntry(BaseModel):
    company: str
    title: str
    period: str = ""
    bullets: list[str] = Field(default_factory=list)


class EducationEntry(BaseModel):
    school: str
    degree: str
    year: str | None = None


class ProjectBlock(BaseModel):
    name: str
    bullets: list[str] = Field(default_factory=list)


class KeywordCheck(BaseModel):
    keyword: str
    found: bool
    section: str | None = None
    suggestion: str | None = None


class ExperienceGap(BaseModel):
    gap: str
    suggestion: str = ""
    severity: Literal["high", "medium", "low"] = "medium"


class BulletRewrite(BaseModel):
    original: str
    rewritten: str
    section: str = ""
    notes: str = ""


class TailoredDocument(BaseModel):
    """Tailored resume, cover letter and the narrative insights around them.

    Factual fields (company, title, period, school, degree) are never
    rewritten by the repair stages; only bullets, summaries, skill labels,
    cover-letter paragraphs and insight text are.
    """

    name: str = ""
    headline: str = ""
    summary: str = ""
    skills: list[SkillGroup] = Field(default_factory=list)
    experience: list[RoleEntry] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)
    projects: list[ProjectBlock] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)
    cover_letter: list[str] = Field(default_factory=list)

    # Narrative insights
    overview: str = ""
    keyword_checklist: list[KeywordCheck] = Field(default_factory=list)
    experience_gaps: list[ExperienceGap] = Field(default_factory=list)
    recruiter_feedback: list[str] = Field(default_factory=list)
    next_actions: list[str] = Field(default_factory=list)
    bullet_rewrites: list[BulletRewrite] = Field(default_factory=list)

    def bullet_count(self) -> int:
        return sum(len(role.bullets) for role in self.experience)

    def skill_items(self) -> list[str]:
        return [item for group in self.skills for item in group.items]
