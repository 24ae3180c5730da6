"""Pydantic models for Document Scorer output."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

# Fixed public weights; must sum to 1.0.
CATEGORY_WEIGHTS: dict[str, float] = {
    "hard_skills": 0.25,
    "soft_skills": 0.15,
    "measurable_results": 0.25,
    "keyword_alignment": 0.20,
    "formatting": 0.15,
}

STRONG_LABEL_CUTOFF = 75
MODERATE_LABEL_CUTOFF = 50
BLOCKER_CUTOFF = 80


class ScoreLabel(str, Enum):
    STRONG = "Strong"
    MODERATE = "Moderate"
    WEAK = "Weak"

    @classmethod
    def from_score(cls, score: int) -> ScoreLabel:
        if score >= STRONG_LABEL_CUTOFF:
            return cls.STRONG
        if score >= MODERATE_LABEL_CUTOFF:
            return cls.MODERATE
        return cls.WEAK


class CategoryScores(BaseModel):
    hard_skills: int  # 0-100, weight 25%
    soft_skills: int  # 0-100, weight 15%
    measurable_results: int  # 0-100, weight 25%
    keyword_alignment: int  # 0-100, weight 20%
    formatting: int  # 0-100, weight 15%


class BeforeAfter(BaseModel):
    before: str
    after: str


class Blocker(BaseModel):
    category: str
    title: str
    why: str
    how: str
    before_after: BeforeAfter | None = None


class KeywordCluster(BaseModel):
    cluster: str  # "Required Skills" | "Preferred Skills" | "Additional Keywords"
    keywords: list[str]


class ScoreDiagnostics(BaseModel):
    missing_metrics: list[str] = Field(default_factory=list)
    weak_verbs: list[str] = Field(default_factory=list)
    missing_keyword_clusters: list[KeywordCluster] = Field(default_factory=list)
    matched_keywords: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class ScoreBreakdown(BaseModel):
    score: int  # 0-100 aggregate
    label: ScoreLabel
    categories: CategoryScores
    blockers: list[Blocker] = Field(default_factory=list)
    diagnostics: ScoreDiagnostics = Field(default_factory=ScoreDiagnostics)


class RelevanceCheck(BaseModel):
    relevant: bool
    score: int
    reason: str | None = None
