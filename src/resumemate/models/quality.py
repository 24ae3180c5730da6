"""Pydantic models for Quality Gate and Consistency Validator findings."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class IssueKind(str, Enum):
    DUPLICATE = "duplicate"
    BANNED_PHRASE = "banned-phrase"
    DANGLING_BULLET = "dangling-bullet"
    STRUCTURAL = "structural"
    CONTRADICTION = "contradiction"


class QualityIssue(BaseModel):
    kind: IssueKind
    location: str  # e.g. "experience[0].bullets", "cover_letter", "skills.Languages"
    detail: str
    auto_fixed: bool = True

    model_config = {"frozen": True}
