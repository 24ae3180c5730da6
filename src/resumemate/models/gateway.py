"""Models returned by the Resilience Gateway."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel

from resumemate.models.document import TailoredDocument
from resumemate.models.quality import QualityIssue
from resumemate.models.scoring import ScoreBreakdown


class Provenance(str, Enum):
    LLM = "llm"
    FALLBACK = "fallback"


@dataclass
class GatewayResult:
    """Final document plus provenance metadata."""

    document: TailoredDocument
    provenance: Provenance
    score_before: ScoreBreakdown
    score_after: ScoreBreakdown
    reason: str | None = None
    issues: list[QualityIssue] = field(default_factory=list)
    boost_actions: list[str] = field(default_factory=list)
    elapsed_seconds: float = 0.0


class GatewayHealth(BaseModel):
    circuit_open: bool
    active_requests: int
    recent_failures: int
    opened_at: float | None = None  # epoch seconds
