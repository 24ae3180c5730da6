"""Data models for the resumemate pipeline."""

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
from resumemate.models.gateway import GatewayHealth, GatewayResult, Provenance
from resumemate.models.profile import (
    CandidateProfile,
    EducationRecord,
    ExperienceEntry,
    ProjectEntry,
    TargetProfile,
)
from resumemate.models.quality import IssueKind, QualityIssue
from resumemate.models.scoring import (
    Blocker,
    CategoryScores,
    ScoreBreakdown,
    ScoreLabel,
)

__all__ = [
    "Blocker",
    "BulletRewrite",
    "CandidateProfile",
    "CategoryScores",
    "EducationEntry",
    "EducationRecord",
    "ExperienceEntry",
    "ExperienceGap",
    "GatewayHealth",
    "GatewayResult",
    "IssueKind",
    "KeywordCheck",
    "ProjectBlock",
    "ProjectEntry",
    "Provenance",
    "QualityIssue",
    "RoleEntry",
    "ScoreBreakdown",
    "ScoreLabel",
    "SkillGroup",
    "TailoredDocument",
    "TargetProfile",
]
