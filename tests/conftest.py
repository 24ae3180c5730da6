"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from resumemate.clients.llm_client import LLMClient, LLMResponse
from resumemate.config import AppConfig, GatewayConfig
from resumemate.models.document import (
    EducationEntry,
    ExperienceGap,
    KeywordCheck,
    RoleEntry,
    SkillGroup,
    TailoredDocument,
)
from resumemate.models.profile import (
    CandidateProfile,
    EducationRecord,
    ExperienceEntry,
    TargetProfile,
)


class FakeClock:
    """Manually advanced clock for circuit timing."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sample_candidate() -> CandidateProfile:
    return CandidateProfile(
        name="Jordan Lee",
        headline="Backend Engineer",
        summary="Backend engineer building APIs and data services.",
        email="jordan@example.com",
        skills=["Python", "Django", "PostgreSQL", "Docker", "AWS"],
        experience=[
            ExperienceEntry(
                company="Acme Corp",
                title="Senior Backend Engineer",
                start="2021",
                end="Present",
                bullets=[
                    "Led migration of billing services to Python 3, cutting deploy time by 40%",
                    "Built REST APIs serving 2M requests per day with Django and PostgreSQL",
                    "Mentored 4 engineers through code reviews and pairing sessions",
                ],
            ),
            ExperienceEntry(
                company="Widget Labs",
                title="Software Engineer",
                start="2018",
                end="2021",
                bullets=[
                    "Responsible for maintaining internal dashboards",
                    "Automated nightly reports with Python scripts",
                ],
            ),
        ],
        education=[EducationRecord(school="State University", degree="BSc Computer Science", end="2018")],
    )


@pytest.fixture
def sample_target() -> TargetProfile:
    return TargetProfile(
        title="Platform Engineer",
        company="Initech",
        required_skills=["Python", "Kubernetes", "GraphQL"],
        preferred_skills=["Terraform"],
        responsibilities=["Operate the container platform used by product teams"],
        keywords=["Python", "Kubernetes", "GraphQL", "CI/CD"],
        seniority_level="senior",
    )


@pytest.fixture
def sample_document() -> TailoredDocument:
    return TailoredDocument(
        name="Jordan Lee",
        headline="Platform Engineer",
        summary="Backend engineer building APIs and data services.",
        skills=[
            SkillGroup(category="Core Skills", items=["Python", "Django", "PostgreSQL"]),
            SkillGroup(category="Cloud & DevOps", items=["Docker", "AWS"]),
        ],
        experience=[
            RoleEntry(
                company="Acme Corp",
                title="Senior Backend Engineer",
                period="2021 – Present",
                bullets=[
                    "Led migration of billing services to Python 3, cutting deploy time by 40%",
                    "Built REST APIs serving 2M requests per day with Django and PostgreSQL",
                    "Mentored 4 engineers through code reviews and pairing sessions",
                ],
            ),
        ],
        education=[EducationEntry(school="State University", degree="BSc Computer Science", year="2018")],
        cover_letter=[
            "Dear Hiring Manager,",
            "I am applying for the Platform Engineer role at Initech.",
            "At Acme Corp I led the migration of our billing services.",
            "Best regards,\nJordan Lee",
        ],
        overview="Solid backend foundation for the platform role.",
        keyword_checklist=[
            KeywordCheck(keyword="Python", found=True, section="Skills"),
            KeywordCheck(keyword="Kubernetes", found=False, suggestion="Add Kubernetes"),
            KeywordCheck(keyword="GraphQL", found=False, suggestion="Add GraphQL"),
        ],
        experience_gaps=[
            ExperienceGap(gap='Requirement not demonstrated: "Kubernetes"', suggestion="Add a bullet", severity="high"),
        ],
        recruiter_feedback=["Strong Python background", "No Kubernetes experience shown"],
        next_actions=["Add missing technical skills to your resume: Kubernetes, GraphQL"],
    )


@pytest.fixture
def raw_suggestions() -> dict:
    """A well-formed payload in the generation source's camelCase shape."""
    return {
        "summary": "Good fit for the platform role.",
        "tailoredResume": {
            "name": "Jordan Lee",
            "headline": "Platform Engineer",
            "summary": "Backend engineer moving into platform work.",
            "skills": [{"category": "Core Skills", "items": ["Python", "Docker", "AWS"]}],
            "experience": [
                {
                    "company": "Acme Corp",
                    "title": "Senior Backend Engineer",
                    "period": "2021 – Present",
                    "bullets": [
                        "Led migration of billing services to Python 3, cutting deploy time by 40%",
                        "Mentored 4 engineers through code reviews and pairing sessions",
                    ],
                }
            ],
            "education": [{"school": "State University", "degree": "BSc Computer Science", "year": 2018}],
        },
        "coverLetter": {
            "paragraphs": [
                "Dear Hiring Manager,",
                "I am applying for the Platform Engineer role.",
                "Best regards,\nJordan Lee",
            ]
        },
        "keywordChecklist": [{"keyword": "Python", "found": True, "section": "Skills", "suggestion": None}],
        "recruiterFeedback": ["Clear progression"],
        "bulletRewrites": [],
        "experienceGaps": [{"gap": "Kubernetes not shown", "suggestion": "Add it if true", "severity": "HIGH"}],
        "nextActions": ["Quantify more bullets"],
    }


@pytest.fixture
def fast_config() -> AppConfig:
    """Gateway config with no retry backoff so tests do not sleep."""
    return AppConfig(gateway=GatewayConfig(retry_backoff=0.0, timeout_seconds=1.0))


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Mock LLMClient with configurable responses."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(
        return_value=LLMResponse(text="mock response", input_tokens=100, output_tokens=50)
    )
    client.generate_json = AsyncMock(return_value={})
    return client
