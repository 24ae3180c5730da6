"""Generation sources - produce raw structured suggestions for a candidate/target pair.

Two interchangeable implementations share the ``GenerationSource`` protocol:
the Claude-backed ``LLMGenerationSource`` here, and the deterministic
``DeterministicGenerationSource`` in ``fallback_generator``.
"""

from __future__ import annotations

import logging
import os
from typing import Protocol, runtime_checkable

import anthropic

from resumemate.clients.llm_client import LLMClient
from resumemate.config import LLMConfig
from resumemate.errors import (
    AuthError,
    DocumentValidationError,
    GenerationError,
    ServiceTimeoutError,
    TransientServiceError,
)
from resumemate.models.profile import CandidateProfile, TargetProfile

logger = logging.getLogger(__name__)

MAX_RESUME_CHARS = 8000
MAX_JOB_CHARS = 5000

SYSTEM_PROMPT = """\
You are an expert resume consultant and career coach. You analyze resumes against job descriptions and provide detailed, actionable feedback.

CRITICAL: You must respond with ONLY valid JSON matching the exact schema below. No markdown, no explanation, no code fences - ONLY the JSON object.
{retry_note}
Response JSON schema:
{{
  "summary": "string - executive summary of the analysis",
  "tailoredResume": {{
    "name": "string - candidate name",
    "headline": "string - professional headline/title",
    "summary": "string - professional summary paragraph",
    "skills": [{{"category": "string", "items": ["string"]}}],
    "experience": [{{"company": "string", "title": "string", "period": "string", "bullets": ["string"]}}],
    "education": [{{"school": "string", "degree": "string", "year": "string or omit"}}],
    "projects": [{{"name": "string", "bullets": ["string"]}}],
    "certifications": ["string"]
  }},
  "coverLetter": {{
    "paragraphs": ["string - each paragraph of the cover letter"]
  }},
  "keywordChecklist": [{{"keyword": "string", "found": boolean, "section": "string or null", "suggestion": "string or null"}}],
  "recruiterFeedback": ["string - each bullet point of recruiter feedback"],
  "bulletRewrites": [{{"original": "string", "rewritten": "string", "section": "string", "notes": "string"}}],
  "experienceGaps": [{{"gap": "string", "suggestion": "string", "severity": "high|medium|low"}}],
  "nextActions": ["string - actionable next step"]
}}

Rules:
- Do NOT invent metrics or achievements - use [X] placeholders for numbers the candidate should fill in
- Do NOT add skills the candidate does not have and the job does not ask for
- Do NOT include any content outside the JSON
- Keep suggestions specific and actionable
- Cover letter: one greeting paragraph, at most three body paragraphs, one signoff
- Bullet rewrites should use strong action verbs and quantify impact where possible
- Skills are short labels grouped by category (e.g. Languages, Frontend, Backend, Cloud & DevOps, Databases, Tools)
- Recruiter feedback should be an array of bullet strings, not markdown"""

CONCISE_NOTE = (
    "\nThis is a RETRY because your previous response did not match the schema. "
    "Be concise: shorter bullets, fewer rewrites. Respond with ONLY the JSON object, nothing else.\n"
)

USER_PROMPT = """\
Analyze this resume against the job description and provide a complete tailored package.

RESUME:
{resume_text}

JOB DESCRIPTION:
{job_text}

PARSED CANDIDATE PROFILE:
Name: {name}
Skills: {skills}
Experience: {experience}

PARSED JOB PROFILE:
Title: {title}
Company: {company}
Required: {required}
Preferred: {preferred}
Keywords: {keywords}

Respond with ONLY the JSON object."""


@runtime_checkable
class GenerationSource(Protocol):
    """Anything that can turn a candidate/target pair into raw suggestions."""

    @property
    def available(self) -> bool: ...

    async def invoke(
        self,
        candidate: CandidateProfile,
        target: TargetProfile,
        resume_text: str,
        job_text: str,
        *,
        concise: bool = False,
    ) -> dict: ...


def build_prompt(
    candidate: CandidateProfile,
    target: TargetProfile,
    resume_text: str,
    job_text: str,
    concise: bool = False,
) -> tuple[str, str]:
    """Return (system, user) prompts for one attempt."""
    system = SYSTEM_PROMPT.format(retry_note=CONCISE_NOTE if concise else "")
    user = USER_PROMPT.format(
        resume_text=resume_text[:MAX_RESUME_CHARS],
        job_text=job_text[:MAX_JOB_CHARS],
        name=candidate.name or "Unknown",
        skills=", ".join(candidate.skills),
        experience="; ".join(f"{e.title or ''} at {e.company or ''}" for e in candidate.experience),
        title=target.title or "Unknown",
        company=target.company or "Unknown",
        required="; ".join(target.required_skills),
        preferred="; ".join(target.preferred_skills),
        keywords=", ".join(target.keywords),
    )
    return system, user


class LLMGenerationSource:
    """Claude-backed generation source.

    Provider exceptions are mapped onto the generation error taxonomy so the
    gateway can decide retry and circuit accounting without knowing the SDK.
    """

    def __init__(
        self,
        llm: LLMClient | None,
        model: str = "claude-sonnet-4-5-20250929",
        max_tokens: int = 8000,
        enabled: bool = True,
        mock: bool = False,
    ):
        self.llm = llm
        self.model = model
        self.max_tokens = max_tokens
        self.enabled = enabled
        self.mock = mock

    @classmethod
    def from_env(cls, config: LLMConfig | None = None) -> LLMGenerationSource:
        """Build from ``ANTHROPIC_API_KEY`` / ``MOCK_LLM``; no client without a key."""
        config = config or LLMConfig()
        api_key = os.environ.get("ANTHROPIC_API_KEY")
        mock = os.environ.get("MOCK_LLM", "").lower() == "true"
        llm = LLMClient(api_key=api_key, timeout=config.timeout) if api_key and not mock else None
        return cls(llm, model=config.model, max_tokens=config.max_tokens, enabled=config.enabled, mock=mock)

    @property
    def configured(self) -> bool:
        return self.llm is not None

    @property
    def available(self) -> bool:
        return self.enabled and self.configured and not self.mock

    async def invoke(
        self,
        candidate: CandidateProfile,
        target: TargetProfile,
        resume_text: str,
        job_text: str,
        *,
        concise: bool = False,
    ) -> dict:
        if self.llm is None:
            raise AuthError("Generation service is not configured")

        system, prompt = build_prompt(candidate, target, resume_text, job_text, concise=concise)
        try:
            return await self.llm.generate_json(
                prompt=prompt,
                system=system,
                model=self.model,
                max_tokens=self.max_tokens,
            )
        except ValueError as e:
            raise DocumentValidationError("Response was not a JSON object", [str(e)[:200]]) from e
        except (anthropic.AuthenticationError, anthropic.PermissionDeniedError) as e:
            raise AuthError(f"Credential rejected ({e.status_code})") from e
        except anthropic.APITimeoutError as e:
            raise ServiceTimeoutError("Generation service timed out") from e
        except anthropic.APIConnectionError as e:
            raise TransientServiceError("Could not reach generation service") from e
        except (anthropic.RateLimitError, anthropic.InternalServerError) as e:
            raise TransientServiceError(f"Generation service error {e.status_code}") from e
        except anthropic.APIStatusError as e:
            if e.status_code >= 500:
                raise TransientServiceError(f"Generation service error {e.status_code}") from e
            raise GenerationError(f"Generation service rejected the request ({e.status_code})") from e
