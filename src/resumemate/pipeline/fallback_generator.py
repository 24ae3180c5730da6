"""Deterministic generation source used for fallback and offline/mock operation.

Produces the same raw payload shape as the LLM source from the parsed
profiles alone: rewritten bullets, grouped skills, keyword checklist, gaps,
a cover letter, recruiter feedback and next actions. No network, no
randomness; identical input yields identical output.
"""

from __future__ import annotations

import datetime
import logging
import re

from resumemate.models.profile import CandidateProfile, TargetProfile
from resumemate.pipeline.rules import VAGUE_OPENERS

logger = logging.getLogger(__name__)

MAX_REWRITES = 20
MAX_CHECKLIST = 30
MAX_GAPS = 10
MAX_ACTIONS = 8
MIN_ROLE_BULLETS = 4

# Leading-verb upgrades, first match wins.
BULLET_OPENERS: tuple[tuple[re.Pattern, str], ...] = (
    (re.compile(r"^Responsible for\s+", re.IGNORECASE), "Owned "),
    (re.compile(r"^Helped\s+(?:to\s+)?", re.IGNORECASE), "Collaborated to "),
    (re.compile(r"^Assisted\s+(?:with\s+)?", re.IGNORECASE), "Supported "),
    (re.compile(r"^Worked on\s+", re.IGNORECASE), "Developed and delivered "),
    (re.compile(r"^Participated in\s+", re.IGNORECASE), "Contributed to "),
    (re.compile(r"^Involved in\s+", re.IGNORECASE), "Drove "),
    (re.compile(r"^Was part of\s+", re.IGNORECASE), "Collaborated across teams on "),
    (re.compile(r"^Created\s+", re.IGNORECASE), "Designed and implemented "),
    (re.compile(r"^Built\s+", re.IGNORECASE), "Architected and built "),
    (re.compile(r"^Made\s+", re.IGNORECASE), "Engineered "),
    (re.compile(r"^Used\s+", re.IGNORECASE), "Applied "),
)

SUPPLEMENTARY_BULLETS = (
    "Collaborated with product and design partners to deliver key initiatives on schedule",
    "Improved code quality through reviews, documentation and mentoring of teammates",
    "Contributed to architecture decisions on scalability and reliability trade-offs",
    "Planned sprint priorities with stakeholders to keep delivery aligned with goals",
)

SKILL_CATEGORIES: tuple[tuple[str, re.Pattern], ...] = (
    ("Languages", re.compile(r"^(javascript|typescript|python|java|c\+\+|c#|go|golang|rust|ruby|php|swift|kotlin|scala|r|sql)$", re.IGNORECASE)),
    ("Frontend", re.compile(r"^(react|angular|vue|svelte|next(\.js)?|nuxt|html|css|tailwind|sass|bootstrap)$", re.IGNORECASE)),
    ("Backend", re.compile(r"^(node(\.js)?|express|django|flask|fastapi|spring|rails|laravel|graphql|rest|grpc)$", re.IGNORECASE)),
    ("Cloud & DevOps", re.compile(r"^(aws|gcp|azure|docker|kubernetes|k8s|terraform|ci/cd|github actions|jenkins|linux|bash)$", re.IGNORECASE)),
    ("Databases", re.compile(r"^(postgresql|postgres|mysql|mongodb|redis|elasticsearch|dynamodb|cassandra|sqlite|nosql)$", re.IGNORECASE)),
)
DEFAULT_CATEGORY = "Tools & Methods"

_CAPITALIZED_TERM = re.compile(r"\b[A-Z][a-z]+(?:\.\w+)?|\b[A-Z]{2,}\b")
_YEAR = re.compile(r"\d{4}")


class DeterministicGenerationSource:
    """Always-available generation source with no external calls."""

    @property
    def available(self) -> bool:
        return True

    async def invoke(
        self,
        candidate: CandidateProfile,
        target: TargetProfile,
        resume_text: str = "",
        job_text: str = "",
        *,
        concise: bool = False,
    ) -> dict:
        return generate_suggestions(candidate, target)


def generate_suggestions(candidate: CandidateProfile, target: TargetProfile) -> dict:
    """Build the raw camelCase suggestions payload."""
    name = candidate.name or "The candidate"
    title = target.title or "the target role"
    company = target.company or "the company"

    summary = (
        f"{name}'s resume has a solid foundation for the {title} role at {company}. "
        "The tailored version rewrites bullets with stronger verbs, groups skills to mirror "
        "the job description, and surfaces the requirements the resume already supports. "
        "Focus areas: quantify impact, lead with the most relevant accomplishments, "
        "and confirm any requirement you have experience with but did not list."
    )
    return {
        "summary": summary,
        "tailoredResume": tailored_resume(candidate, target),
        "coverLetter": {"paragraphs": cover_letter(candidate, target)},
        "keywordChecklist": keyword_checklist(candidate, target),
        "recruiterFeedback": recruiter_feedback(candidate, target),
        "bulletRewrites": bullet_rewrites(candidate),
        "experienceGaps": experience_gaps(candidate, target),
        "nextActions": next_actions(candidate, target),
    }


# ── Bullets ──


def rewrite_bullet(bullet: str) -> str:
    improved = bullet.strip()
    for pattern, replacement in BULLET_OPENERS:
        if pattern.search(improved):
            improved = pattern.sub(replacement, improved, count=1)
            break
    if improved and improved[0].islower():
        improved = improved[0].upper() + improved[1:]
    return improved


def rewrite_notes(original: str, rewritten: str) -> str:
    notes = []
    if VAGUE_OPENERS.search(original.strip()) or rewritten.split()[:1] != original.split()[:1]:
        notes.append("Replaced the opening with a stronger action verb")
    if not re.search(r"\d", original):
        notes.append("Add a number here ([X] users, [X]% faster) to show scale")
    if not notes:
        notes.append("Tightened wording for a more direct read")
    return ". ".join(notes) + "."


def bullet_rewrites(candidate: CandidateProfile) -> list[dict]:
    rewrites = []
    for exp in candidate.experience:
        section = f"{exp.title or ''} at {exp.company or ''}".strip() if exp.title or exp.company else "Experience"
        for bullet in exp.bullets:
            rewritten = rewrite_bullet(bullet)
            if rewritten != bullet.strip() or not re.search(r"\d", bullet):
                rewrites.append(
                    {
                        "original": bullet,
                        "rewritten": rewritten,
                        "section": section,
                        "notes": rewrite_notes(bullet, rewritten),
                    }
                )
    return rewrites[:MAX_REWRITES]


# ── Resume ──


def estimate_years(candidate: CandidateProfile) -> int:
    if not candidate.experience:
        return 0
    current_year = datetime.date.today().year
    starts, ends = [], []
    for exp in candidate.experience:
        start = _YEAR.search(exp.start or "")
        end = _YEAR.search(exp.end or "")
        if start:
            starts.append(int(start.group(0)))
        if end:
            ends.append(int(end.group(0)))
        elif re.search(r"present|current", exp.end or "", re.IGNORECASE):
            ends.append(current_year)
    if not starts:
        return len(candidate.experience) * 2
    return max(1, max(ends or starts) - min(starts))


def skill_groups(candidate: CandidateProfile, target: TargetProfile) -> list[dict]:
    groups: dict[str, list[str]] = {category: [] for category, _ in SKILL_CATEGORIES}
    groups[DEFAULT_CATEGORY] = []

    seen: set[str] = set()
    # Only the candidate's own skills; JD-only terms are added later by the booster.
    for skill in candidate.skills:
        label = skill.strip()
        if not label or label.lower() in seen:
            continue
        seen.add(label.lower())
        category = next((c for c, pattern in SKILL_CATEGORIES if pattern.match(label)), DEFAULT_CATEGORY)
        groups[category].append(label)

    return [{"category": c, "items": items} for c, items in groups.items() if items]


def tailored_resume(candidate: CandidateProfile, target: TargetProfile) -> dict:
    headline = target.title or candidate.headline or "Professional"
    years = estimate_years(candidate)

    experience = []
    for exp in candidate.experience:
        bullets = [rewrite_bullet(b) for b in exp.bullets if b.strip()]
        for extra in SUPPLEMENTARY_BULLETS:
            if len(bullets) >= MIN_ROLE_BULLETS:
                break
            bullets.append(extra)
        period = f"{exp.start} – {exp.end or 'Present'}" if exp.start else ""
        experience.append(
            {"company": exp.company or "", "title": exp.title or "", "period": period, "bullets": bullets}
        )

    top_skills = ", ".join(candidate.skills[:5]) or "core tools of the field"
    focus = ", ".join(target.keywords[:3]) or "the team's priorities"
    experience_phrase = f"{years}+ years of experience" if years else "hands-on experience"
    summary = (
        f"{headline} with {experience_phrase} delivering production work and leading technical initiatives. "
        f"Skilled in {top_skills}. "
        f"Focused on {focus} as {target.title or 'a team member'} at {target.company or 'your organization'}."
    )

    return {
        "name": candidate.name or "Your Name",
        "headline": headline,
        "summary": summary,
        "skills": skill_groups(candidate, target),
        "experience": experience,
        "education": [
            {"school": e.school or "University", "degree": e.degree or "Degree", "year": e.end}
            for e in candidate.education
        ],
        "projects": [{"name": p.name or "Project", "bullets": list(p.bullets)} for p in candidate.projects],
        "certifications": [],
    }


# ── Cover letter ──


def cover_letter(candidate: CandidateProfile, target: TargetProfile) -> list[str]:
    name = candidate.name or "The candidate"
    title = target.title or "the open position"
    company = target.company or "your company"
    skills = ", ".join(candidate.skills[:5]) or "the core skills of the role"

    recent = candidate.experience[0] if candidate.experience else None
    if recent is not None:
        role = f"{recent.title or 'my current role'} at {recent.company or 'my current company'}"
        highlight = (recent.bullets[0] if recent.bullets else "delivered high-impact projects").rstrip(".")
        highlight = highlight[:1].lower() + highlight[1:]
        experience_paragraph = (
            f"As {role}, I {highlight}. That work built a solid foundation in shipping reliable "
            "solutions with partners across engineering, product and operations."
        )
    else:
        experience_paragraph = (
            "My recent work has focused on delivering reliable results and learning quickly "
            "alongside experienced teammates."
        )

    if target.responsibilities:
        focus = target.responsibilities[0].rstrip(".")
        motivation = (
            f"The focus on {focus[:1].lower() + focus[1:]} at {company} matches the work I most want to do next."
        )
    else:
        motivation = f"The chance to take on {company}'s technical challenges is what draws me to this role."

    return [
        "Dear Hiring Manager,",
        f"I am applying for the {title} position at {company}. My background in {skills} lines up closely with what your team is looking for.",
        experience_paragraph,
        f"{motivation} I would be glad to talk through how my experience fits your team's needs.",
        f"Best regards,\n{name}",
    ]


# ── Insights ──


def _candidate_text(candidate: CandidateProfile) -> str:
    parts = [*candidate.skills]
    for exp in candidate.experience:
        parts.extend([exp.title or "", *exp.bullets])
    return " ".join(parts).lower()


def _requirement_terms(requirement: str) -> list[str]:
    """Short requirements are terms themselves; longer ones yield their capitalized words."""
    if len(requirement.split()) <= 3:
        return [requirement.strip()] if requirement.strip() else []
    return _CAPITALIZED_TERM.findall(requirement)


def keyword_checklist(candidate: CandidateProfile, target: TargetProfile) -> list[dict]:
    text = _candidate_text(candidate)
    checklist: list[dict] = []
    seen: set[str] = set()

    def add(keyword: str, suggestion: str) -> None:
        found = keyword.lower() in text
        checklist.append(
            {
                "keyword": keyword,
                "found": found,
                "section": "Skills / Experience" if found else None,
                "suggestion": None if found else suggestion,
            }
        )
        seen.add(keyword.lower())

    for keyword in target.keywords:
        if keyword.strip() and keyword.lower() not in seen:
            add(keyword, f'Add "{keyword}" to your Skills section or an experience bullet')
    for requirement in [*target.required_skills, *target.preferred_skills]:
        terms = _requirement_terms(requirement)
        for term in terms:
            if term.lower() not in seen:
                add(term, f'Consider adding "{term}" to demonstrate this competency')
    return checklist[:MAX_CHECKLIST]


def experience_gaps(candidate: CandidateProfile, target: TargetProfile) -> list[dict]:
    text = _candidate_text(candidate)
    gaps = []

    def demonstrated(requirement: str) -> bool:
        terms = _requirement_terms(requirement) or [requirement]
        return any(t.lower() in text for t in terms)

    for requirement in target.required_skills[:8]:
        if not demonstrated(requirement):
            gaps.append(
                {
                    "gap": f'Requirement not demonstrated: "{requirement[:100]}"',
                    "suggestion": "If you have experience with this, add a specific bullet showing it. "
                    "If not, mention your plan to build it in the cover letter.",
                    "severity": "high",
                }
            )
    for requirement in target.preferred_skills[:5]:
        if not demonstrated(requirement):
            gaps.append(
                {
                    "gap": f'Nice-to-have not demonstrated: "{requirement[:100]}"',
                    "suggestion": "This is a differentiator. Include any related experience to stand out.",
                    "severity": "medium",
                }
            )
    return gaps[:MAX_GAPS]


def recruiter_feedback(candidate: CandidateProfile, target: TargetProfile) -> list[str]:
    years = estimate_years(candidate)
    title = target.title or "this role"
    bullets = [b for e in candidate.experience for b in e.bullets]
    with_metrics = [b for b in bullets if re.search(r"\d", b)]

    fit = "Strong" if years >= 5 else "Moderate" if years >= 3 else "Developing"
    lines = [
        f"Recruiter assessment for {title}",
        f"Overall fit: {fit} candidate with a relevant foundation",
        f"{years}+ years of experience showing career progression" if years else "Early-career profile with room to grow",
    ]
    if candidate.skills:
        variety = "Diverse" if len(candidate.skills) > 5 else "Focused"
        lines.append(f"{variety} skill set including {', '.join(candidate.skills[:3])}")
    lines.append(
        "Good use of metrics in experience bullets" if with_metrics else "Experience bullets show clear responsibilities"
    )
    lines.append("Adding scope indicators (team size, users, budget) would make impact easier to judge")
    if not candidate.summary:
        lines.append("Missing a professional summary section")
    return lines


def next_actions(candidate: CandidateProfile, target: TargetProfile) -> list[str]:
    actions = []
    if not candidate.summary:
        actions.append("Add a professional summary targeting the specific role and company")
    skills = {s.lower() for s in candidate.skills}
    missing = [k for k in target.keywords if k.lower() not in skills]
    if missing:
        actions.append(f"Add missing technical skills to your resume: {', '.join(missing[:5])}")
    actions.append("Quantify bullets with metrics (users, revenue, percentage improvements)")
    actions.append("Tailor your most recent role's bullets to mirror the job description language")
    if target.company:
        actions.append(f"Research {target.company}'s stack and culture to personalize your cover letter")
    actions.append("Proofread the final version and ask a peer to review it before submitting")
    return actions[:MAX_ACTIONS]
