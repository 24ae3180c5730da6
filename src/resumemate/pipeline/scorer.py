"""Document Scorer - weighted five-category match score against a target role.

Pure and deterministic: identical (candidate, target) input always yields an
identical ``ScoreBreakdown``. Category weights live in
``resumemate.models.scoring.CATEGORY_WEIGHTS``:

    hard_skills 25% | soft_skills 15% | measurable_results 25%
    keyword_alignment 20% | formatting 15%

Labels: aggregate >= 75 "Strong", >= 50 "Moderate", else "Weak".
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from resumemate.models.document import TailoredDocument
from resumemate.models.profile import (
    CandidateProfile,
    EducationRecord,
    ExperienceEntry,
    ProjectEntry,
    TargetProfile,
)
from resumemate.models.scoring import (
    BLOCKER_CUTOFF,
    CATEGORY_WEIGHTS,
    BeforeAfter,
    Blocker,
    CategoryScores,
    KeywordCluster,
    RelevanceCheck,
    ScoreBreakdown,
    ScoreDiagnostics,
    ScoreLabel,
)
from resumemate.pipeline.rules import (
    FORMATTING_FLOOR,
    FORMATTING_PENALTIES,
    MAX_BULLET_CHARS,
    MAX_SKILL_COUNT,
    METRIC_RULES,
    MIN_BULLET_CHARS,
    OPENER_UPGRADES,
    SHORT_REQUIREMENT_CHARS,
    SHORT_REQUIREMENT_WORDS,
    SOFT_SKILL_VERBS,
    TERM_CATALOGUE,
    VAGUE_OPENERS,
)
from resumemate.utils.text_match import same_term, term_present

SOFT_SKILL_SATURATION = 0.3  # 30%+ of bullets with a leadership verb maps to 100
RELEVANCE_MINIMUM = 10

_PERIOD_SPLIT = re.compile(r"\s*[–\-—]\s*")


# ── Public API ──


def score_candidate(candidate: CandidateProfile, target: TargetProfile) -> ScoreBreakdown:
    """Score a candidate profile against the target role."""
    bullets = all_bullets(candidate)
    text = candidate_text(candidate)

    categories = CategoryScores(
        hard_skills=_clamp(_round(hard_skill_score(candidate, target, text))),
        soft_skills=_clamp(_round(soft_skill_score(bullets))),
        measurable_results=_clamp(_round(impact_score(bullets))),
        keyword_alignment=_clamp(_round(keyword_alignment_score(candidate, target, text))),
        formatting=_clamp(_round(formatting_score(candidate, bullets))),
    )
    score = aggregate(categories)

    return ScoreBreakdown(
        score=score,
        label=ScoreLabel.from_score(score),
        categories=categories,
        blockers=build_blockers(categories, candidate, target, bullets, text),
        diagnostics=build_diagnostics(candidate, target, bullets, text),
    )


def score_document(document: TailoredDocument, target: TargetProfile) -> ScoreBreakdown:
    """Re-score a tailored document by viewing it as a candidate profile."""
    return score_candidate(document_to_candidate(document), target)


def aggregate(categories: CategoryScores) -> int:
    values = categories.model_dump()
    total = sum(values[name] * weight for name, weight in CATEGORY_WEIGHTS.items())
    return _clamp(_round(total))


def check_relevance(candidate: CandidateProfile, target: TargetProfile) -> RelevanceCheck:
    """Fast gate: is there enough overlap to tailor without fabricating?"""
    text = candidate_text(candidate)
    relevance = _round(
        hard_skill_score(candidate, target, text) * 0.6
        + keyword_alignment_score(candidate, target, text) * 0.4
    )
    if relevance < RELEVANCE_MINIMUM:
        return RelevanceCheck(
            relevant=False,
            score=relevance,
            reason=(
                "The resume shows too little overlap with this role's skills and keywords "
                "to tailor it without inventing experience."
            ),
        )
    return RelevanceCheck(relevant=True, score=relevance)


def document_to_candidate(document: TailoredDocument) -> CandidateProfile:
    """Flatten a tailored document back into a candidate profile for re-scoring."""
    experience = []
    for role in document.experience:
        parts = _PERIOD_SPLIT.split(role.period, maxsplit=1) if role.period else []
        experience.append(
            ExperienceEntry(
                company=role.company,
                title=role.title,
                start=parts[0] if parts else None,
                end=parts[1] if len(parts) > 1 else None,
                bullets=list(role.bullets),
            )
        )
    return CandidateProfile(
        name=document.name or None,
        headline=document.headline or None,
        summary=document.summary or None,
        skills=document.skill_items(),
        experience=experience,
        education=[EducationRecord(school=e.school, degree=e.degree, end=e.year) for e in document.education],
        projects=[ProjectEntry(name=p.name, bullets=list(p.bullets)) for p in document.projects],
    )


# ── Term extraction ──


def extract_terms(requirements: Iterable[str]) -> list[str]:
    """Pull atomic skill terms out of requirement sentences, lowercased, in order."""
    terms: list[str] = []
    for requirement in requirements:
        found = [
            match.group(0).lower()
            for rule in TERM_CATALOGUE
            for match in rule.pattern.finditer(requirement)
        ]
        if not found and _is_short_requirement(requirement):
            found = [requirement.strip().lower()]
        for term in found:
            if term not in terms:
                terms.append(term)
    return terms


def skill_labels_for(requirements: Iterable[str]) -> list[str]:
    """Labels suitable for a skills section: short entries as-is, long ones as their terms."""
    labels: list[str] = []
    for requirement in requirements:
        if _is_short_requirement(requirement):
            found = [requirement.strip()]
        else:
            found = [m.group(0) for rule in TERM_CATALOGUE for m in rule.pattern.finditer(requirement)]
        for label in found:
            if not any(same_term(label, existing) for existing in labels):
                labels.append(label)
    return labels


def target_terms(target: TargetProfile) -> list[str]:
    """All distinct JD terms (required, preferred, keywords), lowercased."""
    terms: list[str] = []
    for term in [*target.required_skills, *target.preferred_skills, *target.keywords]:
        lower = term.strip().lower()
        if lower and lower not in terms:
            terms.append(lower)
    return terms


def _is_short_requirement(requirement: str) -> bool:
    stripped = requirement.strip()
    return bool(stripped) and (
        len(stripped.split()) <= SHORT_REQUIREMENT_WORDS and len(stripped) <= SHORT_REQUIREMENT_CHARS
    )


# ── Category scorers ──


def hard_skill_score(candidate: CandidateProfile, target: TargetProfile, text: str) -> float:
    required = extract_terms(target.required_skills)
    keywords = extract_terms(target.keywords)
    preferred = extract_terms(target.preferred_skills)

    weights: dict[str, int] = {}
    for term in required:
        weights.setdefault(term, 2)
    for term in [*preferred, *keywords]:
        weights.setdefault(term, 1)

    if not weights:
        return 50.0

    skills = [s.lower() for s in candidate.skills]
    total = sum(weights.values())
    matched = sum(w for term, w in weights.items() if _has_skill(term, skills, text))
    return matched / total * 100


def soft_skill_score(bullets: list[str]) -> float:
    if not bullets:
        return 30.0
    density = sum(1 for b in bullets if SOFT_SKILL_VERBS.search(b)) / len(bullets)
    if density >= SOFT_SKILL_SATURATION:
        return 100.0
    return density / SOFT_SKILL_SATURATION * 100


def impact_score(bullets: list[str]) -> float:
    if not bullets:
        return 20.0
    return sum(1 for b in bullets if has_metric(b)) / len(bullets) * 100


def keyword_alignment_score(candidate: CandidateProfile, target: TargetProfile, text: str) -> float:
    terms = target_terms(target)
    if not terms:
        return 50.0

    skills = [s.lower() for s in candidate.skills]
    matched = 0
    placed = 0
    for term in terms:
        if term_present(text, term):
            matched += 1
            if any(same_term(skill, term) for skill in skills):
                placed += 1

    coverage = matched / len(terms) * 80
    placement = placed / len(terms) * 20
    return min(100.0, coverage + placement)


def formatting_score(candidate: CandidateProfile, bullets: list[str]) -> float:
    counts = {
        "long_bullet": sum(1 for b in bullets if len(b) > MAX_BULLET_CHARS),
        "vague_opener": sum(1 for b in bullets if VAGUE_OPENERS.search(b.strip())),
        "short_bullet": sum(1 for b in bullets if 0 < len(b) < MIN_BULLET_CHARS),
        "missing_summary": 0 if (candidate.summary or "").strip() else 1,
        "missing_education": 0 if candidate.education else 1,
        "skill_overload": 1 if len(candidate.skills) > MAX_SKILL_COUNT else 0,
    }
    score = 100
    for name, count in counts.items():
        rule = FORMATTING_PENALTIES[name]
        score -= min(rule.cap, count * rule.per_item)
    return max(FORMATTING_FLOOR, score)


def has_metric(bullet: str) -> bool:
    return any(rule.pattern.search(bullet) for rule in METRIC_RULES)


# ── Blockers ──


def build_blockers(
    categories: CategoryScores,
    candidate: CandidateProfile,
    target: TargetProfile,
    bullets: list[str],
    text: str,
) -> list[Blocker]:
    """Explain the three weakest categories scoring below the strong cutoff, worst first."""
    ranked = sorted(categories.model_dump().items(), key=lambda item: item[1])
    blockers = []
    for category, score in ranked[:3]:
        if score >= BLOCKER_CUTOFF:
            continue
        blockers.append(_BLOCKER_BUILDERS[category](candidate, target, bullets, text))
    return blockers


def _hard_skills_blocker(candidate, target, bullets, text) -> Blocker:
    skills = [s.lower() for s in candidate.skills]
    missing = [t for t in extract_terms(target.required_skills) if not _has_skill(t, skills, text)][:3]
    named = ", ".join(missing) if missing else "several key skills"
    return Blocker(
        category="hard_skills",
        title="Opportunity to strengthen hard skills",
        why=f"Could further emphasize: {named}. These are highlighted in the job description.",
        how="Add these skills to your Skills section and weave them into experience bullets where you've used them.",
    )


def _soft_skills_blocker(candidate, target, bullets, text) -> Blocker:
    soft = sum(1 for b in bullets if SOFT_SKILL_VERBS.search(b))
    return Blocker(
        category="soft_skills",
        title="Could highlight more soft skills",
        why=f"{soft} of {len(bullets)} bullets show leadership, communication, or teamwork.",
        how=(
            "Consider adding bullets about mentoring, leading meetings, cross-team collaboration, "
            "stakeholder communication, or conflict resolution."
        ),
    )


def _impact_blocker(candidate, target, bullets, text) -> Blocker:
    with_metrics = [b for b in bullets if has_metric(b)]
    without = [b for b in bullets if not has_metric(b)]
    before_after = None
    if without:
        sample = without[0]
        before_after = BeforeAfter(
            before=sample,
            after=f"{sample.rstrip('.')}, reducing turnaround time by [X]% and improving team throughput",
        )
    return Blocker(
        category="measurable_results",
        title="Opportunity to add measurable results",
        why=f"{len(with_metrics)} of {len(bullets)} bullets include metrics.",
        how="Add %, $, time saved, team size, or user count to more bullets. Even estimates help show impact.",
        before_after=before_after,
    )


def _keyword_blocker(candidate, target, bullets, text) -> Blocker:
    missing = [t for t in target_terms(target) if not term_present(text, t)]
    return Blocker(
        category="keyword_alignment",
        title="Could strengthen keyword alignment",
        why=(
            f"{len(missing)} job description keywords could be better represented. "
            "ATS systems and recruiters scan for exact matches."
        ),
        how="Mirror the exact phrases from the job description in your skills section and experience bullets.",
    )


def _formatting_blocker(candidate, target, bullets, text) -> Blocker:
    issues = []
    long_bullets = [b for b in bullets if len(b) > MAX_BULLET_CHARS]
    vague = [b for b in bullets if VAGUE_OPENERS.search(b.strip())]
    if long_bullets:
        issues.append(f"{len(long_bullets)} bullets over {MAX_BULLET_CHARS} chars")
    if vague:
        issues.append(f"{len(vague)} vague verb openings")
    if not (candidate.summary or "").strip():
        issues.append("missing professional summary")
    if not candidate.education:
        issues.append("no education section")
    before_after = None
    if vague:
        before_after = BeforeAfter(before=vague[0], after=upgrade_opener(vague[0]))
    return Blocker(
        category="formatting",
        title="Optional formatting enhancements",
        why=f"Areas to refine: {', '.join(issues) if issues else 'a few formatting details'}.",
        how=(
            f"Keep bullets under {MAX_BULLET_CHARS} characters, start with strong verbs, "
            "add a professional summary, and list education."
        ),
        before_after=before_after,
    )


_BLOCKER_BUILDERS = {
    "hard_skills": _hard_skills_blocker,
    "soft_skills": _soft_skills_blocker,
    "measurable_results": _impact_blocker,
    "keyword_alignment": _keyword_blocker,
    "formatting": _formatting_blocker,
}


def upgrade_opener(bullet: str) -> str:
    for pattern, replacement in OPENER_UPGRADES:
        if pattern.search(bullet):
            return pattern.sub(replacement, bullet, count=1)
    return bullet


# ── Diagnostics ──


def build_diagnostics(
    candidate: CandidateProfile,
    target: TargetProfile,
    bullets: list[str],
    text: str,
) -> ScoreDiagnostics:
    missing_metrics = [b for b in bullets if not has_metric(b) and len(b) > 20][:5]

    weak_verbs: list[str] = []
    for bullet in bullets:
        match = VAGUE_OPENERS.search(bullet.strip())
        if match and match.group(0).lower() not in weak_verbs:
            weak_verbs.append(match.group(0).lower())

    required = {s.strip().lower() for s in target.required_skills}
    preferred = {s.strip().lower() for s in target.preferred_skills}
    clusters: dict[str, list[str]] = {"Required Skills": [], "Preferred Skills": [], "Additional Keywords": []}
    seen: set[str] = set()
    for keyword in [*target.required_skills, *target.preferred_skills, *target.keywords]:
        lower = keyword.strip().lower()
        if not lower or lower in seen or term_present(text, lower):
            continue
        seen.add(lower)
        if lower in required:
            clusters["Required Skills"].append(keyword)
        elif lower in preferred:
            clusters["Preferred Skills"].append(keyword)
        else:
            clusters["Additional Keywords"].append(keyword)

    terms = target_terms(target)
    return ScoreDiagnostics(
        missing_metrics=missing_metrics,
        weak_verbs=weak_verbs,
        missing_keyword_clusters=[
            KeywordCluster(cluster=name, keywords=kws) for name, kws in clusters.items() if kws
        ],
        matched_keywords=[t for t in terms if term_present(text, t)],
        missing_keywords=[t for t in terms if not term_present(text, t)],
        warnings=compat_warnings(candidate),
    )


def compat_warnings(candidate: CandidateProfile) -> list[str]:
    warnings = []
    if not (candidate.summary or "").strip():
        warnings.append("Missing professional summary; reviewers read the top of the resume first")
    if len(candidate.skills) < 3:
        warnings.append("Very few skills detected; make sure the Skills section is clearly formatted")
    if any(len(b) > 200 for e in candidate.experience for b in e.bullets):
        warnings.append("Some bullets exceed 200 characters; keep bullets concise for readability")
    if not candidate.experience:
        warnings.append("No experience section detected")
    if not candidate.education:
        warnings.append("No education section detected")
    return warnings


# ── Helpers ──


def all_bullets(candidate: CandidateProfile) -> list[str]:
    return [b for e in candidate.experience for b in e.bullets] + [
        b for p in candidate.projects for b in p.bullets
    ]


def candidate_text(candidate: CandidateProfile) -> str:
    parts: list[str] = [candidate.name or "", candidate.headline or "", candidate.summary or ""]
    parts.extend(candidate.skills)
    for exp in candidate.experience:
        parts.extend([exp.title or "", exp.company or "", *exp.bullets])
    for edu in candidate.education:
        parts.extend([edu.school or "", edu.degree or ""])
    for proj in candidate.projects:
        parts.extend([proj.name or "", *proj.bullets])
    return " ".join(p for p in parts if p).lower()


def _has_skill(term: str, skills: list[str], text: str) -> bool:
    return any(same_term(skill, term) for skill in skills) or term_present(text, term)


def _round(value: float) -> int:
    # Half-up rounding; Python's round() is banker's rounding.
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def _clamp(value: int) -> int:
    return max(0, min(100, value))
