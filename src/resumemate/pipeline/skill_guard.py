"""Strip generated skill labels the candidate never claimed and the role never asked for."""

from __future__ import annotations

import logging

from resumemate.models.document import SkillGroup, TailoredDocument
from resumemate.models.profile import CandidateProfile, TargetProfile

logger = logging.getLogger(__name__)

MIN_SUBSTRING_LEN = 3
MAX_SHORT_LABEL_WORDS = 2


def allowed_terms(candidate: CandidateProfile, target: TargetProfile) -> set[str]:
    terms = [*candidate.skills, *target.required_skills, *target.preferred_skills, *target.keywords]
    return {t.strip().lower() for t in terms if t.strip()}


def is_allowed(label: str, allowed: set[str], candidate_text: str) -> bool:
    lower = label.strip().lower()
    if not lower:
        return False
    if lower in allowed:
        return True
    for term in allowed:
        if len(term) >= MIN_SUBSTRING_LEN and len(lower) >= MIN_SUBSTRING_LEN and (term in lower or lower in term):
            return True
    if lower in candidate_text:
        return True
    # One- or two-word labels read as plain skill names.
    return len(lower.split()) <= MAX_SHORT_LABEL_WORDS


def enforce_no_injection(
    document: TailoredDocument,
    candidate: CandidateProfile,
    target: TargetProfile,
) -> tuple[TailoredDocument, list[str]]:
    """Return (document, stripped labels). Groups left empty are dropped."""
    allowed = allowed_terms(candidate, target)
    candidate_text = " ".join(
        [
            candidate.summary or "",
            candidate.headline or "",
            *[part for e in candidate.experience for part in (e.title or "", *e.bullets)],
        ]
    ).lower()

    stripped: list[str] = []
    groups = []
    for group in document.skills:
        items = []
        for item in group.items:
            if is_allowed(item, allowed, candidate_text):
                items.append(item)
            elif item.strip():
                stripped.append(item)
        if items:
            groups.append(SkillGroup(category=group.category, items=items))

    if stripped:
        logger.info("No-injection: stripped %d skill label(s)", len(stripped))
    return document.model_copy(update={"skills": groups}, deep=True), stripped
