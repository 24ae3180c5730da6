"""Consistency Validator - removes contradictions between insights and document content.

Insight items that claim a term is absent are flipped to found (keyword
checklist) or dropped (gaps, feedback lines, next actions) when the term is
actually in the document. Discouraging phrasing in free text is replaced
with supportive wording. Factual fields are never touched.
"""

from __future__ import annotations

import re

from resumemate.models.document import KeywordCheck, TailoredDocument
from resumemate.models.quality import IssueKind, QualityIssue
from resumemate.pipeline.rules import (
    ABSENCE_CLAIMS,
    ADD_SKILLS_ACTION,
    QUOTED_TERM,
    TONE_RULES,
)
from resumemate.utils.text_match import contains_term, keyword_found_in_text

FOUND_SECTION = "Skills / Experience (tailored)"

_TERM_PARTS = re.compile(r"\s*(?:,|;|\band\b|\bor\b|&)\s*", re.IGNORECASE)


def document_text(document: TailoredDocument) -> str:
    """Lowercase blob of the document's resume content used for presence checks."""
    parts: list[str] = [document.name, document.headline, document.summary]
    for group in document.skills:
        parts.append(group.category)
        parts.extend(group.items)
    for role in document.experience:
        parts.extend([role.company, role.title, *role.bullets])
    parts.extend(f"{e.degree} {e.school}" for e in document.education)
    for project in document.projects:
        parts.extend([project.name, *project.bullets])
    parts.extend(document.certifications)
    return " ".join(p for p in parts if p).lower()


def fix_tone(text: str) -> str:
    """Replace discouraging phrases with supportive rephrasings."""
    if not text:
        return text
    result = text
    for rule in TONE_RULES:
        result = rule.pattern.sub(rule.replacement, result)
    if text[0].isupper() and result and result[0].islower():
        result = result[0].upper() + result[1:]
    return result


def claim_refuted(line: str, text: str) -> bool:
    """True when ``line`` claims a term is missing but every named part is present."""
    for pattern in ABSENCE_CLAIMS:
        match = pattern.search(line)
        if match and _all_present(match.group("term"), text):
            return True
    return False


def _all_present(term: str, text: str) -> bool:
    parts = [p.strip(" .") for p in _TERM_PARTS.split(term) if p.strip(" .")]
    return bool(parts) and all(keyword_found_in_text(p, text) for p in parts)


def reconcile(document: TailoredDocument) -> TailoredDocument:
    """Return a copy of ``document`` with contradicting insights resolved."""
    text = document_text(document)
    skills = [s.lower() for s in document.skill_items()]

    checklist = []
    for item in document.keyword_checklist:
        if not item.found and keyword_found_in_text(item.keyword, text):
            item = KeywordCheck(keyword=item.keyword, found=True, section=FOUND_SECTION, suggestion=None)
        else:
            item = item.model_copy()
        if item.suggestion:
            item.suggestion = fix_tone(item.suggestion)
        checklist.append(item)

    gaps = []
    for gap in document.experience_gaps:
        if _gap_refuted(gap.gap, text, skills):
            continue
        gaps.append(gap.model_copy(update={"gap": fix_tone(gap.gap), "suggestion": fix_tone(gap.suggestion)}))

    feedback = [fix_tone(line) for line in document.recruiter_feedback if not claim_refuted(line, text)]

    actions = []
    for action in document.next_actions:
        match = ADD_SKILLS_ACTION.search(action)
        if match and _all_present(match.group("skills"), text):
            continue
        if claim_refuted(action, text):
            continue
        actions.append(fix_tone(action))

    return document.model_copy(
        update={
            "overview": fix_tone(document.overview),
            "keyword_checklist": checklist,
            "experience_gaps": gaps,
            "recruiter_feedback": feedback,
            "next_actions": actions,
        },
        deep=True,
    )


def _gap_refuted(gap: str, text: str, skills: list[str]) -> bool:
    for quoted in QUOTED_TERM.findall(gap):
        if keyword_found_in_text(quoted, text):
            return True
    if claim_refuted(gap, text):
        return True
    return any(len(skill) >= 3 and contains_term(gap, skill) for skill in skills)


def reconciliation_issues(before: TailoredDocument, after: TailoredDocument) -> list[QualityIssue]:
    """Audit trail for a ``reconcile`` call."""
    issues = []
    flipped = [
        new.keyword
        for old, new in zip(before.keyword_checklist, after.keyword_checklist)
        if new.found and not old.found
    ]
    if flipped:
        issues.append(
            QualityIssue(
                kind=IssueKind.CONTRADICTION,
                location="keyword_checklist",
                detail=f"Marked {len(flipped)} keyword(s) found in the tailored resume: {', '.join(flipped)}",
            )
        )
    removed = {
        "experience_gaps": len(before.experience_gaps) - len(after.experience_gaps),
        "recruiter_feedback": len(before.recruiter_feedback) - len(after.recruiter_feedback),
        "next_actions": len(before.next_actions) - len(after.next_actions),
    }
    for location, count in removed.items():
        if count > 0:
            issues.append(
                QualityIssue(
                    kind=IssueKind.CONTRADICTION,
                    location=location,
                    detail=f"Removed {count} item(s) that contradict the tailored resume",
                )
            )
    return issues
