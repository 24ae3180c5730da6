"""Quality Gate - deterministic repair pass over a tailored document.

Stages, applied in order each round:

1. Bullet deduplication (near-duplicates by word-set Jaccard)
2. Ending diversity (no two bullets in a role end with the same words)
3. Banned-phrase removal across every free-text field
4. Dangling-bullet repair (trailing connector with no object)
5. Cover-letter structure (one greeting first, one signoff last, bounded length)
6. Skill-label validation (sentences truncated to short labels)
7. Reconcile insights against the repaired content

Rounds repeat until the document stops changing, so ``repair`` applied to
its own output is a no-op.
"""

from __future__ import annotations

import logging
import re

from resumemate.config import QualityConfig
from resumemate.models.document import SkillGroup, TailoredDocument
from resumemate.models.quality import IssueKind, QualityIssue
from resumemate.pipeline.bullet_dedupe import dedupe_bullets, diversify_endings
from resumemate.pipeline.consistency import reconcile, reconciliation_issues
from resumemate.pipeline.rules import (
    BANNED_PHRASES,
    DANGLING_ENDINGS,
    GREETING_PATTERN,
    SIGNOFF_PATTERN,
)

logger = logging.getLogger(__name__)

_BANNED_PATTERNS = tuple(
    (phrase, re.compile(rf",?\s*{re.escape(phrase)}", re.IGNORECASE)) for phrase in BANNED_PHRASES
)
_SPACES = re.compile(r"\s+")
_SPACE_BEFORE_PUNCT = re.compile(r"\s+([,.;:!?])")
_DOUBLE_PUNCT = re.compile(r"([,;:])\s*([.!?])|\.{2,}")
_LEADING_PUNCT = re.compile(r"^[\s,;:.]+")
_DANGLING_TAIL = re.compile(r"[,;:\s]+\.$")


def repair(
    document: TailoredDocument,
    config: QualityConfig | None = None,
) -> tuple[TailoredDocument, list[QualityIssue]]:
    """Repair ``document`` and return the fixed copy with the issues found."""
    config = config or QualityConfig()
    fixed = document.model_copy(deep=True)
    issues: list[QualityIssue] = []

    for _ in range(config.max_repair_rounds):
        before = fixed.model_dump()
        fixed = _run_round(fixed, config, issues)
        if fixed.model_dump() == before:
            break
    else:
        logger.warning("Quality gate stopped after %d rounds without settling", config.max_repair_rounds)

    if issues:
        logger.info("Quality gate fixed %d issue(s)", len(issues))
    return fixed, issues


def _run_round(
    document: TailoredDocument,
    config: QualityConfig,
    issues: list[QualityIssue],
) -> TailoredDocument:
    _dedupe_stage(document, config, issues)
    _banned_phrase_stage(document, issues)
    _dangling_stage(document, issues)
    _cover_letter_stage(document, config, issues)
    _skills_stage(document, config, issues)

    reconciled = reconcile(document)
    issues.extend(reconciliation_issues(document, reconciled))
    return reconciled


# ── Stage 1 + 2: dedupe and ending diversity ──


def _dedupe_stage(document: TailoredDocument, config: QualityConfig, issues: list[QualityIssue]) -> None:
    blocks = [(f"experience[{i}]", role) for i, role in enumerate(document.experience)]
    blocks += [(f"projects[{i}]", project) for i, project in enumerate(document.projects)]

    for location, block in blocks:
        unique = dedupe_bullets(block.bullets, config.jaccard_threshold)
        if len(unique) < len(block.bullets):
            issues.append(
                QualityIssue(
                    kind=IssueKind.DUPLICATE,
                    location=f"{location}.bullets",
                    detail=f"Removed {len(block.bullets) - len(unique)} duplicate/near-duplicate bullet(s)",
                )
            )
        diversified = diversify_endings(unique, config.ending_word_count)
        rewritten = sum(1 for a, b in zip(unique, diversified) if a != b)
        if rewritten:
            issues.append(
                QualityIssue(
                    kind=IssueKind.DUPLICATE,
                    location=f"{location}.bullets",
                    detail=f"Rewrote {rewritten} bullet(s) sharing an ending with an earlier bullet",
                )
            )
        block.bullets = diversified


# ── Stage 3: banned phrases ──


def remove_banned_phrases(text: str) -> tuple[str, list[str]]:
    """Strip banned phrases from ``text``. Returns (cleaned, phrases removed)."""
    removed = []
    cleaned = text
    for phrase, pattern in _BANNED_PATTERNS:
        if pattern.search(cleaned):
            cleaned = pattern.sub("", cleaned)
            removed.append(phrase)
    if not removed:
        return text, []

    cleaned = _SPACES.sub(" ", cleaned)
    cleaned = _SPACE_BEFORE_PUNCT.sub(r"\1", cleaned)
    cleaned = _DOUBLE_PUNCT.sub(lambda m: m.group(2) or ".", cleaned)
    cleaned = _LEADING_PUNCT.sub("", cleaned).strip()
    if not cleaned:
        # Nothing left but the phrase; keep the original wording.
        return text, []
    if text[:1].isupper() and cleaned[0].islower():
        cleaned = cleaned[0].upper() + cleaned[1:]
    return cleaned, removed


def _banned_phrase_stage(document: TailoredDocument, issues: list[QualityIssue]) -> None:
    def clean(text: str, location: str) -> str:
        cleaned, removed = remove_banned_phrases(text)
        for phrase in removed:
            issues.append(
                QualityIssue(kind=IssueKind.BANNED_PHRASE, location=location, detail=f'Removed banned phrase: "{phrase}"')
            )
        return cleaned

    for i, role in enumerate(document.experience):
        role.bullets = [clean(b, f"experience[{i}].bullets") for b in role.bullets]
    for i, project in enumerate(document.projects):
        project.bullets = [clean(b, f"projects[{i}].bullets") for b in project.bullets]
    document.summary = clean(document.summary, "summary")
    document.overview = clean(document.overview, "overview")
    document.cover_letter = [clean(p, f"cover_letter[{i}]") for i, p in enumerate(document.cover_letter)]
    document.recruiter_feedback = [
        clean(line, f"recruiter_feedback[{i}]") for i, line in enumerate(document.recruiter_feedback)
    ]
    document.next_actions = [clean(a, f"next_actions[{i}]") for i, a in enumerate(document.next_actions)]


# ── Stage 4: dangling endings ──


def fix_dangling(bullet: str) -> str:
    for pattern in DANGLING_ENDINGS:
        if pattern.search(bullet):
            fixed = _DANGLING_TAIL.sub(".", pattern.sub(".", bullet).strip())
            fixed = re.sub(r"\.{2,}$", ".", fixed)
            if fixed.strip(" ."):
                return fixed
    return bullet


def _dangling_stage(document: TailoredDocument, issues: list[QualityIssue]) -> None:
    blocks = [(f"experience[{i}]", role) for i, role in enumerate(document.experience)]
    blocks += [(f"projects[{i}]", project) for i, project in enumerate(document.projects)]
    for location, block in blocks:
        repaired = []
        for bullet in block.bullets:
            fixed = fix_dangling(bullet)
            if fixed != bullet:
                issues.append(
                    QualityIssue(
                        kind=IssueKind.DANGLING_BULLET,
                        location=f"{location}.bullets",
                        detail=f'Fixed dangling ending in: "{bullet[-40:]}"',
                    )
                )
            repaired.append(fixed)
        block.bullets = repaired


# ── Stage 5: cover letter ──


def enforce_cover_letter(paragraphs: list[str], max_paragraphs: int = 5) -> tuple[list[str], list[str]]:
    """Return (paragraphs, notes) with one leading greeting, one trailing signoff, bounded length."""
    notes = []
    kept = [p.strip() for p in paragraphs if p.strip()]
    if len(kept) < len(paragraphs):
        notes.append(f"Dropped {len(paragraphs) - len(kept)} empty paragraph(s)")

    greeting = signoff = None
    body = []
    for paragraph in kept:
        if GREETING_PATTERN.search(paragraph):
            if greeting is None:
                greeting = paragraph
            else:
                notes.append("Removed duplicate greeting")
        elif SIGNOFF_PATTERN.search(paragraph):
            if signoff is None:
                signoff = paragraph
            else:
                notes.append("Removed duplicate signoff")
        else:
            body.append(paragraph)

    max_body = max(1, max_paragraphs - (greeting is not None) - (signoff is not None))
    if len(body) > max_body:
        notes.append(f"Merged {len(body) - max_body + 1} body paragraphs to stay within {max_paragraphs}")
        body = body[: max_body - 1] + [" ".join(body[max_body - 1 :])]

    reordered = (greeting is not None and kept[0] != greeting) or (
        signoff is not None
        and any(not SIGNOFF_PATTERN.search(p) for p in kept[kept.index(signoff) + 1 :])
    )
    if reordered:
        notes.append("Moved greeting to the start and signoff to the end")
    result = ([greeting] if greeting else []) + body + ([signoff] if signoff else [])
    return result, notes


def _cover_letter_stage(document: TailoredDocument, config: QualityConfig, issues: list[QualityIssue]) -> None:
    paragraphs, notes = enforce_cover_letter(document.cover_letter, config.max_paragraphs)
    for note in notes:
        issues.append(QualityIssue(kind=IssueKind.STRUCTURAL, location="cover_letter", detail=note))
    if len(paragraphs) < config.min_paragraphs:
        logger.debug("Cover letter has %d paragraphs (fewer than %d)", len(paragraphs), config.min_paragraphs)
    document.cover_letter = paragraphs


# ── Stage 6: skill labels ──


def shorten_label(item: str, config: QualityConfig) -> str:
    trimmed = item.strip()
    words = trimmed.split()
    if len(trimmed) > config.max_skill_chars or len(words) > config.max_skill_words:
        return " ".join(words[: config.skill_label_words]).rstrip(",;:.")
    return trimmed


def _skills_stage(document: TailoredDocument, config: QualityConfig, issues: list[QualityIssue]) -> None:
    groups = []
    for group in document.skills:
        items = []
        for item in group.items:
            label = shorten_label(item, config)
            if label != item.strip():
                issues.append(
                    QualityIssue(
                        kind=IssueKind.STRUCTURAL,
                        location=f"skills.{group.category}",
                        detail=f'Shortened sentence-like skill: "{item.strip()[:40]}"',
                    )
                )
            if label:
                items.append(label)
        if items:
            groups.append(SkillGroup(category=group.category, items=items))
        else:
            issues.append(
                QualityIssue(kind=IssueKind.STRUCTURAL, location=f"skills.{group.category}", detail="Dropped empty skill group")
            )
    document.skills = groups
