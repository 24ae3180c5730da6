"""Near-duplicate bullet removal and sentence-ending diversity."""

from __future__ import annotations

import re

from resumemate.pipeline.rules import OUTCOME_SYNONYMS
from resumemate.utils.text_match import jaccard, normalize_text, stable_index, word_set

_TRAILING_PUNCT = re.compile(r"[.!?]+$")
_TRAILING_CLAUSE = re.compile(r",\s*(?=[a-z])")
_PERCENT = re.compile(r"\d+%")
_SCALE = re.compile(r"\$[\d,]+|[\d,]+\s*(?:users|customers|transactions)", re.IGNORECASE)
_MULTIPLIER = re.compile(r"\d+x|\d+\.\d+")


def bullet_strength(bullet: str) -> int:
    """Longer bullets with metrics win ties between near-duplicates."""
    score = len(bullet)
    if _PERCENT.search(bullet):
        score += 50
    if _SCALE.search(bullet):
        score += 40
    if _MULTIPLIER.search(bullet):
        score += 30
    return score


def is_near_duplicate(a: str, b: str, threshold: float = 0.85) -> bool:
    if normalize_text(a) == normalize_text(b):
        return True
    return jaccard(word_set(a), word_set(b)) >= threshold


def dedupe_bullets(bullets: list[str], threshold: float = 0.85) -> list[str]:
    """Drop near-duplicates, keeping the stronger bullet in the earlier slot."""
    unique: list[str] = []
    for bullet in bullets:
        for i, existing in enumerate(unique):
            if is_near_duplicate(existing, bullet, threshold):
                if bullet_strength(bullet) > bullet_strength(existing):
                    unique[i] = bullet
                break
        else:
            unique.append(bullet)
    return unique


def ending_of(bullet: str, word_count: int = 5) -> str:
    words = _TRAILING_PUNCT.sub("", bullet.strip()).split()
    return " ".join(words[-word_count:]).lower()


def diversify_endings(bullets: list[str], word_count: int = 5) -> list[str]:
    """Rewrite bullets whose last ``word_count`` words repeat an earlier bullet's.

    A rewrite is only accepted if it produces a fresh ending and does not
    collide with another bullet's normalized form.
    """
    endings: set[str] = set()
    forms = {normalize_text(b) for b in bullets}
    result = []
    for bullet in bullets:
        ending = ending_of(bullet, word_count)
        if ending in endings:
            for candidate in _rewrites(bullet):
                fresh = ending_of(candidate, word_count)
                form = normalize_text(candidate)
                if fresh not in endings and form not in forms:
                    forms.add(form)
                    bullet, ending = candidate, fresh
                    break
        endings.add(ending)
        result.append(bullet)
    return result


def _rewrites(bullet: str):
    """Candidate rewrites in preference order: synonym swap, then clause trim."""
    lower = bullet.lower()
    for phrase, synonyms in OUTCOME_SYNONYMS:
        pos = lower.rfind(phrase)
        if pos < 0:
            continue
        start = stable_index(bullet, len(synonyms))
        for offset in range(len(synonyms)):
            synonym = synonyms[(start + offset) % len(synonyms)]
            yield bullet[:pos] + synonym + bullet[pos + len(phrase):]

    parts = _TRAILING_CLAUSE.split(bullet)
    if len(parts) > 1:
        trimmed = ", ".join(parts[:-1]).rstrip(", ")
        yield trimmed + "."
