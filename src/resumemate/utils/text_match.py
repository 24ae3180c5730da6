"""Text-matching primitives shared by the scorer and the consistency validator."""

from __future__ import annotations

import re
import zlib
from functools import lru_cache

from resumemate.pipeline.rules import SYNONYM_GROUPS

_NON_WORD = re.compile(r"[^\w\s]")
_SPACES = re.compile(r"\s+")
_COMPACT = re.compile(r"[/.\-\s]")


def normalize_text(text: str) -> str:
    """Lowercase, strip punctuation, collapse whitespace."""
    return _SPACES.sub(" ", _NON_WORD.sub(" ", text.lower())).strip()


def word_set(text: str, min_len: int = 3) -> frozenset[str]:
    return frozenset(w for w in normalize_text(text).split(" ") if len(w) >= min_len)


def jaccard(a: frozenset[str], b: frozenset[str]) -> float:
    if not a and not b:
        return 1.0
    union = len(a | b)
    return len(a & b) / union if union else 0.0


def stable_index(text: str, size: int) -> int:
    """Deterministic replacement for random choice: crc32(text) mod size."""
    return zlib.crc32(text.encode("utf-8")) % size


@lru_cache(maxsize=2048)
def _term_pattern(term: str) -> re.Pattern:
    return re.compile(rf"(?<![\w+#]){re.escape(term)}(?![\w+#])", re.IGNORECASE)


def contains_term(text: str, term: str) -> bool:
    """Word-boundary match that tolerates symbols such as ``c++`` or ``.net``."""
    term = term.strip().lower()
    if not term:
        return False
    return _term_pattern(term).search(text) is not None


@lru_cache(maxsize=2048)
def term_variants(term: str) -> tuple[str, ...]:
    """The term plus every synonym from its group, lowercased."""
    lower = term.strip().lower()
    variants = {lower}
    for group in SYNONYM_GROUPS:
        if lower in group:
            variants |= group
    return tuple(sorted(variants))


def term_present(text: str, term: str) -> bool:
    """True when the term or one of its synonyms occurs in ``text`` on a word boundary."""
    return any(contains_term(text, variant) for variant in term_variants(term))


def same_term(a: str, b: str) -> bool:
    return a.strip().lower() in term_variants(b)


def keyword_found_in_text(keyword: str, text: str) -> bool:
    """Looser presence check used to reconcile insight claims.

    Accepts a verbatim substring for longer keywords, a compact form
    ("CI/CD" vs "cicd"), a word-boundary match, or a synonym.
    """
    kw = keyword.strip().lower()
    if not kw:
        return False
    text = text.lower()
    if len(kw) > 4 and kw in text:
        return True
    compact_kw = _COMPACT.sub("", kw)
    if len(compact_kw) > 4 and compact_kw in _COMPACT.sub("", text):
        return True
    return term_present(text, kw)
