"""Tests for text-matching primitives."""

import pytest

from resumemate.utils.text_match import (
    contains_term,
    jaccard,
    keyword_found_in_text,
    normalize_text,
    same_term,
    stable_index,
    term_present,
    word_set,
)


class TestNormalize:
    def test_lowercases_and_strips_punctuation(self):
        assert normalize_text("Built  REST APIs, fast!") == "built rest apis fast"

    def test_word_set_drops_short_words(self):
        assert word_set("Led a team of 5 to ship it") == frozenset({"led", "team", "ship"})

    def test_jaccard(self):
        assert jaccard(frozenset({"a", "b"}), frozenset({"a", "b"})) == 1.0
        assert jaccard(frozenset({"a", "b"}), frozenset({"c"})) == 0.0
        assert jaccard(frozenset(), frozenset()) == 1.0
        assert jaccard(frozenset({"a", "b", "c"}), frozenset({"a", "b", "d"})) == pytest.approx(0.5)


class TestStableIndex:
    def test_is_deterministic(self):
        assert stable_index("same text", 4) == stable_index("same text", 4)

    def test_in_range(self):
        for text in ["a", "b", "longer bullet text", ""]:
            assert 0 <= stable_index(text, 3) < 3


class TestTermMatching:
    def test_word_boundary(self):
        assert contains_term("experience with go and rust", "go")
        assert not contains_term("google cloud", "go")

    def test_symbol_terms(self):
        assert contains_term("wrote c++ services", "C++")
        assert contains_term("built on .net core", ".NET")
        assert not contains_term("wrote c services", "c++")

    def test_synonyms(self):
        assert term_present("deployed on k8s clusters", "Kubernetes")
        assert term_present("migrated to gcp", "Google Cloud")
        assert not term_present("deployed on bare metal", "Kubernetes")

    def test_same_term(self):
        assert same_term("K8s", "kubernetes")
        assert same_term("Postgres", "PostgreSQL")
        assert not same_term("MySQL", "PostgreSQL")


class TestKeywordFoundInText:
    def test_substring_for_long_keywords(self):
        assert keyword_found_in_text("TypeScript", "strong typescript skills")

    def test_compact_form(self):
        assert keyword_found_in_text("CI/CD", "owned the cicd pipeline")

    def test_short_keyword_needs_boundary(self):
        assert not keyword_found_in_text("Go", "a good fit")
        assert keyword_found_in_text("MUI", "react with mui components")

    def test_empty_keyword(self):
        assert not keyword_found_in_text("  ", "anything")
