"""
Tests for services/query/tokens.py - query text classification
"""
import pytest

from services.query.tokens import classify_query, partial_token_at, is_prefixed_token


@pytest.mark.unit
class TestClassifyQuery:

    def test_plain_tags_are_included(self):
        tokens = classify_query("cat outdoor")
        assert tokens.include_tags == {"cat", "outdoor"}
        assert not tokens.exclude_tags
        assert not tokens.include_ratings
        assert not tokens.exclude_ratings

    def test_tags_are_lowercased(self):
        assert classify_query("Cat OUTDOOR").include_tags == {"cat", "outdoor"}

    def test_negated_tags_are_excluded(self):
        tokens = classify_query("cat -dog")
        assert tokens.include_tags == {"cat"}
        assert tokens.exclude_tags == {"dog"}

    def test_rating_tokens(self):
        tokens = classify_query("rating:s rating:q -rating:e")
        assert tokens.include_ratings == {"s", "q"}
        assert tokens.exclude_ratings == {"e"}
        assert not tokens.include_tags
        assert not tokens.exclude_tags

    def test_rating_prefix_is_case_insensitive(self):
        tokens = classify_query("RATING:s")
        assert tokens.include_ratings == {"s"}
        assert not tokens.include_tags

    def test_rating_values_are_lowercased(self):
        tokens = classify_query("rating:S -Rating:Q")
        assert tokens.include_ratings == {"s"}
        assert tokens.exclude_ratings == {"q"}
        assert not tokens.include_tags
        assert not tokens.exclude_tags

    def test_unknown_rating_values_are_kept(self):
        # They reach the compiler and simply match nothing
        assert classify_query("rating:x").include_ratings == {"x"}

    def test_whitespace_and_duplicates(self):
        tokens = classify_query("  cat\tcat \n dog  ")
        assert tokens.include_tags == {"cat", "dog"}

    def test_empty_and_none(self):
        assert classify_query("").is_empty
        assert classify_query(None).is_empty
        assert classify_query("   ").is_empty

    def test_bare_negation_marker_is_dropped(self):
        tokens = classify_query("- cat")
        assert tokens.include_tags == {"cat"}
        assert not tokens.exclude_tags

    def test_each_token_lands_in_one_set(self):
        tokens = classify_query("a -b rating:s -rating:q")
        sets = [tokens.include_tags, tokens.exclude_tags, tokens.include_ratings, tokens.exclude_ratings]
        assert sum(len(s) for s in sets) == 4


@pytest.mark.unit
class TestPartialToken:

    def test_last_token_before_caret(self):
        token = partial_token_at("cat do", 6)
        assert token.text == "do"
        assert token.value == "do"
        assert not token.negated
        assert not token.is_rating

    def test_caret_in_middle(self):
        assert partial_token_at("cat dog", 2).text == "ca"

    def test_after_whitespace_is_none(self):
        assert partial_token_at("cat ", 4) is None
        assert partial_token_at("", 0) is None

    def test_negated_rating(self):
        token = partial_token_at("cat -rating:s", 13)
        assert token.negated
        assert token.is_rating
        assert token.value == "s"

    def test_uppercase_rating_prefix(self):
        token = partial_token_at("RATING:q", 8)
        assert token.is_rating
        assert token.value == "q"

    def test_selection_end_is_clamped(self):
        assert partial_token_at("cat", 99).text == "cat"


@pytest.mark.unit
def test_is_prefixed_token():
    assert is_prefixed_token("-cat")
    assert is_prefixed_token("rating:s")
    assert is_prefixed_token("Rating:S")
    assert not is_prefixed_token("cat-girl")
