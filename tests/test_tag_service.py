"""
Tests for services/tag_service.py - autocompletion and bulk edit
"""
import pytest

from services import tag_service
from tests.conftest import create_test_post


@pytest.fixture
def tagged(db_connection, users):
    create_test_post(db_connection, users['alice'].id, 'cat catgirl dog')


@pytest.mark.unit
class TestSuggestCompletions:

    def test_tag_prefix(self, tagged):
        suggestions = tag_service.suggest_completions("dog ca", 6)
        assert suggestions == [
            {'name': 'cat', 'value': 'cat'},
            {'name': 'catgirl', 'value': 'catgirl'},
        ]

    def test_negated_tag_keeps_marker_in_value(self, tagged):
        suggestions = tag_service.suggest_completions("-do", 3)
        assert suggestions == [{'name': 'dog', 'value': '-dog'}]

    def test_rating_prefix(self, db_connection):
        names = [s['name'] for s in tag_service.suggest_completions("rating:", 7)]
        assert names == ['rating:u', 'rating:s', 'rating:q', 'rating:e']

    def test_negated_rating(self, db_connection):
        assert tag_service.suggest_completions("-rating:s", 9) == [
            {'name': 'rating:s', 'value': '-rating:s'},
        ]

    def test_uppercase_rating_prefix(self, db_connection):
        assert tag_service.suggest_completions("Rating:E", 8) == [
            {'name': 'rating:e', 'value': 'rating:e'},
        ]

    def test_only_token_before_caret_counts(self, tagged):
        # caret after "ca", "dog" follows it
        suggestions = tag_service.suggest_completions("ca dog", 2)
        assert [s['name'] for s in suggestions] == ['cat', 'catgirl']

    @pytest.mark.parametrize("text,selection_end", [("", 0), ("cat ", 4), ("-", 1)])
    def test_nothing_to_complete(self, tagged, text, selection_end):
        assert tag_service.suggest_completions(text, selection_end) == []

    def test_no_match(self, tagged):
        assert tag_service.suggest_completions("zebra", 5) == []


@pytest.mark.unit
class TestSelectCompletion:

    def test_replaces_token_before_caret(self):
        assert tag_service.select_completion("foo ba", "bar", 6) == "foo bar "

    def test_keeps_tokens_after_caret(self):
        assert tag_service.select_completion("foo ba baz", "bar", 6) == "foo bar baz "

    def test_negated_value(self):
        assert tag_service.select_completion("cat -do", "-dog", 7) == "cat -dog "

    def test_empty_text(self):
        assert tag_service.select_completion("", "cat", 0) == "cat "

    def test_caret_past_end_is_clamped(self):
        assert tag_service.select_completion("ca", "cat", 99) == "cat "


@pytest.mark.unit
class TestBulkEdit:

    def test_edit_tag_returns_plain_dict(self, db_connection, users):
        create_test_post(db_connection, users['alice'].id, 'kitty cat')
        result = tag_service.edit_tag("kitty", "cat")
        assert result['merged'] is True
        assert result['tag']['name'] == 'cat'

    def test_collect_unused_tags(self, db_connection):
        db_connection.execute("INSERT INTO tags (name, normalized_name) VALUES ('lonely', 'lonely')")
        db_connection.commit()
        assert tag_service.collect_unused_tags() == 1
