"""
Tests for utils/validation.py and page parameter parsing
"""
import pytest

from services.query.pagination import page_index, parse_page
from utils.errors import BadRequestError
from utils.validation import (
    validate_boolean,
    validate_enum,
    validate_integer,
    validate_string,
    validate_string_list,
)


@pytest.mark.unit
class TestValidateString:

    def test_strips(self):
        assert validate_string("  name ", "name") == "name"

    def test_missing_or_empty(self):
        with pytest.raises(BadRequestError, match="name is required"):
            validate_string(None, "name")
        with pytest.raises(BadRequestError, match="cannot be empty"):
            validate_string("   ", "name")
        assert validate_string(None, "name", allow_empty=True) == ""
        assert validate_string(" ", "name", allow_empty=True) == ""

    def test_wrong_type(self):
        with pytest.raises(BadRequestError):
            validate_string(5, "name")


@pytest.mark.unit
class TestValidateInteger:

    @pytest.mark.parametrize("value,expected", [(3, 3), ("7", 7), ("-2", -2)])
    def test_valid(self, value, expected):
        assert validate_integer(value, "n") == expected

    @pytest.mark.parametrize("value", [None, True, "abc", 1.5j, [1]])
    def test_invalid(self, value):
        with pytest.raises(BadRequestError):
            validate_integer(value, "n")

    def test_min_value(self):
        with pytest.raises(BadRequestError, match="at least 0"):
            validate_integer(-1, "index", min_value=0)


@pytest.mark.unit
class TestOtherValidators:

    @pytest.mark.parametrize("value,expected", [
        (True, True), (False, False), ("on", True), ("true", True),
        ("0", False), ("", False), (None, False), (1, True), (0, False),
    ])
    def test_boolean(self, value, expected):
        assert validate_boolean(value, "flag") is expected

    def test_boolean_garbage(self):
        with pytest.raises(BadRequestError):
            validate_boolean("maybe", "flag")

    def test_enum(self):
        assert validate_enum("q", "rating", ['u', 's', 'q', 'e']) == "q"
        with pytest.raises(BadRequestError, match="rating must be one of"):
            validate_enum("x", "rating", ['u', 's', 'q', 'e'])

    def test_string_list(self):
        assert validate_string_list(None, "sources") == []
        assert validate_string_list("https://a", "sources") == ["https://a"]
        assert validate_string_list(["a", "b"], "sources") == ["a", "b"]
        with pytest.raises(BadRequestError):
            validate_string_list(["a", 1], "sources")


@pytest.mark.unit
class TestPageParameters:

    @pytest.mark.parametrize("value,expected", [(None, 1), ("", 1), ("3", 3), ("0", 0), ("-4", -4)])
    def test_parse_page(self, value, expected):
        assert parse_page(value) == expected

    def test_parse_page_garbage(self):
        with pytest.raises(BadRequestError):
            parse_page("two")

    @pytest.mark.parametrize("page,expected", [(None, 0), (0, 0), (-3, 0), (1, 0), (4, 3)])
    def test_page_index_saturates(self, page, expected):
        assert page_index(page) == expected
