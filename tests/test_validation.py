"""Tests for column, order and limit sanitizing."""

import pytest

from tablequery.validation import check_column, check_limit, check_order

KNOWN = ("id", "title", "status")


class TestCheckColumn:
    def test_known_single_column(self):
        assert check_column("title", KNOWN) == "title"

    def test_unknown_single_column_is_star(self):
        assert check_column("password", KNOWN) == "*"

    def test_list_keeps_known_in_order(self):
        assert check_column(["status", "nope", "id"], KNOWN) == "status,id"

    def test_only_unknown_columns_is_star(self):
        assert check_column(["a", "b; DROP TABLE posts"], KNOWN) == "*"

    @pytest.mark.parametrize("cols", ["*", "", None, []])
    def test_star_and_empty(self, cols):
        assert check_column(cols, KNOWN) == "*"

    def test_list_output(self):
        assert check_column(["id", "x"], KNOWN, as_list=True) == ["id"]
        assert check_column("x", KNOWN, as_list=True) == ["*"]

    def test_case_sensitive(self):
        assert check_column("ID", KNOWN) == "*"


class TestCheckOrder:
    @pytest.mark.parametrize("raw, expected", [("ASC", "ASC"), ("desc", "DESC"), (" Desc ", "DESC")])
    def test_allowed(self, raw, expected):
        assert check_order(raw) == expected

    @pytest.mark.parametrize("raw", ["random", None, 1, "DESC; DROP"])
    def test_fallback(self, raw):
        assert check_order(raw) == "ASC"


class TestCheckLimit:
    def test_none(self):
        assert check_limit(None) == ""

    def test_single_int(self):
        assert check_limit(10) == "LIMIT 10"

    def test_offset_and_count(self):
        assert check_limit([20, 10]) == "LIMIT 20,10"

    def test_digit_strings(self):
        assert check_limit(["5"]) == "LIMIT 5"

    def test_garbage_dropped(self):
        assert check_limit(["1; DROP TABLE x", 3]) == "LIMIT 3"
        assert check_limit([-1]) == ""
        assert check_limit("abc") == ""

    @pytest.mark.parametrize("limit", [2.5, object(), True, [1.5]])
    def test_non_integer_scalars_dropped(self, limit):
        assert check_limit(limit) == ""

    def test_offset_keyword_form(self):
        assert check_limit([20, 10], offset_keyword=True) == "LIMIT 10 OFFSET 20"
        assert check_limit(10, offset_keyword=True) == "LIMIT 10"
