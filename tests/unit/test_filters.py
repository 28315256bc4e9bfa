"""Unit tests for where-clause construction."""

import pytest

from bestagent.caspio.filters import Where, any_of, equals, parse_account_id, render_value
from bestagent.utils.exceptions import InvalidFilterError


class TestRenderValue:
    """Tests for render_value."""

    def test_integer_literal(self):
        assert render_value(12345) == "12345"

    def test_string_is_quoted(self):
        assert render_value("8055551234") == "'8055551234'"

    def test_embedded_quotes_are_doubled(self):
        assert render_value("O'Brien") == "'O''Brien'"

    def test_injection_attempt_stays_inside_literal(self):
        rendered = render_value("x' OR '1'='1")
        assert rendered == "'x'' OR ''1''=''1'"

    @pytest.mark.parametrize("value", [True, 1.5, None, ["a"]])
    def test_unsupported_types(self, value):
        with pytest.raises(InvalidFilterError):
            render_value(value)


class TestClauses:
    """Tests for equals and any_of."""

    def test_equals(self):
        assert str(equals("pkgcode2", "EM")) == "pkgcode2='EM'"
        assert str(equals("vac_id", 42)) == "vac_id=42"

    @pytest.mark.parametrize("field", ["", "vac id", "a;b", "1abc", "x=1"])
    def test_invalid_field_names(self, field):
        with pytest.raises(InvalidFilterError):
            equals(field, "value")

    def test_any_of(self):
        where = any_of(equals("phn1", "8055551234"), equals("phn2", "8055551234"))
        assert str(where) == "phn1='8055551234' OR phn2='8055551234'"

    def test_or_operator(self):
        assert equals("a", 1) | equals("b", 2) == Where("a=1 OR b=2")

    def test_any_of_needs_clauses(self):
        with pytest.raises(InvalidFilterError):
            any_of()


class TestParseAccountId:
    """Tests for parse_account_id."""

    @pytest.mark.parametrize("value,expected", [(42, 42), ("42", 42), (" 7 ", 7), (42.0, 42)])
    def test_valid(self, value, expected):
        assert parse_account_id(value) == expected

    @pytest.mark.parametrize("value", ["abc", "42 OR 1=1", "-1", "4.5", 4.5, True, None, ""])
    def test_invalid(self, value):
        with pytest.raises(InvalidFilterError):
            parse_account_id(value)

    def test_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_account_id("nope")
