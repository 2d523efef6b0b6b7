"""
Unit tests for validation primitives.

Tests focus on:
- Ordered, short-circuiting checks
- Idempotent text sanitizing
- Email canonicalization
- Locale-tolerant decimal parsing
"""
from decimal import Decimal
from unittest.mock import MagicMock

from paygate.services.validation import (
    Ok,
    Err,
    run_checks,
    sanitize_text,
    normalize_email,
    parse_decimal,
    required_text,
    optional_text,
    numeric,
    MAX_AMOUNT,
)


class TestRunChecks:
    """Tests for run_checks"""

    def test_threads_value_through_checks(self):
        """Each check sees the previous check's output"""
        result = run_checks(" 5 ", [
            lambda v: Ok(v.strip()),
            lambda v: Ok(int(v)),
            lambda v: Ok(v * 2),
        ])

        assert result == Ok(10)

    def test_stops_at_first_error(self):
        """Checks after an Err are never called"""
        later_check = MagicMock(return_value=Ok("unused"))

        result = run_checks("x", [
            lambda v: Err("VALIDATION_ERROR", "bad", "field"),
            later_check,
        ])

        assert result == Err("VALIDATION_ERROR", "bad", "field")
        later_check.assert_not_called()

    def test_no_checks_returns_input(self):
        assert run_checks(42, []) == Ok(42)


class TestSanitizeText:
    """Tests for sanitize_text"""

    def test_escapes_markup(self):
        assert sanitize_text('<script>alert("x")</script>') == (
            "&lt;script&gt;alert(&quot;x&quot;)&lt;/script&gt;"
        )

    def test_strips_control_characters_and_whitespace(self):
        assert sanitize_text("  Jane\x00 Doe\x1b  ") == "Jane Doe"

    def test_is_idempotent(self):
        """Escaping an already-escaped value does not double-encode"""
        once = sanitize_text("Tom & Jerry's <shop>")
        twice = sanitize_text(once)

        assert once == "Tom &amp; Jerry&#x27;s &lt;shop&gt;"
        assert twice == once

    def test_plain_text_unchanged(self):
        assert sanitize_text("Basic Service") == "Basic Service"


class TestNormalizeEmail:
    """Tests for normalize_email"""

    def test_lowercases_address(self):
        assert normalize_email("Jane@Example.COM") == "jane@example.com"

    def test_gmail_dots_and_tags_removed(self):
        assert normalize_email("Jane.Doe+shop@gmail.com") == "janedoe@gmail.com"

    def test_googlemail_maps_to_gmail(self):
        assert normalize_email("jane.doe@googlemail.com") == "janedoe@gmail.com"

    def test_other_providers_keep_dots_and_tags(self):
        assert normalize_email("jane.doe+shop@example.com") == "jane.doe+shop@example.com"

    def test_surrounding_whitespace_ignored(self):
        assert normalize_email("  jane@example.com ") == "jane@example.com"

    def test_invalid_addresses(self):
        for value in ["", "jane", "jane@", "@example.com", "jane@@example.com", "jane doe@example.com"]:
            assert normalize_email(value) is None, value


class TestParseDecimal:
    """Tests for parse_decimal"""

    def test_numbers_and_strings(self):
        assert parse_decimal(10) == Decimal("10")
        assert parse_decimal(75.5) == Decimal("75.5")
        assert parse_decimal("150.00") == Decimal("150.00")

    def test_comma_separator(self):
        assert parse_decimal("12,34") == parse_decimal("12.34") == Decimal("12.34")

    def test_rejects_non_numeric(self):
        for value in [None, "", "   ", "abc", "1.2.3", [], {}, True, False]:
            assert parse_decimal(value) is None, value

    def test_rejects_non_finite(self):
        for value in ["nan", "NaN", "inf", "-Infinity", float("inf"), float("nan")]:
            assert parse_decimal(value) is None, value


class TestTextChecks:
    """Tests for required_text and optional_text"""

    def test_required_text_rejects_empty_and_wrong_type(self):
        check = required_text("payer_name", "Payer name is required.")

        for value in [None, "", "   ", 123, ["Jane"]]:
            assert check(value) == Err("VALIDATION_ERROR", "Payer name is required.", "payer_name")

    def test_required_text_returns_sanitized(self):
        check = required_text("payer_name", "Payer name is required.")
        assert check("  <b>Jane</b> ") == Ok("&lt;b&gt;Jane&lt;/b&gt;")

    def test_optional_text_allows_missing(self):
        check = optional_text("service_type", "Service type must be text.")

        assert check(None) == Ok(None)
        assert check("   ") == Ok(None)
        assert check(5) == Err("VALIDATION_ERROR", "Service type must be text.", "service_type")

    def test_length_measured_after_escaping(self):
        check = required_text("payer_name", "Payer name is required.", max_length=10)

        assert check("Jane") == Ok("Jane")
        # "<b>" escapes to "&lt;b&gt;", 9 characters
        assert check("<b><b>") == Err(
            "VALIDATION_ERROR", "payer_name must be at most 10 characters.", "payer_name"
        )

    def test_optional_text_length(self):
        check = optional_text("payment_status", "Payment status must be text.", max_length=3)

        assert check("abc") == Ok("abc")
        assert isinstance(check("abcd"), Err)


class TestNumeric:
    """Tests for the numeric check"""

    def test_accepts_largest_storable_amount(self):
        check = numeric("amount", "Amount must be numeric.")

        assert check(str(MAX_AMOUNT)) == Ok(MAX_AMOUNT)

    def test_rejects_amount_that_rounds_past_column_capacity(self):
        check = numeric("amount", "Amount must be numeric.")

        assert check("9999999999.995") == Err("VALIDATION_ERROR", "Amount must be numeric.", "amount")
        assert isinstance(check("1e30"), Err)
