"""Unit tests for the composable field validators.

Every non-required validator treats None and "" as valid; that shared
behaviour is checked once, parametrized over the whole set.
"""

from __future__ import annotations

import json
from datetime import date, datetime, timezone

import pytest
import re2

from clientguard.models.verdict import ValidationFailureKind as Kind
from clientguard.models.verdict import ValidationVerdict
from clientguard.patterns.definitions import PatternEntry
from clientguard.validation import validators as v

OPTIONAL_VALIDATORS = [
    v.no_whitespace_only(),
    v.email(),
    v.phone_number(),
    v.url(),
    v.alphanumeric(),
    v.pattern(r"^\d+$"),
    v.strong_password(),
    v.no_xss(),
    v.no_sql_injection(),
    v.no_html(),
    v.safe_file_name(),
    v.credit_card(),
    v.numeric_range(1, 10),
    v.string_length(2, 5),
    v.whitelist(["a"]),
    v.date_range("2024-01-01", "2024-12-31"),
]


class TestEmptyValues:
    @pytest.mark.parametrize("validator", OPTIONAL_VALIDATORS)
    @pytest.mark.parametrize("value", [None, ""])
    def test_empty_is_valid(self, validator, value) -> None:
        assert validator(value).is_valid is True

    @pytest.mark.parametrize("value", [None, "", [], {}])
    def test_required_rejects_empty(self, value) -> None:
        verdict = v.required()(value)
        assert verdict.failure_kind is Kind.REQUIRED

    @pytest.mark.parametrize("value", ["x", 0, False, [1]])
    def test_required_accepts_values(self, value) -> None:
        assert v.required()(value).is_valid is True

    def test_whitespace_only(self) -> None:
        assert v.no_whitespace_only()("   ").failure_kind is Kind.WHITESPACE
        assert v.no_whitespace_only()(" a ").is_valid is True


class TestFormats:
    @pytest.mark.parametrize(
        "value", ["user@example.com", "first.last+tag@sub.example.co", "x@localhost"]
    )
    def test_email_valid(self, value: str) -> None:
        assert v.email()(value).is_valid is True

    @pytest.mark.parametrize(
        "value", ["plainaddress", "@example.com", "a@-bad.com", "a b@example.com", "a@b@c.com"]
    )
    def test_email_invalid(self, value: str) -> None:
        verdict = v.email()(value)
        assert verdict.failure_kind is Kind.EMAIL
        assert verdict.details["value"] == value

    @pytest.mark.parametrize("value", ["+1 (555) 123-4567", "+442071838750", "5551234"])
    def test_phone_valid(self, value: str) -> None:
        assert v.phone_number()(value).is_valid is True

    @pytest.mark.parametrize("value", ["0123456", "+0 555", "12345678901234567", "abc"])
    def test_phone_invalid(self, value: str) -> None:
        assert v.phone_number()(value).failure_kind is Kind.PHONE_NUMBER

    def test_url_valid(self) -> None:
        assert v.url()("https://example.com/a").is_valid is True

    def test_url_bad_format(self) -> None:
        verdict = v.url()("example.com")
        assert verdict.failure_kind is Kind.URL
        assert verdict.details["reason"] == "Invalid URL format"

    def test_url_bad_scheme(self) -> None:
        verdict = v.url()("ftp://example.com")
        assert verdict.details["reason"] == "Only HTTP and HTTPS protocols allowed"

    def test_alphanumeric(self) -> None:
        assert v.alphanumeric()("abc123").is_valid is True
        assert v.alphanumeric()("abc 123").failure_kind is Kind.ALPHANUMERIC
        assert v.alphanumeric()("héllo").failure_kind is Kind.ALPHANUMERIC

    def test_pattern_string(self) -> None:
        check = v.pattern(r"^[A-Z]{3}$", "Three capitals")
        assert check("ABC").is_valid is True
        verdict = check("abc")
        assert verdict.failure_kind is Kind.PATTERN
        assert verdict.details["required_pattern"] == r"^[A-Z]{3}$"
        assert verdict.details["message"] == "Three capitals"

    def test_pattern_precompiled(self) -> None:
        check = v.pattern(re2.compile(r"\d"))
        assert check("a1").is_valid is True
        assert check("ab").is_valid is False


class TestStrongPassword:
    def test_valid(self) -> None:
        assert v.strong_password()("Ab1!aaaa").is_valid is True

    def test_flags_every_missing_requirement(self) -> None:
        verdict = v.strong_password()("abc")
        assert verdict.failure_kind is Kind.STRONG_PASSWORD
        assert verdict.details == {
            "min_length": True,
            "uppercase": True,
            "number": True,
            "special_char": True,
        }

    def test_single_flag(self) -> None:
        assert v.strong_password()("Abcdefg!").details == {"number": True}


class TestMatches:
    def test_reads_sibling_at_call_time(self) -> None:
        form = {"password": "one"}
        check = v.matches(lambda: form["password"])
        assert check("one").is_valid is True
        form["password"] = "two"
        assert check("one").failure_kind is Kind.MISMATCH


class TestDenyLists:
    @pytest.mark.parametrize(
        "value",
        [
            "<script>alert(1)</script>",
            "javascript:alert(1)",
            '<img onerror="x">',
            "<iframe src=x>",
            "eval(x)",
        ],
    )
    def test_no_xss_rejects(self, value: str) -> None:
        verdict = v.no_xss()(value)
        assert verdict.failure_kind is Kind.XSS
        assert verdict.details["value"] == value
        assert verdict.details["rule"]

    def test_no_xss_accepts_plain_text(self) -> None:
        assert v.no_xss()("Hello, world").is_valid is True

    @pytest.mark.parametrize(
        "value", ["1 OR 1=1", "'; DROP TABLE users; --", "UNION SELECT *", "name\"", "a;b"]
    )
    def test_no_sql_injection_rejects(self, value: str) -> None:
        assert v.no_sql_injection()(value).failure_kind is Kind.SQL_INJECTION

    def test_no_sql_injection_accepts_plain_text(self) -> None:
        assert v.no_sql_injection()("John Smith").is_valid is True

    def test_injectable_pattern_list(self) -> None:
        entries = [PatternEntry(re2.compile(r"(?i)forbidden"), "CUSTOM", "forbidden-word")]
        check = v.no_xss(entries)
        assert check("<script>x</script>").is_valid is True
        verdict = check("FORBIDDEN")
        assert verdict.failure_kind is Kind.XSS
        assert verdict.details["rule"] == "forbidden-word"

    def test_no_html(self) -> None:
        assert v.no_html()("a <b>bold</b>").failure_kind is Kind.NO_HTML
        assert v.no_html()("2 < 3").is_valid is True


class TestSafeFileName:
    @pytest.mark.parametrize("value", ["../secret", "a/b.txt", "a\\b.txt", "..hidden"])
    def test_traversal(self, value: str) -> None:
        verdict = v.safe_file_name()(value)
        assert verdict.failure_kind is Kind.UNSAFE_FILE_NAME
        assert verdict.details["reason"] == "Directory traversal detected"

    @pytest.mark.parametrize("value", ["a<b.txt", "c:d", "what?.txt", "star*.txt", 'q"t'])
    def test_dangerous_characters(self, value: str) -> None:
        verdict = v.safe_file_name()(value)
        assert verdict.details["reason"] == "Contains dangerous characters"

    def test_ok(self) -> None:
        assert v.safe_file_name()("report-2024.final.pdf").is_valid is True


class TestCreditCard:
    @pytest.mark.parametrize("value", ["4532015112830366", "4532 0151 1283 0366"])
    def test_valid(self, value: str) -> None:
        assert v.credit_card()(value).is_valid is True

    @pytest.mark.parametrize("value", ["4532015112830367", "4532-0151-1283-0366", "abcd"])
    def test_invalid(self, value: str) -> None:
        assert v.credit_card()(value).failure_kind is Kind.CREDIT_CARD


class TestNumericRange:
    @pytest.mark.parametrize("value", [1, 10, 5.5, "7", 0.0 + 1])
    def test_inside(self, value) -> None:
        assert v.numeric_range(1, 10)(value).is_valid is True

    def test_zero_is_a_value(self) -> None:
        verdict = v.numeric_range(1, 10)(0)
        assert verdict.failure_kind is Kind.NUMERIC_RANGE
        assert verdict.details["min"] == 1
        assert verdict.details["max"] == 10

    def test_not_a_number(self) -> None:
        verdict = v.numeric_range(1, 10)("ten")
        assert verdict.details["reason"] == "Not a number"

    @pytest.mark.parametrize("value", [True, float("nan")])
    def test_bool_and_nan_rejected(self, value) -> None:
        assert v.numeric_range(0, 10)(value).details["reason"] == "Not a number"


class TestStringLength:
    def test_bounds_inclusive(self) -> None:
        check = v.string_length(2, 5)
        assert check("ab").is_valid is True
        assert check("abcde").is_valid is True

    def test_too_long(self) -> None:
        verdict = v.string_length(2, 5)("abcdef")
        assert verdict.failure_kind is Kind.STRING_LENGTH
        assert verdict.details["current_length"] == 6
        assert verdict.details["min_length"] == 2
        assert verdict.details["max_length"] == 5

    def test_non_string_uses_str_form(self) -> None:
        assert v.string_length(1, 2)(12345).is_valid is False


class TestWhitelist:
    def test_member(self) -> None:
        assert v.whitelist(["red", "green"])("red").is_valid is True

    def test_case_sensitive(self) -> None:
        verdict = v.whitelist(["red", "green"])("Red")
        assert verdict.failure_kind is Kind.WHITELIST
        assert verdict.details["allowed_values"] == ["red", "green"]


class TestDateRange:
    def test_iso_strings(self) -> None:
        check = v.date_range("2024-01-01", "2024-12-31")
        assert check("2024-06-15").is_valid is True
        assert check("2024-01-01").is_valid is True
        assert check("2025-01-01").failure_kind is Kind.DATE_RANGE

    def test_date_objects(self) -> None:
        check = v.date_range(date(2024, 1, 1), date(2024, 12, 31))
        assert check(date(2024, 3, 1)).is_valid is True
        verdict = check(datetime(2023, 12, 31, 23, 59))
        assert verdict.details["min"] == date(2024, 1, 1)

    def test_unparseable_value_fails(self) -> None:
        verdict = v.date_range("2024-01-01", "2024-12-31")("not a date")
        assert verdict.failure_kind is Kind.DATE_RANGE
        assert verdict.details["reason"] == "Invalid date"

    def test_naive_vs_aware_fails(self) -> None:
        check = v.date_range("2024-01-01", "2024-12-31")
        aware = datetime(2024, 6, 1, tzinfo=timezone.utc)
        assert check(aware).details["reason"] == "Invalid date"

    def test_bad_bound_raises_at_construction(self) -> None:
        with pytest.raises(ValueError):
            v.date_range("yesterday", "2024-12-31")


class TestCompose:
    def test_first_failure_wins(self) -> None:
        check = v.compose(v.required(), v.email())
        assert check("").failure_kind is Kind.REQUIRED
        assert check("bad").failure_kind is Kind.EMAIL
        assert check("a@example.com").is_valid is True

    def test_empty_compose_is_valid(self) -> None:
        assert v.compose()("anything").is_valid is True

    def test_fresh_verdicts(self) -> None:
        check = v.email()
        assert check("bad") is not check("bad")


class TestUnencodableText:
    """Lone surrogates (from JSON or surrogateescape) never reach re2."""

    VALUE = json.loads('"a\\ud800b@example.com"')

    @pytest.mark.parametrize("validator", OPTIONAL_VALIDATORS)
    def test_never_raises(self, validator) -> None:
        assert isinstance(validator(self.VALUE), ValidationVerdict)

    @pytest.mark.parametrize(
        "validator, kind",
        [
            (v.email(), Kind.EMAIL),
            (v.phone_number(), Kind.PHONE_NUMBER),
            (v.alphanumeric(), Kind.ALPHANUMERIC),
            (v.pattern(r"."), Kind.PATTERN),
            (v.strong_password(), Kind.STRONG_PASSWORD),
            (v.no_xss(), Kind.XSS),
            (v.no_sql_injection(), Kind.SQL_INJECTION),
            (v.no_html(), Kind.NO_HTML),
            (v.safe_file_name(), Kind.UNSAFE_FILE_NAME),
            (v.credit_card(), Kind.CREDIT_CARD),
        ],
    )
    def test_fails_closed(self, validator, kind) -> None:
        verdict = validator(self.VALUE)
        assert verdict.is_valid is False
        assert verdict.failure_kind is kind
        assert verdict.details["reason"] == v.INVALID_ENCODING_REASON

    def test_password_not_echoed(self) -> None:
        verdict = v.strong_password()(self.VALUE)
        assert "value" not in verdict.details
