"""Composable field validators.

Every factory returns a ``Validator``: a side-effect-free callable taking one
field value and returning a fresh ``ValidationVerdict``. Validators never raise
for bad input and never cache; debouncing belongs to the form layer.
Text that has no UTF-8 encoding (lone surrogates) fails closed with
``reason=INVALID_ENCODING_REASON`` instead of reaching re2.

Empty values (``None`` or ``""``) are VALID for every validator except
``required()``. Emptiness is a separate concern, so fields compose
``required()`` with format checks instead of each check re-implementing it::

    check = compose(required(), email())
    check("")               # → fails with REQUIRED
    check("a@example.com")  # → valid

Deny-list validators (``no_xss``, ``no_sql_injection``) take their pattern
list as an argument so deployments can swap the lists without touching
this module.

IMPORT RULES:
  - ``import re2`` ONLY — ``import re`` is PROHIBITED in this file.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time
from typing import Any, Callable, Iterable, Optional, Sequence, Union

import re2

from clientguard.constants import PASSWORD_MIN_LENGTH
from clientguard.models.verdict import ValidationFailureKind as Kind
from clientguard.models.verdict import ValidationVerdict
from clientguard.patterns.definitions import (
    ALPHANUMERIC_PATTERN,
    DIGITS_ONLY,
    EMAIL_PATTERN,
    FILE_NAME_DANGEROUS,
    HTML_TAG_PATTERN,
    PASSWORD_DIGIT,
    PASSWORD_LOWERCASE,
    PASSWORD_SPECIAL,
    PASSWORD_UPPERCASE,
    PHONE_PATTERN,
    PHONE_SEPARATORS,
    SAFE_URL_SCHEMES,
    SQL_INJECTION_PATTERNS,
    WHITESPACE_RUN,
    XSS_PATTERNS,
    PatternEntry,
)
from clientguard.patterns.matcher import first_match, is_engine_safe, luhn_valid
from clientguard.sanitizer.urls import parse_url

Validator = Callable[[Any], ValidationVerdict]
DateLike = Union[date, datetime, str]

_OK = ValidationVerdict.ok

#: Reason reported for text re2 cannot take (it has no UTF-8 encoding).
INVALID_ENCODING_REASON = "Invalid text encoding"


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def _unencodable(kind: Kind, **details: Any) -> ValidationVerdict:
    return ValidationVerdict.fail(kind, reason=INVALID_ENCODING_REASON, **details)


# ─── Presence ─────────────────────────────────────────────────────────────────


def required() -> Validator:
    """Fail on ``None``, ``""`` and empty collections."""

    def validate(value: Any) -> ValidationVerdict:
        if _is_empty(value) or (isinstance(value, (list, tuple, set, dict)) and not value):
            return ValidationVerdict.fail(Kind.REQUIRED)
        return _OK()

    return validate


def no_whitespace_only() -> Validator:
    """Fail when a non-empty value consists only of whitespace."""

    def validate(value: Any) -> ValidationVerdict:
        if _is_empty(value):
            return _OK()
        if not str(value).strip():
            return ValidationVerdict.fail(Kind.WHITESPACE, value=value)
        return _OK()

    return validate


# ─── Formats ──────────────────────────────────────────────────────────────────


def email() -> Validator:
    """RFC 5322-inspired address check."""

    def validate(value: Any) -> ValidationVerdict:
        if _is_empty(value):
            return _OK()
        text = str(value)
        if not is_engine_safe(text):
            return _unencodable(Kind.EMAIL, value=value)
        if not EMAIL_PATTERN.search(text):
            return ValidationVerdict.fail(Kind.EMAIL, value=value)
        return _OK()

    return validate


def phone_number() -> Validator:
    """International (E.164) number; spaces, dashes and parentheses are ignored."""

    def validate(value: Any) -> ValidationVerdict:
        if _is_empty(value):
            return _OK()
        text = str(value)
        if not is_engine_safe(text):
            return _unencodable(Kind.PHONE_NUMBER, value=value)
        if not PHONE_PATTERN.search(PHONE_SEPARATORS.sub("", text)):
            return ValidationVerdict.fail(Kind.PHONE_NUMBER, value=value)
        return _OK()

    return validate


def url() -> Validator:
    """Absolute http(s) URL."""

    def validate(value: Any) -> ValidationVerdict:
        if _is_empty(value):
            return _OK()
        parts = parse_url(str(value))
        if parts is None:
            return ValidationVerdict.fail(Kind.URL, value=value, reason="Invalid URL format")
        if parts.scheme not in SAFE_URL_SCHEMES:
            return ValidationVerdict.fail(
                Kind.URL, value=value, reason="Only HTTP and HTTPS protocols allowed"
            )
        return _OK()

    return validate


def alphanumeric() -> Validator:
    """ASCII letters and digits only."""

    def validate(value: Any) -> ValidationVerdict:
        if _is_empty(value):
            return _OK()
        text = str(value)
        if not is_engine_safe(text):
            return _unencodable(Kind.ALPHANUMERIC, value=value)
        if not ALPHANUMERIC_PATTERN.search(text):
            return ValidationVerdict.fail(Kind.ALPHANUMERIC, value=value)
        return _OK()

    return validate


def pattern(regex: Any, message: Optional[str] = None) -> Validator:
    """Fail unless ``regex`` matches somewhere in the value.

    ``regex`` is a pattern string (compiled here with re2) or any pre-compiled
    object with a ``search`` method. Anchor it yourself for a full match.
    """
    compiled = re2.compile(regex) if isinstance(regex, str) else regex
    required_pattern = getattr(compiled, "pattern", str(regex))

    def validate(value: Any) -> ValidationVerdict:
        if _is_empty(value):
            return _OK()
        text = str(value)
        if not is_engine_safe(text):
            return _unencodable(Kind.PATTERN, value=value, message=message)
        if not compiled.search(text):
            return ValidationVerdict.fail(
                Kind.PATTERN,
                value=value,
                required_pattern=required_pattern,
                message=message,
            )
        return _OK()

    return validate


# ─── Passwords ────────────────────────────────────────────────────────────────


def strong_password() -> Validator:
    """Same classes as ``password_strength()``, reported as per-class flags.

    Failure details hold a flag for every unmet requirement:
    ``min_length``, ``uppercase``, ``lowercase``, ``number``, ``special_char``.
    """

    def validate(value: Any) -> ValidationVerdict:
        if _is_empty(value):
            return _OK()
        password = str(value)
        if not is_engine_safe(password):
            return _unencodable(Kind.STRONG_PASSWORD)
        flags: dict[str, bool] = {}
        if len(password) < PASSWORD_MIN_LENGTH:
            flags["min_length"] = True
        if not PASSWORD_UPPERCASE.search(password):
            flags["uppercase"] = True
        if not PASSWORD_LOWERCASE.search(password):
            flags["lowercase"] = True
        if not PASSWORD_DIGIT.search(password):
            flags["number"] = True
        if not PASSWORD_SPECIAL.search(password):
            flags["special_char"] = True
        if flags:
            return ValidationVerdict.fail(Kind.STRONG_PASSWORD, **flags)
        return _OK()

    return validate


def matches(other_value: Callable[[], Any]) -> Validator:
    """Fail unless the value equals ``other_value()`` (confirm-password fields).

    ``other_value`` is called at validation time so it always sees the current
    value of the sibling field.
    """

    def validate(value: Any) -> ValidationVerdict:
        if value != other_value():
            return ValidationVerdict.fail(Kind.MISMATCH)
        return _OK()

    return validate


# ─── Deny-lists ───────────────────────────────────────────────────────────────


def _deny_list(kind: Kind, patterns: Sequence[PatternEntry]) -> Validator:
    entries = tuple(patterns)

    def validate(value: Any) -> ValidationVerdict:
        if _is_empty(value):
            return _OK()
        text = str(value)
        if not is_engine_safe(text):
            return _unencodable(kind, value=value)
        hit = first_match(text, entries)
        if hit is not None:
            return ValidationVerdict.fail(kind, value=value, rule=hit.slug)
        return _OK()

    return validate


def no_xss(patterns: Sequence[PatternEntry] = XSS_PATTERNS) -> Validator:
    """Reject script tags, ``javascript:``, inline handlers, iframe/object/embed, ``eval(``.

    Heuristic defense in depth only; output must still be escaped on render.
    """
    return _deny_list(Kind.XSS, patterns)


def no_sql_injection(patterns: Sequence[PatternEntry] = SQL_INJECTION_PATTERNS) -> Validator:
    """Reject SQL keywords, quote/semicolon/comment tokens and OR/AND tautologies.

    Heuristic defense in depth only; queries must still be parameterised.
    """
    return _deny_list(Kind.SQL_INJECTION, patterns)


def no_html() -> Validator:
    def validate(value: Any) -> ValidationVerdict:
        if _is_empty(value):
            return _OK()
        text = str(value)
        if not is_engine_safe(text):
            return _unencodable(Kind.NO_HTML, value=value)
        if HTML_TAG_PATTERN.search(text):
            return ValidationVerdict.fail(Kind.NO_HTML, value=value)
        return _OK()

    return validate


def safe_file_name() -> Validator:
    """Reject traversal sequences, path separators and ``< > : " | ? *``."""

    def validate(value: Any) -> ValidationVerdict:
        if _is_empty(value):
            return _OK()
        name = str(value)
        if ".." in name or "/" in name or "\\" in name:
            return ValidationVerdict.fail(
                Kind.UNSAFE_FILE_NAME, value=value, reason="Directory traversal detected"
            )
        if not is_engine_safe(name):
            return _unencodable(Kind.UNSAFE_FILE_NAME, value=value)
        if FILE_NAME_DANGEROUS.search(name):
            return ValidationVerdict.fail(
                Kind.UNSAFE_FILE_NAME, value=value, reason="Contains dangerous characters"
            )
        return _OK()

    return validate


# ─── Payment cards ────────────────────────────────────────────────────────────


def credit_card() -> Validator:
    """Whitespace-insensitive card number check: digits only, Luhn checksum."""

    def validate(value: Any) -> ValidationVerdict:
        if _is_empty(value):
            return _OK()
        text = str(value)
        if not is_engine_safe(text):
            return _unencodable(Kind.CREDIT_CARD, value=value)
        digits = WHITESPACE_RUN.sub("", text)
        if not DIGITS_ONLY.search(digits) or not luhn_valid(digits):
            return ValidationVerdict.fail(Kind.CREDIT_CARD, value=value)
        return _OK()

    return validate


# ─── Bounds ───────────────────────────────────────────────────────────────────


def _to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


def numeric_range(min_value: float, max_value: float) -> Validator:
    """Inclusive numeric bounds. ``0`` is a value, not an empty field."""

    def validate(value: Any) -> ValidationVerdict:
        if _is_empty(value):
            return _OK()
        number = _to_number(value)
        if number is None:
            return ValidationVerdict.fail(Kind.NUMERIC_RANGE, value=value, reason="Not a number")
        if number < min_value or number > max_value:
            return ValidationVerdict.fail(
                Kind.NUMERIC_RANGE, value=value, min=min_value, max=max_value
            )
        return _OK()

    return validate


def string_length(min_length: int, max_length: int) -> Validator:
    """Inclusive length bounds on the string form of the value."""

    def validate(value: Any) -> ValidationVerdict:
        if _is_empty(value):
            return _OK()
        length = len(value) if isinstance(value, str) else len(str(value))
        if length < min_length or length > max_length:
            return ValidationVerdict.fail(
                Kind.STRING_LENGTH,
                value=value,
                current_length=length,
                min_length=min_length,
                max_length=max_length,
            )
        return _OK()

    return validate


def whitelist(allowed_values: Iterable[Any]) -> Validator:
    """Value must be one of ``allowed_values`` (exact, case-sensitive)."""
    allowed = list(allowed_values)

    def validate(value: Any) -> ValidationVerdict:
        if _is_empty(value):
            return _OK()
        if value not in allowed:
            return ValidationVerdict.fail(Kind.WHITELIST, value=value, allowed_values=allowed)
        return _OK()

    return validate


def _to_datetime(value: DateLike) -> datetime:
    """Coerce a date, datetime or ISO-8601 string; raises ValueError/TypeError."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str):
        return datetime.fromisoformat(value.strip())
    raise TypeError(f"unsupported date value: {type(value).__name__}")


def date_range(min_date: DateLike, max_date: DateLike) -> Validator:
    """Inclusive date bounds.

    Values and bounds may be ``date``, ``datetime`` or ISO-8601 strings. A value
    that cannot be parsed, or that cannot be compared with the bounds (naive vs
    timezone-aware), fails with ``reason="Invalid date"``.
    """
    lower = _to_datetime(min_date)
    upper = _to_datetime(max_date)

    def validate(value: Any) -> ValidationVerdict:
        if _is_empty(value):
            return _OK()
        try:
            moment = _to_datetime(value)
            out_of_range = moment < lower or moment > upper
        except (TypeError, ValueError):
            return ValidationVerdict.fail(Kind.DATE_RANGE, value=value, reason="Invalid date")
        if out_of_range:
            return ValidationVerdict.fail(
                Kind.DATE_RANGE, value=value, min=min_date, max=max_date
            )
        return _OK()

    return validate


# ─── Composition ──────────────────────────────────────────────────────────────


def compose(*validators: Validator) -> Validator:
    """Run ``validators`` in order and return the first failure (or valid)."""

    def validate(value: Any) -> ValidationVerdict:
        for validator in validators:
            verdict = validator(value)
            if not verdict.is_valid:
                return verdict
        return _OK()

    return validate
