"""User-facing messages for validation verdicts.

The validator set returns structured verdicts; this module is the default way
to turn one into text. Form layers with their own wording can ignore it.
"""

from __future__ import annotations

from clientguard.constants import PASSWORD_MIN_LENGTH
from clientguard.models.verdict import ValidationFailureKind as Kind
from clientguard.models.verdict import ValidationVerdict

_STATIC_MESSAGES: dict[Kind, str] = {
    Kind.REQUIRED: "This field is required",
    Kind.EMAIL: "Please enter a valid email address",
    Kind.PHONE_NUMBER: "Please enter a valid phone number",
    Kind.ALPHANUMERIC: "Only letters and numbers are allowed",
    Kind.SQL_INJECTION: "Input contains characters or keywords that are not allowed",
    Kind.XSS: "Input contains potentially unsafe content",
    Kind.CREDIT_CARD: "Please enter a valid card number",
    Kind.WHITELIST: "Please choose one of the allowed values",
    Kind.NO_HTML: "HTML tags are not allowed",
    Kind.WHITESPACE: "This field cannot be empty or contain only spaces",
    Kind.MISMATCH: "Values do not match",
}

# strong_password() flag → requirement phrase, in display order.
_PASSWORD_REQUIREMENTS: tuple[tuple[str, str], ...] = (
    ("number", "at least one number"),
    ("uppercase", "at least one uppercase letter"),
    ("lowercase", "at least one lowercase letter"),
    ("special_char", "at least one special character"),
    ("min_length", f"at least {PASSWORD_MIN_LENGTH} characters"),
)


def error_message(verdict: ValidationVerdict) -> str:
    """Return a message for ``verdict``; ``""`` when it is valid."""
    if verdict.is_valid:
        return ""

    kind = verdict.failure_kind
    details = verdict.details

    if kind in _STATIC_MESSAGES:
        return _STATIC_MESSAGES[kind]

    if kind is Kind.STRONG_PASSWORD:
        missing = [text for flag, text in _PASSWORD_REQUIREMENTS if details.get(flag)]
        if not missing:
            return "Password is not strong enough"
        return "Password must contain " + ", ".join(missing)

    if kind is Kind.NUMERIC_RANGE:
        if "min" not in details:
            return "Please enter a valid number"
        return f"Value must be between {details['min']} and {details['max']}"

    if kind is Kind.DATE_RANGE:
        if "min" not in details:
            return "Please enter a valid date"
        return f"Date must be between {details['min']} and {details['max']}"

    if kind is Kind.STRING_LENGTH:
        if "min_length" not in details:
            return "Invalid length"
        return (
            f"Length must be between {details['min_length']} and "
            f"{details['max_length']} characters"
        )

    if kind is Kind.URL:
        return details.get("reason") or "Please enter a valid URL"

    if kind is Kind.UNSAFE_FILE_NAME:
        return f"Unsafe file name: {details.get('reason', 'not allowed')}"

    if kind is Kind.PATTERN:
        return details.get("message") or "Invalid format"

    return "Invalid input"
