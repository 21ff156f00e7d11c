"""ClientGuard validator set.

Validator factories (validators.py) return callables mapping a field value to
a ValidationVerdict; error_message() (messages.py) renders a verdict as text.
"""

from __future__ import annotations

from clientguard.validation.messages import error_message
from clientguard.validation.validators import (
    Validator,
    alphanumeric,
    compose,
    credit_card,
    date_range,
    email,
    matches,
    no_html,
    no_sql_injection,
    no_whitespace_only,
    no_xss,
    numeric_range,
    pattern,
    phone_number,
    required,
    safe_file_name,
    string_length,
    strong_password,
    url,
    whitelist,
)

__all__ = [
    "Validator",
    "alphanumeric",
    "compose",
    "credit_card",
    "date_range",
    "email",
    "error_message",
    "matches",
    "no_html",
    "no_sql_injection",
    "no_whitespace_only",
    "no_xss",
    "numeric_range",
    "pattern",
    "phone_number",
    "required",
    "safe_file_name",
    "string_length",
    "strong_password",
    "url",
    "whitelist",
]
