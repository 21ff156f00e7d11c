"""Pattern definitions for the sanitizer and validator set.

All patterns are pre-compiled at module load time using google-re2.
NO pattern compilation happens per-call or lazily. RE2 guarantees linear-time
matching, so hostile form input cannot trigger catastrophic backtracking.

IMPORT RULES:
  - ``import re2`` ONLY — ``import re`` is PROHIBITED in clientguard/patterns/,
    clientguard/sanitizer/ and clientguard/validation/.
  - RE2 has no lookaround; write patterns without it.

The XSS and SQL-injection lists are heuristic deny-lists. False negatives are
expected against obfuscated payloads. Validators take the list as an argument,
so deployments can swap in their own without touching decision logic.
"""

from __future__ import annotations

import re2

from dataclasses import dataclass
from typing import Any


# ---------------------------------------------------------------------------
# PatternEntry dataclass
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PatternEntry:
    """A single compiled deny-list pattern with metadata.

    Fields:
        pattern: Pre-compiled re2 pattern object. Compiled at module load time.
        rule_id: Identifier of the rule family (e.g. ``"XSS_PATTERN"``).
        slug:    Kebab-case name of this specific pattern (e.g. ``"script-tag"``).
    """
    pattern: Any           # re2._Regexp, pre-compiled at module load
    rule_id: str
    slug: str


# ===========================================================================
# XSS PATTERNS
# ===========================================================================

XSS_PATTERNS: list[PatternEntry] = [
    # Complete <script>…</script> element, any attributes, spanning lines.
    PatternEntry(
        pattern=re2.compile(r'(?is)<script\b.*?</script>'),
        rule_id="XSS_PATTERN",
        slug="script-tag",
    ),
    PatternEntry(
        pattern=re2.compile(r'(?i)javascript:'),
        rule_id="XSS_PATTERN",
        slug="javascript-scheme",
    ),
    # Inline event handlers: onclick=, onerror =, onload=...
    PatternEntry(
        pattern=re2.compile(r'(?i)on\w+\s*='),
        rule_id="XSS_PATTERN",
        slug="event-handler",
    ),
    PatternEntry(
        pattern=re2.compile(r'(?i)<iframe'),
        rule_id="XSS_PATTERN",
        slug="iframe-tag",
    ),
    PatternEntry(
        pattern=re2.compile(r'(?i)<object'),
        rule_id="XSS_PATTERN",
        slug="object-tag",
    ),
    PatternEntry(
        pattern=re2.compile(r'(?i)<embed'),
        rule_id="XSS_PATTERN",
        slug="embed-tag",
    ),
    PatternEntry(
        pattern=re2.compile(r'(?i)eval\('),
        rule_id="XSS_PATTERN",
        slug="eval-call",
    ),
]

# Content inspection (contains_xss_pattern) also flags legacy IE CSS expressions.
XSS_CONTENT_PATTERNS: list[PatternEntry] = XSS_PATTERNS + [
    PatternEntry(
        pattern=re2.compile(r'(?i)expression\('),
        rule_id="XSS_PATTERN",
        slug="css-expression",
    ),
]


# ===========================================================================
# SQL INJECTION PATTERNS
# ===========================================================================

SQL_INJECTION_PATTERNS: list[PatternEntry] = [
    PatternEntry(
        pattern=re2.compile(
            r'(?i)\b(SELECT|INSERT|UPDATE|DELETE|DROP|CREATE|ALTER|EXEC|EXECUTE|UNION|DECLARE)\b'
        ),
        rule_id="SQL_INJECTION_PATTERN",
        slug="sql-keyword",
    ),
    # Comment, wildcard, statement terminator, quotes.
    PatternEntry(
        pattern=re2.compile(r'(--|\*|;|\'|")'),
        rule_id="SQL_INJECTION_PATTERN",
        slug="sql-metacharacter",
    ),
    PatternEntry(
        pattern=re2.compile(r'(?i)\bOR\b.*=.*'),
        rule_id="SQL_INJECTION_PATTERN",
        slug="or-tautology",
    ),
    PatternEntry(
        pattern=re2.compile(r'(?i)\bAND\b.*=.*'),
        rule_id="SQL_INJECTION_PATTERN",
        slug="and-tautology",
    ),
]

# Keywords removed (not rejected) by sanitize_sql_input(). Matched anywhere,
# including inside longer words, mirroring a blunt strip rather than a parse.
SQL_STRIP_KEYWORDS = re2.compile(
    r'(?i)SELECT|INSERT|UPDATE|DELETE|DROP|CREATE|ALTER|EXEC|UNION'
)
SQL_STRIP_CHARS = re2.compile(r'[\'";\\]')


# ===========================================================================
# CSS INJECTION PATTERNS
# ===========================================================================

CSS_INJECTION_PATTERNS: list[PatternEntry] = [
    PatternEntry(re2.compile(r'(?i)javascript:'), "CSS_INJECTION_PATTERN", "javascript-scheme"),
    PatternEntry(re2.compile(r'(?i)expression\('), "CSS_INJECTION_PATTERN", "css-expression"),
    PatternEntry(re2.compile(r'(?i)import\s'), "CSS_INJECTION_PATTERN", "import-keyword"),
    PatternEntry(re2.compile(r'(?i)@import'), "CSS_INJECTION_PATTERN", "at-import"),
    PatternEntry(re2.compile(r'(?i)behavior:'), "CSS_INJECTION_PATTERN", "ie-behavior"),
    PatternEntry(re2.compile(r'(?i)-moz-binding:'), "CSS_INJECTION_PATTERN", "moz-binding"),
]


# ===========================================================================
# PASSWORD CLASSES
# ===========================================================================

PASSWORD_LOWERCASE = re2.compile(r'[a-z]')
PASSWORD_UPPERCASE = re2.compile(r'[A-Z]')
PASSWORD_DIGIT = re2.compile(r'\d')
# Special characters accepted by the password checks.
PASSWORD_SPECIAL = re2.compile(r'[!@#$%^&*(),.?":{}|<>]')


# ===========================================================================
# FORMAT PATTERNS
# ===========================================================================

# RFC 5322-inspired: permissive local part, dot-separated DNS labels of at most
# 63 characters that neither start nor end with a hyphen.
EMAIL_PATTERN = re2.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)

# Loose shape check used by sanitize_email() before normalising.
EMAIL_SHAPE_PATTERN = re2.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')

# E.164: optional +, no leading zero, at most 15 digits.
PHONE_PATTERN = re2.compile(r'^\+?[1-9]\d{1,14}$')
PHONE_SEPARATORS = re2.compile(r'[\s\-()]')
PHONE_STRIP = re2.compile(r'[^\d+]')

ALPHANUMERIC_PATTERN = re2.compile(r'^[a-zA-Z0-9]+$')
HTML_TAG_PATTERN = re2.compile(r'<[^>]*>')
WHITESPACE_RUN = re2.compile(r'\s')
DIGITS_ONLY = re2.compile(r'^\d+$')

# Leading decimal number, optional sign and exponent ("12.5kg" → "12.5").
NUMERIC_PREFIX = re2.compile(r'^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?')

# File names
PATH_SEPARATORS = re2.compile(r'[/\\]')
FILE_NAME_DISALLOWED = re2.compile(r'[^\w\s.-]')
FILE_NAME_DANGEROUS = re2.compile(r'[<>:"|?*]')


# ===========================================================================
# URL SCHEMES
# ===========================================================================

SAFE_URL_SCHEMES: frozenset[str] = frozenset({"http", "https"})
SAFE_LINK_SCHEMES: frozenset[str] = SAFE_URL_SCHEMES | {"mailto"}
DANGEROUS_SRC_SCHEMES: tuple[str, ...] = ("javascript:", "data:", "vbscript:")
