"""Text sanitizers.

Pure functions with no shared state; safe to call concurrently and repeatedly.
Bad input never raises: each function falls back to a safe default
(``""``, ``None``) instead.

IMPORT RULES:
  - ``import re2`` ONLY for pattern work. Patterns come from
    clientguard.patterns.definitions; nothing is compiled here.
"""

from __future__ import annotations

import json
import math
import secrets
from html.parser import HTMLParser
from typing import Any, Optional, Union

from clientguard.constants import NONCE_BYTES
from clientguard.patterns.definitions import (
    CSS_INJECTION_PATTERNS,
    DANGEROUS_SRC_SCHEMES,
    EMAIL_SHAPE_PATTERN,
    FILE_NAME_DISALLOWED,
    NUMERIC_PREFIX,
    PATH_SEPARATORS,
    PHONE_STRIP,
    SQL_STRIP_CHARS,
    SQL_STRIP_KEYWORDS,
    XSS_CONTENT_PATTERNS,
)
from clientguard.patterns.matcher import engine_text, first_match
from clientguard.utils.logger import get_logger

logger = get_logger(__name__)

# ─── HTML ─────────────────────────────────────────────────────────────────────

_ESCAPE_TABLE = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
    "/": "&#x2F;",
})

# Elements whose content is code, not text. Dropped together with their tags.
_NON_TEXT_ELEMENTS: frozenset[str] = frozenset({"script", "style"})


class _TextExtractor(HTMLParser):
    """Collects character data, skipping script/style bodies."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.parts: list[str] = []
        self._skip_depth = 0

    def handle_starttag(self, tag: str, attrs: list) -> None:
        if tag in _NON_TEXT_ELEMENTS:
            self._skip_depth += 1

    def handle_endtag(self, tag: str) -> None:
        if tag in _NON_TEXT_ELEMENTS and self._skip_depth:
            self._skip_depth -= 1

    def handle_data(self, data: str) -> None:
        if not self._skip_depth:
            self.parts.append(data)


def strip_tags(text: str) -> str:
    """Remove all markup and return the plain text content.

    Entities are decoded (``&amp;`` → ``&``), so the result is plain text and
    must still go through ``escape()`` before being rendered as HTML.

    >>> strip_tags('<p>Hello <b>world</b></p>')
    'Hello world'
    """
    if not text:
        return ""
    parser = _TextExtractor()
    parser.feed(text)
    parser.close()
    return "".join(parser.parts)


def escape(text: str) -> str:
    """Map ``& < > " ' /`` to their HTML entities.

    NOT idempotent: escaping already-escaped text double-escapes
    (``&amp;`` → ``&amp;amp;``).
    """
    return text.translate(_ESCAPE_TABLE)


def contains_xss_pattern(content: str) -> bool:
    """True if ``content`` matches any XSS content pattern (heuristic)."""
    if not content:
        return False
    return first_match(content, XSS_CONTENT_PATTERNS) is not None


def sanitize_css(css: str) -> str:
    """Remove CSS injection vectors (javascript:, expression(, @import, ...)."""
    sanitized = engine_text(css)
    for entry in CSS_INJECTION_PATTERNS:
        sanitized = entry.pattern.sub("", sanitized)
    return sanitized


def sanitize_image_src(src: str) -> str:
    """Return ``src`` unchanged unless it uses a javascript:/data:/vbscript: scheme."""
    if not src:
        return ""
    lowered = src.strip().lower()
    if lowered.startswith(DANGEROUS_SRC_SCHEMES):
        logger.warning("Blocked dangerous image source protocol")
        return ""
    return src


def generate_nonce() -> str:
    """Random hex nonce for a Content-Security-Policy ``nonce-`` source."""
    return secrets.token_hex(NONCE_BYTES)


# ─── Files ────────────────────────────────────────────────────────────────────


def sanitize_file_name(name: str) -> str:
    """Strip path separators and anything outside ``[\\w\\s.-]``, then trim.

    Prevents directory traversal (``../../etc/passwd`` → ``....etcpasswd``);
    it does not guarantee a name is valid on every filesystem.

    Idempotent: sanitizing the output again returns it unchanged.
    """
    without_separators = PATH_SEPARATORS.sub("", engine_text(name))
    return FILE_NAME_DISALLOWED.sub("", without_separators).strip()


# ─── Contact details ──────────────────────────────────────────────────────────


def sanitize_email(email: str) -> str:
    """Strip markup and return the lower-cased address, or ``""`` if malformed.

    The shape check runs before trimming, so surrounding whitespace is rejected.
    """
    stripped = engine_text(strip_tags(email or ""))
    if EMAIL_SHAPE_PATTERN.search(stripped):
        return stripped.lower().strip()
    return ""


def sanitize_phone_number(phone: str) -> str:
    """Keep digits and ``+`` only."""
    return PHONE_STRIP.sub("", engine_text(phone or ""))


# ─── Numbers / structured data ────────────────────────────────────────────────


def sanitize_number(value: Union[str, int, float, None]) -> Optional[float]:
    """Parse a finite number, or return None.

    Strings are parsed from their leading numeric prefix, so ``"12.5kg"`` gives
    ``12.5``. Booleans, NaN and infinities are rejected.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        m = NUMERIC_PREFIX.search(engine_text(value))
        if not m:
            return None
        number = float(m.group(0))
    else:
        return None
    return number if math.isfinite(number) else None


def sanitize_sql_input(value: str) -> str:
    """Remove SQL keywords and the characters ``' " ; \\``.

    Blunt keyword removal; it mangles ordinary words that contain a keyword.
    Use parameterised queries server-side; this is defense in depth only.
    """
    without_keywords = SQL_STRIP_KEYWORDS.sub("", engine_text(value or ""))
    return SQL_STRIP_CHARS.sub("", without_keywords)


def sanitize_json(text: str) -> Any:
    """Parse JSON text, returning None when it is malformed.

    A literal ``null`` document also yields None.
    """
    try:
        return json.loads(text)
    except (TypeError, ValueError) as exc:
        logger.debug("Invalid JSON input", error=str(exc))
        return None
