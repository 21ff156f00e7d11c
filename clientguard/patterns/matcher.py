"""Deny-list matching and checksum arithmetic.

Provides:
  - ``PatternHit``:  frozen dataclass naming the first pattern that matched.
  - ``first_match()``: apply a list of pre-compiled patterns; never raises.
  - ``is_engine_safe()`` / ``engine_text()``: gate text before any re2 call.
  - ``luhn_valid()``:  Luhn checksum over a digit string.

IMPORT RULES:
  - ``import re2`` ONLY — ``import re`` is PROHIBITED in this file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from clientguard.patterns.definitions import PatternEntry

logger = logging.getLogger(__name__)

#: rule_id reported when the engine itself fails. Treated as a hit (fail closed).
ENGINE_ERROR_RULE_ID: str = "PATTERN_ENGINE_ERROR"

#: Stands in for code points that have no UTF-8 encoding (lone surrogates).
REPLACEMENT_CHARACTER: str = "\ufffd"


@dataclass(frozen=True)
class PatternHit:
    """The first deny-list entry that matched a value.

    Fields:
        rule_id:     Rule family of the matching entry.
        slug:        Slug of the matching entry ("engine-error" on failure).
        match_start: Character offset where the match begins (None on failure).
        match_end:   Character offset where the match ends (None on failure).
    """

    rule_id: str
    slug: str
    match_start: Optional[int] = None
    match_end: Optional[int] = None


def first_match(text: str, entries: Iterable[PatternEntry]) -> Optional[PatternHit]:
    """Search ``text`` with each entry in order; first match wins.

    INVARIANTS:
      - Synchronous, no I/O.
      - NEVER raises. Any exception is logged at ERROR and reported as a hit
        with ``rule_id=ENGINE_ERROR_RULE_ID`` so that callers reject the value.

    Args:
        text:    Value to inspect.
        entries: Deny-list entries, evaluated in iteration order.

    Returns:
        ``PatternHit`` for the first matching entry, or None if nothing matched.
    """
    try:
        for entry in entries:
            m = entry.pattern.search(text)
            if m:
                return PatternHit(
                    rule_id=entry.rule_id,
                    slug=entry.slug,
                    match_start=m.start(),
                    match_end=m.end(),
                )
        return None
    except Exception as exc:  # noqa: BLE001
        logger.error(
            "Unexpected error in first_match(): %s: %s — rejecting value",
            type(exc).__name__,
            exc,
            exc_info=True,
        )
        return PatternHit(rule_id=ENGINE_ERROR_RULE_ID, slug="engine-error")


def is_engine_safe(text: str) -> bool:
    """True if re2 can accept ``text``.

    re2 encodes its input to UTF-8, which Python refuses for surrogate code
    points (``json.loads('"\\ud800"')``, surrogateescape'd file names). Such a
    ``str`` makes every ``search``/``sub`` raise ``UnicodeEncodeError``.
    """
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def engine_text(text: str) -> str:
    """Return ``text`` with every surrogate replaced by U+FFFD.

    Sanitizers pass input through here so their re2 calls cannot raise.
    Text that already encodes is returned unchanged.
    """
    if is_engine_safe(text):
        return text
    return "".join(
        REPLACEMENT_CHARACTER if "\ud800" <= char <= "\udfff" else char for char in text
    )


def luhn_valid(digits: str) -> bool:
    """Return True if ``digits`` passes the Luhn checksum.

    Every second digit counting from the rightmost is doubled; doubled values
    above 9 have 9 subtracted; the total must be divisible by 10.

    ``digits`` must be non-empty and contain only 0-9. Anything else is False.
    """
    if not digits or not digits.isascii() or not digits.isdigit():
        return False

    total = 0
    for position, char in enumerate(reversed(digits)):
        digit = int(char)
        if position % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0
