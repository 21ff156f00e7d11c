"""URL classification for the request authorization policy.

``UrlClassifier.classify()`` maps a request target to exactly one ``UrlClass``:

  1. PUBLIC            — URL contains any public substring
  2. SECURE_NO_LOGOUT  — else, URL contains any no-logout substring
  3. SECURE            — everything else

Matching is substring containment, not path-segment matching, so an entry such
as ``/api/v1/ports`` also matches ``/api/v1/ports-archive``. That over-match is
documented behaviour; tighten the configured substrings rather than the matcher.

The URL is not normalised beyond optional case folding.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from clientguard.constants import (
    DEFAULT_NO_LOGOUT_ON_401_SUBSTRINGS,
    DEFAULT_PUBLIC_URL_SUBSTRINGS,
)
from clientguard.models.request import UrlClass

if TYPE_CHECKING:
    from clientguard.config import PolicyConfig


class UrlClassifier:
    """Classifies request URLs against two static substring lists.

    Args:
        public_substrings:    Targets that never carry a bearer token.
        no_logout_substrings: Targets whose 401s never sign the user out.
        case_sensitive:       When False (default), both the URL and the list
                              entries are case-folded before comparison.
    """

    def __init__(
        self,
        public_substrings: Iterable[str] = DEFAULT_PUBLIC_URL_SUBSTRINGS,
        no_logout_substrings: Iterable[str] = DEFAULT_NO_LOGOUT_ON_401_SUBSTRINGS,
        case_sensitive: bool = False,
    ) -> None:
        self.case_sensitive = case_sensitive
        self._public = tuple(self._fold(s) for s in public_substrings if s)
        self._no_logout = tuple(self._fold(s) for s in no_logout_substrings if s)

    @classmethod
    def from_config(cls, config: "PolicyConfig") -> "UrlClassifier":
        return cls(
            public_substrings=config.public_url_substrings,
            no_logout_substrings=config.no_logout_on_401_substrings,
            case_sensitive=config.case_sensitive_urls,
        )

    def _fold(self, value: str) -> str:
        return value if self.case_sensitive else value.casefold()

    def classify(self, url: str) -> UrlClass:
        """Return the UrlClass for ``url``. Pure; never raises for str input."""
        target = self._fold(url)
        if any(s in target for s in self._public):
            return UrlClass.PUBLIC
        if any(s in target for s in self._no_logout):
            return UrlClass.SECURE_NO_LOGOUT
        return UrlClass.SECURE

    def is_public(self, url: str) -> bool:
        return self.classify(url) is UrlClass.PUBLIC
