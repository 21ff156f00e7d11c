"""URL safety checks.

All checks fail closed: a URL that cannot be parsed is never "safe".
"""

from __future__ import annotations

from typing import Iterable, Optional
from urllib.parse import SplitResult, urlsplit

from clientguard.patterns.definitions import SAFE_LINK_SCHEMES, SAFE_URL_SCHEMES


def parse_url(url: str) -> Optional[SplitResult]:
    """Parse an absolute URL; None if malformed or missing a scheme.

    http(s) URLs must also carry a host.
    """
    if not isinstance(url, str) or not url.strip():
        return None
    try:
        parts = urlsplit(url.strip())
        # .hostname / .port validate the netloc and raise ValueError when bad
        hostname = parts.hostname
        _ = parts.port
    except ValueError:
        return None
    if not parts.scheme:
        return None
    if parts.scheme in SAFE_URL_SCHEMES and not hostname:
        return None
    return parts


def _host_allowed(hostname: str, allowed_domains: Iterable[str]) -> bool:
    host = hostname.casefold()
    for domain in allowed_domains:
        domain = domain.casefold()
        if domain and (host == domain or host.endswith("." + domain)):
            return True
    return False


def is_safe_url(url: str, allowed_domains: Iterable[str] = ()) -> bool:
    """True if ``url`` is http(s) and, when a whitelist is given, on an allowed domain.

    A host is allowed if it equals an allowed domain or is a subdomain of one
    (``sub.example.com`` is allowed by ``example.com``; ``badexample.com`` is not).

    >>> is_safe_url("javascript:alert(1)")
    False
    >>> is_safe_url("https://sub.example.com", ["example.com"])
    True
    """
    parts = parse_url(url)
    if parts is None or parts.scheme not in SAFE_URL_SCHEMES:
        return False
    domains = list(allowed_domains)
    if domains:
        return _host_allowed(parts.hostname or "", domains)
    return True


def is_link_safe(url: str) -> bool:
    """True if ``url`` uses http, https or mailto."""
    parts = parse_url(url)
    return parts is not None and parts.scheme in SAFE_LINK_SCHEMES


def is_url_allowed(url: str, allowed_domains: Iterable[str]) -> bool:
    """True if ``url`` parses and its host is on ``allowed_domains`` (any scheme)."""
    parts = parse_url(url)
    if parts is None or not parts.hostname:
        return False
    return _host_allowed(parts.hostname, allowed_domains)
