"""Config loading for ClientGuard.

Reads `.clientguard/config.yaml` (or `~/.clientguard/config.yaml`).
Raises SystemExit on parse errors, a missing `version` field, or invalid values.
If no config file is found, returns default values (safe to run without config).

Config search order:
  1. `config_path` argument (if provided — for testing or explicit override)
  2. CLIENTGUARD_CONFIG environment variable (if set)
  3. `.clientguard/config.yaml` (working directory — for development)
  4. `~/.clientguard/config.yaml` (home directory — for deployments)

Environment variable overrides (applied after file parsing):
  CLIENTGUARD_TENANT_ID  — overrides policy.tenant_header_value
  CLIENTGUARD_API_URL    — overrides transport.api_url
  CLIENTGUARD_LOG_LEVEL  — overrides logging.level
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import urlsplit

import yaml

from clientguard.constants import (
    DEFAULT_API_URL,
    DEFAULT_AUTH_FAILURE_PHRASES,
    DEFAULT_MAX_CONNECTIONS,
    DEFAULT_NO_LOGOUT_ON_401_SUBSTRINGS,
    DEFAULT_PUBLIC_URL_SUBSTRINGS,
    DEFAULT_TENANT_HEADER_NAME,
    DEFAULT_TENANT_HEADER_VALUE,
    DEFAULT_TIMEOUT_S,
)
from clientguard.utils.logger import get_logger

logger = get_logger(__name__)

# ─── Version constants ────────────────────────────────────────────────────────

SUPPORTED_CONFIG_VERSION = 1

SUPPORTED_VERSIONS: frozenset[int] = frozenset({1})

# ─── Validation sets ─────────────────────────────────────────────────────────

VALID_LOG_LEVELS: frozenset[str] = frozenset(
    {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
)

DEFAULT_CONFIG_PATHS = [
    ".clientguard/config.yaml",
    "~/.clientguard/config.yaml",
]

_LOOPBACK_HOSTS: frozenset[str] = frozenset({"localhost", "127.0.0.1", "::1"})


# ─── Dataclasses ─────────────────────────────────────────────────────────────


@dataclass
class PolicyConfig:
    """Request authorization policy configuration.

    public_url_substrings:       URLs containing any of these carry no token and
                                 are exempt from automatic sign-out.
    no_logout_on_401_substrings: URLs containing any of these carry the token but
                                 never sign the user out on 401.
    tenant_header_name/value:    Tenant header attached to every request.
    auth_failure_phrases:        401 message substrings that justify a sign-out.
    case_sensitive_urls:         Compare URLs case-sensitively (default: fold case).
    """

    public_url_substrings: list[str] = field(
        default_factory=lambda: list(DEFAULT_PUBLIC_URL_SUBSTRINGS)
    )
    no_logout_on_401_substrings: list[str] = field(
        default_factory=lambda: list(DEFAULT_NO_LOGOUT_ON_401_SUBSTRINGS)
    )
    tenant_header_name: str = DEFAULT_TENANT_HEADER_NAME
    tenant_header_value: str = DEFAULT_TENANT_HEADER_VALUE
    auth_failure_phrases: list[str] = field(
        default_factory=lambda: list(DEFAULT_AUTH_FAILURE_PHRASES)
    )
    case_sensitive_urls: bool = False


@dataclass
class TransportConfig:
    """HTTP transport configuration."""

    api_url: str = DEFAULT_API_URL
    timeout_s: float = DEFAULT_TIMEOUT_S
    max_connections: int = DEFAULT_MAX_CONNECTIONS
    security_headers_enabled: bool = True


@dataclass
class LoggingConfig:
    level: str = "INFO"
    json_output: bool = True


@dataclass
class Config:
    """Root configuration object populated from .clientguard/config.yaml.

    All fields have safe defaults — ClientGuard works without any config file.
    """

    version: int = SUPPORTED_CONFIG_VERSION
    policy: PolicyConfig = field(default_factory=PolicyConfig)
    transport: TransportConfig = field(default_factory=TransportConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    path: Optional[str] = None  # Path to the loaded config file

    @classmethod
    def defaults(cls) -> "Config":
        """Return a fully-default Config (no file required)."""
        return cls()

    @classmethod
    def from_dict(cls, raw: dict, path: Optional[str] = None) -> "Config":
        """Construct Config from a parsed YAML dict.

        Merges user-supplied values onto defaults; unknown keys are silently ignored.

        Args:
            raw:  Parsed YAML dict (must already be validated for version field).
            path: Path to the config file (stored in Config.path).

        Returns:
            Config with all fields populated from raw + defaults for missing fields.

        Raises:
            SystemExit(1): On a wrongly-typed list, an empty tenant header name,
                           a non-positive timeout or an unknown log level.
        """
        # ── Policy ────────────────────────────────────────────────────────────
        policy_raw = _section(raw, "policy")
        defaults = PolicyConfig()
        policy = PolicyConfig(
            public_url_substrings=_string_list(
                policy_raw, "public_url_substrings", defaults.public_url_substrings
            ),
            no_logout_on_401_substrings=_string_list(
                policy_raw, "no_logout_on_401_substrings", defaults.no_logout_on_401_substrings
            ),
            tenant_header_name=str(
                policy_raw.get("tenant_header_name", DEFAULT_TENANT_HEADER_NAME)
            ),
            tenant_header_value=str(
                policy_raw.get("tenant_header_value", DEFAULT_TENANT_HEADER_VALUE)
            ),
            auth_failure_phrases=_string_list(
                policy_raw, "auth_failure_phrases", defaults.auth_failure_phrases
            ),
            case_sensitive_urls=_flag(policy_raw, "case_sensitive_urls", False),
        )
        if not policy.tenant_header_name.strip():
            _config_error("policy.tenant_header_name must not be empty.")

        # ── Transport ─────────────────────────────────────────────────────────
        transport_raw = _section(raw, "transport")
        transport = TransportConfig(
            api_url=str(transport_raw.get("api_url", DEFAULT_API_URL)),
            timeout_s=transport_raw.get("timeout_s", DEFAULT_TIMEOUT_S),
            max_connections=transport_raw.get("max_connections", DEFAULT_MAX_CONNECTIONS),
            security_headers_enabled=_flag(transport_raw, "security_headers_enabled", True),
        )
        # bool is an int subclass; `timeout_s: true` is not a number of seconds.
        timeout_s = transport.timeout_s
        if (
            isinstance(timeout_s, bool)
            or not isinstance(timeout_s, (int, float))
            or timeout_s <= 0
        ):
            _config_error(
                f"Invalid transport.timeout_s: '{transport.timeout_s}'. "
                "Must be a positive number of seconds."
            )
        max_connections = transport.max_connections
        if (
            isinstance(max_connections, bool)
            or not isinstance(max_connections, int)
            or max_connections <= 0
        ):
            _config_error(
                f"Invalid transport.max_connections: '{transport.max_connections}'. "
                "Must be a positive integer."
            )

        # ── Logging ───────────────────────────────────────────────────────────
        logging_raw = _section(raw, "logging")
        log_config = LoggingConfig(
            level=str(logging_raw.get("level", "INFO")).upper(),
            json_output=_flag(logging_raw, "json_output", True),
        )
        if log_config.level not in VALID_LOG_LEVELS:
            _config_error(
                f"Invalid logging.level: '{log_config.level}'. "
                f"Supported values: {sorted(VALID_LOG_LEVELS)}."
            )

        return cls(
            version=raw.get("version", SUPPORTED_CONFIG_VERSION),
            policy=policy,
            transport=transport,
            logging=log_config,
            path=path,
        )


def _config_error(detail: str) -> None:
    print(f"CONFIG ERROR: {detail}", file=sys.stderr)
    raise SystemExit(1)


def _section(raw: dict, name: str) -> dict:
    """Return ``raw[name]`` as a dict; a null section means defaults."""
    value = raw.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        _config_error(f"'{name}' must be a YAML mapping, got {type(value).__name__}.")
    return value


def _string_list(section: dict, key: str, default: list[str]) -> list[str]:
    value: Any = section.get(key)
    if value is None:
        return list(default)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        _config_error(f"'{key}' must be a list of strings.")
    return list(value)


def _flag(section: dict, key: str, default: bool) -> bool:
    """Return a YAML boolean; quoted strings such as "false" are rejected."""
    value: Any = section.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        _config_error(f"'{key}' must be true or false, got {value!r}.")
    return value


# ─── Config loading ───────────────────────────────────────────────────────────


def load_config(config_path: Optional[str] = None) -> Config:
    """Load and validate ClientGuard configuration.

    Search order:
      1. ``config_path`` argument (if provided)
      2. ``CLIENTGUARD_CONFIG`` environment variable (if set)
      3. ``.clientguard/config.yaml`` (current working directory)
      4. ``~/.clientguard/config.yaml`` (home directory)

    If no file is found at any of these paths, returns default Config (not an error).
    If a file is found but invalid, writes error to stderr and raises SystemExit(1).
    Environment overrides are applied in both cases.

    Returns:
        Config object with all values populated (file values merged onto defaults).

    Raises:
        SystemExit(1): On YAML parse error, missing ``version`` field, unsupported
                       version, or any invalid section value.
    """
    search_paths: list[str] = []
    if config_path:
        search_paths.append(config_path)
    env_config = os.environ.get("CLIENTGUARD_CONFIG")
    if env_config:
        search_paths.append(env_config)
    search_paths.extend(DEFAULT_CONFIG_PATHS)

    found_path: Optional[str] = None
    for candidate in search_paths:
        expanded = os.path.expanduser(candidate)
        if os.path.isfile(expanded):
            found_path = expanded
            break

    # ── No config file found ─────────────────────────────────────────────────
    if found_path is None:
        logger.info("No config file found — using defaults", searched=search_paths)
        config = Config.defaults()
        _apply_env_overrides(config)
        return config

    # ── Parse config file ─────────────────────────────────────────────────────
    logger.info("Loading config", path=found_path)

    try:
        with open(found_path) as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        msg = (
            f"CONFIG ERROR: Failed to parse {found_path}: {exc}\n"
            "ClientGuard refuses to start with an invalid config. "
            "Check the YAML syntax and try again."
        )
        print(msg, file=sys.stderr)
        raise SystemExit(1)
    except OSError as exc:
        msg = f"CONFIG ERROR: Could not read {found_path}: {exc}"
        print(msg, file=sys.stderr)
        raise SystemExit(1)

    if not isinstance(raw, dict):
        if raw is None:
            msg = (
                f"CONFIG ERROR: {found_path} is missing the required 'version' field.\n"
                "Add 'version: 1' to the top of your config file."
            )
        else:
            msg = (
                f"CONFIG ERROR: {found_path} is not a valid YAML mapping.\n"
                "The config file must be a YAML dictionary at the top level."
            )
        print(msg, file=sys.stderr)
        raise SystemExit(1)

    # ── Version validation ────────────────────────────────────────────────────
    version = raw.get("version")
    if version is None:
        msg = (
            f"CONFIG ERROR: {found_path} is missing the required 'version' field.\n"
            "Add 'version: 1' to the top of your config file."
        )
        print(msg, file=sys.stderr)
        raise SystemExit(1)

    if version not in SUPPORTED_VERSIONS:
        msg = (
            f"CONFIG ERROR: Unsupported config version: {version}. "
            f"Supported versions: {sorted(SUPPORTED_VERSIONS)}."
        )
        print(msg, file=sys.stderr)
        raise SystemExit(1)

    config = Config.from_dict(raw, path=found_path)

    _apply_env_overrides(config)

    # ── Security warnings ─────────────────────────────────────────────────────
    if config.transport.api_url.startswith("http://") and not _is_loopback_url(
        config.transport.api_url
    ):
        logger.warning(
            "SECURITY WARNING: transport.api_url uses plain HTTP for a non-local host. "
            "Bearer tokens will be sent unencrypted.",
            api_url=config.transport.api_url,
        )

    logger.info(
        "Config loaded",
        path=found_path,
        version=config.version,
        public_urls=len(config.policy.public_url_substrings),
        no_logout_urls=len(config.policy.no_logout_on_401_substrings),
    )
    return config


def _is_loopback_url(url: str) -> bool:
    try:
        host = urlsplit(url).hostname
    except ValueError:
        return False
    return host in _LOOPBACK_HOSTS


def _apply_env_overrides(config: Config) -> None:
    """Apply environment variable overrides to a Config object in-place.

    Handles:
      CLIENTGUARD_TENANT_ID — config.policy.tenant_header_value
      CLIENTGUARD_API_URL   — config.transport.api_url
      CLIENTGUARD_LOG_LEVEL — config.logging.level (SystemExit(1) if unknown)

    Called for both file-loaded and default configs so env vars always take
    precedence over any file value.
    """
    tenant = os.environ.get("CLIENTGUARD_TENANT_ID")
    if tenant is not None:
        config.policy.tenant_header_value = tenant

    api_url = os.environ.get("CLIENTGUARD_API_URL")
    if api_url:
        config.transport.api_url = api_url

    level = os.environ.get("CLIENTGUARD_LOG_LEVEL")
    if level is not None:
        if level.upper() not in VALID_LOG_LEVELS:
            msg = (
                f"CONFIG ERROR: CLIENTGUARD_LOG_LEVEL environment variable is not a "
                f"valid level: '{level}'"
            )
            print(msg, file=sys.stderr)
            raise SystemExit(1)
        config.logging.level = level.upper()
