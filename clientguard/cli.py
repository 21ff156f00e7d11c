"""Command-line entry point for ClientGuard.

Runs the policy and validation primitives against single values so that
configured URL lists and validator behaviour can be checked from a shell:

    clientguard classify https://host/api/v1/ports
    clientguard validate email "a@example.com"
    clientguard validate numeric-range 42 --min 1 --max 10
    clientguard sanitize file-name "../../etc/passwd"
    clientguard password "Ab1!aaaa"

Results are printed to stdout as JSON; logs go to stderr. The exit status is 0
on success and 1 when a validated value (or password) is rejected.

Config is loaded via load_config(); errors there exit with status 1 before
any command runs.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Callable, Optional, Sequence

from clientguard import __version__
from clientguard.config import load_config
from clientguard.policy.classifier import UrlClassifier
from clientguard.sanitizer import (
    escape,
    password_strength,
    sanitize_css,
    sanitize_email,
    sanitize_file_name,
    sanitize_image_src,
    sanitize_number,
    sanitize_phone_number,
    sanitize_sql_input,
    strip_tags,
)
from clientguard.utils.logger import configure_logging
from clientguard.validation import validators as v
from clientguard.validation.messages import error_message

# Validators that take no arguments.
_SIMPLE_VALIDATORS: dict[str, Callable[[], v.Validator]] = {
    "required": v.required,
    "whitespace": v.no_whitespace_only,
    "email": v.email,
    "phone": v.phone_number,
    "url": v.url,
    "alphanumeric": v.alphanumeric,
    "strong-password": v.strong_password,
    "no-xss": v.no_xss,
    "no-sql-injection": v.no_sql_injection,
    "no-html": v.no_html,
    "file-name": v.safe_file_name,
    "credit-card": v.credit_card,
}

# Validators that need --min/--max, --allowed or --pattern.
_BOUNDED_VALIDATORS = ("numeric-range", "string-length", "date-range")
_VALIDATOR_KINDS = sorted([*_SIMPLE_VALIDATORS, *_BOUNDED_VALIDATORS, "whitelist", "pattern"])

_SANITIZERS: dict[str, Callable[[str], Any]] = {
    "strip-tags": strip_tags,
    "escape": escape,
    "file-name": sanitize_file_name,
    "email": sanitize_email,
    "phone": sanitize_phone_number,
    "number": sanitize_number,
    "sql": sanitize_sql_input,
    "css": sanitize_css,
    "image-src": sanitize_image_src,
}


def _emit(payload: dict) -> None:
    print(json.dumps(payload, default=str))


def _build_validator(args: argparse.Namespace) -> v.Validator:
    kind = args.kind
    if kind in _SIMPLE_VALIDATORS:
        return _SIMPLE_VALIDATORS[kind]()
    if kind == "whitelist":
        if not args.allowed:
            raise SystemExit("validate whitelist: at least one --allowed value is required")
        return v.whitelist(args.allowed)
    if kind == "pattern":
        if not args.pattern:
            raise SystemExit("validate pattern: --pattern is required")
        return v.pattern(args.pattern)

    if args.min is None or args.max is None:
        raise SystemExit(f"validate {kind}: --min and --max are required")
    if kind == "numeric-range":
        return v.numeric_range(float(args.min), float(args.max))
    if kind == "string-length":
        return v.string_length(int(args.min), int(args.max))
    try:
        return v.date_range(args.min, args.max)
    except ValueError as exc:
        raise SystemExit(f"validate date-range: invalid bound: {exc}")


# ─── Subcommands ──────────────────────────────────────────────────────────────


def _cmd_classify(args: argparse.Namespace, classifier: UrlClassifier) -> int:
    url_class = classifier.classify(args.url)
    _emit({"url": args.url, "url_class": url_class.value})
    return 0


def _cmd_validate(args: argparse.Namespace, classifier: UrlClassifier) -> int:
    verdict = _build_validator(args)(args.value)
    _emit({
        "kind": args.kind,
        "valid": verdict.is_valid,
        "failure_kind": verdict.failure_kind.value if verdict.failure_kind else None,
        "message": error_message(verdict),
        "details": verdict.details,
    })
    return 0 if verdict.is_valid else 1


def _cmd_sanitize(args: argparse.Namespace, classifier: UrlClassifier) -> int:
    _emit({"kind": args.kind, "input": args.value, "output": _SANITIZERS[args.kind](args.value)})
    return 0


def _cmd_password(args: argparse.Namespace, classifier: UrlClassifier) -> int:
    result = password_strength(args.value)
    _emit({
        "valid": result.is_valid,
        "strength": result.strength.value,
        "issues": list(result.issues),
    })
    return 0 if result.is_valid else 1


# ─── Parser ───────────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clientguard",
        description="Request authorization policy and input sanitization tools.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", help="Path to a config.yaml (overrides the search order)")
    sub = parser.add_subparsers(dest="command", required=True)

    classify = sub.add_parser("classify", help="Classify a request URL")
    classify.add_argument("url")
    classify.set_defaults(handler=_cmd_classify)

    validate = sub.add_parser("validate", help="Run one validator against a value")
    validate.add_argument("kind", choices=_VALIDATOR_KINDS)
    validate.add_argument("value")
    validate.add_argument("--min", help="Lower bound (number, length or ISO date)")
    validate.add_argument("--max", help="Upper bound (number, length or ISO date)")
    validate.add_argument(
        "--allowed", action="append", default=[], help="Allowed value (repeatable)"
    )
    validate.add_argument("--pattern", help="Regular expression for the pattern validator")
    validate.set_defaults(handler=_cmd_validate)

    sanitize = sub.add_parser("sanitize", help="Run one sanitizer against a value")
    sanitize.add_argument("kind", choices=sorted(_SANITIZERS))
    sanitize.add_argument("value")
    sanitize.set_defaults(handler=_cmd_sanitize)

    password = sub.add_parser("password", help="Rate password strength")
    password.add_argument("value")
    password.set_defaults(handler=_cmd_password)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse arguments, load config and run the selected subcommand.

    Raises:
        SystemExit: Propagated from load_config() on config errors, and from
                    argparse on usage errors.
    """
    args = build_parser().parse_args(argv)
    config = load_config(args.config)
    configure_logging(config.logging.level, config.logging.json_output)
    classifier = UrlClassifier.from_config(config.policy)
    return args.handler(args, classifier)


if __name__ == "__main__":
    sys.exit(main())
