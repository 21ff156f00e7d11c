"""ClientGuard sanitizer package.

Pure functions mapping raw text to cleaned text or a safety verdict:

  - text.py     — strip_tags, escape, sanitize_file_name, sanitize_email,
                  sanitize_phone_number, sanitize_number, sanitize_sql_input,
                  sanitize_json, sanitize_css, sanitize_image_src,
                  contains_xss_pattern, generate_nonce
  - urls.py     — is_safe_url, is_link_safe, is_url_allowed
  - password.py — password_strength
"""

from __future__ import annotations

from clientguard.sanitizer.password import password_strength
from clientguard.sanitizer.text import (
    contains_xss_pattern,
    escape,
    generate_nonce,
    sanitize_css,
    sanitize_email,
    sanitize_file_name,
    sanitize_image_src,
    sanitize_json,
    sanitize_number,
    sanitize_phone_number,
    sanitize_sql_input,
    strip_tags,
)
from clientguard.sanitizer.urls import is_link_safe, is_safe_url, is_url_allowed

__all__ = [
    "contains_xss_pattern",
    "escape",
    "generate_nonce",
    "is_link_safe",
    "is_safe_url",
    "is_url_allowed",
    "password_strength",
    "sanitize_css",
    "sanitize_email",
    "sanitize_file_name",
    "sanitize_image_src",
    "sanitize_json",
    "sanitize_number",
    "sanitize_phone_number",
    "sanitize_sql_input",
    "strip_tags",
]
