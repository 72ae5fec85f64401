"""Masking of credentials and personal data in log output.

Staff sign in with email and password, and every gateway request carries an
API key plus a JWT. None of these may end up in a log file, and student
contact details should not either.
"""

from __future__ import annotations

import re
from typing import Any

MASK = "***MASKED***"

# Key/value pairs whose value is a secret. Group 1 is the key part we keep.
_SECRET_VALUE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r'(["\']?password["\']?\s*[:=]\s*)["\']?[^"\'\s,}\]]+["\']?', re.IGNORECASE),
    re.compile(
        r'(["\']?(?:refresh|access)_token["\']?\s*[:=]\s*)["\']?[A-Za-z0-9_\-\.]+["\']?',
        re.IGNORECASE,
    ),
    re.compile(r'(["\']?api_?key["\']?\s*[:=]\s*)["\']?[A-Za-z0-9_\-\.]+["\']?', re.IGNORECASE),
    re.compile(r"(Bearer\s+)[A-Za-z0-9_\-\.]+", re.IGNORECASE),
]

# Bare JWTs (header.payload.signature), e.g. the anon key pasted into a URL
_JWT_PATTERN = re.compile(r"eyJ[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]+")

_EMAIL_PATTERN = re.compile(r"([A-Za-z0-9._%+-]+)@([A-Za-z0-9.-]+\.[A-Za-z]{2,})")

# Field names whose values are masked wholesale in structured payloads
SENSITIVE_KEYWORDS: frozenset[str] = frozenset(
    {
        "password",
        "secret",
        "token",
        "apikey",
        "api_key",
        "authorization",
        "credential",
        "contact_number",
        "address",
    }
)


def _mask_email(match: re.Match[str]) -> str:
    local, domain = match.group(1), match.group(2)
    return f"{local[:2]}***@{domain}"


def mask_sensitive_string(text: str) -> str:
    """Replace secrets and email local-parts in ``text``."""
    if not text:
        return text

    result = text
    for pattern in _SECRET_VALUE_PATTERNS:
        result = pattern.sub(r"\g<1>" + MASK, result)
    result = _JWT_PATTERN.sub(MASK, result)
    result = _EMAIL_PATTERN.sub(_mask_email, result)
    return result


def is_sensitive_key(key: str) -> bool:
    lower_key = key.lower()
    return any(keyword in lower_key for keyword in SENSITIVE_KEYWORDS)


def mask_dict(data: dict[str, Any], depth: int = 0, max_depth: int = 8) -> dict[str, Any]:
    """Recursively mask a structured log payload.

    Args:
        data: Payload to mask
        depth: Current recursion depth
        max_depth: Depth after which nested values are returned untouched

    Returns:
        A new dictionary with sensitive values replaced by ``MASK``
    """
    if depth >= max_depth:
        return data

    result: dict[str, Any] = {}
    for key, value in data.items():
        if is_sensitive_key(str(key)):
            result[key] = MASK
        elif isinstance(value, dict):
            result[key] = mask_dict(value, depth + 1, max_depth)
        elif isinstance(value, list):
            result[key] = [
                mask_dict(item, depth + 1, max_depth) if isinstance(item, dict) else item
                for item in value
            ]
        elif isinstance(value, str):
            result[key] = mask_sensitive_string(value)
        else:
            result[key] = value
    return result


class SensitiveValue:
    """Wrap a secret so that formatting it never reveals the value.

    Usage:
        key = SensitiveValue(os.environ["SUPABASE_ANON_KEY"])
        logger.debug("Using key %s", key)  # logs ***MASKED***
    """

    def __init__(self, value: Any) -> None:
        self._value = value

    def get(self) -> Any:
        return self._value

    def __str__(self) -> str:
        return MASK

    def __repr__(self) -> str:
        return f"SensitiveValue({MASK})"

    def __bool__(self) -> bool:
        return bool(self._value)
