"""Shared redaction utilities for log output."""

from __future__ import annotations

import re
from typing import Any

from .const import API_SESSION_KEY_PARAM, CONF_PASSWORD, CONF_USERNAME

REDACTED = "**REDACTED**"

# Keys to fully redact (compared case-insensitively)
KEYS_TO_REDACT = {
    key.lower()
    for key in (CONF_PASSWORD, "password", "key", API_SESSION_KEY_PARAM, "cookie", "set-cookie")
}

# Keys holding login e-mail addresses (partial redaction - keep domain)
EMAIL_KEYS = {key.lower() for key in (CONF_USERNAME, "login", "username", "email")}

EMAIL_PATTERN = re.compile(r"([A-Za-z0-9._%+\-]+)@([A-Za-z0-9.\-]+\.[A-Za-z]{2,})")


def _redact_email(email: str | None | Any) -> str | Any:
    """Redact the local part of an e-mail address, keeping its first character and domain.

    Example: sleeper@example.com -> s***@example.com

    Non-string inputs are returned unchanged. Strings that are not e-mail
    addresses are fully redacted.
    """
    if not email or not isinstance(email, str):
        return email

    match = EMAIL_PATTERN.fullmatch(email.strip())
    if match is None:
        return REDACTED
    local, domain = match.groups()
    return f"{local[0]}***@{domain}"


def redact_string(text: str) -> str:
    """Redact e-mail addresses found within a string."""

    def replace_email(match: re.Match[str]) -> str:
        return _redact_email(match.group(0))

    return EMAIL_PATTERN.sub(replace_email, text)


def redact_data(data: Any, depth: int = 0) -> Any:
    """Recursively redact sensitive data from a dictionary.

    - Fully redacts passwords and session keys
    - Partially redacts login e-mail addresses (keeps the domain)

    Args:
        data: The data structure to redact.
        depth: Current recursion depth (for infinite loop prevention).

    Returns:
        A copy of the data with sensitive values redacted.
    """
    if depth > 20:
        return data

    if isinstance(data, dict):
        result = {}
        for key, value in data.items():
            key_lower = key.lower() if isinstance(key, str) else key
            if key_lower in KEYS_TO_REDACT:
                result[key] = REDACTED
            elif key_lower in EMAIL_KEYS:
                result[key] = _redact_email(value)
            else:
                result[key] = redact_data(value, depth + 1)
        return result
    elif isinstance(data, list):
        return [redact_data(item, depth + 1) for item in data]
    elif isinstance(data, str):
        return redact_string(data)
    else:
        return data
