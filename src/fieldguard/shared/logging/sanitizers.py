"""
Log sanitizers for validation events.

Validation logs name the field being checked and may carry the text of an
exception raised by a check, which can quote the checked value. Values and
error texts belonging to sensitive fields are redacted.
"""

import re
from typing import Any

from structlog.types import EventDict, WrappedLogger

REDACTED = "***REDACTED***"

SENSITIVE_PATTERNS = [
    r"password",
    r"pwd",
    r"secret",
    r"token",
    r"api_key",
    r"apikey",
    r"auth",
    r"credential",
    r"private",
    r"ssn",
    r"credit_card",
    r"card_number",
    r"cvv",
    r"(^|_)pin($|_)",
]

# Keys whose content derives from the checked value
VALUE_KEYS = ("value", "error")


class SensitiveFieldProcessor:
    """Structlog processor masking sensitive data in log events."""

    def __call__(
        self,
        logger: WrappedLogger,
        name: str,
        event_dict: EventDict,
    ) -> EventDict:
        return sanitize_for_log(event_dict)


def sanitize_for_log(data: dict[str, Any]) -> dict[str, Any]:
    """
    Sanitize a dictionary for logging.

    Keys that look sensitive are redacted. When ``field`` names a sensitive
    field, the value-derived keys of the same event are redacted too.

    Args:
        data: Dictionary to sanitize

    Returns:
        Sanitized copy
    """
    sensitive_subject = isinstance(data.get("field"), str) and is_sensitive_field(data["field"])

    sanitized = {}
    for key, value in data.items():
        if is_sensitive_field(key):
            sanitized[key] = REDACTED
        elif sensitive_subject and key in VALUE_KEYS:
            sanitized[key] = REDACTED
        elif isinstance(value, dict):
            sanitized[key] = sanitize_for_log(value)
        elif isinstance(value, list):
            sanitized[key] = [
                sanitize_for_log(item) if isinstance(item, dict) else item for item in value
            ]
        else:
            sanitized[key] = value

    return sanitized


def is_sensitive_field(field_name: str) -> bool:
    """Check if a field name indicates sensitive data."""
    field_lower = field_name.lower()
    return any(re.search(pattern, field_lower) for pattern in SENSITIVE_PATTERNS)
