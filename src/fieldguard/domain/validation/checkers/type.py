"""Type checks: presence, booleans, datetimes and timezones."""

from datetime import date, datetime
from typing import Any

from dateutil import parser as date_parser
from dateutil import tz

from fieldguard.domain.validation.checkers.base import Checker
from fieldguard.domain.validation.functions import is_empty

_BOOLEAN_STRINGS = {"0", "1", "true", "false", "yes", "no", "on", "off"}


class TypeChecker(Checker):
    """Checks registered as ``type``."""

    messages = {
        "not_empty": "This value is required.",
        "boolean": "Not a valid boolean.",
        "datetime": "Not a valid datetime.",
        "timezone": "Not a valid timezone.",
    }

    def not_empty(self, value: Any, as_string: bool = True) -> bool:
        """Value is present; whitespace-only strings count as empty unless as_string is False."""
        if as_string and isinstance(value, str):
            return value.strip() != ""
        return not is_empty(value)

    def boolean(self, value: Any) -> bool:
        if isinstance(value, bool):
            return True
        if isinstance(value, int):
            return value in (0, 1)
        if isinstance(value, str):
            return value.strip().lower() in _BOOLEAN_STRINGS
        return False

    def datetime(self, value: Any) -> bool:
        if isinstance(value, (datetime, date)):
            return True
        if isinstance(value, bool):
            return False
        if isinstance(value, (int, float)):
            return True  # unix timestamp
        if not isinstance(value, str):
            return False
        try:
            date_parser.parse(value)
        except (ValueError, OverflowError):
            return False
        return True

    def timezone(self, value: Any) -> bool:
        if not isinstance(value, str) or not value.strip():
            return False
        return tz.gettz(value) is not None
