"""Email and URL checks."""

import re
from typing import Any

from fieldguard.domain.validation.checkers.base import Checker

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
URL_PATTERN = re.compile(r"^https?://[^\s/$.?#].[^\s]*$", re.IGNORECASE)


class AddressChecker(Checker):
    """Checks registered as ``address``."""

    messages = {
        "email": "Must be a valid email address.",
        "url": "Must be a valid URL address.",
    }

    def email(self, value: Any) -> bool:
        return isinstance(value, str) and EMAIL_PATTERN.match(value) is not None

    def url(self, value: Any, require_scheme: bool = True) -> bool:
        if not isinstance(value, str):
            return False
        if not require_scheme and "://" not in value:
            value = f"http://{value}"
        return URL_PATTERN.match(value) is not None
