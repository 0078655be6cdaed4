"""Numeric checks."""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from fieldguard.domain.validation.checkers.base import Checker


def _to_number(value: Any) -> Optional[Decimal]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        return Decimal(str(value))
    if isinstance(value, str):
        try:
            return Decimal(value.strip())
        except InvalidOperation:
            return None
    return None


class NumberChecker(Checker):
    """Checks registered as ``number``. Numeric strings are accepted."""

    messages = {
        "range": "Your value should be in range of {0}-{1}.",
        "higher": "Your value should be higher than {0}.",
        "lower": "Your value should be lower than {0}.",
    }

    def range(self, value: Any, begin: Optional[float], end: Optional[float]) -> bool:
        """Inclusive range; a None bound leaves that side open."""
        number = _to_number(value)
        if number is None or number.is_nan():
            return False
        if begin is not None and number < Decimal(str(begin)):
            return False
        if end is not None and number > Decimal(str(end)):
            return False
        return True

    def higher(self, value: Any, limit: float) -> bool:
        return self.range(value, limit, None)

    def lower(self, value: Any, limit: float) -> bool:
        return self.range(value, None, limit)
