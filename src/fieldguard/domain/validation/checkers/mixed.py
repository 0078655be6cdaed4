"""Checks that do not fit a single value type."""

from typing import Any

from fieldguard.domain.validation.checkers.base import Checker


class MixedChecker(Checker):
    """Checks registered as ``mixed``."""

    messages = {
        "card_number": "Please enter valid card number.",
        "match": "Fields {field} and {0} do not match.",
    }

    def card_number(self, value: Any) -> bool:
        """Luhn checksum over the digits of the value."""
        if not isinstance(value, (str, int)) or isinstance(value, bool):
            return False

        digits = str(value).replace(" ", "").replace("-", "")
        if not digits.isdigit() or not 12 <= len(digits) <= 19:
            return False

        total = 0
        for position, char in enumerate(reversed(digits)):
            digit = int(char)
            if position % 2 == 1:
                digit *= 2
                if digit > 9:
                    digit -= 9
            total += digit

        return total % 10 == 0

    def match(self, value: Any, field: str, strict: bool = False) -> bool:
        """Value equals the value of another field of the same data."""
        other = self.validator.get_value(field)
        if strict:
            return type(value) is type(other) and value == other
        return value == other or str(value) == str(other)
