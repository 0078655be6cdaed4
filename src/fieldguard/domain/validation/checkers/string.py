"""String checks."""

import re
from typing import Any, Sequence

from fieldguard.domain.validation.checkers.base import Checker


class StringChecker(Checker):
    """Checks registered as ``string``. Non-string values always fail."""

    messages = {
        "regexp": "Your value does not match required pattern.",
        "shorter": "Enter text shorter or equal to {0}.",
        "longer": "Your text must be longer or equal to {0}.",
        "length": "Your text length must be exactly equal to {0}.",
        "range": "Text length should be in range of {0}-{1}.",
    }

    def __init__(self) -> None:
        super().__init__()
        self._patterns: dict[str, re.Pattern] = {}

    def validate_arguments(self, method: str, arguments: Sequence[Any]) -> None:
        if method == "regexp" and arguments:
            pattern = arguments[0]
            if not isinstance(pattern, str):
                raise ValueError(f"Pattern must be a string, got {type(pattern).__name__}")
            try:
                self._compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid pattern {pattern!r}: {e}") from e

    def regexp(self, value: Any, pattern: str) -> bool:
        if not isinstance(value, str):
            return False
        return self._compile(pattern).search(value) is not None

    def shorter(self, value: Any, length: int) -> bool:
        return isinstance(value, str) and len(value) <= length

    def longer(self, value: Any, length: int) -> bool:
        return isinstance(value, str) and len(value) >= length

    def length(self, value: Any, length: int) -> bool:
        return isinstance(value, str) and len(value) == length

    def range(self, value: Any, minimum: int, maximum: int) -> bool:
        return isinstance(value, str) and minimum <= len(value) <= maximum

    def _compile(self, pattern: str) -> re.Pattern:
        if pattern not in self._patterns:
            self._patterns[pattern] = re.compile(pattern)
        return self._patterns[pattern]
