"""Conditional presence checks.

These run against empty values (they are listed in the default empty
conditions). A value that is present always passes. An empty value fails
when the dependency on other fields makes it required, otherwise the
remaining rules of the field are skipped.
"""

from typing import Any, Sequence, Union

from fieldguard.domain.validation.checkers.base import Checker
from fieldguard.domain.validation.functions import is_empty
from fieldguard.domain.validation.rules import STOP_VALIDATION

Fields = Union[str, Sequence[str]]


class RequiredChecker(Checker):
    """Checks registered as ``required``."""

    messages = {
        "with_any": "This value is required.",
        "with_all": "This value is required.",
        "without_any": "This value is required.",
        "without_all": "This value is required.",
    }

    def with_any(self, value: Any, fields: Fields) -> Any:
        """Required when any of the fields is present."""
        return self._require(value, any(self._present(fields)))

    def with_all(self, value: Any, fields: Fields) -> Any:
        """Required when all of the fields are present."""
        return self._require(value, all(self._present(fields)))

    def without_any(self, value: Any, fields: Fields) -> Any:
        """Required when any of the fields is missing."""
        return self._require(value, not all(self._present(fields)))

    def without_all(self, value: Any, fields: Fields) -> Any:
        """Required when all of the fields are missing."""
        return self._require(value, not any(self._present(fields)))

    def _present(self, fields: Fields) -> list[bool]:
        if isinstance(fields, str):
            fields = [fields]
        return [not is_empty(self.validator.get_value(field)) for field in fields]

    @staticmethod
    def _require(value: Any, required: bool) -> Any:
        if not is_empty(value):
            return True
        if required:
            return False
        return STOP_VALIDATION
