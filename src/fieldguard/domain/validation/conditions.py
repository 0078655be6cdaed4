"""
Conditional-skip predicates.

A rule carrying ``{"condition": "<name>"}`` is only checked while the named
condition is met. Conditions do not look at the value being checked; they
read the rest of the data or the caller context through the validator they
are bound to.
"""

import copy
from typing import Any, Callable

from fieldguard.domain.errors import ValidatorError
from fieldguard.domain.validation.functions import is_empty


class Condition:
    """Base class for conditional-skip predicates."""

    def __init__(self) -> None:
        self._validator = None

    @property
    def validator(self):
        if self._validator is None:
            raise ValidatorError(f"{type(self).__name__} is not bound to a validator")
        return self._validator

    def with_validator(self, validator) -> "Condition":
        """Return a copy bound to the validator being run."""
        condition = copy.copy(self)
        condition._validator = validator
        return condition

    def is_met(self) -> bool:
        raise NotImplementedError


class CallbackCondition(Condition):
    """Delegates to ``predicate(validator)``."""

    def __init__(self, predicate: Callable[[Any], bool]) -> None:
        super().__init__()
        self.predicate = predicate

    def is_met(self) -> bool:
        return bool(self.predicate(self.validator))


class FieldPresentCondition(Condition):
    """Met when another field holds a non-empty value."""

    def __init__(self, field: str) -> None:
        super().__init__()
        self.field = field

    def is_met(self) -> bool:
        return not is_empty(self.validator.get_value(self.field))


class FieldAbsentCondition(FieldPresentCondition):
    """Met when another field is missing or empty."""

    def is_met(self) -> bool:
        return not super().is_met()
