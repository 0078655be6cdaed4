"""Base class for validation checkers."""

import copy
from typing import Any, ClassVar, Optional, Sequence

from fieldguard.domain.errors import RuleDefinitionError, ValidatorError


class Checker:
    """
    Group of related check methods addressed as ``"<checker>:<method>"``.

    Every public method of a subclass is a check: it receives the field value
    followed by the rule arguments and returns ``True`` on success, ``False``
    on failure or ``STOP_VALIDATION`` to halt the remaining rules of the
    field without an error. Failure messages are looked up in ``messages``.
    """

    messages: ClassVar[dict[str, str]] = {}

    _reserved: ClassVar[frozenset[str]] = frozenset(
        {
            "check",
            "message_for",
            "with_validator",
            "has_method",
            "validate_arguments",
            "validator",
            "messages",
        }
    )

    def __init__(self) -> None:
        self._validator = None

    @property
    def validator(self):
        """Validator this checker is bound to."""
        if self._validator is None:
            raise ValidatorError(f"{type(self).__name__} is not bound to a validator")
        return self._validator

    def with_validator(self, validator) -> "Checker":
        """Return a copy bound to the validator being run."""
        checker = copy.copy(self)
        checker._validator = validator
        return checker

    def has_method(self, method: str) -> bool:
        if method.startswith("_") or method in self._reserved:
            return False
        return callable(getattr(self, method, None))

    def check(self, method: str, value: Any, arguments: Sequence[Any] = ()) -> Any:
        """
        Run one check method.

        Args:
            method: Check method name
            value: Field value
            arguments: Rule arguments passed after the value

        Returns:
            True, False or STOP_VALIDATION

        Raises:
            RuleDefinitionError: Checker has no such method
        """
        if not self.has_method(method):
            raise RuleDefinitionError(
                f"Checker '{type(self).__name__}' has no check method '{method}'",
                condition=method,
            )
        return getattr(self, method)(value, *arguments)

    def validate_arguments(self, method: str, arguments: Sequence[Any]) -> None:
        """
        Reject rule arguments a method can never accept.

        Called once when a rule is compiled. The default accepts anything.

        Raises:
            ValueError: Arguments are unusable
        """

    def message_for(self, method: str) -> Optional[str]:
        """Failure message for a method, None when the checker has none."""
        return self.messages.get(method)
