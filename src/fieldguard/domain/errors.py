"""Domain errors for fieldguard."""

from typing import Any, Optional


class ValidatorError(Exception):
    """Base exception for all validator errors."""

    def __init__(self, message: str) -> None:
        """
        Initialize validator error.

        Args:
            message: Error message (must not include field values)
        """
        super().__init__(message)
        self.message = message


class RuleDefinitionError(ValidatorError):
    """Raised when a rule definition is malformed or cannot be resolved."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        condition: Any = None,
    ) -> None:
        """
        Initialize rule definition error.

        Args:
            message: Description of the problem
            field: Field whose rule list holds the bad rule, if known
            condition: The offending condition reference, if known
        """
        if field is not None:
            message = f"Invalid rule for field '{field}': {message}"
        super().__init__(message)
        self.field = field
        self.condition = condition


class CheckerNotFoundError(ValidatorError):
    """Raised when a checker name is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unable to create validation checker defined by '{name}' name")
        self.name = name


class ConditionNotFoundError(ValidatorError):
    """Raised when a conditional-skip predicate name is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unable to create validation condition defined by '{name}' name")
        self.name = name


class ConfigurationError(ValidatorError):
    """Raised when validator configuration input is invalid."""
