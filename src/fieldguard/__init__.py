"""fieldguard - rule-driven data validation."""

from fieldguard.domain.errors import (
    CheckerNotFoundError,
    ConditionNotFoundError,
    ConfigurationError,
    RuleDefinitionError,
    ValidatorError,
)
from fieldguard.domain.validation import (
    STOP_VALIDATION,
    Checker,
    CheckerRegistry,
    Condition,
    ConditionRegistry,
    Validator,
    ValidatorConfig,
)

__version__ = "1.0.0"

__all__ = [
    "Validator",
    "ValidatorConfig",
    "Checker",
    "Condition",
    "CheckerRegistry",
    "ConditionRegistry",
    "STOP_VALIDATION",
    "ValidatorError",
    "RuleDefinitionError",
    "CheckerNotFoundError",
    "ConditionNotFoundError",
    "ConfigurationError",
]
