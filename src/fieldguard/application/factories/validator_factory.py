"""
Factory for validators sharing one configuration.

Validators are cheap and meant to live for one operation; the factory keeps
the configuration and registries so every validator it makes resolves
checkers and conditions the same way.
"""

import logging
from typing import Any, Mapping, Optional

from fieldguard.application.config import get_config
from fieldguard.domain.validation.conditions import Condition
from fieldguard.domain.validation.config import ValidatorConfig
from fieldguard.domain.validation.registry import CheckerRegistry, ConditionRegistry
from fieldguard.domain.validation.validator import Validator

logger = logging.getLogger(__name__)


class ValidatorFactory:
    """Creates validators wired to shared registries."""

    def __init__(
        self,
        config: Optional[ValidatorConfig] = None,
        conditions: Optional[Mapping[str, Any]] = None,
        classes: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """
        Initialize factory.

        Args:
            config: Validator configuration, process-wide config when omitted
            conditions: Conditional-skip predicates by name
            classes: Objects addressable by name in ``(name, method)`` rules
        """
        self.config = config or get_config()
        self.checkers = CheckerRegistry(self.config.checkers, classes=classes)
        self.conditions = ConditionRegistry(conditions)

    def register_condition(self, name: str, condition: Condition) -> "ValidatorFactory":
        self.conditions.register(name, condition)
        return self

    def register_class(self, name: str, target: Any) -> "ValidatorFactory":
        self.checkers.register_class(name, target)
        return self

    def make(
        self,
        rules: Optional[Mapping[str, Any]] = None,
        data: Any = None,
        context: Any = None,
    ) -> Validator:
        """Create a validator for one data subject."""
        validator = Validator(
            rules,
            data,
            config=self.config,
            checkers=self.checkers,
            conditions=self.conditions,
        )
        if context is not None:
            validator.set_context(context)
        return validator

    def errors_for(self, rules: Mapping[str, Any], data: Any) -> dict[str, str]:
        """Validate data once and return its error map."""
        errors = self.make(rules, data).get_errors()
        if errors:
            logger.debug(f"Validation failed for {len(errors)} field(s)")
        return errors
