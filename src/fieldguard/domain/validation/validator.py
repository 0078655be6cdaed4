"""
Rule-driven validator.

Examples:
    validator = Validator(
        {
            "status": [
                "not_empty",
                ["string:shorter", 10, {"error": "Your string is too long."}],
                [(StatusLookup, "exists"), {"error": "Unknown status."}],
            ],
            "email": [
                ["not_empty", {"error": "Please enter your email address."}],
                ["email", {"error": "Email is not valid."}],
            ],
            "pin": [
                ["string:regexp", r"^[0-9]{5}$", {"error": "Invalid pin format."}],
            ],
            "flag": ["not_empty", "boolean"],
        },
        data,
    )

    if not validator.is_valid():
        errors = validator.get_errors()
"""

from collections.abc import Mapping
from typing import Any, Callable, Optional, Protocol, runtime_checkable

from fieldguard.domain.errors import ValidatorError
from fieldguard.domain.validation.compiler import RuleCompiler
from fieldguard.domain.validation.config import ValidatorConfig
from fieldguard.domain.validation.functions import is_empty
from fieldguard.domain.validation.interpolation import interpolate, message_values
from fieldguard.domain.validation.registry import CheckerRegistry, ConditionRegistry
from fieldguard.domain.validation.rules import (
    STOP_VALIDATION,
    CheckerRef,
    ClassMethodRef,
    CompiledRule,
    CompiledRuleSet,
    Outcome,
)
from fieldguard.shared.logging import get_logger

logger = get_logger("fieldguard.validator")


@runtime_checkable
class Entity(Protocol):
    """Record exposing all of its fields at once."""

    def get_fields(self) -> Mapping[str, Any]: ...


@runtime_checkable
class Packable(Protocol):
    """Composite value that unwraps to a primitive before being checked."""

    def pack_value(self) -> Any: ...


class Validator:
    """
    Validates one data subject against a rule set.

    Validation runs lazily on ``is_valid``/``get_errors`` and is cached until
    data or rules change. Each field is checked rule by rule and stops at its
    first failure. Empty values skip every rule except those the empty policy
    exempts (``required``-like conditions by default).

    Not safe for concurrent use; create one validator per operation.
    """

    def __init__(
        self,
        rules: Optional[Mapping[str, Any]] = None,
        data: Any = None,
        *,
        config: Optional[ValidatorConfig] = None,
        checkers: Optional[CheckerRegistry] = None,
        conditions: Optional[ConditionRegistry] = None,
        empty_policy: Optional[Callable[[CompiledRule], bool]] = None,
    ) -> None:
        """
        Initialize validator.

        Args:
            rules: Field name to ordered rule list
            data: Mapping, entity or mapping-like object to validate
            config: Alias, checker and function tables
            checkers: Checker registry, built from config when omitted
            conditions: Conditional-skip registry, empty when omitted
            empty_policy: Decides which rules still run on empty values

        Raises:
            RuleDefinitionError: Rules cannot be compiled
        """
        self.config = config or ValidatorConfig.default()
        self.checkers = checkers if checkers is not None else CheckerRegistry(self.config.checkers)
        self.conditions = conditions if conditions is not None else ConditionRegistry()
        self._compiler = RuleCompiler(self.config, self.checkers, self.conditions)
        self._empty_policy = empty_policy or self.config.is_empty_condition

        self._rules: dict[str, Any] = {}
        self._compiled = CompiledRuleSet()
        self._data: dict[str, Any] = {}
        self._context: Any = None

        self._errors: dict[str, str] = {}
        self._registered_errors: dict[str, str] = {}
        self._validated = False

        if rules:
            self.set_rules(rules)
        if data is not None:
            self.set_data(data)

    def set_rules(self, rules: Mapping[str, Any]) -> "Validator":
        """Replace the rule set; resets computed errors unless rules are unchanged."""
        rules = _snapshot(rules)
        if self._rules == rules:
            return self

        self._compiled = self._compiler.compile(rules)
        self._rules = rules
        self.reset()
        return self

    def get_rules(self) -> dict[str, Any]:
        return self._rules

    def set_data(self, data: Any) -> "Validator":
        """Replace the data; resets computed errors unless data is unchanged."""
        data = _snapshot(self._extract_data(data))
        if self._data == data:
            return self

        self._data = data
        self.reset()
        return self

    def get_data(self) -> dict[str, Any]:
        return self._data

    def set_context(self, context: Any) -> "Validator":
        """Attach caller context readable by checkers and conditions. Not validated."""
        self._context = context
        return self

    def get_context(self) -> Any:
        return self._context

    def get_value(self, field: str, default: Any = None) -> Any:
        """Field value (or default when missing/None), unwrapped if packable."""
        value = self._data.get(field)
        if value is None:
            value = default

        if isinstance(value, Packable):
            return value.pack_value()
        return value

    def is_valid(self) -> bool:
        self._validate()
        return not self._errors and not self._registered_errors

    def has_errors(self) -> bool:
        return not self.is_valid()

    def get_errors(self) -> dict[str, str]:
        """Field to message; registered errors take precedence over rule errors."""
        self._validate()

        errors = dict(self._registered_errors)
        for field, message in self._errors.items():
            errors.setdefault(field, message)
        return errors

    def register_error(self, field: str, message: str) -> "Validator":
        """Record an error detected outside the rule set (e.g. a uniqueness lookup)."""
        self._registered_errors[field] = message
        return self

    def flush_registered(self) -> "Validator":
        self._registered_errors = {}
        return self

    def reset(self) -> None:
        """Drop computed errors; the next query validates again."""
        self._errors = {}
        self._validated = False

    def _validate(self) -> None:
        if self._validated:
            return

        errors: dict[str, str] = {}
        for field, rules in self._compiled:
            value = self.get_value(field)

            for rule in rules:
                if field in errors:
                    # Validating field till first error
                    break

                if is_empty(value) and not self._empty_policy(rule):
                    # Empty values are only checked by special conditions
                    break

                if self._skip_rule(rule):
                    continue

                outcome = self._evaluate(field, value, rule)
                if outcome.passed:
                    continue
                if outcome.stopped:
                    break

                message = rule.message_override or outcome.message or self.config.default_message
                errors[field] = interpolate(
                    message,
                    message_values(field, rule.reference.display, rule.arguments),
                )

        self._errors = errors
        self._validated = True
        logger.debug("validation_completed", fields=len(self._compiled), errors=len(errors))

    def _skip_rule(self, rule: CompiledRule) -> bool:
        """Whether the rule's conditional-skip predicate is currently not met."""
        if rule.skip_condition is None:
            return False

        condition = self.conditions.get(rule.skip_condition).with_validator(self)
        return not condition.is_met()

    def _evaluate(self, field: str, value: Any, rule: CompiledRule) -> Outcome:
        """
        Run one rule against a value.

        Errors raised by the check itself are logged and count as a failure
        with the default message. Validator errors (bad rule or registry
        setup) propagate.
        """
        reference = rule.reference
        try:
            if isinstance(reference, CheckerRef):
                checker = self.checkers.resolve_checker(reference.checker).with_validator(self)
                result = checker.check(reference.method, value, rule.arguments)
                if result is STOP_VALIDATION:
                    return Outcome.stop()
                if result:
                    return Outcome.success()
                # Checker provides its own message for the method
                return Outcome.failure(checker.message_for(reference.method))

            if isinstance(reference, ClassMethodRef):
                target = self.checkers.resolve(reference.target)
                result = getattr(target, reference.method)(value, *rule.arguments)
            else:
                result = reference.function(value, *rule.arguments)
        except ValidatorError:
            raise
        except Exception as e:
            logger.error(
                "condition_failed",
                field=field,
                condition=reference.display,
                error=str(e),
                error_type=type(e).__name__,
            )
            return Outcome.failure()

        if result is STOP_VALIDATION:
            return Outcome.stop()
        return Outcome.success() if result else Outcome.failure()

    @staticmethod
    def _extract_data(data: Any) -> dict[str, Any]:
        if data is None:
            return {}
        if isinstance(data, Entity):
            return dict(data.get_fields())
        if isinstance(data, Mapping):
            return dict(data)
        if hasattr(data, "keys") and hasattr(data, "__getitem__"):
            return {key: data[key] for key in data.keys()}
        raise TypeError(f"Unable to validate data of type {type(data).__name__}")


def _snapshot(value: Any) -> Any:
    """Copy nested containers; leaf objects (callables, checkers, entities) are shared."""
    if isinstance(value, Mapping):
        return {key: _snapshot(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_snapshot(item) for item in value]
    if isinstance(value, tuple):
        return tuple(_snapshot(item) for item in value)
    if isinstance(value, (set, frozenset)):
        return type(value)(value)
    return value
