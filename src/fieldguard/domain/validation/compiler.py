"""
Rule compiler - rule grammar to compiled rules.

Rule definitions are loose Python structures (or YAML documents holding
them). The compiler resolves aliases, checker and function names once and
rejects anything it cannot resolve, so a bad rule set fails when it is
assigned rather than while data is being checked.
"""

import inspect
import logging
from collections.abc import Mapping
from typing import Any, Optional, Union

import jsonschema
import yaml

from fieldguard.domain.errors import RuleDefinitionError
from fieldguard.domain.validation.checkers.base import Checker
from fieldguard.domain.validation.config import ValidatorConfig
from fieldguard.domain.validation.registry import CheckerRegistry, ConditionRegistry
from fieldguard.domain.validation.rules import (
    CallableRef,
    CheckerRef,
    ClassMethodRef,
    CompiledRule,
    CompiledRuleSet,
    ConditionRef,
)

logger = logging.getLogger(__name__)

OPTION_KEYS = frozenset({"message", "error", "condition"})
MAPPING_KEYS = OPTION_KEYS | {"check", "args"}

RULES_DOCUMENT_SCHEMA = {
    "type": "object",
    "required": ["rules"],
    "properties": {
        "rules": {
            "type": "object",
            "additionalProperties": {
                "type": "array",
                "items": {
                    "anyOf": [
                        {"type": "string"},
                        {"type": "array", "minItems": 1},
                        {"type": "object", "required": ["check"]},
                    ]
                },
            },
        },
    },
}


class RuleCompiler:
    """
    Compiles rule sets into ``CompiledRuleSet``.

    Accepted rule forms for each entry of a field's rule list:
    - ``"email"``: condition name
    - ``my_function``: callable
    - ``["range", 1, 10, {"message": "..."}]``: condition, arguments and an
      optional trailing dict of options (message, error, condition)
    - ``{"check": "range", "args": [1, 10], "message": "..."}``

    Conditions themselves may be aliases, ``"checker:method"`` (or
    ``"checker::method"``), registered function names, callables, or
    ``(target, "method")`` pairs.
    """

    def __init__(
        self,
        config: ValidatorConfig,
        checkers: CheckerRegistry,
        conditions: ConditionRegistry,
    ) -> None:
        self.config = config
        self.checkers = checkers
        self.conditions = conditions

    def compile(self, rules: Mapping[str, Any]) -> CompiledRuleSet:
        """
        Compile a field to rule list mapping.

        Raises:
            RuleDefinitionError: A rule cannot be parsed or resolved
        """
        if not isinstance(rules, Mapping):
            raise RuleDefinitionError("Rules must be a mapping of field names to rule lists")

        fields: dict[str, tuple[CompiledRule, ...]] = {}
        for field, field_rules in rules.items():
            if isinstance(field_rules, (str, bytes)) or not isinstance(field_rules, (list, tuple)):
                raise RuleDefinitionError("Rules must be given as a list", field=field)
            fields[field] = tuple(self.compile_rule(field, rule) for rule in field_rules)

        compiled = CompiledRuleSet(fields=fields)
        logger.debug(f"Compiled {compiled.total_rules} rules for {len(compiled)} fields")
        return compiled

    def compile_yaml(self, content: Union[str, Mapping[str, Any]]) -> CompiledRuleSet:
        """
        Compile a YAML rules document (``rules:`` mapping at the top level).

        Args:
            content: YAML text or an already parsed document

        Raises:
            RuleDefinitionError: Invalid YAML, document shape or rule
        """
        if isinstance(content, str):
            try:
                document = yaml.safe_load(content)
            except yaml.YAMLError as e:
                raise RuleDefinitionError(f"Invalid YAML rules document: {e}") from e
        else:
            document = content

        try:
            jsonschema.validate(document, RULES_DOCUMENT_SCHEMA)
        except jsonschema.ValidationError as e:
            raise RuleDefinitionError(f"Invalid rules document: {e.message}") from e

        return self.compile(document["rules"])

    def compile_rule(self, field: str, rule: Any) -> CompiledRule:
        """Compile one entry of a field's rule list."""
        condition, arguments, options = self._decompose(field, rule)
        name = _condition_name(condition)
        reference, arguments = self._resolve(field, condition, arguments)

        skip_condition = options.get("condition")
        if skip_condition is not None:
            if not isinstance(skip_condition, str):
                raise RuleDefinitionError("Rule condition must be a name", field=field, condition=name)
            if not self.conditions.has(skip_condition):
                raise RuleDefinitionError(
                    f"Unknown rule condition '{skip_condition}'", field=field, condition=name
                )

        for key in ("message", "error"):
            if options.get(key) is not None and not isinstance(options[key], str):
                raise RuleDefinitionError(f"Rule {key} must be a string", field=field, condition=name)

        return CompiledRule(
            name=name,
            reference=reference,
            arguments=arguments,
            message=options.get("message"),
            error=options.get("error"),
            skip_condition=skip_condition,
        )

    def _decompose(self, field: str, rule: Any) -> tuple[Any, tuple, dict]:
        """Split a rule entry into condition, arguments and options."""
        if isinstance(rule, str) or callable(rule):
            return rule, (), {}

        if isinstance(rule, (list, tuple)):
            if not rule:
                raise RuleDefinitionError("Empty rule definition", field=field)
            rest = list(rule[1:])
            options: dict = {}
            if rest and _is_options(rest[-1]):
                options = dict(rest.pop())
            return rule[0], tuple(rest), options

        if isinstance(rule, Mapping):
            unknown = set(rule) - MAPPING_KEYS
            if unknown:
                raise RuleDefinitionError(
                    f"Unknown rule keys: {', '.join(sorted(map(str, unknown)))}", field=field
                )
            if "check" not in rule:
                raise RuleDefinitionError("Rule mapping requires a 'check' key", field=field)
            args = rule.get("args", ())
            if isinstance(args, (str, bytes)) or not isinstance(args, (list, tuple)):
                args = (args,)
            options = {key: rule[key] for key in OPTION_KEYS if key in rule}
            return rule["check"], tuple(args), options

        raise RuleDefinitionError(f"Unsupported rule definition {rule!r}", field=field)

    def _resolve(self, field: str, condition: Any, arguments: tuple) -> tuple[ConditionRef, tuple]:
        """Resolve aliases, then turn the condition into a reference."""
        seen: set[str] = set()
        while isinstance(condition, str):
            key = condition.replace("::", ":")
            if key not in self.config.aliases:
                condition = key
                break
            if key in seen:
                raise RuleDefinitionError(f"Alias cycle at '{key}'", field=field, condition=key)
            seen.add(key)

            target = self.config.aliases[key]
            if isinstance(target, list):
                if not target:
                    raise RuleDefinitionError(f"Empty alias '{key}'", field=field, condition=key)
                condition, arguments = target[0], tuple(target[1:]) + arguments
            else:
                condition = target

        if isinstance(condition, str):
            reference = self._resolve_name(field, condition)
        elif isinstance(condition, (list, tuple)):
            reference = self._resolve_pair(field, condition)
        elif callable(condition):
            reference = CallableRef(name=_condition_name(condition), function=condition)
        else:
            raise RuleDefinitionError(f"Unsupported condition {condition!r}", field=field)

        self._check_arguments(field, reference, arguments)
        if isinstance(reference, CheckerRef):
            self._check_checker_arguments(field, reference, arguments)
        return reference, arguments

    def _resolve_name(self, field: str, name: str) -> ConditionRef:
        if ":" in name:
            prefix, method = name.split(":", 1)
            if self.checkers.has(prefix):
                checker = self.checkers.get(prefix)
                if not checker.has_method(method):
                    raise RuleDefinitionError(
                        f"Checker '{prefix}' has no check method '{method}'",
                        field=field,
                        condition=name,
                    )
                return CheckerRef(checker=prefix, method=method)
            if self.checkers.has_class(prefix):
                return self._class_method(field, prefix, method)
            raise RuleDefinitionError(f"Unknown checker '{prefix}'", field=field, condition=name)

        function = self.config.functions.get(name)
        if function is None:
            raise RuleDefinitionError(f"Unknown condition '{name}'", field=field, condition=name)
        return CallableRef(name=name, function=function)

    def _resolve_pair(self, field: str, pair: Any) -> ConditionRef:
        if len(pair) != 2 or not isinstance(pair[1], str):
            raise RuleDefinitionError(
                "Class condition must be a (target, method) pair", field=field, condition=pair
            )

        target, method = pair
        if isinstance(target, str) and self.checkers.has(target):
            return self._resolve_name(field, f"{target}:{method}")

        is_checker = isinstance(target, Checker) or (
            isinstance(target, type) and issubclass(target, Checker)
        )
        if is_checker:
            if not self.checkers.resolve_checker(target).has_method(method):
                raise RuleDefinitionError(
                    f"Checker has no check method '{method}'", field=field, condition=pair
                )
            return CheckerRef(checker=target, method=method)

        return self._class_method(field, target, method)

    def _class_method(self, field: str, target: Any, method: str) -> ClassMethodRef:
        instance = self.checkers.resolve(target)
        if not callable(getattr(instance, method, None)):
            raise RuleDefinitionError(
                f"'{type(instance).__name__}' has no method '{method}'",
                field=field,
                condition=(target, method),
            )
        return ClassMethodRef(target=target, method=method)

    def _check_arguments(self, field: str, reference: ConditionRef, arguments: tuple) -> None:
        """Reject argument counts the condition signature cannot accept."""
        function = self._callable_of(reference)
        try:
            signature = inspect.signature(function)
        except (TypeError, ValueError):
            return  # builtins without introspectable signature

        try:
            signature.bind(None, *arguments)
        except TypeError as e:
            raise RuleDefinitionError(
                f"Condition '{reference.display}' does not accept {len(arguments)} argument(s): {e}",
                field=field,
                condition=reference.display,
            ) from e

    def _check_checker_arguments(self, field: str, reference: CheckerRef, arguments: tuple) -> None:
        checker = self.checkers.resolve_checker(reference.checker)
        try:
            checker.validate_arguments(reference.method, arguments)
        except ValueError as e:
            raise RuleDefinitionError(
                f"Invalid arguments for '{reference.display}': {e}",
                field=field,
                condition=reference.display,
            ) from e

    def _callable_of(self, reference: ConditionRef) -> Any:
        if isinstance(reference, CheckerRef):
            return getattr(self.checkers.resolve_checker(reference.checker), reference.method)
        if isinstance(reference, ClassMethodRef):
            return getattr(self.checkers.resolve(reference.target), reference.method)
        return reference.function


def _is_options(candidate: Any) -> bool:
    return isinstance(candidate, Mapping) and bool(candidate) and set(candidate) <= OPTION_KEYS


def _condition_name(condition: Any) -> str:
    if isinstance(condition, str):
        return condition.replace("::", ":")
    if isinstance(condition, (list, tuple)) and len(condition) == 2:
        target, method = condition
        if isinstance(target, str):
            return f"{target}:{method}"
        owner = target if isinstance(target, type) else type(target)
        return f"{owner.__name__}:{method}"
    return getattr(condition, "__name__", None) or type(condition).__name__


def compile_rules(
    rules: Mapping[str, Any],
    config: Optional[ValidatorConfig] = None,
) -> CompiledRuleSet:
    """Compile rules against a config using fresh registries."""
    config = config or ValidatorConfig.default()
    compiler = RuleCompiler(config, CheckerRegistry(config.checkers), ConditionRegistry())
    return compiler.compile(rules)
