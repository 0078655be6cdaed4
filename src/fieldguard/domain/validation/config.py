"""Validator configuration: aliases, checkers, functions and empty-value policy."""

from dataclasses import dataclass, replace
from dataclasses import field as dataclass_field
from typing import Any, Callable, Optional

from fieldguard.domain.validation.checkers import BUILTIN_CHECKERS
from fieldguard.domain.validation.functions import BUILTIN_FUNCTIONS

DEFAULT_MESSAGE = "Condition '{condition}' is not met."

DEFAULT_ALIASES: dict[str, Any] = {
    "not_empty": "type:not_empty",
    "required": "type:not_empty",
    "datetime": "type:datetime",
    "timezone": "type:timezone",
    "bool": "type:boolean",
    "boolean": "type:boolean",
    "card_number": "mixed:card_number",
    "match": "mixed:match",
    "regexp": "string:regexp",
    "range": "number:range",
    "email": "address:email",
    "url": "address:url",
    "array": "is_list",
    "list": "is_list",
    "dict": "is_dict",
    "callable": "is_callable",
    "double": "is_float",
    "float": "is_float",
    "int": "is_int",
    "integer": "is_int",
    "numeric": "is_numeric",
    "null": "is_none",
    "scalar": "is_scalar",
    "string": "is_string",
}

# Conditions still checked when the field value is empty.
DEFAULT_EMPTY_CONDITIONS = frozenset(
    {
        "not_empty",
        "required",
        "type:not_empty",
        "required:with_any",
        "required:with_all",
        "required:without_any",
        "required:without_all",
    }
)


@dataclass(frozen=True)
class ValidatorConfig:
    """
    Tables the rule compiler resolves condition names against.

    Attributes:
        aliases: Short rule name to condition reference. A list target
            ``[reference, *arguments]`` prepends its arguments to the rule's.
        checkers: Checker name to Checker class or instance.
        functions: Plain predicate name to callable.
        empty_conditions: Condition names (as written or resolved) that are
            still checked when the field value is empty.
        default_message: Failure text when neither rule nor checker supply one.
    """

    aliases: dict[str, Any] = dataclass_field(default_factory=lambda: dict(DEFAULT_ALIASES))
    checkers: dict[str, Any] = dataclass_field(default_factory=lambda: dict(BUILTIN_CHECKERS))
    functions: dict[str, Callable[..., Any]] = dataclass_field(
        default_factory=lambda: dict(BUILTIN_FUNCTIONS)
    )
    empty_conditions: frozenset[str] = DEFAULT_EMPTY_CONDITIONS
    default_message: str = DEFAULT_MESSAGE

    @classmethod
    def default(cls) -> "ValidatorConfig":
        return cls()

    def with_overrides(
        self,
        aliases: Optional[dict[str, Any]] = None,
        checkers: Optional[dict[str, Any]] = None,
        functions: Optional[dict[str, Callable[..., Any]]] = None,
        empty_conditions: Optional[set[str]] = None,
        default_message: Optional[str] = None,
    ) -> "ValidatorConfig":
        """Return a copy with table entries added or replaced."""
        return replace(
            self,
            aliases={**self.aliases, **(aliases or {})},
            checkers={**self.checkers, **(checkers or {})},
            functions={**self.functions, **(functions or {})},
            empty_conditions=self.empty_conditions | frozenset(empty_conditions or ()),
            default_message=default_message if default_message is not None else self.default_message,
        )

    def is_empty_condition(self, rule) -> bool:
        """Whether a compiled rule is still checked against an empty value."""
        return any(name in self.empty_conditions for name in rule.names)
