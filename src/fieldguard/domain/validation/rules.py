"""
Compiled rule representation.

The compiler turns the loose rule grammar (strings, lists, mappings,
callables) into the structures below once, so the validator never parses
rule definitions while checking data.
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field as dataclass_field
from enum import Enum
from typing import Any, Callable, Optional, Union


class _StopValidation:
    """Sentinel type returned by a check to halt the remaining field rules."""

    _instance: Optional["_StopValidation"] = None

    def __new__(cls) -> "_StopValidation":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "STOP_VALIDATION"


STOP_VALIDATION = _StopValidation()


@dataclass(frozen=True)
class CallableRef:
    """Plain function invoked as ``function(value, *arguments)``."""

    name: str
    function: Callable[..., Any]

    @property
    def display(self) -> str:
        return self.name


@dataclass(frozen=True)
class CheckerRef:
    """Method on a registered checker, e.g. ``string:shorter``."""

    checker: Any  # registered name, Checker class or Checker instance
    method: str

    @property
    def display(self) -> str:
        return f"{_target_name(self.checker)}:{self.method}"


@dataclass(frozen=True)
class ClassMethodRef:
    """Method on an arbitrary object, resolved through the checker registry."""

    target: Any  # registered class name, class or instance
    method: str

    @property
    def display(self) -> str:
        return f"{_target_name(self.target)}:{self.method}"


ConditionRef = Union[CallableRef, CheckerRef, ClassMethodRef]


@dataclass(frozen=True)
class CompiledRule:
    """A single rule of a field, ready for evaluation."""

    name: str  # condition name as written in the rule, before alias resolution
    reference: ConditionRef
    arguments: tuple[Any, ...] = ()
    message: Optional[str] = None
    error: Optional[str] = None
    skip_condition: Optional[str] = None

    @property
    def message_override(self) -> Optional[str]:
        """Rule supplied failure text, ``message`` first then ``error``."""
        if self.message is not None:
            return self.message
        return self.error

    @property
    def names(self) -> tuple[str, str]:
        """Written name and resolved display name, used by the empty policy."""
        return self.name, self.reference.display


@dataclass(frozen=True)
class CompiledRuleSet:
    """Rules of every field, in declaration order."""

    fields: dict[str, tuple[CompiledRule, ...]] = dataclass_field(default_factory=dict)

    def __iter__(self):
        return iter(self.fields.items())

    def __len__(self) -> int:
        return len(self.fields)

    @property
    def total_rules(self) -> int:
        return sum(len(rules) for rules in self.fields.values())


class OutcomeStatus(str, Enum):
    """Possible results of evaluating one rule."""

    PASS = "pass"
    FAIL = "fail"
    STOP = "stop"


@dataclass(frozen=True)
class Outcome:
    """Result of evaluating one rule against one value."""

    status: OutcomeStatus
    message: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.status == OutcomeStatus.PASS

    @property
    def stopped(self) -> bool:
        return self.status == OutcomeStatus.STOP

    @classmethod
    def success(cls) -> "Outcome":
        return cls(status=OutcomeStatus.PASS)

    @classmethod
    def failure(cls, message: Optional[str] = None) -> "Outcome":
        return cls(status=OutcomeStatus.FAIL, message=message)

    @classmethod
    def stop(cls) -> "Outcome":
        return cls(status=OutcomeStatus.STOP)


def _target_name(target: Any) -> str:
    if isinstance(target, str):
        return target
    if isinstance(target, type):
        return target.__name__
    return type(target).__name__
