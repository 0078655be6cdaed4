"""Registries for checkers, conditions and class-method rule targets.

Registries are plain objects handed to the validator; there is no global
instance. Entries may be classes (instantiated on first use, without
arguments) or ready instances.
"""

import logging
from typing import Any, Mapping, Optional

from fieldguard.domain.errors import (
    CheckerNotFoundError,
    ConditionNotFoundError,
    ConfigurationError,
    RuleDefinitionError,
)
from fieldguard.domain.validation.checkers.base import Checker
from fieldguard.domain.validation.conditions import Condition

logger = logging.getLogger(__name__)


class Registry:
    """Name to class-or-instance mapping with lazy, cached instantiation."""

    category = "entry"
    base_class: type = object

    def __init__(self, entries: Optional[Mapping[str, Any]] = None) -> None:
        self._entries: dict[str, Any] = {}
        self._instances: dict[str, Any] = {}
        for name, entry in (entries or {}).items():
            self.register(name, entry)

    def register(self, name: str, entry: Any) -> "Registry":
        """Register a class or an instance under a name, replacing any previous entry."""
        if isinstance(entry, type):
            valid = issubclass(entry, self.base_class)
        else:
            valid = isinstance(entry, self.base_class)
        if not valid:
            raise ConfigurationError(
                f"{self.category.capitalize()} '{name}' must be a {self.base_class.__name__}"
            )

        self._entries[name] = entry
        self._instances.pop(name, None)
        logger.debug(f"Registered {self.category}: {name}")
        return self

    def has(self, name: str) -> bool:
        return name in self._entries

    def names(self) -> list[str]:
        return list(self._entries.keys())

    def get(self, name: str) -> Any:
        """Return the instance registered under name."""
        if name not in self._entries:
            raise self._not_found(name)

        if name not in self._instances:
            entry = self._entries[name]
            self._instances[name] = entry() if isinstance(entry, type) else entry
        return self._instances[name]

    def _not_found(self, name: str) -> Exception:
        return KeyError(name)


class CheckerRegistry(Registry):
    """
    Checkers by short name, plus classes usable as ``(target, method)`` rules.

    Usage:
        registry = CheckerRegistry({"string": StringChecker})
        registry.register_class("users", UserLookup())
        registry.get("string").check("shorter", "abc", [5])
    """

    category = "checker"
    base_class = Checker

    def __init__(
        self,
        entries: Optional[Mapping[str, Any]] = None,
        classes: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(entries)
        self._classes: dict[str, Any] = {}
        self._class_instances: dict[Any, Any] = {}
        for name, target in (classes or {}).items():
            self.register_class(name, target)

    def _not_found(self, name: str) -> Exception:
        return CheckerNotFoundError(name)

    def register_class(self, name: str, target: Any) -> "CheckerRegistry":
        """Register a class or instance addressable by name in ``(name, method)`` rules."""
        self._classes[name] = target
        self._class_instances.pop(name, None)
        return self

    def has_class(self, name: str) -> bool:
        return name in self._classes

    def resolve_checker(self, checker: Any) -> Checker:
        """Resolve a checker given by registered name, Checker class or instance."""
        if isinstance(checker, str):
            return self.get(checker)
        if isinstance(checker, Checker):
            return checker
        if isinstance(checker, type) and issubclass(checker, Checker):
            return self._instance_of(checker, checker)
        raise RuleDefinitionError(f"'{checker!r}' is not a checker", condition=checker)

    def resolve(self, target: Any) -> Any:
        """Resolve the object a ``(target, method)`` rule is called on."""
        if isinstance(target, str):
            if target not in self._classes:
                raise RuleDefinitionError(
                    f"Class '{target}' is not registered", condition=target
                )
            return self._instance_of(target, self._classes[target])
        if isinstance(target, type):
            return self._instance_of(target, target)
        return target

    def _instance_of(self, key: Any, target: Any) -> Any:
        if key not in self._class_instances:
            if isinstance(target, type):
                try:
                    self._class_instances[key] = target()
                except TypeError as e:
                    raise RuleDefinitionError(
                        f"Unable to instantiate '{target.__name__}': {e}", condition=target
                    ) from e
            else:
                self._class_instances[key] = target
        return self._class_instances[key]


class ConditionRegistry(Registry):
    """Conditional-skip predicates by name."""

    category = "condition"
    base_class = Condition

    def _not_found(self, name: str) -> Exception:
        return ConditionNotFoundError(name)
