"""
fieldguard validation engine.

Rule sets are compiled once (aliases, checker and function names resolved)
and evaluated lazily by ``Validator``.
"""

from .checkers import (
    AddressChecker,
    Checker,
    MixedChecker,
    NumberChecker,
    RequiredChecker,
    StringChecker,
    TypeChecker,
)
from .compiler import RuleCompiler, compile_rules
from .conditions import CallbackCondition, Condition, FieldAbsentCondition, FieldPresentCondition
from .config import ValidatorConfig
from .interpolation import interpolate
from .registry import CheckerRegistry, ConditionRegistry
from .rules import (
    STOP_VALIDATION,
    CallableRef,
    CheckerRef,
    ClassMethodRef,
    CompiledRule,
    CompiledRuleSet,
    Outcome,
    OutcomeStatus,
)
from .validator import Entity, Packable, Validator

__all__ = [
    # Core classes
    "Validator",
    "RuleCompiler",
    "ValidatorConfig",
    "CheckerRegistry",
    "ConditionRegistry",
    "compile_rules",
    "interpolate",

    # Checkers
    "Checker",
    "TypeChecker",
    "StringChecker",
    "NumberChecker",
    "AddressChecker",
    "MixedChecker",
    "RequiredChecker",

    # Conditions
    "Condition",
    "CallbackCondition",
    "FieldPresentCondition",
    "FieldAbsentCondition",

    # Data structures
    "CompiledRule",
    "CompiledRuleSet",
    "CallableRef",
    "CheckerRef",
    "ClassMethodRef",
    "Outcome",
    "OutcomeStatus",
    "STOP_VALIDATION",

    # Protocols
    "Entity",
    "Packable",
]
