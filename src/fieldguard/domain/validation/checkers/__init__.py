"""Built-in validation checkers."""

from .address import AddressChecker
from .base import Checker
from .mixed import MixedChecker
from .number import NumberChecker
from .required import RequiredChecker
from .string import StringChecker
from .type import TypeChecker

BUILTIN_CHECKERS = {
    "type": TypeChecker,
    "string": StringChecker,
    "number": NumberChecker,
    "address": AddressChecker,
    "mixed": MixedChecker,
    "required": RequiredChecker,
}

__all__ = [
    "Checker",
    "TypeChecker",
    "StringChecker",
    "NumberChecker",
    "AddressChecker",
    "MixedChecker",
    "RequiredChecker",
    "BUILTIN_CHECKERS",
]
