"""
Built-in predicate functions.

Each function takes the value first and returns a bool. They are exposed to
rules through the function table of ``ValidatorConfig`` (``"is_int"``) and
through aliases (``"integer"``).
"""

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any


def is_empty(value: Any) -> bool:
    """Check whether a value counts as missing input."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple, dict, set, frozenset, bytes)):
        return len(value) == 0
    return False


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_float(value: Any) -> bool:
    return isinstance(value, float)


def is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def is_numeric(value: Any) -> bool:
    """Numbers and strings holding a number (``"12"``, ``"1.5e3"``)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float, Decimal)):
        return True
    if isinstance(value, str):
        try:
            Decimal(value.strip())
        except InvalidOperation:
            return False
        return value.strip() != ""
    return False


def is_list(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def is_dict(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_none(value: Any) -> bool:
    return value is None


def is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float, bool, Decimal))


def is_callable(value: Any) -> bool:
    return callable(value)


BUILTIN_FUNCTIONS = {
    "is_string": is_string,
    "is_int": is_int,
    "is_float": is_float,
    "is_bool": is_bool,
    "is_numeric": is_numeric,
    "is_list": is_list,
    "is_dict": is_dict,
    "is_none": is_none,
    "is_scalar": is_scalar,
    "is_callable": is_callable,
}
