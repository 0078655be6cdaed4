"""Message interpolation for validation errors."""

import re
from typing import Any, Mapping

_PLACEHOLDER = re.compile(r"\{([A-Za-z0-9_.\-]+)\}")


def interpolate(message: str, values: Mapping[str, Any]) -> str:
    """
    Replace ``{name}`` placeholders with values.

    Placeholders without a matching key are left verbatim.

    Args:
        message: Message template
        values: Placeholder values, keys are matched as strings

    Returns:
        Interpolated message
    """
    if "{" not in message:
        return message

    lookup = {str(key): value for key, value in values.items()}

    def replace(match: re.Match) -> str:
        key = match.group(1)
        if key not in lookup:
            return match.group(0)
        return _stringify(lookup[key])

    return _PLACEHOLDER.sub(replace, message)


def message_values(field: str, condition: str, arguments: tuple) -> dict[str, Any]:
    """Build interpolation values: field, condition and positional arguments."""
    values: dict[str, Any] = {str(index): argument for index, argument in enumerate(arguments)}
    values["field"] = field
    values["condition"] = condition
    return values


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple, set)):
        return ", ".join(_stringify(item) for item in value)
    return str(value)
