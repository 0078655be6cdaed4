"""Application configuration for fieldguard."""

import importlib
import os
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from fieldguard.domain.errors import ConfigurationError
from fieldguard.domain.validation.checkers import Checker
from fieldguard.domain.validation.config import ValidatorConfig
from fieldguard.shared.logging import configure_logging

CONFIG_KEYS = frozenset({"aliases", "checkers", "functions", "empty_conditions", "default_message"})


class Environment(Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


@dataclass(frozen=True)
class LoggingConfig:
    """Logging settings read from the environment."""

    environment: Environment = Environment.DEVELOPMENT
    log_level: str = "INFO"
    log_format: str = "json"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LoggingConfig":
        environ = os.environ if environ is None else environ
        try:
            environment = Environment(environ.get("ENVIRONMENT", "development").lower())
        except ValueError as e:
            raise ConfigurationError(f"Unknown ENVIRONMENT: {environ.get('ENVIRONMENT')}") from e

        log_format = environ.get("LOG_FORMAT", "json").lower()
        if log_format not in ("json", "keyvalue"):
            raise ConfigurationError(f"LOG_FORMAT must be json or keyvalue, got {log_format}")

        return cls(
            environment=environment,
            log_level=environ.get("LOG_LEVEL", "INFO").upper(),
            log_format=log_format,
        )

    def apply(self) -> None:
        """Configure structlog with these settings."""
        configure_logging(
            environment=self.environment.value,
            log_level=self.log_level,
            json_logs=self.log_format == "json",
            include_caller_info=self.environment == Environment.DEVELOPMENT,
        )


def config_from_mapping(
    mapping: Mapping[str, Any],
    base: Optional[ValidatorConfig] = None,
) -> ValidatorConfig:
    """
    Build a ValidatorConfig by merging a mapping over a base config.

    Checker and function entries may be given as ``"package.module:attr"``
    import strings; they are imported here, once, at load time.

    Args:
        mapping: Keys aliases, checkers, functions, empty_conditions, default_message
        base: Config to merge over, defaults to ValidatorConfig.default()

    Raises:
        ConfigurationError: Unknown keys, wrong types or unimportable references
    """
    if not isinstance(mapping, Mapping):
        raise ConfigurationError("Validator configuration must be a mapping")

    unknown = set(mapping) - CONFIG_KEYS
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

    aliases = _mapping_section(mapping, "aliases")
    checkers = {name: _import_ref(ref) for name, ref in _mapping_section(mapping, "checkers").items()}
    functions = {name: _import_ref(ref) for name, ref in _mapping_section(mapping, "functions").items()}

    for name, checker in checkers.items():
        is_checker = isinstance(checker, Checker) or (
            isinstance(checker, type) and issubclass(checker, Checker)
        )
        if not is_checker:
            raise ConfigurationError(f"Checker '{name}' must be a Checker class or instance")

    for name, function in functions.items():
        if not callable(function):
            raise ConfigurationError(f"Function '{name}' is not callable")

    empty_conditions = mapping.get("empty_conditions") or []
    if isinstance(empty_conditions, str) or not isinstance(empty_conditions, (list, tuple, set, frozenset)):
        raise ConfigurationError("empty_conditions must be a list of condition names")

    default_message = mapping.get("default_message")
    if default_message is not None and not isinstance(default_message, str):
        raise ConfigurationError("default_message must be a string")

    base = base or ValidatorConfig.default()
    try:
        return base.with_overrides(
            aliases=aliases,
            checkers=checkers,
            functions=functions,
            empty_conditions=set(empty_conditions),
            default_message=default_message,
        )
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def load_validator_config(source: Union[str, Path, Mapping[str, Any]]) -> ValidatorConfig:
    """
    Load a ValidatorConfig from a mapping, a YAML file path or YAML text.

    Raises:
        ConfigurationError: Unreadable or invalid configuration
    """
    if isinstance(source, Mapping):
        return config_from_mapping(source)

    if isinstance(source, Path) or (isinstance(source, str) and _looks_like_path(source)):
        path = Path(source)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Unable to read configuration {path}: {e}") from e
    else:
        text = source

    try:
        document = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML configuration: {e}") from e

    return config_from_mapping(document)


# Global configuration instance
_config: Optional[ValidatorConfig] = None


def get_config(source: Union[str, Path, Mapping[str, Any], None] = None) -> ValidatorConfig:
    """
    Get or create the process-wide validator configuration.

    The first call loads ``source`` when given, else the file named by
    ``FIELDGUARD_CONFIG``, else the built-in defaults.
    """
    global _config
    if _config is None:
        source = source if source is not None else os.getenv("FIELDGUARD_CONFIG")
        _config = load_validator_config(source) if source else ValidatorConfig.default()
    return _config


def reset_config() -> None:
    """Forget the process-wide configuration."""
    global _config
    _config = None


def _mapping_section(mapping: Mapping[str, Any], key: str) -> dict[str, Any]:
    section = mapping.get(key) or {}
    if not isinstance(section, Mapping):
        raise ConfigurationError(f"'{key}' must be a mapping")
    return dict(section)


def _import_ref(ref: Any) -> Any:
    """Resolve ``"module:attr"`` strings; other values pass through."""
    if not isinstance(ref, str):
        return ref

    module_name, sep, attribute = ref.partition(":")
    if not sep or not module_name or not attribute:
        raise ConfigurationError(f"Import reference must look like 'module:attr', got '{ref}'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Unable to import module '{module_name}': {e}") from e

    try:
        return getattr(module, attribute)
    except AttributeError as e:
        raise ConfigurationError(f"Module '{module_name}' has no attribute '{attribute}'") from e


def _looks_like_path(value: str) -> bool:
    return "\n" not in value and value.endswith((".yml", ".yaml"))
