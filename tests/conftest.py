"""Test configuration and shared fixtures."""

import pytest

from fieldguard.application.config import reset_config
from fieldguard.domain.validation.config import ValidatorConfig
from fieldguard.domain.validation.registry import CheckerRegistry, ConditionRegistry
from tests.fakes import FakeStatusLookup


@pytest.fixture(autouse=True)
def _isolated_global_config():
    """Each test starts without a process-wide config."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def config() -> ValidatorConfig:
    """Default validator configuration."""
    return ValidatorConfig.default()


@pytest.fixture
def checkers(config: ValidatorConfig) -> CheckerRegistry:
    """Checker registry with built-ins and a named lookup class."""
    return CheckerRegistry(config.checkers, classes={"status": FakeStatusLookup})


@pytest.fixture
def conditions() -> ConditionRegistry:
    """Empty condition registry."""
    return ConditionRegistry()
