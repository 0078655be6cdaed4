"""Application factories."""

from .validator_factory import ValidatorFactory

__all__ = ["ValidatorFactory"]
