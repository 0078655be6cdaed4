"""
fieldguard structured logging.

This module provides structured logging capabilities with:
- structlog configuration for JSON or key-value output
- Redaction of sensitive field data in validation events
"""

from .factory import configure_logging, get_logger
from .sanitizers import SensitiveFieldProcessor, is_sensitive_field, sanitize_for_log

__all__ = [
    "configure_logging",
    "get_logger",
    "SensitiveFieldProcessor",
    "is_sensitive_field",
    "sanitize_for_log",
]
