"""
Structured logging setup for fieldguard.

structlog events and plain stdlib records (compiler, registry and factory
modules log through ``logging.getLogger(__name__)``) share one processor
chain and are rendered once, by the root handler's ``ProcessorFormatter``.
"""

import logging
import os

import structlog
from structlog.contextvars import merge_contextvars
from structlog.processors import (
    CallsiteParameter,
    CallsiteParameterAdder,
    JSONRenderer,
    KeyValueRenderer,
    TimeStamper,
    UnicodeDecoder,
    add_log_level,
    format_exc_info,
)
from structlog.stdlib import BoundLogger, ProcessorFormatter, add_logger_name
from structlog.types import Processor

from .sanitizers import SensitiveFieldProcessor

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def get_logger(name: str) -> BoundLogger:
    """
    Get a structured logger carrying the service name and version.

    Args:
        name: Logger name (e.g., "fieldguard.validator")
    """
    # Lazy proxy: configuration is read on first use
    return structlog.get_logger(
        name,
        service="fieldguard",
        version=os.getenv("SERVICE_VERSION", "1.0.0"),
    )


def configure_logging(
    environment: str = "development",
    log_level: str = "INFO",
    json_logs: bool = True,
    include_caller_info: bool = True,
) -> None:
    """
    Route structlog and stdlib logging through one root handler.

    Args:
        environment: Environment name (development, staging, production, test)
        log_level: Minimum log level name, unknown names fall back to INFO
        json_logs: Render JSON lines instead of key=value pairs
        include_caller_info: Add file, function and line (development only)
    """
    level = LOG_LEVELS.get(log_level.upper(), logging.INFO)
    shared = _shared_processors(include_caller_info and environment == "development")

    structlog.configure(
        processors=[*shared, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[ProcessorFormatter.remove_processors_meta, _renderer(json_logs)],
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)


def _shared_processors(with_callsite: bool) -> list[Processor]:
    processors: list[Processor] = [
        merge_contextvars,
        TimeStamper(fmt="ISO", utc=True),
        add_log_level,
        add_logger_name,
        UnicodeDecoder(),
        # Condition errors may quote the value being checked
        SensitiveFieldProcessor(),
    ]
    if with_callsite:
        processors.append(
            CallsiteParameterAdder(
                parameters=[
                    CallsiteParameter.FILENAME,
                    CallsiteParameter.FUNC_NAME,
                    CallsiteParameter.LINENO,
                ],
            )
        )
    processors.append(format_exc_info)
    return processors


def _renderer(json_logs: bool) -> Processor:
    if json_logs:
        return JSONRenderer(sort_keys=True)
    return KeyValueRenderer(key_order=["timestamp", "level", "event", "logger"])
