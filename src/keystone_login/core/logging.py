"""Logging configuration for Keystone Login."""

import logging
import sys
from typing import List, Optional, Union

import structlog

from keystone_login.core.config import Settings, settings as default_settings


def setup_logging(settings: Optional[Settings] = None) -> None:
    """
    Setup structured logging for the application.

    Both structlog loggers and plain ``logging.getLogger`` loggers end up in
    one stdout handler rendered by structlog, so ``extra`` fields on stdlib
    records appear as keys of the JSON (or console) line.
    """
    settings = settings or default_settings
    timestamper = structlog.processors.TimeStamper(fmt="iso")

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            timestamper,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Records from the standard library get the same treatment
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_foreign_pre_chain(timestamper),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            _get_renderer(settings.LOG_FORMAT),
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        if isinstance(existing.formatter, structlog.stdlib.ProcessorFormatter):
            root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper()))


def _foreign_pre_chain(timestamper: structlog.processors.TimeStamper) -> List:
    return [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.ExtraAdder(),
        timestamper,
    ]


def _get_renderer(log_format: str) -> Union[structlog.processors.JSONRenderer, structlog.dev.ConsoleRenderer]:
    """Get the appropriate log renderer based on configuration."""
    if log_format.lower() == "json":
        return structlog.processors.JSONRenderer()
    else:
        return structlog.dev.ConsoleRenderer(colors=True)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
