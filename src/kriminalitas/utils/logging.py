"""Logging configuration for the crime reporting API.

Modules log through ``get_logger(__name__)``, so every record comes from a
``kriminalitas.*`` stdlib logger. Console and file handlers are attached to
the ``kriminalitas`` package logger and records reach them by propagation.
"""
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

import structlog

from .config import settings

PACKAGE_LOGGER = "kriminalitas"


def _add_service(service_name: str):
    def processor(logger, method_name, event_dict):
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def _formatter() -> logging.Formatter:
    if settings.logging.format == "json":
        return logging.Formatter("%(message)s")
    return logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def setup_logging(
    service_name: str,
    log_level: Optional[str] = None,
    log_file: Optional[str] = None
) -> None:
    """Configure structlog and the package logger for one service.

    Args:
        service_name: Service tag added to every event ("api", "cli")
        log_level: Logging level (overrides config)
        log_file: Rotating log file for this service, if any
    """
    level = getattr(logging, (log_level or settings.logging.level).upper())

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            _add_service(service_name),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if settings.logging.format == "json"
            else structlog.dev.ConsoleRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Third-party libraries keep logging through the root logger
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)
    package_logger.propagate = False

    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(_formatter())
    package_logger.addHandler(console_handler)

    if log_file:
        package_logger.addHandler(_file_handler(log_file))


def _file_handler(log_file: str) -> logging.Handler:
    """Rotating file handler sized from the logging settings."""
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=settings.logging.max_bytes,
        backupCount=settings.logging.backup_count
    )
    file_handler.setFormatter(_formatter())
    return file_handler


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name, normally the module's ``__name__``

    Returns:
        Structured logger instance
    """
    return structlog.get_logger(name)
