"""
Logging Configuration
====================

Structured logging configuration with environment-specific settings.
Uses structlog for structured logging with JSON output in production.

Every handler writes to stderr: stdout carries the generated D2 text.
"""

import logging
import logging.config
import sys
from typing import Dict, Any, Optional, TYPE_CHECKING
import structlog
from structlog.types import Processor

from .settings import get_settings

if TYPE_CHECKING:
    from .settings import Settings


def setup_logging(level: Optional[str] = None, settings: Optional["Settings"] = None) -> None:
    """
    Setup application logging configuration.

    Args:
        level: Optional log level overriding the configured one
        settings: Optional settings instance, defaults to the global settings
    """
    settings = settings or get_settings()
    log_level = (level or ("DEBUG" if settings.debug else settings.log_level)).upper()

    # Configure structlog
    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.environment == "production":
        # JSON output for production
        processors.append(structlog.processors.JSONRenderer())
    else:
        # Pretty output for development
        processors.append(
            structlog.dev.ConsoleRenderer(colors=settings.environment == "development")
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Configure standard library logging
    if settings.log_file is not None:
        ensure_log_directory(settings)
    logging.config.dictConfig(get_logging_config(settings, log_level))


def get_logging_config(settings: "Settings", log_level: Optional[str] = None) -> Dict[str, Any]:
    """Get logging configuration dictionary."""
    log_level = log_level or settings.log_level
    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": log_level,
            "formatter": "standard" if settings.environment != "production" else "json",
            "stream": sys.stderr,
        },
    }
    if settings.log_file is not None:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": log_level,
            "formatter": "detailed",
            "filename": str(settings.log_file),
            "maxBytes": 10485760,  # 10MB
            "backupCount": 5,
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "detailed": {
                "format": "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "()": "pythonjsonlogger.json.JsonFormatter",
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
            },
        },
        "handlers": handlers,
        "loggers": {
            "": {  # Root logger
                "level": log_level,
                "handlers": list(handlers),
                "propagate": False,
            },
        },
    }


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def ensure_log_directory(settings: "Settings") -> None:
    """Ensure the log file directory exists."""
    if settings.log_file is not None:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)


# Initialize logging on import
setup_logging()
