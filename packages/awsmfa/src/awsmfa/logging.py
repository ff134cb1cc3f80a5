"""
Structured logging for awsmfa.

Usage:
    from awsmfa.logging import setup_logging, get_logger, log_error, log_warning, log_info

Setup:
    setup_logging()  # human-readable lines on stderr
    setup_logging(level="DEBUG", format_type="json")

Logging:
    logger = get_logger(__name__)
    log_info("Updated dotenv file", path="/work/.env", replaced=["AWS_SESSION_TOKEN"])
    log_warning("Keys not declared in file", ignored=["AWS_SESSION_TOKEN"])
    log_error("Failed to write dotenv file", cause="Permission denied")

Never pass secrets (secret keys, session tokens, MFA codes) as extra fields.
"""

import logging
import sys
from typing import Any, Optional

import pythonjsonlogger.json

SERVICE_NAME = "awsmfa"

logger = logging.getLogger(SERVICE_NAME)

__all__ = [
    "setup_logging",
    "get_logger",
    "log_error",
    "log_warning",
    "log_info",
    "mask",
]


def setup_logging(level: str = "INFO", format_type: str = "text") -> logging.Logger:
    """
    Configure the awsmfa logger.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: 'json' for structured logging, 'text' for human-readable

    Stdout is left alone; it carries the command's own output.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(numeric_level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    if format_type == "json":
        formatter = pythonjsonlogger.json.JsonFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s", datefmt="%Y-%m-%dT%H:%M:%S%z"
        )
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
        )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the awsmfa namespace.

    Args:
        name: Logger name (typically __name__)
    """
    if name == SERVICE_NAME or name.startswith(f"{SERVICE_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{SERVICE_NAME}.{name}")


def mask(value: Optional[str], visible: int = 4) -> str:
    """Mask all but the last few characters of an identifier."""
    if not value:
        return ""
    if len(value) <= visible:
        return "*" * len(value)
    return "*" * (len(value) - visible) + value[-visible:]


def log_error(message: str, cause: Optional[str] = None, **extra: Any):
    """Log error with structured data.

    Args:
        message: Human-readable error message
        cause: Optional exception message or underlying cause
        **extra: Additional structured data to include in log
    """
    log_data = {}
    if cause:
        log_data["cause"] = cause
    log_data.update(extra)

    logger.error(message, extra=log_data)


def log_warning(message: str, **extra: Any):
    """Log warning with structured data."""
    logger.warning(message, extra=dict(extra))


def log_info(message: str, **extra: Any):
    """Log info with structured data."""
    logger.info(message, extra=dict(extra))
