"""Structured logging for the portal: structlog rendered through stdlib handlers on stderr."""
import logging
import sys
from typing import Any, Optional

import structlog
from pythonjsonlogger import jsonlogger

from hotel_portal.config.settings import LoggingSettings, settings

# Keys whose values must never reach a log line
SENSITIVE_KEYS = frozenset({"token", "password", "authorization", "aadhaar_number", "primary_guest_aadhaar"})
REDACTED = "[redacted]"

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
QUIET_LOGGERS = ("httpx", "httpcore", "redis")


def redact_sensitive(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Mask credentials and national IDs bound to a log event."""
    for key in SENSITIVE_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def prefix_booking_id(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Prefix the event with ``[<booking_id>]`` when a booking is bound."""
    booking_id = event_dict.get("booking_id")
    if booking_id:
        event_dict["event"] = f"[{booking_id}] {event_dict.get('event', '')}"
    return event_dict


def _stderr_handler(log_settings: LoggingSettings) -> logging.Handler:
    # stdout is reserved for the CLI's JSON documents
    handler = logging.StreamHandler(sys.stderr)
    if log_settings.format == "json":
        handler.setFormatter(jsonlogger.JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return handler


def configure_logging(log_settings: Optional[LoggingSettings] = None) -> None:
    """Route structlog through the root logger.

    Args:
        log_settings: Level and output format; defaults to the global settings
    """
    log_settings = log_settings or settings.logging
    level = getattr(logging, log_settings.level)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(_stderr_handler(log_settings))
    root_logger.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    renderer = (
        structlog.processors.JSONRenderer()
        if log_settings.format == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            redact_sensitive,
            prefix_booking_id,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger named after its module."""
    return structlog.get_logger(name)
