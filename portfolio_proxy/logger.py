import logging
import re
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from .config import settings

# query and form parameters that carry upstream credentials
_CREDENTIAL_PARAM = re.compile(r"(?i)\b(key|apikey|api_key|access_?token)=[^&\s'\"]+")
_CREDENTIAL_FIELDS = frozenset({"apikey", "api_key", "key", "accesstoken", "private_key"})
REDACTED = "***"


def add_severity_level(_logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """add severity field for cloud logging compatibility"""
    if method_name == "warning":
        event_dict["severity"] = "WARNING"
    else:
        event_dict["severity"] = method_name.upper()
    return event_dict


def _redact(value: Any) -> Any:
    if isinstance(value, str):
        return _CREDENTIAL_PARAM.sub(lambda m: f"{m.group(1)}={REDACTED}", value)
    if isinstance(value, dict):
        return {
            k: REDACTED if str(k).lower() in _CREDENTIAL_FIELDS else _redact(v)
            for k, v in value.items()
        }
    return value


def redact_credentials(_logger: Any, _method_name: str, event_dict: EventDict) -> EventDict:
    """
    mask api keys in log fields

    requests puts the full url into its exception text, and google vision
    takes its key as a query parameter
    """
    return _redact(event_dict)


def configure_logging() -> None:
    """configure structlog with JSON or console output"""

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_severity_level,
        structlog.processors.format_exc_info,
        redact_credentials,
    ]

    if settings.log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(settings.log_level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """get configured logger instance"""
    return structlog.get_logger(name)
