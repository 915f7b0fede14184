"""Structured logging configuration using structlog."""

import logging
import re
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog
from structlog.types import EventDict, WrappedLogger

from core.config import settings

PHONE_KEYS: frozenset[str] = frozenset({"phone", "target_phone", "liker_phone", "liked_phone"})

_DIGITS = re.compile(r"\d")


def mask_phone(value: str) -> str:
    """Keep only the last two digits of a phone number."""
    digits = _DIGITS.findall(value)
    if len(digits) <= 2:
        return "*" * len(digits)
    return "*" * (len(digits) - 2) + "".join(digits[-2:])


def redact_phone_numbers(
    _logger: WrappedLogger,
    _method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Mask phone numbers bound under well-known keys."""
    for key in PHONE_KEYS & event_dict.keys():
        value = event_dict[key]
        if isinstance(value, str):
            event_dict[key] = mask_phone(value)
    return event_dict


def setup_logging(level: str | None = None, format: str | None = None) -> None:
    """Configure structlog for the application.

    Args:
        level: Minimum log level name, defaults to ``settings.log_level``.
        format: ``"json"`` for production, ``"console"`` for development.
    """
    level_name = (level or settings.log_level).upper()
    log_format = format or ("json" if settings.is_production else settings.log_format)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_phone_numbers,
    ]
    if log_format == "json":
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelNamesMapping().get(level_name, logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=True,
    )


def bind_request_context(context: MutableMapping[str, Any]) -> None:
    """Replace the per-request logging context."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**context)
