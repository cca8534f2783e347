"""Structured logging for place search events."""

from __future__ import annotations

import logging
from typing import Any, MutableMapping

import structlog

SERVICE_NAME = "placefinder"
REDACTED = "***"
SECRET_FIELDS = frozenset({"key", "api_key"})


def add_service(_: Any, __: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def redact_secrets(_: Any, __: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """Mask API keys, including the ``key`` query parameter inside ``params``."""

    for field in SECRET_FIELDS & event_dict.keys():
        event_dict[field] = REDACTED
    params = event_dict.get("params")
    if isinstance(params, dict) and SECRET_FIELDS & params.keys():
        event_dict["params"] = {
            name: REDACTED if name in SECRET_FIELDS else value for name, value in params.items()
        }
    return event_dict


def configure_logging(level: int | str = logging.INFO) -> None:
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[logging.StreamHandler()],
    )
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            add_service,
            redact_secrets,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


logger = structlog.get_logger()

__all__ = ["configure_logging", "add_service", "redact_secrets", "logger", "SECRET_FIELDS"]
