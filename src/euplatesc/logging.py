"""Structured logging with correlation_id and secret redaction."""

from __future__ import annotations

import logging
import uuid
from contextvars import ContextVar
from typing import Any

import structlog

__all__ = [
    "configure_logging",
    "correlation_id_var",
    "get_logger",
    "new_correlation_id",
]

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

_REDACTED = "***"
_SECRET_KEYS = frozenset({"secret_key", "secret", "key"})


def new_correlation_id() -> str:
    cid = str(uuid.uuid4())
    correlation_id_var.set(cid)
    return cid


def _add_correlation_id(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    cid = correlation_id_var.get("")
    if cid:
        event_dict["correlation_id"] = cid
    return event_dict


def redact_secrets(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Mask merchant key material if it ever reaches a log call."""
    for name in _SECRET_KEYS.intersection(event_dict):
        event_dict[name] = _REDACTED
    return event_dict


def configure_logging(*, json_output: bool = True, level: str = "INFO") -> None:
    """JSON output for production, console rendering for local runs."""
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        _add_correlation_id,
        redact_secrets,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelNamesMapping()[level.upper()]
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(**kwargs: Any) -> structlog.BoundLogger:
    return structlog.get_logger(**kwargs)  # type: ignore[no-any-return]
