"""Structured logging for the analytics CLI and facade.

Uses structlog on top of stdlib logging, so modules that log through
``logging.getLogger(__name__)`` share the same output.  Every report run
gets a run_id for correlating its log lines.
"""

from __future__ import annotations

import logging
import math
import sys
import uuid
from contextvars import ContextVar
from typing import Any

import structlog

from ..core.config import ObservabilityConfig

_run_id: ContextVar[str] = ContextVar("run_id", default="")


def get_run_id() -> str:
    """Current run ID, generating one on first use."""
    rid = _run_id.get()
    if not rid:
        rid = new_run_id()
    return rid


def new_run_id() -> str:
    """Generate and set a new run ID."""
    rid = uuid.uuid4().hex[:12]
    _run_id.set(rid)
    return rid


def _add_run_id(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor: add run_id to every log entry."""
    event_dict["run_id"] = get_run_id()
    return event_dict


def _stringify_non_finite(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor: an infinite profit factor is not valid JSON."""
    for key, value in event_dict.items():
        if isinstance(value, float) and not math.isfinite(value):
            event_dict[key] = str(value)
    return event_dict


def setup_logging(config: ObservabilityConfig | None = None) -> None:
    """Configure structured logging.

    Args:
        config: Level and renderer ("json" or "console").  Defaults to
            ``ObservabilityConfig()``.
    """
    config = config or ObservabilityConfig()
    log_level = getattr(logging, config.log_level.upper(), logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        _add_run_id,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if config.log_format == "json":
        processors.append(_stringify_non_finite)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=log_level,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for a module."""
    return structlog.get_logger(name)
