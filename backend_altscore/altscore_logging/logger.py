"""
Structured JSON logging: timestamp, event_type, applicant and score fields.

structlog with ISO timestamps, log level, and consistent keys for aggregation.
All modules should use get_logger() and log a snake_case event name followed by
keyword fields (score, risk_category, index, ...).

Uses only Python stdlib logging and structlog; no backend_altscore imports to avoid circular imports.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL_VALUE = getattr(logging, LOG_LEVEL, logging.INFO)

# JSON output for production (LOG_FORMAT=json); human-readable for local
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

# Rendered lines go to stdout unless LOG_STREAM=stderr; unknown values fall back to stdout
LOG_STREAMS = ("stdout", "stderr")
LOG_STREAM = os.getenv("LOG_STREAM", "stdout").strip().lower()
if LOG_STREAM not in LOG_STREAMS:
    LOG_STREAM = "stdout"


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Ensure timestamp is always present (ISO 8601)."""
    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _normalize_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Rename structlog 'event' to event_type; keep message if present."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "message" not in event_dict and "event_type" in event_dict:
        event_dict["message"] = str(event_dict["event_type"])
    return event_dict


class _StreamLoggerFactory:
    """PrintLogger factory that looks up sys.stdout / sys.stderr on every call."""

    def __init__(self, stream: str) -> None:
        self.stream = stream

    def __call__(self, *args: Any) -> structlog.PrintLogger:
        return structlog.PrintLogger(file=getattr(sys, self.stream))


def configure_structlog(stream: str | None = None) -> None:
    """
    Configure structlog: JSON, timestamp, level, event_type.

    Runs once at import with LOG_STREAM; call again with stream="stderr" when
    stdout carries program output (the scoring CLI does). Loggers already handed
    out by get_logger() pick up the new stream on their next call.

    Raises:
        ValueError: stream is not "stdout" or "stderr".
    """
    target = (stream or LOG_STREAM).strip().lower()
    if target not in LOG_STREAMS:
        raise ValueError(f"log stream must be one of {', '.join(LOG_STREAMS)}, got {target!r}")
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _add_timestamp,
        _normalize_event,
    ]
    if LOG_FORMAT == "json":
        shared_processors.append(structlog.processors.JSONRenderer())
    else:
        shared_processors.append(
            structlog.dev.ConsoleRenderer(colors=getattr(sys, target).isatty())
        )
    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVEL_VALUE),
        context_class=dict,
        logger_factory=_StreamLoggerFactory(target),
        # Resolve config per call so a later configure_structlog() reaches module-level loggers
        cache_logger_on_first_use=False,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> Any:
    """
    Return a structured logger for the given module name.

        logger = get_logger(__name__)
        logger.info("credit_score_calculated", score=712, risk_category="Good")
    Output (JSON): {"event_type": "credit_score_calculated", "score": 712, "risk_category": "Good",
    "timestamp": "...", "level": "info", "logger_name": "module.name"}
    """
    return structlog.get_logger(name, logger_name=name)


def bind_request(request_id: str) -> structlog.BoundLogger:
    """Return a logger with request_id bound to all subsequent log calls."""
    return get_logger("backend_altscore").bind(request_id=request_id)
