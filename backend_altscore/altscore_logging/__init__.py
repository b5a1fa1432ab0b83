"""
Structured logging for Backend AltScore.

JSON logs with timestamp, event_type and request-scoped fields.
Use get_logger() in all modules for aggregation-friendly output.
"""

from backend_altscore.altscore_logging.logger import bind_request, configure_structlog, get_logger

__all__ = ["bind_request", "configure_structlog", "get_logger"]
