"""
Test that altscore_logging can be imported without circular import and logger works.
"""

from __future__ import annotations


def test_logging_import():
    """Import get_logger from altscore_logging and use the logger."""
    from backend_altscore.altscore_logging import get_logger

    logger = get_logger("test")
    assert logger is not None
    assert hasattr(logger, "info")
    assert hasattr(logger, "debug")
    assert hasattr(logger, "warning")
    assert hasattr(logger, "error")
    # Smoke test: call info (should not raise)
    logger.info("test_message", key="value")


def test_bind_request_logger():
    """bind_request returns a logger usable with bound request_id."""
    from backend_altscore.altscore_logging import bind_request

    log = bind_request("req-123")
    log.info("test_bound_message", score=700)


def test_log_stream_can_move_to_stderr(capsys):
    """configure_structlog(stream="stderr") reroutes loggers created earlier."""
    from backend_altscore.altscore_logging import configure_structlog, get_logger

    logger = get_logger("test_stream")
    try:
        configure_structlog(stream="stderr")
        logger.info("rerouted_message", key="value")
        captured = capsys.readouterr()
        assert "rerouted_message" not in captured.out
        assert '"event_type": "rerouted_message"' in captured.err
    finally:
        configure_structlog(stream="stdout")
    logger.info("restored_message")
    assert "restored_message" in capsys.readouterr().out


def test_unknown_log_stream_raises():
    import pytest

    from backend_altscore.altscore_logging import configure_structlog

    with pytest.raises(ValueError):
        configure_structlog(stream="syslog")
