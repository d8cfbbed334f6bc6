"""Tests for observability/logging.py."""

from __future__ import annotations

import io
import logging
import sys
from types import SimpleNamespace

import pytest
import structlog
from structlog.contextvars import get_contextvars

from jobsuche_server.observability.logging import (
    _resolve_level,
    bind_call_context,
    clear_call_context,
    configure_logging,
)


def _make_settings(**overrides: object) -> SimpleNamespace:
    """Create a minimal mock settings object."""
    defaults: dict[str, object] = {"log_format": "console", "log_level": "INFO"}
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


@pytest.mark.unit
class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_logs_go_to_stderr(self) -> None:
        """The root handler writes to stderr, never to stdout."""
        configure_logging(_make_settings())  # type: ignore[arg-type]
        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert handlers[0].stream is sys.stderr  # type: ignore[attr-defined]

    def test_json_mode_renders_json(self) -> None:
        """JSON mode renders events as JSON objects."""
        configure_logging(_make_settings(log_format="json"))  # type: ignore[arg-type]

        stream = io.StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.getLogger().handlers[0].formatter)
        log = logging.getLogger("test_json_mode")
        log.addHandler(handler)
        log.setLevel(logging.INFO)
        log.info("search_completed")
        log.removeHandler(handler)

        output = stream.getvalue()
        assert output.startswith("{")
        assert "search_completed" in output

    def test_sets_root_level(self) -> None:
        """Log level is applied to the root logger."""
        configure_logging(_make_settings(log_level="WARNING"))  # type: ignore[arg-type]
        assert logging.getLogger().level == logging.WARNING

    def test_http_loggers_quieted(self) -> None:
        """httpx request logging stays at WARNING even in debug mode."""
        configure_logging(_make_settings(log_level="DEBUG"))  # type: ignore[arg-type]
        assert logging.getLogger("httpx").level == logging.WARNING
        assert structlog.get_logger() is not None


@pytest.mark.unit
class TestCallContext:
    """Tests for bind/clear call context."""

    def test_bind_and_clear_call_context(self) -> None:
        """Bound tool and call id are visible until cleared."""
        bind_call_context("search_jobs", 42)
        assert get_contextvars() == {"tool": "search_jobs", "call_id": 42}
        clear_call_context()
        assert get_contextvars() == {}


@pytest.mark.unit
class TestResolveLevel:
    """Tests for _resolve_level."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("DEBUG", logging.DEBUG),
            ("info", logging.INFO),
            ("Warning", logging.WARNING),
            ("ERROR", logging.ERROR),
            ("CRITICAL", logging.CRITICAL),
            ("verbose", logging.INFO),
        ],
    )
    def test_resolve_level(self, name: str, expected: int) -> None:
        """Level names resolve case-insensitively, defaulting to INFO."""
        assert _resolve_level(name) == expected
