"""Observability: structured logging and tracing."""

from jobsuche_server.observability.logging import (
    bind_call_context,
    clear_call_context,
    configure_logging,
)
from jobsuche_server.observability.tracing import (
    configure_tracing,
    trace_batch_run,
    traced_tool,
)

__all__ = [
    "bind_call_context",
    "clear_call_context",
    "configure_logging",
    "configure_tracing",
    "trace_batch_run",
    "traced_tool",
]
