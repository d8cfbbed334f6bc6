"""Tool registry and stdio transport."""

from jobsuche_server.server.context import ServerContext
from jobsuche_server.server.handlers import build_registry
from jobsuche_server.server.registry import ToolRegistry
from jobsuche_server.server.stdio import StdioServer, run_stdio_server

__all__ = [
    "ServerContext",
    "StdioServer",
    "ToolRegistry",
    "build_registry",
    "run_stdio_server",
]
