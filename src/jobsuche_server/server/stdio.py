"""Line-delimited JSON-RPC 2.0 transport over stdin/stdout (MCP stdio)."""

from __future__ import annotations

import asyncio
import json
import sys
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

import structlog

from jobsuche_core.constants import MCP_PROTOCOL_VERSION, SERVER_NAME, SERVER_VERSION
from jobsuche_core.exceptions import (
    BatchFailedError,
    InvalidArgumentsError,
    JobsucheError,
    UnknownToolError,
)
from jobsuche_server.observability.logging import bind_call_context, clear_call_context
from jobsuche_server.server.context import ServerContext
from jobsuche_server.server.handlers import build_registry
from jobsuche_server.server.registry import ToolRegistry

if TYPE_CHECKING:
    from jobsuche_core.config.settings import Settings

logger = structlog.get_logger()

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

LineReader = Callable[[], Awaitable[str]]
LineWriter = Callable[[str], Awaitable[None]]


def error_payload(error: JobsucheError) -> dict[str, Any]:
    """JSON body describing a domain error returned as a tool result."""
    payload: dict[str, Any] = {"error_type": error.error_type, "message": str(error)}
    if isinstance(error, BatchFailedError):
        payload["report"] = error.report.model_dump(mode="json")
    return payload


def _tool_result(payload: dict[str, Any], *, is_error: bool = False) -> dict[str, Any]:
    text = json.dumps(payload, ensure_ascii=False)
    return {
        "content": [{"type": "text", "text": text}],
        "structuredContent": payload,
        "isError": is_error,
    }


def _response(request_id: Any, result: dict[str, Any]) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "result": result}


def _error(request_id: Any, code: int, message: str) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "error": {"code": code, "message": message}}


class StdioServer:
    """Serve a tool registry as JSON-RPC messages, one per line."""

    def __init__(self, registry: ToolRegistry) -> None:
        """Initialize with the registry of tools to expose."""
        self.registry = registry
        self._write_lock = asyncio.Lock()

    async def handle_line(self, line: str) -> dict[str, Any] | None:
        """Decode one line and return the response, or None for notifications."""
        try:
            message = json.loads(line)
        except json.JSONDecodeError as e:
            return _error(None, PARSE_ERROR, f"Parse error: {e}")
        if not isinstance(message, dict) or not isinstance(message.get("method"), str):
            return _error(None, INVALID_REQUEST, "Invalid request")
        return await self.handle_message(message)

    async def handle_message(self, message: dict[str, Any]) -> dict[str, Any] | None:
        """Dispatch one decoded JSON-RPC message."""
        method: str = message["method"]
        request_id = message.get("id")
        params = message.get("params") or {}

        if request_id is None:
            # Notifications (e.g. notifications/initialized) get no response
            logger.debug("notification_received", method=method)
            return None
        if not isinstance(params, dict):
            return _error(request_id, INVALID_PARAMS, "params must be an object")

        if method == "initialize":
            return _response(
                request_id,
                {
                    "protocolVersion": params.get("protocolVersion", MCP_PROTOCOL_VERSION),
                    "capabilities": {"tools": {"listChanged": False}},
                    "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
                },
            )
        if method == "ping":
            return _response(request_id, {})
        if method == "tools/list":
            return _response(request_id, {"tools": self.registry.list_tools()})
        if method == "tools/call":
            return await self._call_tool(request_id, params)
        return _error(request_id, METHOD_NOT_FOUND, f"Method not found: {method}")

    async def _call_tool(self, request_id: Any, params: dict[str, Any]) -> dict[str, Any]:
        name = params.get("name")
        if not isinstance(name, str):
            return _error(request_id, INVALID_PARAMS, "tools/call requires a tool name")

        bind_call_context(name, request_id)
        try:
            result = await self.registry.call(name, params.get("arguments"))
        except UnknownToolError as e:
            return _error(request_id, METHOD_NOT_FOUND, str(e))
        except InvalidArgumentsError as e:
            return _error(request_id, INVALID_PARAMS, str(e))
        except JobsucheError as e:
            logger.warning("tool_call_failed", error_type=e.error_type, error=str(e))
            return _response(request_id, _tool_result(error_payload(e), is_error=True))
        except Exception as e:
            logger.exception("tool_call_crashed")
            return _error(request_id, INTERNAL_ERROR, f"Internal error: {e}")
        finally:
            clear_call_context()
        return _response(request_id, _tool_result(result))

    async def serve(self, read_line: LineReader, write_line: LineWriter) -> None:
        """Read requests until EOF, answering each from its own task."""
        pending: set[asyncio.Task[None]] = set()

        async def _answer(line: str) -> None:
            response = await self.handle_line(line)
            if response is not None:
                async with self._write_lock:
                    await write_line(json.dumps(response, ensure_ascii=False))

        logger.info("stdio_server_ready", tools=self.registry.names())
        while True:
            line = await read_line()
            if not line:
                break
            if not line.strip():
                continue
            task = asyncio.create_task(_answer(line))
            pending.add(task)
            task.add_done_callback(pending.discard)

        if pending:
            await asyncio.gather(*pending)
        logger.info("stdio_server_stopped")


async def read_stdin_line() -> str:
    """Read one line from stdin without blocking the event loop."""
    return await asyncio.to_thread(sys.stdin.readline)


async def write_stdout_line(line: str) -> None:
    """Write one protocol line to stdout."""
    sys.stdout.write(line + "\n")
    sys.stdout.flush()


async def run_stdio_server(settings: Settings) -> None:
    """Build the server context and serve tools on stdin/stdout until EOF."""
    ctx = ServerContext.create(settings)
    try:
        server = StdioServer(build_registry(ctx))
        await server.serve(read_stdin_line, write_stdout_line)
    finally:
        await ctx.aclose()
