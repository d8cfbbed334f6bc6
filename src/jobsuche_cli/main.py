"""CLI entrypoint using typer."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import structlog
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from jobsuche_core.config.settings import Settings
from jobsuche_core.constants import SERVER_NAME, SERVER_VERSION
from jobsuche_core.exceptions import JobsucheError
from jobsuche_server.observability import configure_logging, configure_tracing
from jobsuche_server.server.context import ServerContext
from jobsuche_server.server.handlers import TOOL_DEFINITIONS, build_registry
from jobsuche_server.server.stdio import error_payload, run_stdio_server

app = typer.Typer(
    name="jobsuche-mcp",
    help="AI-friendly job search over the German Federal Employment Agency API",
)
console = Console()
err_console = Console(stderr=True)
logger = structlog.get_logger()


def _load_settings(verbose: bool) -> Settings:
    """Load settings from the environment, exiting with a hint on failure."""
    try:
        settings = Settings()
    except ValidationError as exc:
        err_console.print(f"[red]Error:[/red] invalid configuration\n{exc}")
        err_console.print(
            "\nPlease check:\n"
            "  - JOBSUCHE_API_URL (optional, uses the official API if not set)\n"
            "  - JOBSUCHE_API_KEY (optional, uses the public key if not set)\n"
            "  - JOBSUCHE_DEFAULT_PAGE_SIZE / JOBSUCHE_MAX_PAGE_SIZE (1-100)"
        )
        raise typer.Exit(code=1) from exc
    if verbose:
        settings.log_level = "DEBUG"
    return settings


@app.command()
def serve(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Serve the tools over stdio (MCP)."""
    settings = _load_settings(verbose)
    configure_logging(settings)
    configure_tracing(settings)
    logger.info("server_starting", api_url=settings.api_url, version=SERVER_VERSION)
    asyncio.run(run_stdio_server(settings))


@app.command()
def call(
    tool: str = typer.Argument(..., help="Tool name, e.g. search_jobs"),
    args: str = typer.Option("{}", "--args", help="Tool arguments as a JSON object"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Invoke one tool and print its JSON result."""
    try:
        arguments = json.loads(args)
    except json.JSONDecodeError as exc:
        err_console.print(f"[red]Error:[/red] --args is not valid JSON: {exc}")
        raise typer.Exit(code=2) from exc

    settings = _load_settings(verbose)
    configure_logging(settings)

    try:
        result = asyncio.run(_call_tool(settings, tool, arguments))
    except JobsucheError as exc:
        console.print_json(data=error_payload(exc))
        raise typer.Exit(code=1) from exc
    console.print_json(data=result)


@app.command()
def tools() -> None:
    """List the available tools."""
    table = Table(title=f"{SERVER_NAME} tools")
    table.add_column("Tool", style="bold")
    table.add_column("Description")
    for name, description, _ in TOOL_DEFINITIONS:
        table.add_row(name, description.splitlines()[0])
    console.print(table)


@app.command()
def version() -> None:
    """Show version."""
    console.print(f"jobsuche-mcp v{SERVER_VERSION}")


async def _call_tool(settings: Settings, tool: str, arguments: dict[str, Any]) -> dict[str, Any]:
    """Run a single tool call against a fresh server context."""
    ctx = ServerContext.create(settings)
    try:
        return await build_registry(ctx).call(tool, arguments)
    finally:
        await ctx.aclose()


if __name__ == "__main__":
    app()
