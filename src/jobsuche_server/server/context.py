"""Per-process server context shared by all tool calls."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from jobsuche_server.orchestrator.batch import BatchOrchestrator
from jobsuche_server.orchestrator.expander import SearchExpander
from jobsuche_server.orchestrator.pacer import Pacer
from jobsuche_server.tools.factories import create_search_client

if TYPE_CHECKING:
    from jobsuche_core.config.settings import Settings
    from jobsuche_core.interfaces.search import SearchClient

logger = structlog.get_logger()


@dataclass
class ServerContext:
    """Long-lived collaborators: one client and one pacer per process."""

    settings: Settings
    client: SearchClient
    pacer: Pacer
    expander: SearchExpander
    batch: BatchOrchestrator
    started_at: float = field(default_factory=time.monotonic)

    @classmethod
    def create(
        cls,
        settings: Settings,
        client: SearchClient | None = None,
        pacer: Pacer | None = None,
    ) -> ServerContext:
        """Wire the orchestrators around a shared client and pacer."""
        client = client or create_search_client(settings)
        pacer = pacer or Pacer.from_settings(settings)
        expander = SearchExpander(client, pacer, settings)
        logger.info(
            "server_context_created",
            api_url=settings.api_url,
            detail_interval_ms=settings.detail_interval_ms,
            search_interval_ms=settings.search_interval_ms,
        )
        return cls(
            settings=settings,
            client=client,
            pacer=pacer,
            expander=expander,
            batch=BatchOrchestrator(expander, pacer, settings),
        )

    def uptime_seconds(self) -> int:
        """Whole seconds since the context was created."""
        return int(time.monotonic() - self.started_at)

    async def aclose(self) -> None:
        """Release the client's network resources, if it holds any."""
        close = getattr(self.client, "aclose", None)
        if close is not None:
            await close()
