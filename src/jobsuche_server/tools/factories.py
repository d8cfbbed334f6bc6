"""Factory functions for creating tool instances from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from jobsuche_core.interfaces.search import SearchClient

if TYPE_CHECKING:
    from jobsuche_core.config.settings import Settings


def create_search_client(settings: Settings) -> SearchClient:
    """Create the Jobsuche API client configured from settings."""
    from jobsuche_server.tools.jobsuche_client import JobsucheClient

    return JobsucheClient(settings)
