"""Abstract job search client interface."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from jobsuche_core.models.job import JobDetail
from jobsuche_core.models.report import SearchOutcome
from jobsuche_core.models.search import SearchFilter


@runtime_checkable
class SearchClient(Protocol):
    """Raw search and detail primitives of the remote job board."""

    async def search(self, search_filter: SearchFilter) -> SearchOutcome:
        """Return one page of summaries plus a total-count estimate.

        Raises InvalidFilterError or UpstreamError.
        """
        ...

    async def get_details(self, reference_number: str) -> JobDetail:
        """Return the detail record for one reference number.

        Raises NotFoundError or UpstreamError.
        """
        ...
