"""Single-search expansion: one search plus detail fetches for its top results."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import structlog

from jobsuche_core.exceptions import NotFoundError, UpstreamError
from jobsuche_core.models.report import (
    DetailFetched,
    DetailFetchFailed,
    DetailFetchOutcome,
    ExpandedSearchReport,
)
from jobsuche_server.orchestrator.pacer import CallClass, Pacer

if TYPE_CHECKING:
    from jobsuche_core.config.settings import Settings
    from jobsuche_core.interfaces.search import SearchClient
    from jobsuche_core.models.search import SearchFilter

logger = structlog.get_logger()


def clamp_max_details(requested: int | None, default: int, cap: int) -> int:
    """Resolve a requested detail count into [0, cap]."""
    value = default if requested is None else requested
    return max(0, min(value, cap))


class SearchExpander:
    """Run a search, then fetch details for the first N summaries serially."""

    def __init__(self, client: SearchClient, pacer: Pacer, settings: Settings) -> None:
        """Initialize with the upstream client and the process-wide pacer."""
        self.client = client
        self.pacer = pacer
        self.settings = settings

    async def expand(
        self, search_filter: SearchFilter, max_details: int | None = None
    ) -> ExpandedSearchReport:
        """Search once and fetch details for the first ``max_details`` summaries.

        Detail failures are recorded per reference number and never stop
        the loop. Only a failure of the search itself propagates.
        """
        limit = clamp_max_details(
            max_details, self.settings.default_max_details, self.settings.max_details_cap
        )
        checked = search_filter.checked(self.settings)

        search_start = time.monotonic()
        outcome = await self.client.search(checked)
        search_ms = int((time.monotonic() - search_start) * 1000)
        outcome = outcome.model_copy(update={"search_duration_ms": search_ms})

        to_fetch = outcome.jobs[:limit]
        logger.info(
            "expansion_fetching_details",
            total_results=outcome.total_results,
            requested=limit,
            fetching=len(to_fetch),
        )

        details_start = time.monotonic()
        details: list[DetailFetchOutcome] = []
        for summary in to_fetch:
            ref = summary.reference_number
            await self.pacer.wait(CallClass.DETAIL_FETCH)
            try:
                job = await self.client.get_details(ref)
            except (NotFoundError, UpstreamError) as e:
                logger.warning(
                    "detail_fetch_failed",
                    reference_number=ref,
                    error_type=e.error_type,
                    error=str(e),
                )
                details.append(DetailFetchFailed.from_error(ref, e))
                continue
            details.append(DetailFetched(reference_number=ref, job=job))
        details_ms = int((time.monotonic() - details_start) * 1000)

        report = ExpandedSearchReport(
            search=outcome,
            details=details,
            details_duration_ms=details_ms,
            max_details=limit,
        )
        logger.info(
            "expansion_completed",
            details_fetched=report.details_fetched,
            details_failed=report.details_failed,
            search_duration_ms=search_ms,
            details_duration_ms=details_ms,
        )
        return report
