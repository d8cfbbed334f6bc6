"""Batch orchestration of named searches with per-search detail expansion."""

from __future__ import annotations

import time
from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog

from jobsuche_core.exceptions import BatchFailedError, InvalidFilterError, JobsucheError
from jobsuche_core.models.report import (
    BatchEntry,
    BatchReport,
    BatchSearchFailed,
    BatchSearchSucceeded,
)
from jobsuche_server.observability.tracing import trace_batch_run
from jobsuche_server.orchestrator.expander import SearchExpander, clamp_max_details
from jobsuche_server.orchestrator.pacer import CallClass, Pacer

if TYPE_CHECKING:
    from jobsuche_core.config.settings import Settings
    from jobsuche_core.models.search import NamedSearchSpec

logger = structlog.get_logger()


class BatchOrchestrator:
    """Run named searches strictly in order, isolating failures per search.

    Searches are serialized, never run concurrently, so the pacer's
    inter-search spacing bounds the upstream load of a batch.
    """

    def __init__(self, expander: SearchExpander, pacer: Pacer, settings: Settings) -> None:
        """Initialize with the expander and the process-wide pacer."""
        self.expander = expander
        self.pacer = pacer
        self.settings = settings

    async def run(
        self,
        specs: Sequence[NamedSearchSpec],
        default_max_details: int | None = None,
    ) -> BatchReport:
        """Expand every spec in input order and aggregate the results.

        Raises InvalidFilterError for an empty batch and BatchFailedError
        when every search that ran failed.
        """
        if not specs:
            msg = "A batch needs at least one search"
            raise InvalidFilterError(msg)

        cap = self.settings.max_batch_searches
        to_run, skipped = list(specs[:cap]), [s.name for s in specs[cap:]]
        if skipped:
            logger.warning("batch_searches_skipped", limit=cap, skipped=skipped)

        default_details = clamp_max_details(
            default_max_details,
            self.settings.default_batch_max_details,
            self.settings.max_details_cap,
        )

        start = time.monotonic()
        results: list[BatchEntry] = []
        async with trace_batch_run(len(to_run)):
            for index, spec in enumerate(to_run):
                if index == 0:
                    # Start the inter-search interval at the first search
                    await self.pacer.mark(CallClass.INTER_SEARCH)
                else:
                    await self.pacer.wait(CallClass.INTER_SEARCH)
                results.append(await self._run_one(spec, default_details))

        report = BatchReport(
            results=results,
            skipped=skipped,
            total_duration_ms=int((time.monotonic() - start) * 1000),
        )
        logger.info(
            "batch_completed",
            searches=report.searches_count,
            failed=report.searches_failed,
            duration_ms=report.total_duration_ms,
        )
        if report.searches_failed == report.searches_count:
            raise BatchFailedError(report)
        return report

    async def _run_one(self, spec: NamedSearchSpec, default_details: int) -> BatchEntry:
        """Expand one named search; a domain error becomes a failure entry."""
        max_details = default_details if spec.max_details is None else spec.max_details
        search_filter = spec.filter
        if search_filter.page_size is None:
            # Only request as many summaries as will be expanded
            search_filter = search_filter.model_copy(update={"page_size": max(max_details, 1)})

        logger.info("batch_search_start", name=spec.name, max_details=max_details)
        try:
            report = await self.expander.expand(search_filter, max_details)
        except JobsucheError as e:
            logger.warning(
                "batch_search_failed",
                name=spec.name,
                error_type=e.error_type,
                error=str(e),
            )
            return BatchSearchFailed(name=spec.name, error_type=e.error_type, message=str(e))
        return BatchSearchSucceeded(name=spec.name, report=report)
