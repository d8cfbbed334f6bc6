"""The five Jobsuche tools exposed to callers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from pydantic import BaseModel

from jobsuche_core.constants import SERVER_NAME, SERVER_VERSION
from jobsuche_core.exceptions import JobsucheError
from jobsuche_core.models.search import SearchFilter
from jobsuche_core.models.status import ServerStatus
from jobsuche_server.observability.tracing import traced_tool
from jobsuche_server.orchestrator.pacer import CallClass
from jobsuche_server.projection import project_report
from jobsuche_server.server.params import (
    BatchSearchJobsParams,
    GetJobDetailsParams,
    GetServerStatusParams,
    SearchJobsParams,
    SearchJobsWithDetailsParams,
)
from jobsuche_server.server.registry import ToolRegistry

if TYPE_CHECKING:
    from jobsuche_server.server.context import ServerContext

logger = structlog.get_logger()

SEARCH_JOBS_DESCRIPTION = """\
Search for jobs in Germany using the Federal Employment Agency database.

Filters include location, job title, employer, branch, employment type and
recency. Results are job summaries with reference numbers that can be passed
to get_job_details.

Examples:
- Software jobs in Berlin: {"job_title": "Software Engineer", "location": "Berlin"}
- Recent jobs in München: {"location": "München", "published_since_days": 7}
- Full-time jobs nationwide: {"employment_type": ["fulltime"]}"""

GET_JOB_DETAILS_DESCRIPTION = """\
Get detailed information about a specific job posting, including the full
description, salary, contract details and employment flags. Fields the API
does not provide are returned as null.

Example: {"reference_number": "10001-1234567890-S"}"""

SEARCH_WITH_DETAILS_DESCRIPTION = """\
Search for jobs and automatically fetch details for the top results in one
call. A failed detail fetch is reported per job and does not fail the search.

Examples:
- {"location": "Wuppertal", "employment_type": ["parttime"], "max_details": 5}
- {"employer": "BARMER", "location": "Wuppertal", "max_details": 3,
   "fields": {"include_fields": ["title", "salary", "description"]}}"""

BATCH_SEARCH_DESCRIPTION = """\
Perform several named job searches in one operation, with details for the top
results of each. Searches run in order; a failed search is reported by name
and the others still run.

Examples:
- Compare employers: {"searches": [{"name": "BARMER", "employer": "BARMER",
  "location": "Wuppertal"}, {"name": "Siemens", "employer": "Siemens",
  "location": "Wuppertal"}], "max_details_per_search": 3}
- Job types: {"searches": [{"name": "Sekretariat", "job_title": "Sekretärin"},
  {"name": "Sport", "job_title": "Schwimm"}]}"""

SERVER_STATUS_DESCRIPTION = """\
Get server status: uptime, API configuration, upstream connectivity and the
number of available tools."""

TOOL_DEFINITIONS: list[tuple[str, str, type[BaseModel]]] = [
    ("search_jobs", SEARCH_JOBS_DESCRIPTION, SearchJobsParams),
    ("get_job_details", GET_JOB_DETAILS_DESCRIPTION, GetJobDetailsParams),
    ("search_jobs_with_details", SEARCH_WITH_DETAILS_DESCRIPTION, SearchJobsWithDetailsParams),
    ("batch_search_jobs", BATCH_SEARCH_DESCRIPTION, BatchSearchJobsParams),
    ("get_server_status", SERVER_STATUS_DESCRIPTION, GetServerStatusParams),
]


def build_registry(ctx: ServerContext) -> ToolRegistry:
    """Register every tool against one server context."""
    registry = ToolRegistry()

    @traced_tool("search_jobs")
    async def search_jobs(params: SearchJobsParams) -> dict[str, Any]:
        if params.fields is not None:
            params.fields.ensure_exclusive()
        search_filter = params.to_filter().checked(ctx.settings)
        outcome = await ctx.client.search(search_filter)
        return project_report(outcome, params.fields)

    @traced_tool("get_job_details")
    async def get_job_details(params: GetJobDetailsParams) -> dict[str, Any]:
        if params.fields is not None:
            params.fields.ensure_exclusive()
        await ctx.pacer.wait(CallClass.DETAIL_FETCH)
        detail = await ctx.client.get_details(params.reference_number)
        return project_report(detail, params.fields)

    @traced_tool("search_jobs_with_details")
    async def search_jobs_with_details(params: SearchJobsWithDetailsParams) -> dict[str, Any]:
        if params.fields is not None:
            params.fields.ensure_exclusive()
        report = await ctx.expander.expand(params.to_filter(), params.max_details)
        return project_report(report, params.fields)

    @traced_tool("batch_search_jobs")
    async def batch_search_jobs(params: BatchSearchJobsParams) -> dict[str, Any]:
        if params.fields is not None:
            params.fields.ensure_exclusive()
        specs = [item.to_spec() for item in params.searches]
        report = await ctx.batch.run(specs, params.max_details_per_search)
        return project_report(report, params.fields)

    @traced_tool("get_server_status")
    async def get_server_status(params: GetServerStatusParams) -> dict[str, Any]:
        try:
            await ctx.client.search(SearchFilter(page_size=1))
            connection = "Connected"
        except JobsucheError as e:
            logger.warning("status_check_failed", error=str(e))
            connection = f"Connection Error: {e}"
        status = ServerStatus(
            server_name=SERVER_NAME,
            version=SERVER_VERSION,
            uptime_seconds=ctx.uptime_seconds(),
            api_url=ctx.settings.api_url,
            api_connection_status=connection,
            tools_count=len(registry),
        )
        return status.model_dump(mode="json")

    handlers = {
        "search_jobs": search_jobs,
        "get_job_details": get_job_details,
        "search_jobs_with_details": search_jobs_with_details,
        "batch_search_jobs": batch_search_jobs,
        "get_server_status": get_server_status,
    }
    for name, description, params_model in TOOL_DEFINITIONS:
        registry.register(name, description, params_model, handlers[name])
    return registry
