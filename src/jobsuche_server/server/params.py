"""Tool parameter models, validated at the transport boundary."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from jobsuche_core.models.fields import FieldSpec
from jobsuche_core.models.search import NamedSearchSpec, SearchFilter


class _CriteriaParams(BaseModel):
    """Search criteria shared by every search tool."""

    model_config = ConfigDict(extra="forbid")

    job_title: str | None = Field(
        default=None, description="Job title or keywords, e.g. 'Software Engineer'"
    )
    location: str | None = Field(
        default=None, description="Location name, e.g. 'Berlin', 'München'"
    )
    radius_km: int | None = Field(
        default=None, description="Search radius in kilometers from the location"
    )
    employment_type: list[str] | None = Field(
        default=None,
        description=(
            "Any of: fulltime, parttime, mini_job, home_office, shift; "
            "unrecognized values are ignored"
        ),
    )
    contract_type: list[str] | None = Field(
        default=None, description="Any of: permanent, temporary; unrecognized values are ignored"
    )
    published_since_days: int | None = Field(
        default=None, description="Days since publication (0-100), e.g. 7 for last week"
    )
    employer: str | None = Field(
        default=None, description="Employer name, combined with job_title in the query"
    )
    branch: str | None = Field(
        default=None, description="Branch or industry, combined with job_title in the query"
    )

    def to_filter(self) -> SearchFilter:
        """Build the immutable search filter from these parameters."""
        return SearchFilter(**self.model_dump(include=set(SearchFilter.model_fields)))


class _PagedParams(_CriteriaParams):
    """Criteria plus pagination."""

    page_size: int | None = Field(
        default=None, description="Results per page (1-100, default from config)"
    )
    page: int | None = Field(default=None, description="Page number, starting at 1")


class SearchJobsParams(_PagedParams):
    """Parameters for search_jobs."""

    fields: FieldSpec | None = Field(
        default=None, description="Optional field filtering for job summaries"
    )


class GetJobDetailsParams(BaseModel):
    """Parameters for get_job_details."""

    model_config = ConfigDict(extra="forbid")

    reference_number: str = Field(description="Job reference number (refnr from search results)")
    fields: FieldSpec | None = Field(
        default=None, description="Optional field filtering for the detail record"
    )


class SearchJobsWithDetailsParams(_PagedParams):
    """Parameters for search_jobs_with_details."""

    max_details: int | None = Field(
        default=None, description="Fetch details for the top N results (default 5, max 10)"
    )
    fields: FieldSpec | None = Field(
        default=None, description="Optional field filtering to reduce response size"
    )


class BatchSearchItem(_CriteriaParams):
    """One named search of a batch."""

    name: str = Field(description="Name for this search, echoed in the results")
    max_details: int | None = Field(
        default=None, description="Override max_details_per_search for this search"
    )

    def to_spec(self) -> NamedSearchSpec:
        """Bind the name and filter into a named search spec."""
        return NamedSearchSpec(name=self.name, filter=self.to_filter(), max_details=self.max_details)


class BatchSearchJobsParams(BaseModel):
    """Parameters for batch_search_jobs."""

    model_config = ConfigDict(extra="forbid")

    searches: list[BatchSearchItem] = Field(description="Searches to perform (max 5)")
    max_details_per_search: int | None = Field(
        default=None, description="Fetch details for the top N results per search (default 3)"
    )
    fields: FieldSpec | None = Field(
        default=None, description="Optional field filtering to reduce response size"
    )


class GetServerStatusParams(BaseModel):
    """get_server_status takes no parameters."""

    model_config = ConfigDict(extra="forbid")
