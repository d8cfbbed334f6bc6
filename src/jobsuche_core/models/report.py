"""Search outcome, expansion and batch report models."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field, computed_field

from jobsuche_core.exceptions import JobsucheError
from jobsuche_core.models.job import JobDetail, JobSummary
from jobsuche_core.models.search import SearchFilter


class SearchOutcome(BaseModel):
    """One page of search results."""

    total_results: int | None = Field(default=None, description="Total matches upstream")
    current_page: int | None = Field(default=None, description="Page number returned")
    page_size: int | None = Field(default=None, description="Page size used")
    jobs: list[JobSummary] = Field(default_factory=list, description="Summaries on this page")
    search_duration_ms: int = Field(default=0, description="Wall-clock time of the search")
    filter: SearchFilter = Field(default_factory=SearchFilter, description="Filter searched")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def jobs_count(self) -> int:
        """Number of summaries on this page."""
        return len(self.jobs)


class DetailFetched(BaseModel):
    """Successful detail fetch."""

    status: Literal["ok"] = "ok"
    reference_number: str = Field(description="Reference number fetched")
    job: JobDetail = Field(description="Detail record")


class DetailFetchFailed(BaseModel):
    """Failed detail fetch, kept as data so the expansion can continue."""

    status: Literal["error"] = "error"
    reference_number: str = Field(description="Reference number that failed")
    error_type: str = Field(description="not_found or upstream_error")
    message: str = Field(description="Error description")

    @classmethod
    def from_error(cls, reference_number: str, error: JobsucheError) -> DetailFetchFailed:
        """Tag a client error with the reference number that produced it."""
        return cls(
            reference_number=reference_number,
            error_type=error.error_type,
            message=str(error),
        )


DetailFetchOutcome = Annotated[
    DetailFetched | DetailFetchFailed, Field(discriminator="status")
]


class ExpandedSearchReport(BaseModel):
    """A search plus detail fetches for its first summaries."""

    search: SearchOutcome = Field(description="The underlying search page")
    details: list[DetailFetchOutcome] = Field(
        default_factory=list, description="Detail outcomes in summary order"
    )
    details_duration_ms: int = Field(default=0, description="Wall-clock time of all detail fetches")
    max_details: int = Field(default=0, description="Detail count after clamping")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def details_fetched(self) -> int:
        """Number of successful detail fetches."""
        return sum(1 for d in self.details if d.status == "ok")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def details_failed(self) -> int:
        """Number of failed detail fetches."""
        return sum(1 for d in self.details if d.status == "error")


class BatchSearchSucceeded(BaseModel):
    """Batch entry for a named search that produced a report."""

    name: str = Field(description="Caller-chosen search name")
    status: Literal["ok"] = "ok"
    report: ExpandedSearchReport = Field(description="Expanded search report")


class BatchSearchFailed(BaseModel):
    """Batch entry for a named search whose expansion failed entirely."""

    name: str = Field(description="Caller-chosen search name")
    status: Literal["error"] = "error"
    error_type: str = Field(description="Error code, e.g. upstream_error")
    message: str = Field(description="Error description")


BatchEntry = Annotated[
    BatchSearchSucceeded | BatchSearchFailed, Field(discriminator="status")
]


class BatchReport(BaseModel):
    """Results of a batch, one entry per named search in input order."""

    results: list[BatchEntry] = Field(default_factory=list, description="Per-search entries")
    skipped: list[str] = Field(
        default_factory=list, description="Names not run because the batch cap was reached"
    )
    total_duration_ms: int = Field(default=0, description="Wall-clock time of the batch")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def searches_count(self) -> int:
        """Number of searches run."""
        return len(self.results)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def searches_failed(self) -> int:
        """Number of searches that failed."""
        return sum(1 for r in self.results if r.status == "error")
