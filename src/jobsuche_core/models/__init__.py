"""Domain models for jobsuche-mcp."""

from jobsuche_core.models.fields import FieldSpec
from jobsuche_core.models.job import JobDetail, JobSummary
from jobsuche_core.models.report import (
    BatchEntry,
    BatchReport,
    BatchSearchFailed,
    BatchSearchSucceeded,
    DetailFetched,
    DetailFetchFailed,
    DetailFetchOutcome,
    ExpandedSearchReport,
    SearchOutcome,
)
from jobsuche_core.models.search import NamedSearchSpec, SearchFilter
from jobsuche_core.models.status import ServerStatus

__all__ = [
    "BatchEntry",
    "BatchReport",
    "BatchSearchFailed",
    "BatchSearchSucceeded",
    "DetailFetchFailed",
    "DetailFetchOutcome",
    "DetailFetched",
    "ExpandedSearchReport",
    "FieldSpec",
    "JobDetail",
    "JobSummary",
    "NamedSearchSpec",
    "SearchFilter",
    "SearchOutcome",
    "ServerStatus",
]
