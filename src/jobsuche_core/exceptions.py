"""Custom exception hierarchy for jobsuche-mcp."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from jobsuche_core.models.report import BatchReport


class JobsucheError(Exception):
    """Base exception for all jobsuche-mcp errors."""

    error_type: str = "jobsuche_error"


class InvalidFilterError(JobsucheError):
    """Raised when caller input violates search filter or batch bounds."""

    error_type = "invalid_filter"


class NotFoundError(JobsucheError):
    """Raised when a reference number has no corresponding listing."""

    error_type = "not_found"

    def __init__(self, reference_number: str, message: str | None = None) -> None:
        self.reference_number = reference_number
        super().__init__(message or f"No job listing found for {reference_number}")


class UpstreamError(JobsucheError):
    """Raised when the Jobsuche API fails, times out, or is unreachable."""

    error_type = "upstream_error"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class InvalidFieldSpecError(JobsucheError):
    """Raised when a field spec names both included and excluded fields."""

    error_type = "invalid_field_spec"


class BatchFailedError(JobsucheError):
    """Raised when every search in a batch failed."""

    error_type = "batch_failed"

    def __init__(self, report: BatchReport) -> None:
        self.report = report
        failures = "; ".join(
            f"{entry.name}: {entry.message}"
            for entry in report.results
            if entry.status == "error"
        )
        super().__init__(f"All {len(report.results)} searches failed ({failures})")


class UnknownToolError(JobsucheError):
    """Raised when a caller invokes a tool that is not registered."""

    error_type = "unknown_tool"


class InvalidArgumentsError(JobsucheError):
    """Raised when tool arguments do not match the tool's parameter schema."""

    error_type = "invalid_arguments"
