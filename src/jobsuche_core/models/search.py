"""Search filter and named batch search models."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from jobsuche_core.constants import CONTRACT_TYPE_CODES, EMPLOYMENT_TYPE_CODES
from jobsuche_core.exceptions import InvalidFilterError

if TYPE_CHECKING:
    from jobsuche_core.config.settings import Settings


class SearchFilter(BaseModel):
    """Criteria for one upstream search. Immutable once constructed."""

    model_config = ConfigDict(frozen=True)

    job_title: str | None = Field(default=None, description="Job title or keywords")
    location: str | None = Field(default=None, description="Location name, e.g. 'Berlin'")
    radius_km: int | None = Field(default=None, description="Search radius around location")
    employment_type: tuple[str, ...] | None = Field(
        default=None,
        description="fulltime, parttime, mini_job, home_office, shift",
    )
    contract_type: tuple[str, ...] | None = Field(
        default=None, description="permanent, temporary"
    )
    published_since_days: int | None = Field(
        default=None, description="Only listings published within this many days"
    )
    employer: str | None = Field(default=None, description="Employer name")
    branch: str | None = Field(default=None, description="Branch or industry")
    page: int | None = Field(default=None, description="Page number, starting at 1")
    page_size: int | None = Field(default=None, description="Results per page")

    @property
    def query_text(self) -> str | None:
        """Free-text query combining job title, employer and branch."""
        terms = [t for t in (self.job_title, self.employer, self.branch) if t]
        return " ".join(terms) if terms else None

    @property
    def employment_codes(self) -> list[str]:
        """Upstream 'arbeitszeit' codes, in caller order without duplicates."""
        return _codes(self.employment_type, EMPLOYMENT_TYPE_CODES)

    @property
    def contract_codes(self) -> list[str]:
        """Upstream 'befristung' codes, in caller order without duplicates."""
        return _codes(self.contract_type, CONTRACT_TYPE_CODES)

    @property
    def ignored_aliases(self) -> dict[str, list[str]]:
        """Employment and contract values that match no upstream code."""
        ignored = {
            "employment_type": _unknown(self.employment_type, EMPLOYMENT_TYPE_CODES),
            "contract_type": _unknown(self.contract_type, CONTRACT_TYPE_CODES),
        }
        return {name: values for name, values in ignored.items() if values}

    def checked(self, settings: Settings) -> SearchFilter:
        """Validate bounds and return a copy with the page size resolved.

        Page size is clamped to ``settings.max_page_size``; every other
        out-of-range value raises ``InvalidFilterError``. Unknown employment
        and contract aliases are not an error; they map to no upstream code
        (see ``ignored_aliases``).
        """
        if self.page is not None and self.page < 1:
            msg = f"page must be >= 1, got {self.page}"
            raise InvalidFilterError(msg)
        if self.page_size is not None and self.page_size < 1:
            msg = f"page_size must be >= 1, got {self.page_size}"
            raise InvalidFilterError(msg)
        if self.radius_km is not None and self.radius_km < 0:
            msg = f"radius_km cannot be negative, got {self.radius_km}"
            raise InvalidFilterError(msg)
        if self.published_since_days is not None and not (
            0 <= self.published_since_days <= settings.max_published_since_days
        ):
            msg = (
                f"published_since_days must be between 0 and "
                f"{settings.max_published_since_days}, got {self.published_since_days}"
            )
            raise InvalidFilterError(msg)
        page_size = min(self.page_size or settings.default_page_size, settings.max_page_size)
        return self.model_copy(update={"page_size": page_size})


class NamedSearchSpec(BaseModel):
    """One named search of a batch, with an optional detail count override."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Caller-chosen name used to correlate results")
    filter: SearchFilter = Field(description="Search criteria")
    max_details: int | None = Field(
        default=None, description="Details to fetch for this search (batch default if unset)"
    )


def _unknown(values: tuple[str, ...] | None, table: dict[str, str]) -> list[str]:
    """Values missing from an alias table, in caller order."""
    return [v for v in values or () if v.strip().lower() not in table]


def _codes(values: tuple[str, ...] | None, table: dict[str, str]) -> list[str]:
    """Map caller aliases to upstream codes, dropping unknowns and duplicates."""
    codes: list[str] = []
    for value in values or ():
        code = table.get(value.strip().lower())
        if code and code not in codes:
            codes.append(code)
    return codes
