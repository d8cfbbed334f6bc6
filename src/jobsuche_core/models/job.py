"""Job listing models: search summaries and detail records."""

from __future__ import annotations

from pydantic import BaseModel, Field


class JobSummary(BaseModel):
    """Lightweight listing as returned on a search page."""

    reference_number: str = Field(description="Reference number (use it to get details)")
    title: str = Field(description="Job title")
    employer: str = Field(description="Employer name")
    location: str = Field(description="Location, e.g. 'Berlin (10115)'")
    published_date: str | None = Field(default=None, description="Publication date (YYYY-MM-DD)")
    external_url: str | None = Field(default=None, description="External URL if available")


class JobDetail(BaseModel):
    """Full listing record fetched by reference number.

    Every field is always serialized. Fields the upstream API never fills
    (see ``UNAVAILABLE_DETAIL_FIELDS``) stay ``None`` so callers see a
    stable schema.
    """

    reference_number: str = Field(description="Reference number")
    title: str | None = Field(default=None, description="Job title")
    description: str | None = Field(default=None, description="Job description")
    employer: str | None = Field(default=None, description="Employer name")
    location: str | None = Field(default=None, description="First work location")
    employment_type: str | None = Field(default=None, description="Vollzeit or Teilzeit")
    contract_type: str | None = Field(default=None, description="Not available upstream")
    start_date: str | None = Field(default=None, description="Entry period as text")
    application_deadline: str | None = Field(default=None, description="Not available upstream")
    contact_info: str | None = Field(default=None, description="Not available upstream")
    external_url: str | None = Field(default=None, description="Only present in search results")
    employer_profile_url: str | None = Field(default=None, description="Not available upstream")
    partner_url: str | None = Field(default=None, description="Alliance partner URL")
    salary: str | None = Field(default=None, description="Salary or compensation")
    contract_duration: str | None = Field(default=None, description="Contract duration")
    takeover_opportunity: bool | None = Field(default=None, description="Not available upstream")
    job_type: str | None = Field(default=None, description="e.g. arbeitsstelle, ausbildung")
    open_positions: int | None = Field(default=None, description="Not available upstream")
    company_size: str | None = Field(default=None, description="Not available upstream")
    employer_description: str | None = Field(default=None, description="Not available upstream")
    branch: str | None = Field(default=None, description="Not available upstream")
    published_date: str | None = Field(default=None, description="Not available upstream")
    first_published: str | None = Field(default=None, description="First publication date")
    only_for_disabled: bool | None = Field(
        default=None, description="Only for severely disabled persons"
    )
    fulltime: bool | None = Field(default=None, description="Full-time employment")
    entry_period: str | None = Field(default=None, description="Entry period as text")
    publication_period: str | None = Field(default=None, description="Publication period")
    is_minor_employment: bool | None = Field(default=None, description="Minijob")
    is_temp_agency: bool | None = Field(default=None, description="Temporary employment agency")
    is_private_agency: bool | None = Field(default=None, description="Private placement agency")
    career_changer_suitable: bool | None = Field(
        default=None, description="Suitable for career changers"
    )
    cipher_number: str | None = Field(default=None, description="Cipher for anonymous postings")
    raw_data: dict[str, object] = Field(
        default_factory=dict, description="Raw upstream payload"
    )
