"""Shared constants for jobsuche-mcp."""

from __future__ import annotations

SERVER_NAME = "Jobsuche MCP Server"
SERVER_VERSION = "0.3.0"
MCP_PROTOCOL_VERSION = "2024-11-05"

DEFAULT_API_URL = "https://rest.arbeitsagentur.de/jobboerse/jobsuche-service"
# Public client id accepted by the Jobsuche API for anonymous access
DEFAULT_API_KEY = "jobboerse-jobsuche"
# Hard upstream limit on results per page
API_MAX_PAGE_SIZE = 100

SEARCH_PATH = "/pc/v4/jobs"
DETAILS_PATH = "/pc/v4/jobdetails/{encoded}"

# Caller-facing employment type aliases -> upstream "arbeitszeit" codes
EMPLOYMENT_TYPE_CODES: dict[str, str] = {
    "fulltime": "vz",
    "full": "vz",
    "vollzeit": "vz",
    "vz": "vz",
    "parttime": "tz",
    "part": "tz",
    "teilzeit": "tz",
    "tz": "tz",
    "mini": "mj",
    "minijob": "mj",
    "mini_job": "mj",
    "mj": "mj",
    "home": "ho",
    "homeoffice": "ho",
    "home_office": "ho",
    "ho": "ho",
    "shift": "snw",
    "schicht": "snw",
    "snw": "snw",
}

# Caller-facing contract type aliases -> upstream "befristung" codes
CONTRACT_TYPE_CODES: dict[str, str] = {
    "temporary": "1",
    "befristet": "1",
    "permanent": "2",
    "unbefristet": "2",
}

# Detail fields the upstream API version in use never supplies.
# They are always serialized as null so the record schema stays stable.
UNAVAILABLE_DETAIL_FIELDS: tuple[str, ...] = (
    "contract_type",
    "application_deadline",
    "contact_info",
    "external_url",
    "employer_profile_url",
    "takeover_opportunity",
    "open_positions",
    "company_size",
    "employer_description",
    "branch",
    "published_date",
)
