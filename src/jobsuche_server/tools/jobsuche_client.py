"""Jobsuche API client (Bundesagentur für Arbeit job board)."""

from __future__ import annotations

import base64
import time
from typing import TYPE_CHECKING, Any

import httpx
import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from jobsuche_core.constants import DETAILS_PATH, SEARCH_PATH
from jobsuche_core.exceptions import InvalidFilterError, NotFoundError, UpstreamError
from jobsuche_core.models.job import JobDetail, JobSummary
from jobsuche_core.models.report import SearchOutcome
from jobsuche_core.models.search import SearchFilter

if TYPE_CHECKING:
    from types import TracebackType

    from jobsuche_core.config.settings import Settings

logger = structlog.get_logger()

_RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})
# JSONDecodeError and pydantic ValidationError are ValueErrors
_MALFORMED = (ValueError, KeyError, TypeError, AttributeError)


class _RetryableStatusError(Exception):
    """Transient HTTP status, retried before surfacing as UpstreamError."""

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"Jobsuche API returned HTTP {status_code}")


class JobsucheClient:
    """Async client for the Jobsuche REST API."""

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize with settings and an optional preconfigured HTTP client."""
        self.settings = settings
        self._http = http_client or httpx.AsyncClient(
            base_url=settings.api_url,
            timeout=settings.request_timeout_seconds,
        )
        self._headers = {
            "X-API-Key": settings.effective_api_key,
            "Accept": "application/json",
        }

    async def __aenter__(self) -> JobsucheClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()

    async def search(self, search_filter: SearchFilter) -> SearchOutcome:
        """Run one search and return the page of summaries."""
        if search_filter.ignored_aliases:
            logger.warning("filter_values_ignored", **search_filter.ignored_aliases)
        params = build_search_params(search_filter)
        start = time.monotonic()
        response = await self._get(SEARCH_PATH, params)

        if response.status_code == 400:
            msg = f"Jobsuche API rejected the search: {_error_text(response)}"
            raise InvalidFilterError(msg)
        _raise_for_status(response)

        try:
            data = response.json()
            jobs = [parse_summary(item) for item in data.get("stellenangebote") or []]
        except _MALFORMED as e:
            raise _malformed(e) from e
        duration_ms = int((time.monotonic() - start) * 1000)
        logger.info(
            "search_completed",
            query=search_filter.query_text,
            location=search_filter.location,
            jobs_count=len(jobs),
            duration_ms=duration_ms,
        )
        return SearchOutcome(
            total_results=_as_int(data.get("maxErgebnisse")),
            current_page=_as_int(data.get("page")),
            page_size=_as_int(data.get("size")),
            jobs=jobs,
            search_duration_ms=duration_ms,
            filter=search_filter,
        )

    async def get_details(self, reference_number: str) -> JobDetail:
        """Fetch the detail record for one reference number."""
        encoded = base64.b64encode(reference_number.encode()).decode()
        response = await self._get(DETAILS_PATH.format(encoded=encoded))

        if response.status_code == 404:
            raise NotFoundError(reference_number)
        _raise_for_status(response)

        try:
            detail = parse_detail(reference_number, response.json())
        except _MALFORMED as e:
            raise _malformed(e) from e
        logger.debug("job_details_fetched", reference_number=reference_number)
        return detail

    async def _get(
        self, path: str, params: dict[str, str] | None = None
    ) -> httpx.Response:
        """GET with retries on transient failures; maps exhaustion to UpstreamError."""

        @retry(
            stop=stop_after_attempt(self.settings.retry_max),
            wait=wait_exponential(
                multiplier=self.settings.retry_wait_min,
                min=self.settings.retry_wait_min,
                max=self.settings.retry_wait_max,
            ),
            retry=retry_if_exception_type((httpx.TransportError, _RetryableStatusError)),
            reraise=True,
        )
        async def _do_get() -> httpx.Response:
            response = await self._http.get(path, params=params, headers=self._headers)
            if response.status_code in _RETRYABLE_STATUS:
                logger.warning("upstream_retryable_status", path=path, status=response.status_code)
                raise _RetryableStatusError(response.status_code)
            return response

        try:
            return await _do_get()
        except _RetryableStatusError as e:
            raise UpstreamError(str(e), status_code=e.status_code) from e
        except httpx.TimeoutException as e:
            msg = f"Jobsuche API timed out: {e}"
            raise UpstreamError(msg) from e
        except httpx.TransportError as e:
            msg = f"Jobsuche API unreachable: {e}"
            raise UpstreamError(msg) from e


def build_search_params(search_filter: SearchFilter) -> dict[str, str]:
    """Translate a filter into Jobsuche query parameters."""
    params: dict[str, str] = {"angebotsart": "1"}
    if search_filter.query_text:
        params["was"] = search_filter.query_text
    if search_filter.location:
        params["wo"] = search_filter.location
    if search_filter.radius_km is not None:
        params["umkreis"] = str(search_filter.radius_km)
    if search_filter.employment_codes:
        params["arbeitszeit"] = ";".join(search_filter.employment_codes)
    if search_filter.contract_codes:
        params["befristung"] = ";".join(search_filter.contract_codes)
    if search_filter.published_since_days is not None:
        params["veroeffentlichtseit"] = str(search_filter.published_since_days)
    if search_filter.page is not None:
        params["page"] = str(search_filter.page)
    if search_filter.page_size is not None:
        params["size"] = str(search_filter.page_size)
    return params


def parse_summary(item: dict[str, Any]) -> JobSummary:
    """Map one 'stellenangebote' entry to a JobSummary."""
    place = item.get("arbeitsort") or {}
    location = place.get("ort") or ""
    if place.get("plz"):
        location = f"{location} ({place['plz']})"
    return JobSummary(
        reference_number=item["refnr"],
        title=item.get("titel") or item.get("beruf") or "",
        employer=item.get("arbeitgeber") or "",
        location=location,
        published_date=item.get("aktuelleVeroeffentlichungsdatum"),
        external_url=item.get("externeUrl"),
    )


def parse_detail(reference_number: str, data: dict[str, Any]) -> JobDetail:
    """Map a jobdetails payload to a JobDetail.

    Fields the API does not provide are left unset and serialize as null.
    """
    fulltime = data.get("arbeitszeitVollzeit")
    entry_period = _format_period(data.get("eintrittszeitraum"))
    return JobDetail(
        reference_number=reference_number,
        title=data.get("titel"),
        description=data.get("stellenbeschreibung"),
        employer=data.get("arbeitgeber"),
        location=_first_location(data.get("arbeitsorte") or []),
        employment_type=None if fulltime is None else ("Vollzeit" if fulltime else "Teilzeit"),
        start_date=entry_period,
        partner_url=data.get("allianzpartnerUrl"),
        salary=data.get("verguetung"),
        contract_duration=data.get("vertragsdauer"),
        job_type=data.get("stellenangebotsArt"),
        first_published=data.get("ersteVeroeffentlichungsdatum"),
        only_for_disabled=data.get("nurFuerSchwerbehinderte"),
        fulltime=fulltime,
        entry_period=entry_period,
        publication_period=_format_period(data.get("veroeffentlichungszeitraum")),
        is_minor_employment=data.get("istGeringfuegigeBeschaeftigung"),
        is_temp_agency=data.get("istArbeitnehmerUeberlassung"),
        is_private_agency=data.get("istPrivateArbeitsvermittlung"),
        career_changer_suitable=data.get("quereinstiegGeeignet"),
        cipher_number=data.get("chiffrenummer"),
        raw_data=data,
    )


def _first_location(places: list[dict[str, Any]]) -> str | None:
    """Format the first work location as 'Ort (PLZ)'."""
    if not places:
        return None
    address = places[0].get("adresse") or {}
    city = address.get("ort")
    if not city:
        return None
    return f"{city} ({address['plz']})" if address.get("plz") else city


def _format_period(period: dict[str, Any] | None) -> str | None:
    """Render a {von, bis} date range as text."""
    if period is None:
        return None
    start, end = period.get("von"), period.get("bis")
    if start and end:
        return f"{start} - {end}"
    if start:
        return f"ab {start}"
    if end:
        return f"bis {end}"
    return ""


def _as_int(value: object) -> int | None:
    """Coerce numeric strings from the API to int."""
    if value is None or value == "":
        return None
    try:
        return int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        return None


def _error_text(response: httpx.Response) -> str:
    """Short error description from a failed response."""
    text = response.text.strip()
    return text[:200] if text else f"HTTP {response.status_code}"


def _malformed(error: Exception) -> UpstreamError:
    """Wrap an undecodable or unparseable payload as an upstream failure."""
    logger.warning("upstream_malformed_response", error=str(error))
    return UpstreamError(f"Malformed Jobsuche response: {error}")


def _raise_for_status(response: httpx.Response) -> None:
    """Map remaining non-success statuses to UpstreamError."""
    if response.is_success:
        return
    msg = f"Jobsuche API returned HTTP {response.status_code}: {_error_text(response)}"
    raise UpstreamError(msg, status_code=response.status_code)
