"""Tests for the Jobsuche API client using httpx.MockTransport."""

from __future__ import annotations

import base64
from collections.abc import Callable

import httpx
import pytest

from jobsuche_core.constants import DEFAULT_API_KEY, DEFAULT_API_URL
from jobsuche_core.exceptions import InvalidFilterError, NotFoundError, UpstreamError
from jobsuche_core.interfaces.search import SearchClient
from jobsuche_core.models.search import SearchFilter
from jobsuche_server.tools.jobsuche_client import (
    JobsucheClient,
    build_search_params,
    parse_detail,
    parse_summary,
)
from tests.mocks.mock_factories import make_detail_payload, make_search_payload
from tests.mocks.mock_settings import make_settings

Handler = Callable[[httpx.Request], httpx.Response]


def _client(handler: Handler, **overrides: object) -> JobsucheClient:
    """Build a client whose HTTP layer is served by ``handler``."""
    settings = make_settings(**overrides)
    http = httpx.AsyncClient(base_url=DEFAULT_API_URL, transport=httpx.MockTransport(handler))
    return JobsucheClient(settings, http_client=http)


def _maintenance_page(request: httpx.Request) -> httpx.Response:
    """An HTML body served with a success status."""
    return httpx.Response(200, text="<html>maintenance</html>")


@pytest.mark.unit
class TestBuildSearchParams:
    """Test filter to query parameter translation."""

    def test_full_filter(self) -> None:
        """All criteria are translated to upstream names."""
        f = SearchFilter(
            job_title="Entwickler",
            employer="Siemens",
            location="Berlin",
            radius_km=25,
            employment_type=("fulltime", "home_office"),
            contract_type=("permanent",),
            published_since_days=7,
            page=2,
            page_size=10,
        )
        assert build_search_params(f) == {
            "angebotsart": "1",
            "was": "Entwickler Siemens",
            "wo": "Berlin",
            "umkreis": "25",
            "arbeitszeit": "vz;ho",
            "befristung": "2",
            "veroeffentlichtseit": "7",
            "page": "2",
            "size": "10",
        }

    def test_empty_filter(self) -> None:
        """An empty filter only sends the offer type."""
        assert build_search_params(SearchFilter()) == {"angebotsart": "1"}


@pytest.mark.unit
class TestParsing:
    """Test mapping of upstream payloads."""

    def test_summary_location_with_postcode(self) -> None:
        """Location renders as 'Ort (PLZ)'."""
        item = make_search_payload(1)["stellenangebote"][0]
        summary = parse_summary(item)
        assert summary.location == "Berlin (10115)"
        assert summary.title == "Entwickler 1"
        assert summary.published_date == "2025-01-10"

    def test_summary_title_falls_back_to_occupation(self) -> None:
        """Missing titel falls back to beruf."""
        summary = parse_summary({"refnr": "r", "beruf": "Koch/Köchin", "arbeitsort": {}})
        assert summary.title == "Koch/Köchin"
        assert summary.location == ""

    def test_detail_mapping(self) -> None:
        """Detail payload fields map onto the record."""
        detail = parse_detail("r-1", make_detail_payload())
        assert detail.reference_number == "r-1"
        assert detail.location == "Berlin (10115)"
        assert detail.employment_type == "Vollzeit"
        assert detail.fulltime is True
        assert detail.start_date == "ab 2025-02-01"
        assert detail.publication_period == "2025-01-10 - 2025-03-10"
        assert detail.salary == "60.000 EUR"
        assert detail.career_changer_suitable is False
        assert detail.contract_type is None
        assert detail.raw_data["titel"] == "Entwickler"

    def test_detail_parttime_and_open_ended_period(self) -> None:
        """Teilzeit and an end-only period are rendered."""
        payload = make_detail_payload(
            arbeitszeitVollzeit=False, eintrittszeitraum={"bis": "2025-06-30"}, arbeitsorte=[]
        )
        detail = parse_detail("r-2", payload)
        assert detail.employment_type == "Teilzeit"
        assert detail.entry_period == "bis 2025-06-30"
        assert detail.location is None


@pytest.mark.unit
class TestJobsucheClient:
    """Test HTTP behavior of the client."""

    def test_satisfies_protocol(self) -> None:
        """The client implements the SearchClient protocol."""
        client = _client(lambda request: httpx.Response(200, json={}))
        assert isinstance(client, SearchClient)

    @pytest.mark.asyncio
    async def test_search_sends_params_and_key(self) -> None:
        """Search hits /pc/v4/jobs with the API key header."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=make_search_payload(2, total="57"))

        async with _client(handler) as client:
            outcome = await client.search(SearchFilter(location="Berlin", page_size=25))

        request = seen[0]
        assert request.url.path.endswith("/pc/v4/jobs")
        assert request.url.params["wo"] == "Berlin"
        assert request.headers["X-API-Key"] == DEFAULT_API_KEY
        assert outcome.total_results == 57
        assert outcome.current_page == 1
        assert outcome.page_size == 25
        assert outcome.jobs_count == 2
        assert outcome.filter.location == "Berlin"

    @pytest.mark.asyncio
    async def test_search_without_results(self) -> None:
        """A payload without stellenangebote yields an empty page."""
        async with _client(lambda r: httpx.Response(200, json={"maxErgebnisse": 0})) as client:
            outcome = await client.search(SearchFilter())
        assert outcome.jobs == []
        assert outcome.total_results == 0

    @pytest.mark.asyncio
    async def test_search_400_is_invalid_filter(self) -> None:
        """A rejected request maps to InvalidFilterError."""
        async with _client(lambda r: httpx.Response(400, text="bad umkreis")) as client:
            with pytest.raises(InvalidFilterError, match="bad umkreis"):
                await client.search(SearchFilter())

    @pytest.mark.asyncio
    async def test_details_encode_reference_number(self) -> None:
        """The reference number is base64 encoded into the path."""
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.path)
            return httpx.Response(200, json=make_detail_payload())

        async with _client(handler) as client:
            detail = await client.get_details("10001-1234567890-S")

        encoded = base64.b64encode(b"10001-1234567890-S").decode()
        assert seen[0].endswith(f"/pc/v4/jobdetails/{encoded}")
        assert detail.reference_number == "10001-1234567890-S"

    @pytest.mark.asyncio
    async def test_details_404_is_not_found(self) -> None:
        """A missing listing maps to NotFoundError with the reference."""
        async with _client(lambda r: httpx.Response(404)) as client:
            with pytest.raises(NotFoundError) as exc_info:
                await client.get_details("r-404")
        assert exc_info.value.reference_number == "r-404"

    @pytest.mark.asyncio
    async def test_retries_transient_status_then_succeeds(self) -> None:
        """A 503 followed by a 200 succeeds after one retry."""
        responses = [httpx.Response(503), httpx.Response(200, json=make_search_payload(1))]
        calls: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(1)
            return responses[len(calls) - 1]

        async with _client(handler) as client:
            outcome = await client.search(SearchFilter())
        assert len(calls) == 2
        assert outcome.jobs_count == 1

    @pytest.mark.asyncio
    async def test_exhausted_retries_raise_upstream_error(self) -> None:
        """Persistent 502s surface as UpstreamError after retry_max attempts."""
        calls: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(1)
            return httpx.Response(502)

        async with _client(handler, retry_max=2) as client:
            with pytest.raises(UpstreamError) as exc_info:
                await client.search(SearchFilter())
        assert len(calls) == 2
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_transport_error_is_upstream_error(self) -> None:
        """Connection failures surface as UpstreamError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(UpstreamError, match="unreachable"):
                await client.get_details("r-1")

    @pytest.mark.asyncio
    async def test_timeout_is_upstream_error(self) -> None:
        """Timeouts surface as UpstreamError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        async with _client(handler, retry_max=1) as client:
            with pytest.raises(UpstreamError, match="timed out"):
                await client.search(SearchFilter())

    @pytest.mark.asyncio
    async def test_other_status_is_upstream_error(self) -> None:
        """Non-retryable failures are not retried."""
        calls: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(1)
            return httpx.Response(403, text="forbidden")

        async with _client(handler) as client:
            with pytest.raises(UpstreamError, match="403"):
                await client.search(SearchFilter())
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_unknown_aliases_are_not_sent(self) -> None:
        """Unrecognized employment values are dropped from the request."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=make_search_payload(1))

        search_filter = SearchFilter(employment_type=("weekends", "parttime"))
        async with _client(handler) as client:
            outcome = await client.search(search_filter)
        assert seen[0].url.params["arbeitszeit"] == "tz"
        assert outcome.jobs_count == 1


@pytest.mark.unit
class TestMalformedResponses:
    """Test that undecodable or unparseable payloads become UpstreamError."""

    @pytest.mark.asyncio
    async def test_search_non_json_body(self) -> None:
        """An HTML page served with 200 is an upstream failure."""
        async with _client(_maintenance_page) as client:
            with pytest.raises(UpstreamError, match="Malformed Jobsuche response"):
                await client.search(SearchFilter())

    @pytest.mark.asyncio
    async def test_search_item_without_reference(self) -> None:
        """A summary lacking refnr is an upstream failure, not a KeyError."""
        payload = make_search_payload(2)
        del payload["stellenangebote"][1]["refnr"]
        async with _client(lambda r: httpx.Response(200, json=payload)) as client:
            with pytest.raises(UpstreamError, match="Malformed"):
                await client.search(SearchFilter())

    @pytest.mark.asyncio
    async def test_search_payload_not_an_object(self) -> None:
        """A JSON array where an object is expected is an upstream failure."""
        async with _client(lambda r: httpx.Response(200, json=[1, 2])) as client:
            with pytest.raises(UpstreamError, match="Malformed"):
                await client.search(SearchFilter())

    @pytest.mark.asyncio
    async def test_details_non_json_body(self) -> None:
        """A non-JSON detail body is an upstream failure."""
        async with _client(_maintenance_page) as client:
            with pytest.raises(UpstreamError, match="Malformed") as exc_info:
                await client.get_details("r-1")
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_details_wrong_field_type(self) -> None:
        """A detail field of the wrong type fails validation as UpstreamError."""
        payload = make_detail_payload(titel={"de": "Entwickler"})
        async with _client(lambda r: httpx.Response(200, json=payload)) as client:
            with pytest.raises(UpstreamError, match="Malformed"):
                await client.get_details("r-1")
