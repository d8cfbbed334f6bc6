"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from jobsuche_server.orchestrator.pacer import CallClass, Pacer
from tests.mocks.mock_client import FakeClock, FakeSearchClient
from tests.mocks.mock_settings import make_settings


@pytest.fixture
def mock_settings() -> MagicMock:
    """Return a MagicMock Settings with sensible defaults."""
    return make_settings()


@pytest.fixture
def fake_clock() -> FakeClock:
    """Return a manual clock."""
    return FakeClock()


@pytest.fixture
def fake_client(fake_clock: FakeClock) -> FakeSearchClient:
    """Return a fake client that stamps calls with the fake clock."""
    return FakeSearchClient(clock=fake_clock)


@pytest.fixture
def paced(fake_clock: FakeClock) -> Pacer:
    """Return a pacer with production intervals driven by the fake clock."""
    return Pacer(
        {CallClass.DETAIL_FETCH: 0.1, CallClass.INTER_SEARCH: 0.2},
        clock=fake_clock,
        sleep=fake_clock.sleep,
    )
