"""Test fixtures for loader module."""

from collections.abc import Callable

import httpx
import pytest

from epitrend.core.config import Settings

CONFIRMED_CSV = (
    "Province/State,Country/Region,Lat,Long,1/22/20,1/23/20,1/24/20\n"
    ",US,40.0,-100.0,1,1,2\n"
    "Ontario,Canada,51.2,-85.3,0,1,1\n"
    ",India,20.6,78.9,0,0,3\n"
)

DEATHS_CSV = (
    "Province/State,Country/Region,Lat,Long,1/22/20,1/23/20,1/24/20\n"
    ",US,40.0,-100.0,0,0,1\n"
    "Ontario,Canada,51.2,-85.3,0,0,0\n"
    ",India,20.6,78.9,0,0,0\n"
)


@pytest.fixture
def confirmed_csv() -> str:
    """Small JHU-shaped confirmed-cases CSV."""
    return CONFIRMED_CSV


@pytest.fixture
def loader_settings() -> Settings:
    """Settings pointing at fake URLs."""
    return Settings(
        confirmed_cases_url="https://data.example.test/confirmed.csv",
        deaths_url="https://data.example.test/deaths.csv",
        fetch_timeout_seconds=5.0,
    )


@pytest.fixture
def make_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.Client]:
    """Factory for httpx clients backed by a mock transport."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def csv_client(make_client) -> httpx.Client:
    """Client serving both CSVs by path."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("confirmed.csv"):
            return httpx.Response(200, text=CONFIRMED_CSV)
        if request.url.path.endswith("deaths.csv"):
            return httpx.Response(200, text=DEATHS_CSV)
        return httpx.Response(404, text="Not Found")

    return make_client(handler)
