from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from core.config import AppSettings
from core.logging_setup import configure_logging

IP_URL = "https://ip.test/?format=json"
GEO_URL = "https://geo.test/json/{ip}"
PASS_URL = "https://passes.test/json/"

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture(autouse=True)
def _quiet_logging() -> None:
    configure_logging("WARNING")


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        _env_file=None,
        ip_service_url=IP_URL,
        geolocation_url_template=GEO_URL,
        pass_service_url=PASS_URL,
    )


@pytest.fixture
def make_client() -> Callable[[Handler], httpx.AsyncClient]:
    """Factory for clients whose requests never leave the process."""

    def _make(handler: Handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make


def route_by_host(routes: dict[str, Any], seen: list[httpx.Request] | None = None) -> Handler:
    """Handler dispatching on host; values are responses or exceptions to raise."""

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        target = routes[request.url.host]
        if callable(target):
            return target(request)
        return target

    return handler


@pytest.fixture
def scenario_routes() -> dict[str, Any]:
    return {
        "ip.test": httpx.Response(200, json={"ip": "162.245.144.188"}),
        "geo.test": httpx.Response(200, json={"latitude": "49.27670", "longitude": "-123.13000"}),
        "passes.test": httpx.Response(200, json={"response": [{"risetime": 134564234, "duration": 600}]}),
    }
