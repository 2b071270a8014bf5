from __future__ import annotations

import asyncio

import httpx

from contentsync.adapters.admission import AdmissionController
from contentsync.adapters.http_resilience import ResilientClient
from contentsync.config import ResilienceConfig, RetryPolicy

BASE_URL = "https://api.example.test/"


def _flaky_transport(statuses: list[int], seen: list[str]) -> httpx.MockTransport:
    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.method)
        return httpx.Response(statuses.pop(0) if statuses else 200, json={})

    return httpx.MockTransport(handler)


def _config() -> ResilienceConfig:
    return ResilienceConfig(
        name="test",
        base_url=BASE_URL,
        retry=RetryPolicy(total=2, backoff_factor=0.0, backoff_jitter=0.0),
    )


def test_reads_are_retried_through_the_given_transport() -> None:
    seen: list[str] = []
    admission = AdmissionController(limit=10, period=1.0, retry_delay=0.01)

    async def scenario() -> httpx.Response:
        transport = _flaky_transport([503], seen)
        async with ResilientClient(_config(), admission=admission, transport=transport) as http:
            return await http.request("GET", "entries")

    response = asyncio.run(scenario())

    assert response.status_code == 200
    assert seen == ["GET", "GET"]
    assert admission.in_window == 1


def test_writes_are_not_retried() -> None:
    seen: list[str] = []

    async def scenario() -> httpx.Response:
        transport = _flaky_transport([503], seen)
        async with ResilientClient(_config(), transport=transport) as http:
            return await http.request("PUT", "entries/abc")

    response = asyncio.run(scenario())

    assert response.status_code == 503
    assert seen == ["PUT"]


def test_transport_is_used_directly_without_retry_policy() -> None:
    seen: list[str] = []
    config = ResilienceConfig(name="test", base_url=BASE_URL, retry=None)

    async def scenario() -> httpx.Response:
        async with ResilientClient(config, transport=_flaky_transport([503], seen)) as http:
            return await http.request("GET", "entries")

    response = asyncio.run(scenario())

    assert response.status_code == 503
    assert seen == ["GET"]
