from __future__ import annotations
import asyncio

import httpx
import pytest

from ingestion.fetchers.eurostat import EurostatFetcher

BASE = "https://eurostat.test/data"

_CUBE = {
    "id": ["geo", "time"],
    "size": [1, 1],
    "dimension": {
        "geo": {"category": {"index": {"AT": 0}}},
        "time": {"category": {"index": {"2022": 0}}},
    },
    "value": {"0": 528.1},
}


def _fetcher(handler) -> EurostatFetcher:
    return EurostatFetcher(base_url=BASE, transport=httpx.MockTransport(handler))


def test_fetch_cube_sends_dataset_and_filters():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_CUBE)

    doc = asyncio.run(
        _fetcher(handler).fetch_cube("hlth_rs_physage", {"unit": "P_HTHAB", "age": "Y_GE55"})
    )

    assert doc == _CUBE
    (request,) = seen
    assert request.url.path == "/data/hlth_rs_physage"
    assert request.url.params["format"] == "JSON"
    assert request.url.params["lang"] == "EN"
    assert request.url.params["unit"] == "P_HTHAB"
    assert request.url.params["age"] == "Y_GE55"


def test_fetch_cube_http_error_returns_none():
    def handler(request):
        return httpx.Response(500, json={"error": "boom"})

    assert asyncio.run(_fetcher(handler).fetch_cube("hlth_rs_phys")) is None


def test_fetch_cube_html_error_page_returns_none():
    def handler(request):
        return httpx.Response(200, text="<html><body>Service unavailable</body></html>")

    assert asyncio.run(_fetcher(handler).fetch_cube("hlth_rs_phys")) is None


def test_fetch_cube_transport_error_returns_none():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    assert asyncio.run(_fetcher(handler).fetch_cube("hlth_rs_phys")) is None


@pytest.mark.parametrize("response,expected", [
    (httpx.Response(200, json=_CUBE), True),
    (httpx.Response(203, json=_CUBE), True),
    (httpx.Response(200, text="<!DOCTYPE html><html></html>"), False),
    (httpx.Response(503, text="busy"), False),
])
def test_health_check(response, expected):
    assert asyncio.run(_fetcher(lambda request: response).health_check()) is expected


def test_health_check_unreachable():
    def handler(request):
        raise httpx.ConnectError("no route", request=request)

    assert asyncio.run(_fetcher(handler).health_check()) is False


def test_dataset_url_strips_trailing_slash():
    fetcher = EurostatFetcher(base_url=BASE + "/")
    assert fetcher.dataset_url("hlth_rs_phys") == f"{BASE}/hlth_rs_phys"
