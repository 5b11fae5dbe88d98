from __future__ import annotations

import asyncio
import json
from pathlib import Path

import httpx
import pytest

from talentsignal.adapters import HTTPProfileTransport, StaticProfileTransport
from talentsignal.core import FetchError, RateLimitedError
from talentsignal.schemas import Provider


def make_transport(handler, api_token: str | None = None) -> HTTPProfileTransport:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HTTPProfileTransport("https://profiles.example.test/v1/", api_token, client=client)


def fetch(transport: HTTPProfileTransport, provider: Provider, identity: str):
    async def run():
        try:
            return await transport.fetch_payload(provider, identity)
        finally:
            await transport.aclose()

    return asyncio.run(run())


def test_http_transport_returns_payload_and_sends_token():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"public_repos": 3})

    payload = fetch(make_transport(handler, api_token="secret"), Provider.CODE_HOSTING, "octo")

    assert payload == {"public_repos": 3}
    assert str(seen[0].url) == "https://profiles.example.test/v1/code_hosting/octo"
    assert seen[0].headers["Authorization"] == "Bearer secret"


@pytest.mark.parametrize(
    ("response", "kind"),
    [
        (httpx.Response(404), "not_found"),
        (httpx.Response(503), "network"),
        (httpx.Response(200, content=b"{not json"), "malformed"),
        (httpx.Response(200, json=[1, 2, 3]), "malformed"),
    ],
)
def test_http_transport_maps_status_and_body_errors(response: httpx.Response, kind: str):
    transport = make_transport(lambda request: response)

    with pytest.raises(FetchError) as exc:
        fetch(transport, Provider.FORUM, "someone")
    assert exc.value.kind == kind
    assert exc.value.provider == Provider.FORUM


def test_http_transport_rate_limit_carries_retry_after():
    transport = make_transport(lambda request: httpx.Response(429, headers={"Retry-After": "30"}))

    with pytest.raises(RateLimitedError) as exc:
        fetch(transport, Provider.REPUTATION, "busy")
    assert exc.value.retry_after == 30.0


def test_http_transport_timeout_maps_to_timeout_kind():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow upstream", request=request)

    with pytest.raises(FetchError) as exc:
        fetch(make_transport(handler), Provider.NETWORK, "slow")
    assert exc.value.kind == "timeout"


def test_http_transport_connection_error_maps_to_network():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(FetchError) as exc:
        fetch(make_transport(handler), Provider.MICROBLOG, "offline")
    assert exc.value.kind == "network"


def test_static_transport_simulated_errors():
    transport = StaticProfileTransport(
        {
            "forum": {
                "limited": {"_error": "rate_limited"},
                "slow": {"_error": "timeout"},
                "weird": {"_error": "exploded"},
            }
        }
    )

    with pytest.raises(RateLimitedError):
        asyncio.run(transport.fetch_payload(Provider.FORUM, "limited"))
    with pytest.raises(FetchError) as slow:
        asyncio.run(transport.fetch_payload(Provider.FORUM, "slow"))
    assert slow.value.kind == "timeout"
    with pytest.raises(FetchError) as weird:
        asyncio.run(transport.fetch_payload(Provider.FORUM, "weird"))
    assert weird.value.kind == "malformed"


def test_static_transport_from_path(tmp_path: Path):
    path = tmp_path / "fixtures.json"
    path.write_text(json.dumps({"network": {"ann": {"connections": 10}}}), encoding="utf-8")

    transport = StaticProfileTransport.from_path(path)

    assert asyncio.run(transport.fetch_payload(Provider.NETWORK, "ann")) == {"connections": 10}


def test_static_transport_rejects_invalid_fixture_file(tmp_path: Path):
    path = tmp_path / "fixtures.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ValueError):
        StaticProfileTransport.from_path(path)
