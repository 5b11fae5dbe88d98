"\"\"\"Raw payload transports used by source fetchers.\"\"\""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Protocol, get_args, runtime_checkable

import httpx
import structlog

from ..core.errors import FetchError, RateLimitedError
from ..schemas.signals import FetchErrorKind, Provider


@runtime_checkable
class ProfileTransport(Protocol):
    """Retrieve a provider-native JSON payload for one identity."""

    async def fetch_payload(self, provider: Provider, identity: str) -> dict[str, Any]:
        """Return the raw payload or raise FetchError."""

    async def aclose(self) -> None:
        """Release any held connections."""


class HTTPProfileTransport:
    """Profile gateway client: ``GET {base_url}/{provider}/{identity}``."""

    def __init__(
        self,
        base_url: str,
        api_token: str | None = None,
        *,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if api_token:
            headers["Authorization"] = f"Bearer {api_token}"
        self._base_url = base_url.rstrip("/")
        self._headers = headers
        self._timeout_seconds = timeout_seconds
        self._client = client
        self._logger = structlog.get_logger(__name__)

    async def fetch_payload(self, provider: Provider, identity: str) -> dict[str, Any]:
        url = f"{self._base_url}/{provider.value}/{identity}"
        try:
            response = await self._get_client().get(url, headers=self._headers)
        except httpx.TimeoutException as exc:
            raise FetchError(provider, "timeout", str(exc) or "request timed out") from exc
        except httpx.HTTPError as exc:
            raise FetchError(provider, "network", str(exc)) from exc

        if response.status_code == 404:
            raise FetchError(provider, "not_found", f"{identity!r} not found")
        if response.status_code == 429:
            raise RateLimitedError(
                provider,
                "upstream returned 429",
                retry_after=_retry_after(response.headers.get("Retry-After")),
            )
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise FetchError(provider, "network", f"HTTP {response.status_code}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise FetchError(provider, "malformed", f"invalid JSON ({exc})") from exc
        if payload is None:
            return {}
        if not isinstance(payload, dict):
            raise FetchError(provider, "malformed", "payload must be a JSON object")
        self._logger.debug("transport.fetched", provider=provider.value, identity=identity)
        return payload

    async def aclose(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        await client.aclose()

    def _get_client(self) -> httpx.AsyncClient:
        # bound to the running loop; reopened after aclose
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout_seconds)
        return self._client


class StaticProfileTransport:
    """Fixture-backed transport shaped ``{provider: {identity: payload}}``.

    A payload of the form ``{"_error": "<kind>"}`` simulates a failed lookup.
    """

    def __init__(self, payloads: Mapping[str, Mapping[str, Any]]):
        self._payloads: dict[Provider, dict[str, Any]] = {}
        for key, entries in payloads.items():
            self._payloads[Provider(key)] = dict(entries or {})

    @classmethod
    def from_path(cls, path: Path) -> "StaticProfileTransport":
        with path.open("r", encoding="utf-8") as handle:
            try:
                data = json.load(handle)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid fixtures JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError("Fixtures file must contain a JSON object")
        return cls(data)

    async def fetch_payload(self, provider: Provider, identity: str) -> dict[str, Any]:
        entries = self._payloads.get(provider, {})
        if identity not in entries:
            raise FetchError(provider, "not_found", f"{identity!r} not found")
        payload = entries[identity]
        if payload is None:
            return {}
        if not isinstance(payload, dict):
            raise FetchError(provider, "malformed", "payload must be a JSON object")
        error_kind = payload.get("_error")
        if error_kind == "rate_limited":
            raise RateLimitedError(provider, "simulated rate limit")
        if error_kind:
            kind = error_kind if error_kind in get_args(FetchErrorKind) else "malformed"
            raise FetchError(provider, kind, "simulated failure")
        return dict(payload)

    async def aclose(self) -> None:
        return None


def _retry_after(value: str | None) -> float | None:
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None
