"""httpx wrapper for the Alexa web API.

- Standardizes timeout, User-Agent and the session cookie on every request.
- Routing override: either a caller-supplied httpx transport, or a pinned IP
  for the regional Alexa host (see `adapters.dns_override`).
- No retries. Network errors propagate unchanged.
"""

from __future__ import annotations

import ipaddress
from typing import Any, Mapping

import httpx

from alexa_smartplug.adapters.dns_override import PinnedHostTransport
from alexa_smartplug.core.config import AppSettings, Session
from alexa_smartplug.core.diagnostics import log_payload
from alexa_smartplug.core.errors import OptionError
from alexa_smartplug.core.interfaces.transport import Transport


def build_routing_transport(
    session: Session,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    alexa_ip: str | None = None,
) -> httpx.AsyncBaseTransport | None:
    """Pick the httpx transport for a session; None means the httpx default."""

    if transport is not None and alexa_ip is not None:
        raise OptionError("Cannot specify transport and alexa_ip in same instance")
    if alexa_ip is not None:
        try:
            ipaddress.ip_address(alexa_ip)
        except ValueError as exc:
            raise OptionError(f"alexa_ip is not an IP address: {alexa_ip!r}") from exc
        return PinnedHostTransport(session.alexa_host, alexa_ip)
    return transport


def build_async_client(
    settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with the package defaults."""

    settings = settings or AppSettings()
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        transport=transport,
    )


def merge_headers(
    headers: Mapping[str, str] | None,
    *,
    user_agent: str,
    cookie: str,
) -> dict[str, str]:
    """Add the mandatory User-Agent and append the session cookie to any caller cookie."""

    merged: dict[str, str] = {}
    existing_cookie: str | None = None
    for key, value in (headers or {}).items():
        if key.lower() == "cookie":
            existing_cookie = value
        else:
            merged[key] = value

    merged["User-Agent"] = user_agent
    merged["Cookie"] = f"{existing_cookie}; {cookie}" if existing_cookie else cookie
    return merged


class AlexaHttpClient(Transport):
    """Authenticated transport bound to one `Session`."""

    def __init__(
        self,
        session: Session,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        alexa_ip: str | None = None,
    ) -> None:
        self._session = session
        self._settings = settings or AppSettings()
        self._client = build_async_client(
            self._settings,
            transport=build_routing_transport(session, transport=transport, alexa_ip=alexa_ip),
        )

    async def send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        request_headers = merge_headers(
            headers,
            user_agent=self._settings.user_agent,
            cookie=self._session.cookie.get_secret_value(),
        )
        if json is not None:
            log_payload(f"{method} {url}", json)
        return await self._client.request(method, url, headers=request_headers, json=json)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AlexaHttpClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
