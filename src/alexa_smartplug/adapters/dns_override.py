"""Pin the Alexa regional host to a fixed IP address.

httpx resolves names inside httpcore's network backend, so the override is a
backend that swaps the hostname for the configured IP right before opening
the TCP socket. TLS still runs against the original hostname (SNI and
certificate checks are unchanged) and every other host resolves through the
system resolver as usual.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

import httpcore
import httpx

logger = logging.getLogger(__name__)


class PinnedHostBackend(httpcore.AsyncNetworkBackend):
    def __init__(self, host: str, ip: str, backend: httpcore.AsyncNetworkBackend | None = None) -> None:
        self._host = host.lower()
        self._ip = ip
        self._backend = backend or httpcore.AnyIOBackend()

    def resolve(self, host: str) -> str:
        return self._ip if host.lower() == self._host else host

    async def connect_tcp(
        self,
        host: str,
        port: int,
        timeout: float | None = None,
        local_address: str | None = None,
        socket_options: Iterable[Any] | None = None,
    ) -> httpcore.AsyncNetworkStream:
        target = self.resolve(host)
        if target != host:
            logger.debug("connecting to %s via pinned address %s", host, target)
        return await self._backend.connect_tcp(
            target,
            port,
            timeout=timeout,
            local_address=local_address,
            socket_options=socket_options,
        )

    async def connect_unix_socket(
        self,
        path: str,
        timeout: float | None = None,
        socket_options: Iterable[Any] | None = None,
    ) -> httpcore.AsyncNetworkStream:
        return await self._backend.connect_unix_socket(path, timeout=timeout, socket_options=socket_options)

    async def sleep(self, seconds: float) -> None:
        await self._backend.sleep(seconds)


class PinnedHostTransport(httpx.AsyncHTTPTransport):
    """`httpx.AsyncHTTPTransport` whose connection pool uses `PinnedHostBackend`."""

    def __init__(self, host: str, ip: str, *, verify: bool = True, limits: httpx.Limits | None = None) -> None:
        limits = limits or httpx.Limits(max_connections=100, max_keepalive_connections=20)
        super().__init__(verify=verify, limits=limits)
        self.backend = PinnedHostBackend(host, ip)
        # httpx has no public hook for the network backend, so the pool built
        # above (which has not opened any connection) is replaced by one with
        # the same settings over the pinned backend.
        self._pool = httpcore.AsyncConnectionPool(
            ssl_context=httpx.create_ssl_context(verify=verify),
            max_connections=limits.max_connections,
            max_keepalive_connections=limits.max_keepalive_connections,
            keepalive_expiry=limits.keepalive_expiry,
            network_backend=self.backend,
        )
