"""Contract for the authenticated HTTP transport.

A `Protocol` keeps the services testable: anything with a compatible `send`
(an httpx-backed client, a recording fake) can be plugged in.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable

import httpx


@runtime_checkable
class Transport(Protocol):
    """Minimal contract used by the resolver, directory and controllers.

    Design rules:
    - `send` is async because it performs network I/O.
    - The raw `httpx.Response` is returned; decoding is up to the caller.
    - No retries: failures propagate as raised by the HTTP stack.
    """

    async def send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        """Issue one request with the session credentials attached."""

        ...
