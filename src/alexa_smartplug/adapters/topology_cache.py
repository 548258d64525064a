"""Topology (network detail) cache.

One instance per `AlexaController`: the snapshot is shared by reference with
the resolver and every device controller of that account, never across
accounts. There is no expiry; callers ask for a refresh with `force=True`.

Not guarded by a lock. Concurrent forced refreshes race and the last
response written wins.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from alexa_smartplug.core.config import Session
from alexa_smartplug.core.diagnostics import log_payload
from alexa_smartplug.core.domain.models import NetworkDetail, PhoenixResponse
from alexa_smartplug.core.errors import UnknownStateError
from alexa_smartplug.core.interfaces.transport import Transport

logger = logging.getLogger(__name__)


class TopologyCache:
    def __init__(self, session: Session, transport: Transport) -> None:
        self._session = session
        self._transport = transport
        self._snapshot: NetworkDetail | None = None

    @property
    def snapshot(self) -> NetworkDetail | None:
        return self._snapshot

    def invalidate(self) -> None:
        self._snapshot = None

    async def get_topology(self, force: bool = False) -> NetworkDetail:
        """Return the cached snapshot, fetching it on a miss or when `force` is set."""

        if not force and self._snapshot is not None:
            return self._snapshot
        return await self.refresh()

    async def refresh(self) -> NetworkDetail:
        response = await self._transport.send("GET", self._session.url("PHOENIX"))
        body = response.json()
        try:
            snapshot = PhoenixResponse.model_validate(body).decode_network_detail()
        except ValidationError as exc:
            logger.debug("unexpected topology response: %s", exc)
            raise UnknownStateError() from exc

        self._snapshot = log_payload("network detail", snapshot)
        return snapshot
