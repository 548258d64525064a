"""Top-level entry point bound to one Alexa account.

`AlexaController` owns the session, the transport and the topology cache,
and hands them to every device controller it creates:

    directory -> Device -> SmartPlugController -> EntityResolver -> TopologyCache
                                      \\------------------> Transport
"""

from __future__ import annotations

import httpx
from pydantic import SecretStr

from alexa_smartplug.adapters.http_client import AlexaHttpClient
from alexa_smartplug.adapters.topology_cache import TopologyCache
from alexa_smartplug.core.config import AppSettings, Session
from alexa_smartplug.core.diagnostics import configure_logging
from alexa_smartplug.core.domain.models import Device
from alexa_smartplug.core.errors import NoAmazonDomainError, OptionError, UnauthenticatedError
from alexa_smartplug.core.services.directory import DeviceDirectory
from alexa_smartplug.core.services.resolver import EntityResolver
from alexa_smartplug.core.services.state_controller import SmartPlugController


def build_session(
    cookie: str | None,
    amazon_domain: str | None,
    settings: AppSettings,
) -> Session:
    """Explicit arguments first, then `ALEXA_SMARTPLUG_COOKIE` / `ALEXA_SMARTPLUG_AMAZON_DOMAIN`."""

    secret = SecretStr(cookie) if cookie else settings.cookie
    if secret is None or not secret.get_secret_value():
        raise UnauthenticatedError()

    domain = amazon_domain or settings.amazon_domain
    if not domain:
        raise NoAmazonDomainError()

    return Session(cookie=secret, amazon_domain=domain)


class AlexaController:
    """List the smart plugs of an account and control them.

    `transport` (any `httpx.AsyncBaseTransport`) and `alexa_ip` both override
    how requests reach the Alexa host and cannot be combined.
    """

    def __init__(
        self,
        cookie: str | None = None,
        amazon_domain: str | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        alexa_ip: str | None = None,
        settings: AppSettings | None = None,
    ) -> None:
        if transport is not None and alexa_ip is not None:
            raise OptionError("Cannot specify transport and alexa_ip in same instance")

        self.settings = settings or AppSettings()
        configure_logging(self.settings.enable_log)

        self.session = build_session(cookie, amazon_domain, self.settings)
        if transport is None and alexa_ip is None:
            alexa_ip = self.settings.alexa_ip

        self.http = AlexaHttpClient(
            self.session,
            self.settings,
            transport=transport,
            alexa_ip=alexa_ip,
        )
        self.topology = TopologyCache(self.session, self.http)
        self.resolver = EntityResolver(self.topology)
        self.directory = DeviceDirectory(self.session, self.http, self._new_controller)

    def _new_controller(self, device: Device) -> SmartPlugController:
        return SmartPlugController(self.session, self.http, self.resolver, device, self.settings)

    async def get_all_devices(self) -> list[Device]:
        return await self.directory.list_devices()

    async def find_device(self, query: str) -> Device | None:
        """Find a plug by entity id, or by display name (case-insensitive)."""

        devices = await self.get_all_devices()
        for device in devices:
            if device.entity_id == query:
                return device
        wanted = query.casefold()
        for device in devices:
            if device.name.casefold() == wanted:
                return device
        return None

    async def aclose(self) -> None:
        await self.http.aclose()

    async def __aenter__(self) -> "AlexaController":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
