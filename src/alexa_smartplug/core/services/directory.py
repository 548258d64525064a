"""Device directory: list the account entities and keep the smart plugs."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from pydantic import ValidationError

from alexa_smartplug.core.config import Session
from alexa_smartplug.core.diagnostics import log_payload
from alexa_smartplug.core.domain.models import Availability, Device, EntityListing
from alexa_smartplug.core.errors import UnknownStateError
from alexa_smartplug.core.interfaces.transport import Transport

if TYPE_CHECKING:
    from alexa_smartplug.core.services.state_controller import SmartPlugController

logger = logging.getLogger(__name__)

ControllerFactory = Callable[[Device], "SmartPlugController"]


class DeviceDirectory:
    def __init__(
        self,
        session: Session,
        transport: Transport,
        controller_factory: ControllerFactory,
    ) -> None:
        self._session = session
        self._transport = transport
        self._controller_factory = controller_factory

    async def list_devices(self) -> list[Device]:
        """Fetch the entity list and return a fresh `Device` per smart plug."""

        response = await self._transport.send("GET", self._session.url("BEHAVIORS_ENTITIES"))
        body = log_payload("entities", response.json())
        if not isinstance(body, list):
            raise UnknownStateError()

        devices: list[Device] = []
        seen: set[str] = set()
        for raw in body:
            try:
                entity = EntityListing.model_validate(raw)
            except ValidationError:
                logger.debug("skipping malformed entity: %r", raw)
                continue
            if not entity.is_smartplug or entity.id in seen:
                continue

            device = self._build_device(entity)
            if device is None:
                continue
            if not device.is_available:
                logger.info("smart plug %s is %s", device.entity_id, device.availability)
            seen.add(device.entity_id)
            logger.debug("found smart plug at %s (%s)", device.entity_id, device.name)
            devices.append(device)
        return devices

    def _build_device(self, entity: EntityListing) -> Device | None:
        availability = entity.availability or Availability.AVAILABLE.value
        try:
            device = Device(
                entity_id=entity.id,
                name=entity.display_name or "",
                description=entity.description or "",
                availability=availability,
            )
        except ValidationError as exc:
            logger.warning("skipping smart plug %r: %s", entity.id, exc)
            return None

        device.attach_controller(self._controller_factory(device))
        return device
