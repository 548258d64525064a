"""Per-device power control.

Read and write go to the same endpoint (`/api/phoenix/state`), POST to read
and PUT to write. By default they address the device differently:

- write (`set_state`) sends the public entity id;
- read (`get_state`) sends the appliance id resolved from the topology.

Both choices are configurable (`AppSettings.set_state_target` /
`get_state_target`) because only the default pairing has been observed
against a live account.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from alexa_smartplug.core.config import AppSettings, Session, TargetIdentifier
from alexa_smartplug.core.diagnostics import log_payload
from alexa_smartplug.core.domain.models import (
    POWER_CONTROLLER_NAMESPACE,
    ControlEnvelope,
    ControlParameters,
    ControlRequest,
    Device,
    PhoenixStateResponse,
    PowerAction,
    StateEnvelope,
    StateRequest,
)
from alexa_smartplug.core.errors import InteractionError, UnknownStateError
from alexa_smartplug.core.interfaces.transport import Transport
from alexa_smartplug.core.services.resolver import EntityResolver

logger = logging.getLogger(__name__)

_JSON_HEADERS = {"Content-Type": "application/json"}


def parse_state_response(body: object) -> PhoenixStateResponse:
    """Validate a state endpoint body and raise on a reported error."""

    try:
        response = PhoenixStateResponse.model_validate(body)
    except ValidationError as exc:
        logger.debug("unexpected state response: %s", exc)
        raise UnknownStateError() from exc

    if response.errors:
        first = response.errors[0]
        raise InteractionError(first.message, code=first.code)
    return response


class SmartPlugController:
    """Power control for one `Device`; created by the device directory."""

    def __init__(
        self,
        session: Session,
        transport: Transport,
        resolver: EntityResolver,
        device: Device,
        settings: AppSettings | None = None,
    ) -> None:
        settings = settings or AppSettings()
        self._session = session
        self._transport = transport
        self._resolver = resolver
        self.device = device
        self._set_target = settings.set_state_target
        self._get_target = settings.get_state_target

    async def _target_id(self, target: TargetIdentifier, force: bool, operation: str) -> str:
        if target is TargetIdentifier.ENTITY:
            return self.device.entity_id

        appliance_id = await self._resolver.resolve_appliance_id(self.device.entity_id, force)
        if appliance_id is None:
            raise UnknownStateError(f"passing true on force parameter on {operation}")
        return appliance_id

    async def set_state(self, value: bool, force: bool = False) -> None:
        """Turn the plug on (`True`) or off (`False`).

        `force` only matters when writes address the resolved appliance id.
        """

        entity_id = await self._target_id(self._set_target, force, "set_state")
        envelope = ControlEnvelope(
            control_requests=[
                ControlRequest(
                    entity_id=entity_id,
                    parameters=ControlParameters(action=PowerAction.from_bool(value)),
                )
            ]
        )

        response = await self._transport.send(
            "PUT",
            self._session.url("PHOENIX_STATE"),
            headers=_JSON_HEADERS,
            json=envelope.to_wire(),
        )
        parse_state_response(log_payload("set_state", response.json()))

    async def get_state(self, force: bool = False) -> bool:
        """Return True when the plug reports `Alexa.PowerController` as `ON`.

        A missing power capability reads as off.
        """

        entity_id = await self._target_id(self._get_target, force, "get_state")
        envelope = StateEnvelope(state_requests=[StateRequest(entity_id=entity_id)])

        response = await self._transport.send(
            "POST",
            self._session.url("PHOENIX_STATE"),
            headers=_JSON_HEADERS,
            json=envelope.to_wire(),
        )
        state = parse_state_response(log_payload("get_state", response.json()))

        if not state.device_states:
            raise UnknownStateError("passing true on force parameter on get_state")
        try:
            power = state.device_states[0].capability(POWER_CONTROLLER_NAMESPACE)
        except ValidationError as exc:
            raise UnknownStateError() from exc
        return power is not None and power.value == "ON"

    async def turn_on(self) -> None:
        await self.set_state(True)

    async def turn_off(self) -> None:
        await self.set_state(False)
