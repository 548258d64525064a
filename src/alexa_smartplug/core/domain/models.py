"""Domain models (Pydantic v2).

- Wire envelopes sent to the state endpoint.
- Typed views over the vendor responses. Two fields arrive as JSON text
  nested inside JSON (`networkDetail` and each `capabilityStates` entry);
  they are kept as text and decoded by explicit methods so that malformed
  JSON surfaces as `json.JSONDecodeError`, not as a validation error.
- `Device`, the immutable identity snapshot of a smart plug.

These models describe *what* the data is, not *how* it is fetched.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field, PrivateAttr
from pydantic.config import ConfigDict

if TYPE_CHECKING:
    from alexa_smartplug.core.services.state_controller import SmartPlugController

SMARTPLUG_DEVICE_TYPE = "SMARTPLUG"  # cSpell:disable-line
POWER_CONTROLLER_NAMESPACE = "Alexa.PowerController"
APPLIANCE_ENTITY_TYPE = "APPLIANCE"

DEFAULT_LOCATION = "Default_Location"
SMARTHOME_BRIDGE = "LambdaBridge_AAA/SonarCloudService"


class Availability(str, Enum):
    AVAILABLE = "AVAILABLE"


class PowerAction(str, Enum):
    TURN_ON = "turnOn"
    TURN_OFF = "turnOff"

    @classmethod
    def from_bool(cls, value: bool) -> "PowerAction":
        return cls.TURN_ON if value else cls.TURN_OFF


def _decode_json_text(value: Any) -> Any:
    if isinstance(value, (str, bytes)):
        return json.loads(value)
    return value


# ── Device listing ───────────────────────────────────────────────────────────


class ProviderData(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    device_type: str | None = Field(default=None, alias="deviceType")


class EntityListing(BaseModel):
    """One element of the behaviors/entities array."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    display_name: str | None = Field(default=None, alias="displayName")
    description: str | None = None
    availability: str | None = None
    provider_data: ProviderData | None = Field(default=None, alias="providerData")

    @property
    def is_smartplug(self) -> bool:
        return self.provider_data is not None and self.provider_data.device_type == SMARTPLUG_DEVICE_TYPE


class Device(BaseModel):
    """A smart plug tied to the account.

    Immutable after construction. Its controller is attached by the device
    directory right after the device is built and is never shared.
    """

    model_config = ConfigDict(frozen=True)

    entity_id: str = Field(..., min_length=1, description="Stable public entity identifier.")
    name: str = Field(default="", description="Display name shown in the Alexa app.")
    description: str = Field(default="")
    availability: str = Field(
        default=Availability.AVAILABLE.value,
        description="Availability tag as reported by the vendor (e.g. AVAILABLE, UNAVAILABLE).",
    )

    _controller: Any = PrivateAttr(default=None)

    def attach_controller(self, controller: "SmartPlugController") -> None:
        if self._controller is not None:
            raise RuntimeError(f"device {self.entity_id} already has a controller")
        self._controller = controller

    @property
    def controller(self) -> "SmartPlugController":
        if self._controller is None:
            raise RuntimeError(f"device {self.entity_id} has no controller attached")
        return self._controller

    @property
    def is_available(self) -> bool:
        return self.availability == Availability.AVAILABLE

    def __str__(self) -> str:
        return self.name


# ── State endpoint envelopes ─────────────────────────────────────────────────


class ControlParameters(BaseModel):
    action: PowerAction


class ControlRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    entity_id: str = Field(..., alias="entityId")
    entity_type: str = Field(default=APPLIANCE_ENTITY_TYPE, alias="entityType")
    parameters: ControlParameters


class StateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    entity_id: str = Field(..., alias="entityId")
    entity_type: str = Field(default=APPLIANCE_ENTITY_TYPE, alias="entityType")


class ControlEnvelope(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    control_requests: list[ControlRequest] = Field(..., alias="controlRequests")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class StateEnvelope(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    state_requests: list[StateRequest] = Field(..., alias="stateRequests")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


# ── State endpoint responses ─────────────────────────────────────────────────


class ResponseError(BaseModel):
    model_config = ConfigDict(extra="ignore")

    code: str | None = None
    message: str = ""


class CapabilityState(BaseModel):
    model_config = ConfigDict(extra="ignore")

    namespace: str | None = None
    name: str | None = None
    value: Any = None


class DeviceState(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    entity_id: str | None = Field(default=None, alias="entityId")
    capability_states: list[str | dict[str, Any]] = Field(default_factory=list, alias="capabilityStates")

    def capabilities(self) -> list[CapabilityState]:
        """Decode every capability entry (each one is JSON text)."""

        return [CapabilityState.model_validate(_decode_json_text(entry)) for entry in self.capability_states]

    def capability(self, namespace: str) -> CapabilityState | None:
        for state in self.capabilities():
            if state.namespace == namespace:
                return state
        return None


class PhoenixStateResponse(BaseModel):
    """Body returned by both PUT (control) and POST (state read) on the state endpoint."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    errors: list[ResponseError] = Field(default_factory=list)
    device_states: list[DeviceState] = Field(default_factory=list, alias="deviceStates")


# ── Topology (network detail) ────────────────────────────────────────────────


class ApplianceDetail(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    entity_id: str | None = Field(default=None, alias="entityId")
    appliance_id: str | None = Field(default=None, alias="applianceId")


class ApplianceDetails(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    appliance_details: dict[str, ApplianceDetail] | None = Field(default=None, alias="applianceDetails")


class BridgeDetail(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    appliance_details: ApplianceDetails | None = Field(default=None, alias="applianceDetails")


class BridgeDetails(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    amazon_bridge_details: dict[str, BridgeDetail] = Field(default_factory=dict, alias="amazonBridgeDetails")


class LocationDetail(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    amazon_bridge_details: BridgeDetails | None = Field(default=None, alias="amazonBridgeDetails")


class LocationDetails(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    location_details: dict[str, LocationDetail] = Field(default_factory=dict, alias="locationDetails")


class NetworkDetail(BaseModel):
    """Topology snapshot: location -> bridge -> appliance."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    location_details: LocationDetails | None = Field(default=None, alias="locationDetails")

    def appliance_details(
        self,
        location: str = DEFAULT_LOCATION,
        bridge: str = SMARTHOME_BRIDGE,
    ) -> dict[str, ApplianceDetail] | None:
        """Walk the fixed path to the appliance records, or None if any level is missing."""

        if self.location_details is None:
            return None
        loc = self.location_details.location_details.get(location)
        if loc is None or loc.amazon_bridge_details is None:
            return None
        bridge_detail = loc.amazon_bridge_details.amazon_bridge_details.get(bridge)
        if bridge_detail is None or bridge_detail.appliance_details is None:
            return None
        return bridge_detail.appliance_details.appliance_details


class PhoenixResponse(BaseModel):
    """Body of the topology endpoint; `networkDetail` is JSON text."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    network_detail: str = Field(..., alias="networkDetail")

    def decode_network_detail(self) -> NetworkDetail:
        return NetworkDetail.model_validate(json.loads(self.network_detail))
