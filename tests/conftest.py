"""Shared test fixtures.

FakeAlexaApi is an in-memory stand-in for the Alexa web API, served through
`httpx.MockTransport` so no test touches the network.
"""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from alexa_smartplug.core.config import AppSettings
from alexa_smartplug.core.services.controller import AlexaController

COOKIE = "session-id=123; ubid-acbjp=456"
DOMAIN = "amazon.co.jp"


def make_network_detail(appliances: dict[str, str], **extra_records: dict[str, Any]) -> dict[str, Any]:
    """Build a topology snapshot holding `{entityId: applianceId}` records."""

    records: dict[str, Any] = {}
    for index, (entity_id, appliance_id) in enumerate(appliances.items()):
        records[f"record-{index}"] = {
            "entityId": entity_id,
            "applianceId": appliance_id,
            "friendlyName": f"Plug {index}",
        }
    records.update(extra_records)
    return {
        "locationDetails": {
            "locationDetails": {
                "Default_Location": {
                    "amazonBridgeDetails": {
                        "amazonBridgeDetails": {
                            "LambdaBridge_AAA/SonarCloudService": {
                                "applianceDetails": {"applianceDetails": records},
                            }
                        }
                    }
                }
            }
        }
    }


def power_state(value: str | None) -> dict[str, Any]:
    """State-read response for one device, `value=None` omits the power capability."""

    capabilities = [json.dumps({"namespace": "Alexa.EndpointHealth", "value": {"value": "OK"}})]
    if value is not None:
        capabilities.append(json.dumps({"namespace": "Alexa.PowerController", "name": "powerState", "value": value}))
    return {"errors": [], "deviceStates": [{"entityId": "APP-1", "capabilityStates": capabilities}]}


SMARTPLUG_ENTITIES: list[dict[str, Any]] = [
    {
        "id": "E1",
        "displayName": "Plug",
        "description": "Living room plug",
        "providerData": {"deviceType": "SMARTPLUG"},
        "availability": "AVAILABLE",
    },
    {"id": "E2", "providerData": {"deviceType": "LIGHT"}},
]


class FakeAlexaApi:
    """Routes requests by method and path, and records every request."""

    def __init__(
        self,
        entities: Any = None,
        network_detail: Any = None,
        state_response: Any = None,
        control_response: Any = None,
    ) -> None:
        self.entities = SMARTPLUG_ENTITIES if entities is None else entities
        self.network_detail = make_network_detail({"E1": "APP-1"}) if network_detail is None else network_detail
        self.state_response = power_state("ON") if state_response is None else state_response
        self.control_response = {"errors": [], "controlResponses": []} if control_response is None else control_response
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if request.method == "GET" and path == "/api/behaviors/entities":
            return httpx.Response(200, json=self.entities)
        if request.method == "GET" and path == "/api/phoenix":
            detail = self.network_detail
            if not isinstance(detail, str):
                detail = json.dumps(detail)
            return httpx.Response(200, json={"networkDetail": detail})
        if request.method == "POST" and path == "/api/phoenix/state":
            return httpx.Response(200, json=self.state_response)
        if request.method == "PUT" and path == "/api/phoenix/state":
            return httpx.Response(200, json=self.control_response)
        return httpx.Response(404, json={"message": "not found"})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def body(self, request: httpx.Request) -> Any:
        return json.loads(request.content)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """No ALEXA_SMARTPLUG_* variables and no stray .env file."""

    for name in (
        "ALEXA_SMARTPLUG_COOKIE",
        "ALEXA_SMARTPLUG_AMAZON_DOMAIN",
        "ALEXA_SMARTPLUG_ENABLE_LOG",
        "ALEXA_SMARTPLUG_ALEXA_IP",
        "ALEXA_SMARTPLUG_SET_STATE_TARGET",
        "ALEXA_SMARTPLUG_GET_STATE_TARGET",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def api() -> FakeAlexaApi:
    return FakeAlexaApi()


@pytest.fixture
def make_controller():
    def factory(api: FakeAlexaApi, settings: AppSettings | None = None) -> AlexaController:
        return AlexaController(COOKIE, DOMAIN, transport=api.transport(), settings=settings)

    return factory


@pytest.fixture
def alexa(api, make_controller) -> AlexaController:
    return make_controller(api)
