"""Async client for Alexa smart plugs.

    async with AlexaController(cookie, "amazon.co.jp") as alexa:
        for plug in await alexa.get_all_devices():
            print(plug, await plug.controller.get_state())
"""

from alexa_smartplug.core.config import AppSettings, Session, TargetIdentifier
from alexa_smartplug.core.domain.models import Availability, Device
from alexa_smartplug.core.errors import (
    AlexaSmartPlugError,
    InteractionError,
    NoAmazonDomainError,
    OptionError,
    UnauthenticatedError,
    UnknownStateError,
)
from alexa_smartplug.core.services.controller import AlexaController
from alexa_smartplug.core.services.resolver import EntityResolver
from alexa_smartplug.core.services.state_controller import SmartPlugController

__version__ = "0.1.0"

__all__ = [
    "AlexaController",
    "AlexaSmartPlugError",
    "AppSettings",
    "Availability",
    "Device",
    "EntityResolver",
    "InteractionError",
    "NoAmazonDomainError",
    "OptionError",
    "Session",
    "SmartPlugController",
    "TargetIdentifier",
    "UnauthenticatedError",
    "UnknownStateError",
]
