"""Payload logging toggled by `ALEXA_SMARTPLUG_ENABLE_LOG`.

Payloads go to their own `alexa_smartplug.payloads` logger, held at INFO
until `configure_logging(True)` lowers it, so a host application running
the root logger at DEBUG does not receive them.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from rich.logging import RichHandler
from rich.pretty import pretty_repr

PACKAGE_LOGGER = "alexa_smartplug"
PAYLOAD_LOGGER = f"{PACKAGE_LOGGER}.payloads"

payload_logger = logging.getLogger(PAYLOAD_LOGGER)
payload_logger.setLevel(logging.INFO)

T = TypeVar("T")


def configure_logging(enabled: bool) -> None:
    """Attach a Rich handler at DEBUG to the package logger (once)."""

    if not enabled:
        return

    root = logging.getLogger(PACKAGE_LOGGER)
    root.setLevel(logging.DEBUG)
    payload_logger.setLevel(logging.DEBUG)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(RichHandler(rich_tracebacks=True, show_path=False))


def log_payload(stage: str, payload: T) -> T:
    """Log `payload` in full under `stage` and return it unchanged."""

    if payload_logger.isEnabledFor(logging.DEBUG):
        payload_logger.debug("%s: %s", stage, _render(payload))
    return payload


def _render(payload: Any) -> str:
    dump = getattr(payload, "model_dump", None)
    if callable(dump):
        payload = dump(mode="json", by_alias=True)
    return pretty_repr(payload)
