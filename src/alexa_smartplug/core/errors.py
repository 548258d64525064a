"""Exception taxonomy.

Network failures (httpx) and malformed JSON are not wrapped: they reach the
caller as raised by the transport.
"""

from __future__ import annotations


class AlexaSmartPlugError(Exception):
    """Base class for every error raised by this package."""


class UnauthenticatedError(AlexaSmartPlugError):
    def __init__(self) -> None:
        super().__init__("No cookie provided.")


class NoAmazonDomainError(AlexaSmartPlugError):
    def __init__(self) -> None:
        super().__init__("No amazon domain provided.")


class OptionError(AlexaSmartPlugError):
    """Construction options that cannot be combined."""


class UnknownStateError(AlexaSmartPlugError):
    """The vendor answered with a shape we do not understand, or the device is unknown."""

    def __init__(self, help: str | None = None) -> None:
        self.help = help
        if help:
            message = (
                "alexa-smartplug detected unknown error. Try "
                + help
                + "\nIf this keeps happening, please submit issue with logs attached."
            )
        else:
            message = "alexa-smartplug detected unknown error. Please submit issue with logs attached."
        super().__init__(message)


class InteractionError(AlexaSmartPlugError):
    """The vendor reported an error for a control or state request."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code
        super().__init__(message)
