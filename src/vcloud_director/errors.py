"""Exception hierarchy for the vCloud Director client."""

from __future__ import annotations

from typing import Any


class VCloudDirectorError(Exception):
    """Base exception for all vCloud Director client errors."""


class MalformedLinkError(VCloudDirectorError, ValueError):
    """A link descriptor is missing its ``href`` or ``rel``."""

    def __init__(self, message: str, raw: Any = None) -> None:
        super().__init__(message)
        self.raw = raw


class MissingIdError(VCloudDirectorError, LookupError):
    """An inflated resource still carries no ``id`` attribute."""

    def __init__(self, href: str | None) -> None:
        super().__init__(f"Resource {href or '<no href>'} has no id")
        self.href = href


class UnexpectedEnvelopeShapeError(VCloudDirectorError, TypeError):
    """A payload, ``link`` or container value has the wrong JSON shape."""


class TransportError(VCloudDirectorError):
    """A request to the vCloud API failed.

    Attributes:
        method: HTTP method that was attempted
        uri: Target URI of the request
        status_code: HTTP status, or None when no response was received
        message: Server supplied error message, when the body carried one
    """

    def __init__(
        self,
        method: str,
        uri: str,
        status_code: int | None = None,
        message: str | None = None,
    ) -> None:
        self.method = method
        self.uri = uri
        self.status_code = status_code
        self.message = message
        status = f" -> {status_code}" if status_code is not None else ""
        detail = f": {message}" if message else ""
        super().__init__(f"{method} {uri}{status}{detail}")


class AuthenticationError(TransportError):
    """Login to the vCloud API failed."""
