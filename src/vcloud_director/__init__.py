"""Client-side object model for the vCloud Director JSON API."""

from .client import VCloudDirector, configure_logging
from .config import Settings
from .envelope import Envelope, parse_envelope
from .errors import (
    AuthenticationError,
    MalformedLinkError,
    MissingIdError,
    TransportError,
    UnexpectedEnvelopeShapeError,
    VCloudDirectorError,
)
from .kinds import ResourceKind, kind_for, register_kind
from .link import Link
from .node import NodeState, ResourceNode
from .transport import HttpTransport, Transport

__all__ = [
    "AuthenticationError",
    "Envelope",
    "HttpTransport",
    "Link",
    "MalformedLinkError",
    "MissingIdError",
    "NodeState",
    "ResourceKind",
    "ResourceNode",
    "Settings",
    "Transport",
    "TransportError",
    "UnexpectedEnvelopeShapeError",
    "VCloudDirector",
    "VCloudDirectorError",
    "configure_logging",
    "kind_for",
    "parse_envelope",
    "register_kind",
]
