"""Normalization of vCloud JSON payloads into read-only envelopes.

A vCloud payload is either the resource body itself or a single-key object
wrapping the body under its type name::

    {"Org": {"href": "...", "name": "Example"}}

The media type carried in ``type`` (``application/vnd.vmware.vcloud.org+json``)
is the most reliable source of the short type name, so it wins over the
wrapping key and over whatever the caller supplied.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from .errors import UnexpectedEnvelopeShapeError

GENERIC_TYPE = "Thing"

JSON_MIME_PATTERN = re.compile(r"^application/vnd\..*\.(\w+)\+json$")


def freeze(value: Any) -> Any:
    """Return a read-only deep copy of a decoded JSON value."""
    if isinstance(value, Mapping):
        return MappingProxyType({str(key): freeze(item) for key, item in value.items()})
    if isinstance(value, list | tuple):
        return tuple(freeze(item) for item in value)
    return value


def thaw(value: Any) -> Any:
    """Return a mutable, JSON-serializable copy of a frozen value."""
    if isinstance(value, Mapping):
        return {key: thaw(item) for key, item in value.items()}
    if isinstance(value, tuple | list):
        return [thaw(item) for item in value]
    return value


def _optional_str(body: Mapping[str, Any], key: str) -> str | None:
    value = body.get(key)
    return None if value is None else str(value)


@dataclass(frozen=True, slots=True)
class Envelope:
    """Immutable snapshot of one server resource."""

    type: str
    attributes: Mapping[str, Any]
    href: str | None = None
    mime_type: str | None = None
    rel: str | None = None
    id: str | None = None
    name: str | None = None

    def get(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    def __contains__(self, key: object) -> bool:
        return key in self.attributes

    def to_dict(self) -> dict[str, Any]:
        """Return the attribute map as plain, mutable JSON data."""
        return thaw(self.attributes)


def parse_envelope(raw: Mapping[str, Any], contextual_type: str | None = None) -> Envelope:
    """Normalize a raw JSON object into an :class:`Envelope`.

    Args:
        raw: Decoded JSON object, optionally wrapped under a single type key
        contextual_type: Type name known from where the payload was found

    Raises:
        UnexpectedEnvelopeShapeError: If ``raw`` is not a JSON object
    """
    if not isinstance(raw, Mapping):
        raise UnexpectedEnvelopeShapeError(
            f"Expected a JSON object for the resource payload, got {type(raw).__name__}"
        )

    type_name = contextual_type or GENERIC_TYPE
    body: Mapping[str, Any] = raw
    if len(raw) == 1:
        key, value = next(iter(raw.items()))
        # a lone scalar field such as {"href": ...} is a body, not a wrapper
        if isinstance(value, Mapping):
            type_name = str(key)
            body = value

    mime_type = _optional_str(body, "type")
    if mime_type is not None:
        match = JSON_MIME_PATTERN.match(mime_type)
        if match:
            type_name = match.group(1)

    return Envelope(
        type=type_name,
        attributes=freeze(body),
        href=_optional_str(body, "href"),
        mime_type=mime_type,
        rel=_optional_str(body, "rel"),
        id=_optional_str(body, "id"),
        name=_optional_str(body, "name"),
    )
