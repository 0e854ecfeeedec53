"""Typed hyperlinks found in the ``link`` field of a vCloud resource."""

from __future__ import annotations

import re
import weakref
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError

from .envelope import thaw
from .errors import MalformedLinkError, VCloudDirectorError

if TYPE_CHECKING:
    from .node import ResourceNode
    from .transport import Transport

LINK_MIME_PATTERN = re.compile(r"^application/vnd\..*\.(\w+)\+(json|xml)$")


class Link(BaseModel):
    """A reference from one resource to a related resource or action.

    ``type`` is the short type parsed out of the vendor media type and
    ``is_json`` tells the JSON flavour of a link apart from its XML twin.
    Both stay unset when the media type is absent or not a vendor type.
    """

    model_config = ConfigDict(frozen=True)

    href: str = Field(min_length=1, description="Target URI")
    rel: str = Field(min_length=1, description="Relation, e.g. 'down' or 'edit'")
    name: str | None = None
    mime_type: str | None = Field(None, description="Media type exactly as sent")
    type: str | None = Field(None, description="Short type name from the media type")
    is_json: bool | None = None

    _owner: weakref.ReferenceType[ResourceNode] | None = PrivateAttr(default=None)
    _transport: Transport | None = PrivateAttr(default=None)

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any], owner: ResourceNode) -> Link:
        """Build a link from its JSON descriptor, scoped to ``owner``.

        Raises:
            MalformedLinkError: If ``href`` or ``rel`` is missing or a field is invalid
        """
        if not isinstance(raw, Mapping):
            raise MalformedLinkError(
                f"Link descriptor must be an object, got {type(raw).__name__}", raw
            )
        fields: dict[str, Any] = {
            "href": raw.get("href"),
            "rel": raw.get("rel"),
            "name": raw.get("name"),
        }
        mime_type = raw.get("type")
        if mime_type is not None:
            fields["mime_type"] = str(mime_type)
            match = LINK_MIME_PATTERN.match(str(mime_type))
            if match:
                fields["type"] = match.group(1)
                fields["is_json"] = match.group(2) == "json"

        try:
            link = cls.model_validate(fields)
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in exc.errors()
            )
            raise MalformedLinkError(
                f"Malformed link descriptor {dict(raw)}: {problems}", raw
            ) from exc

        link._owner = weakref.ref(owner)
        link._transport = owner.transport
        return link

    @property
    def owner(self) -> ResourceNode | None:
        """The resource this link was found in, if it is still alive."""
        return self._owner() if self._owner is not None else None

    @property
    def transport(self) -> Transport:
        if self._transport is None:
            raise VCloudDirectorError(f"Link {self.href} is not attached to a resource")
        return self._transport

    def fetch(self) -> ResourceNode:
        """GET the link target and return it as an inflated resource."""
        from .node import ResourceNode

        return ResourceNode.from_response(self.transport.fetch(self.href), self.transport)

    def remove(self) -> ResourceNode | None:
        """DELETE the link target; returns the resulting task, if any."""
        from .node import ResourceNode

        return ResourceNode.from_response(self.transport.remove(self.href), self.transport)

    def update(self, payload: Any) -> ResourceNode | None:
        """PUT ``payload`` to the link target using the link media type."""
        return self._send("PUT", payload)

    def create(self, payload: Any) -> ResourceNode | None:
        """POST ``payload`` to the link target using the link media type."""
        return self._send("POST", payload)

    get = fetch
    delete = remove
    put = update
    post = create

    def _send(self, method: str, payload: Any) -> ResourceNode | None:
        from .node import ResourceNode

        body = self.transport.send(method, self.href, thaw(payload), self.mime_type)
        return ResourceNode.from_response(body, self.transport)
