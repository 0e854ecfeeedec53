"""Lazily inflated vCloud resources.

A resource found nested inside another resource's payload usually carries
only an ``href``, ``name`` and ``type``; the full body (and in particular its
links) is only available from a GET of its own ``href``. Such resources start
out as *stubs* and are inflated on the first call that needs complete
content. A resource that already embeds a ``link`` field is treated as
complete.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator, Mapping
from enum import Enum
from typing import Any

from .envelope import Envelope, parse_envelope, thaw
from .errors import MissingIdError, UnexpectedEnvelopeShapeError
from .inflection import Pluralizer, pluralize
from .kinds import ResourceKind, kind_for
from .link import Link
from .transport import Transport

CHILDREN_KEY = "Children"


class NodeState(str, Enum):
    STUB = "stub"
    INFLATED = "inflated"


def _listify(value: Any, what: str) -> Iterator[Mapping[str, Any]]:
    """Yield the objects held by a field that may be one object or a list."""
    if value is None:
        return
    items = value if isinstance(value, list | tuple) else [value]
    for item in items:
        if not isinstance(item, Mapping):
            raise UnexpectedEnvelopeShapeError(
                f"Expected {what} to hold objects, found {type(item).__name__}"
            )
        yield item


class ResourceNode:
    """One server resource in the lazily fetched resource graph.

    The transport is shared between every node built from it and must
    outlive them; nodes never close it.
    """

    def __init__(
        self,
        raw: Mapping[str, Any],
        transport: Transport,
        *,
        state: NodeState = NodeState.INFLATED,
        type_name: str | None = None,
        pluralizer: Pluralizer = pluralize,
    ) -> None:
        self._envelope = parse_envelope(raw, type_name)
        self._transport = transport
        self._state = state
        self._pluralizer = pluralizer
        self._links: list[Link] | None = None
        self._all_links: list[Link] | None = None
        self._lock = threading.RLock()

    @classmethod
    def from_response(
        cls, body: Mapping[str, Any] | None, transport: Transport
    ) -> ResourceNode | None:
        """Wrap a transport response; empty bodies yield None."""
        if body is None:
            return None
        return cls(body, transport)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.type} {self.href} ({self._state.value})>"

    # -- attributes that never require inflation --------------------------

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def state(self) -> NodeState:
        return self._state

    @property
    def is_stub(self) -> bool:
        return self._state is NodeState.STUB

    @property
    def href(self) -> str | None:
        return self._envelope.href

    @property
    def mime_type(self) -> str | None:
        return self._envelope.mime_type

    @property
    def type(self) -> str:
        return self._envelope.type

    @property
    def name(self) -> str | None:
        return self._envelope.name

    @property
    def kind(self) -> ResourceKind:
        return kind_for(self._envelope.type)

    def uuid(self) -> str | None:
        """Return the last path segment of ``href``."""
        if not self.href:
            return None
        return self.href.rstrip("/").rsplit("/", 1)[-1]

    # -- content, forcing inflation ---------------------------------------

    def content(self) -> Envelope:
        return self.inflate()._envelope

    def attributes(self) -> Mapping[str, Any]:
        """Return the read-only attribute map of the fully inflated resource."""
        return self.content().attributes

    def identifier(self) -> str:
        """Return the resource ``id``.

        Raises:
            MissingIdError: If the inflated resource has no id
        """
        envelope = self.content()
        if envelope.id is None:
            raise MissingIdError(envelope.href)
        return envelope.id

    def inflate(self) -> ResourceNode:
        """Fetch the full resource if this node is still a stub."""
        with self._lock:
            if self._state is NodeState.STUB:
                self.refetch()
        return self

    def refetch(self) -> ResourceNode:
        """Unconditionally replace this node's content with a fresh GET."""
        with self._lock:
            raw = self._transport.fetch(self._require_href())
            was_stub = self._state is NodeState.STUB
            self._envelope = parse_envelope(raw, self._envelope.type)
            self._links = None
            self._all_links = None
            self._state = NodeState.INFLATED
            if self._transport.debug:
                action = "Inflated" if was_stub else "Refetched"
                self._transport.debug_log(f"Object: {action} a [{self.type}]")
        return self

    # -- links --------------------------------------------------------------

    def all_links(self) -> list[Link]:
        """Return every link of the resource, JSON and XML flavoured alike."""
        self.inflate()
        with self._lock:
            if self._all_links is None:
                raw_links = self._envelope.get("link")
                self._all_links = [
                    Link.from_raw(raw, self) for raw in _listify(raw_links, "'link'")
                ]
            return list(self._all_links)

    def links(self) -> list[Link]:
        """Return the JSON flavoured links of the resource."""
        all_links = self.all_links()
        with self._lock:
            if self._links is None:
                self._links = [link for link in all_links if link.is_json]
            return list(self._links)

    def find_links(
        self, *, rel: str | None = None, type: str | None = None, name: str | None = None
    ) -> list[Link]:
        """Return the JSON links matching every filter given.

        ``type`` is the short type (``vdc``), not the full media type.
        """
        return [
            link
            for link in self.links()
            if (rel is None or rel == (link.rel or ""))
            and (type is None or type == (link.type or ""))
            and (name is None or name == (link.name or ""))
        ]

    def fetch_links(
        self, *, rel: str | None = None, type: str | None = None, name: str | None = None
    ) -> list[ResourceNode]:
        """As :meth:`find_links`, but GET every match and return the resources."""
        return [link.fetch() for link in self.find_links(rel=rel, type=type, name=name)]

    # -- nested resources ---------------------------------------------------

    def build_sub_objects(self, type_name: str) -> list[ResourceNode]:
        """Build resources nested as ``{"<plural>": {"<type_name>": [...]}}``.

        The container key is the plural of ``type_name``; a missing container
        yields no resources.
        """
        container = self.attributes().get(self._pluralizer(type_name))
        if not isinstance(container, Mapping):
            return []
        return [
            self._create_object(raw, type_name)
            for raw in _listify(container.get(type_name), repr(type_name))
        ]

    def build_children_objects(self) -> list[ResourceNode]:
        """Build the resources listed under the ``Children`` container."""
        children = self.attributes().get(CHILDREN_KEY)
        if not isinstance(children, Mapping):
            return []
        objects: list[ResourceNode] = []
        for type_name, value in children.items():
            objects.extend(self._create_object(raw, type_name) for raw in _listify(value, type_name))
        return objects

    def _create_object(self, raw: Mapping[str, Any], type_name: str) -> ResourceNode:
        # embedded links mean the parent sent the complete resource
        state = NodeState.INFLATED if "link" in raw else NodeState.STUB
        child = ResourceNode(
            {type_name: raw},
            self._transport,
            state=state,
            type_name=type_name,
            pluralizer=self._pluralizer,
        )
        if self._transport.debug:
            self._transport.debug_log(
                f"Object: [{self.type}] instantiated "
                f"{'a stub' if child.is_stub else 'an object'} for [{child.type}]"
            )
        return child

    # -- requests against this resource ------------------------------------

    def get(self) -> ResourceNode:
        return ResourceNode(self._transport.fetch(self._require_href()), self._transport)

    def delete(self) -> ResourceNode | None:
        return ResourceNode.from_response(
            self._transport.remove(self._require_href()), self._transport
        )

    def post(self, payload: Any) -> ResourceNode | None:
        return self._send("POST", payload)

    def put(self, payload: Any) -> ResourceNode | None:
        return self._send("PUT", payload)

    def _send(self, method: str, payload: Any) -> ResourceNode | None:
        body = self._transport.send(method, self._require_href(), thaw(payload), self.mime_type)
        return ResourceNode.from_response(body, self._transport)

    def _require_href(self) -> str:
        if not self.href:
            raise UnexpectedEnvelopeShapeError(
                f"{self.type} resource has no href to send requests to"
            )
        return self.href
