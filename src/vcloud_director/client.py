"""Top-level entry point tying settings, transport and resources together."""

from __future__ import annotations

import sys
from typing import Any

import httpx
from loguru import logger

from .config import Settings
from .node import ResourceNode
from .transport import HttpTransport

ORG_LIST_URI = "/api/org/"


def configure_logging(debug: bool = False) -> None:
    """Send client logs to stderr, including debug chatter when ``debug`` is set."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if debug else "INFO")


class VCloudDirector:
    """Thin wrapper around the vCloud Director JSON API.

    Example:
        >>> vcd = VCloudDirector(Settings.from_file())
        >>> for org in vcd.org_list():
        ...     print(org.name, [vdc.name for vdc in org.fetch_links(type="vdc")])
    """

    def __init__(self, settings: Settings, transport: HttpTransport | None = None) -> None:
        self.settings = settings
        self._transport = transport
        self._org_list: list[ResourceNode] | None = None

    def __enter__(self) -> VCloudDirector:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def api(self) -> HttpTransport:
        if self._transport is None:
            self._transport = HttpTransport(self.settings)
        return self._transport

    def close(self) -> None:
        if self._transport is not None:
            self._transport.close()

    def get(self, uri: str) -> ResourceNode:
        return ResourceNode(self.api.fetch(uri), self.api)

    def put(self, uri: str, payload: Any, content_type: str | None = None) -> ResourceNode | None:
        return ResourceNode.from_response(self.api.send("PUT", uri, payload, content_type), self.api)

    def post(self, uri: str, payload: Any, content_type: str | None = None) -> ResourceNode | None:
        return ResourceNode.from_response(
            self.api.send("POST", uri, payload, content_type), self.api
        )

    def delete(self, uri: str) -> ResourceNode | None:
        return ResourceNode.from_response(self.api.remove(uri), self.api)

    def org_list(self) -> list[ResourceNode]:
        """Return the organisations visible to the logged in user."""
        if self._org_list is None:
            self._org_list = self.get(ORG_LIST_URI).fetch_links(rel="down", type="org")
            logger.debug(f"Found {len(self._org_list)} organisations")
        return list(self._org_list)

    def query(self, **params: Any) -> ResourceNode:
        """Run a typed query, e.g. ``query(type="vm", format="records")``."""
        uri = httpx.URL(self.api.query_uri).copy_merge_params(params)
        return self.get(str(uri))
