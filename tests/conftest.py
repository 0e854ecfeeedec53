"""Pytest configuration: make ``src/`` importable and provide a fake transport."""

from __future__ import annotations

import copy
import sys
from pathlib import Path
from typing import Any

import pytest

# Ensure src directory is in path for imports
repo_root = Path(__file__).parent.parent
src_path = repo_root / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from vcloud_director.errors import TransportError  # noqa: E402


class FakeTransport:
    """In-memory transport that serves canned payloads and records every call.

    ``responses`` maps a URI to a payload, or to a list of payloads served
    one per request (the last one repeats). ``failures`` maps a URI to the
    error a GET of it raises; GETs of unknown URIs fail with a 404.
    """

    def __init__(self, responses: dict[str, Any] | None = None, debug: bool = True) -> None:
        self.responses: dict[str, Any] = responses or {}
        self.failures: dict[str, Exception] = {}
        self.debug = debug
        self.calls: list[tuple[str, str, Any, str | None]] = []
        self.messages: list[str] = []

    def _respond(self, uri: str) -> Any:
        if uri in self.failures:
            raise self.failures[uri]
        if uri not in self.responses:
            raise TransportError("GET", uri, 404, "not found")
        payload = self.responses[uri]
        if isinstance(payload, list):
            payload = payload.pop(0) if len(payload) > 1 else payload[0]
        return copy.deepcopy(payload)

    def fetch(self, uri: str) -> dict[str, Any]:
        self.calls.append(("GET", uri, None, None))
        return self._respond(uri)

    def send(
        self, method: str, uri: str, payload: Any, content_type: str | None
    ) -> dict[str, Any] | None:
        self.calls.append((method, uri, payload, content_type))
        return self._respond(uri) if uri in self.responses else None

    def remove(self, uri: str) -> dict[str, Any] | None:
        self.calls.append(("DELETE", uri, None, None))
        return self._respond(uri) if uri in self.responses else None

    def debug_log(self, message: str) -> None:
        if self.debug:
            self.messages.append(message)

    def fetches(self, uri: str | None = None) -> int:
        return sum(1 for call in self.calls if call[0] == "GET" and uri in (None, call[1]))


@pytest.fixture  # type: ignore[misc]
def fake_transport() -> FakeTransport:
    return FakeTransport()
