"""HTTP transport for the vCloud Director JSON API."""

from __future__ import annotations

import itertools
from pathlib import Path
from typing import Any, Protocol

import httpx
from loguru import logger

from .config import Settings
from .errors import AuthenticationError, TransportError

AUTH_HEADER = "x-vcloud-authorization"
DEFAULT_CONTENT_TYPE = "application/json"


class Transport(Protocol):
    """Request surface the resource graph needs from a transport."""

    debug: bool

    def fetch(self, uri: str) -> dict[str, Any]: ...

    def send(
        self, method: str, uri: str, payload: Any, content_type: str | None
    ) -> dict[str, Any] | None: ...

    def remove(self, uri: str) -> dict[str, Any] | None: ...

    def debug_log(self, message: str) -> None: ...


def _error_message(response: httpx.Response) -> str | None:
    """Pull the message out of a vCloud error body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or None
    if isinstance(body, dict):
        message = body.get("message")
        code = body.get("minorErrorCode") or body.get("majorErrorCode")
        if message and code:
            return f"{message} ({code})"
        if message:
            return str(message)
    return None


class HttpTransport:
    """Authenticated, synchronous access to one vCloud Director endpoint.

    The transport is shared by every resource built from it. It logs in
    lazily on the first request and keeps the session token for the
    remainder of its life.
    """

    def __init__(self, settings: Settings, client: httpx.Client | None = None) -> None:
        self.settings = settings
        self.debug = settings.debug
        self._token: str | None = None
        self._trace_counter = itertools.count(1)
        self._owns_client = client is None
        if client is None:
            verify: bool | str = settings.ssl_verify
            if settings.ssl_verify and settings.ssl_ca_file is not None:
                verify = str(settings.ssl_ca_file)
            client = httpx.Client(
                base_url=settings.base_url,
                timeout=settings.timeout,
                verify=verify,
            )
        self._client = client
        self._client.headers["Accept"] = f"application/*+json;version={settings.api_version}"

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def query_uri(self) -> str:
        return f"{self.settings.base_url}/api/query"

    @property
    def is_logged_in(self) -> bool:
        return self._token is not None

    def debug_log(self, message: str) -> None:
        if self.debug:
            logger.debug(message)

    def login(self) -> str:
        """Open an API session and return its authorization token."""
        url = f"{self.settings.base_url}/api/sessions"
        self.debug_log(f"Logging in to {url} as {self.settings.login_name}")
        try:
            response = self._client.post(
                url, auth=(self.settings.login_name, self.settings.password)
            )
        except httpx.RequestError as exc:
            raise AuthenticationError("POST", url, message=str(exc)) from exc
        self._trace("POST", url, response)
        if response.is_error:
            raise AuthenticationError(
                "POST", url, response.status_code, _error_message(response)
            )
        token = response.headers.get(AUTH_HEADER)
        if not token:
            raise AuthenticationError(
                "POST", url, response.status_code, f"response carried no {AUTH_HEADER} header"
            )
        self._token = token
        logger.info(f"Logged in to {self.settings.hostname} as {self.settings.login_name}")
        return token

    def logout(self) -> None:
        if self._token is None:
            return
        try:
            self._request("DELETE", f"{self.settings.base_url}/api/session")
        finally:
            self._token = None

    def close(self) -> None:
        try:
            self.logout()
        except TransportError as exc:
            logger.warning(f"Logout failed: {exc}")
        if self._owns_client:
            self._client.close()

    def fetch(self, uri: str) -> dict[str, Any]:
        body = self._request("GET", uri)
        if body is None:
            raise TransportError("GET", self._absolute(uri), message="empty response body")
        return body

    def send(
        self, method: str, uri: str, payload: Any, content_type: str | None
    ) -> dict[str, Any] | None:
        method = method.upper()
        if method not in {"POST", "PUT"}:
            raise ValueError(f"send() only issues POST or PUT, not {method}")
        return self._request(
            method, uri, payload=payload, content_type=content_type or DEFAULT_CONTENT_TYPE
        )

    def remove(self, uri: str) -> dict[str, Any] | None:
        return self._request("DELETE", uri)

    def _absolute(self, uri: str) -> str:
        return str(httpx.URL(self.settings.base_url).join(str(uri)))

    def _request(
        self,
        method: str,
        uri: str,
        *,
        payload: Any = None,
        content_type: str | None = None,
    ) -> dict[str, Any] | None:
        if self._token is None:
            self.login()
        url = self._absolute(uri)
        headers = {AUTH_HEADER: self._token or ""}
        if content_type is not None:
            headers["Content-Type"] = content_type

        self.debug_log(f"{method} {url}")
        try:
            response = self._client.request(
                method,
                url,
                headers=headers,
                json=payload,
            )
        except httpx.RequestError as exc:
            raise TransportError(method, url, message=str(exc)) from exc
        self._trace(method, url, response)
        self.debug_log(f"{method} {url} -> {response.status_code}")

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise TransportError(
                method, url, response.status_code, _error_message(response)
            ) from exc

        if not response.content:
            return None
        try:
            body = response.json()
        except ValueError as exc:
            raise TransportError(
                method, url, response.status_code, "response body is not JSON"
            ) from exc
        if not isinstance(body, dict):
            raise TransportError(
                method, url, response.status_code, "response body is not a JSON object"
            )
        return body

    def _trace(self, method: str, url: str, response: httpx.Response) -> None:
        directory = self.settings.trace_directory
        if directory is None:
            return
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        sequence = next(self._trace_counter)
        trace_file = directory / f"{sequence:05d}-{method}-{response.status_code}.txt"
        content_type = response.headers.get("content-type", "")
        trace_file.write_text(
            f"{method} {url}\n"
            f"Status: {response.status_code}\n"
            f"Content-Type: {content_type}\n\n"
            f"{response.text}\n",
            encoding="utf-8",
        )
