"""Request building and dispatch shared by the HTTP drivers.

A driver owns one :class:`RequestBuilder` carrying the fields it needs on
every call (usually credentials). Each operation copies it, adds the call
path and body, and freezes the result into a :class:`PreparedRequest`
that :func:`dispatch` sends through the injected ``httpx.Client``::

    request = (
        self._requests.copy()
        .build_call("/sms/json")
        .build_body({"to": number, "text": text})
        .prepare("POST", encoding=BodyEncoding.FORM)
    )
    response = dispatch(self._client, request, vendor="Nexmo")
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

import httpx

from .errors import TransportError

logger = logging.getLogger(__name__)


class BodyEncoding(str, Enum):
    """How the request body is put on the wire."""

    JSON = "json"
    FORM = "form"
    QUERY = "query"


@dataclass(frozen=True, slots=True)
class PreparedRequest:
    """An immutable description of one HTTP call."""

    method: str
    url: str
    body: Mapping[str, Any] = field(default_factory=dict)
    encoding: BodyEncoding = BodyEncoding.FORM
    headers: Mapping[str, str] = field(default_factory=dict)
    auth: tuple[str, str] | None = field(default=None, repr=False)


class RequestBuilder:
    """Accumulates the URL and body of a request to a fixed API base."""

    def __init__(self, api_base: str, body: Mapping[str, Any] | None = None) -> None:
        self.api_base = api_base
        self.call_path = ""
        self._body: dict[str, Any] = dict(body or {})

    def build_call(self, path: str) -> RequestBuilder:
        """Set the path appended to the API base for the next request."""
        self.call_path = path
        return self

    def build_url(self) -> str:
        # Plain concatenation: callers supply the leading separator.
        return self.api_base + self.call_path

    def build_body(self, fields: Mapping[str, Any]) -> RequestBuilder:
        """Shallow-merge ``fields`` into the body; overlapping keys are overwritten."""
        self._body.update(fields)
        return self

    def get_body(self) -> dict[str, Any]:
        return dict(self._body)

    def copy(self) -> RequestBuilder:
        clone = RequestBuilder(self.api_base, self._body)
        clone.call_path = self.call_path
        return clone

    def prepare(
        self,
        method: str = "POST",
        *,
        encoding: BodyEncoding = BodyEncoding.FORM,
        headers: Mapping[str, str] | None = None,
        auth: tuple[str, str] | None = None,
    ) -> PreparedRequest:
        """Freeze the current URL and body into a :class:`PreparedRequest`."""
        return PreparedRequest(
            method=method.upper(),
            url=self.build_url(),
            body=MappingProxyType(self.get_body()),
            encoding=encoding,
            headers=MappingProxyType(dict(headers or {})),
            auth=auth,
        )


def dispatch(client: httpx.Client, request: PreparedRequest, *, vendor: str) -> httpx.Response:
    """Send ``request`` and return the response.

    Raises:
        TransportError: On network failure or a non-2xx status.
    """
    kwargs: dict[str, Any] = {"headers": dict(request.headers)}
    if request.auth is not None:
        kwargs["auth"] = request.auth
    body = dict(request.body)
    if body:
        if request.encoding is BodyEncoding.JSON:
            kwargs["json"] = body
        elif request.encoding is BodyEncoding.FORM:
            kwargs["data"] = body
        else:
            kwargs["params"] = body

    try:
        response = client.request(request.method, request.url, **kwargs)
    except httpx.HTTPError as exc:
        logger.error("%s request to %s failed: %s", vendor, request.url, exc)
        raise TransportError(f"Unable to reach {vendor} API: {exc}") from exc

    if not response.is_success:
        logger.error("%s returned HTTP %s for %s", vendor, response.status_code, request.url)
        raise TransportError(
            f"Unable to request from {vendor} API. HTTP Error: {response.status_code}",
            status_code=response.status_code,
        )
    return response


def parse_json(response: httpx.Response, *, vendor: str) -> Any:
    """Decode a JSON response body."""
    try:
        return response.json()
    except ValueError as exc:
        raise TransportError(
            f"{vendor} returned invalid JSON",
            status_code=response.status_code,
        ) from exc
