"""Flowroute SMS driver (Messaging API v2)."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from simplesms.errors import MisconfiguredDriverError, VendorRejectedError
from simplesms.request import BodyEncoding, PreparedRequest, RequestBuilder, dispatch, parse_json
from simplesms.types import DeliveryResult, DeliveryStatus, FlowrouteConfig, IncomingMessage, OutgoingMessage

logger = logging.getLogger(__name__)

FLOWROUTE_API_BASE = "https://api.flowroute.com/v2"

_HEADERS = {"Content-Type": "application/vnd.api+json"}


class FlowrouteSMS:
    """Sends SMS through Flowroute, one request per recipient."""

    def __init__(self, client: httpx.Client, config: FlowrouteConfig) -> None:
        self._client = client
        self._auth = (config.access_key, config.secret_key)
        self._requests = RequestBuilder(FLOWROUTE_API_BASE)

    def send(self, message: OutgoingMessage) -> DeliveryResult:
        text = message.compose_message()
        result: DeliveryResult | None = None

        for to in message.to:
            data = {"to": to, "from": message.from_, "body": text}
            request = self._requests.copy().build_call("/messages").build_body(data)
            body = self._call(request.prepare("POST", encoding=BodyEncoding.JSON, headers=_HEADERS, auth=self._auth))

            external_id = (body.get("data") or {}).get("id")
            logger.info("SMS sent via Flowroute to %s, id=%s", to, external_id)
            result = DeliveryResult.ok(status=DeliveryStatus.QUEUED, external_id=external_id, raw=body)

        assert result is not None  # guaranteed by non-empty message.to
        return result

    def receive(self, raw: Mapping[str, Any]) -> IncomingMessage:
        """Parse an inbound-message callback (JSON:API or flat form)."""
        return _process_receive(raw)

    def get_message(self, message_id: str) -> IncomingMessage:
        request = self._requests.copy().build_call(f"/messages/{message_id}")
        return _process_receive(self._call(request.prepare("GET", encoding=BodyEncoding.QUERY, auth=self._auth)))

    def _call(self, request: PreparedRequest) -> dict[str, Any]:
        body = parse_json(dispatch(self._client, request, vendor="Flowroute"), vendor="Flowroute")
        if not isinstance(body, dict):
            return {}
        errors = body.get("errors")
        if errors:
            first = errors[0] if isinstance(errors, list) else errors
            if isinstance(first, Mapping):
                code = str(first["status"]) if first.get("status") is not None else None
                error = first.get("detail") or first.get("title") or "Unknown Flowroute error"
            else:
                code, error = None, str(first)
            logger.error("Flowroute API error: [%s] %s", code, error)
            if code in {"401", "403"}:
                raise MisconfiguredDriverError("Flowroute", error, code=code)
            raise VendorRejectedError("Flowroute", error, code=code)
        return body


def _process_receive(raw: Mapping[str, Any]) -> IncomingMessage:
    data = raw.get("data")
    if isinstance(data, Mapping):
        attributes = data.get("attributes") or {}
        return IncomingMessage(
            raw=dict(raw),
            id=data.get("id"),
            from_=attributes.get("from"),
            to=attributes.get("to"),
            message=attributes.get("body"),
        )
    return IncomingMessage(
        raw=dict(raw),
        id=raw.get("id"),
        from_=raw.get("from"),
        to=raw.get("to"),
        message=raw.get("body"),
    )
