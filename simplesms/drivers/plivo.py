"""Plivo SMS driver."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from simplesms.errors import VendorRejectedError
from simplesms.request import BodyEncoding, PreparedRequest, RequestBuilder, dispatch, parse_json
from simplesms.types import DeliveryResult, DeliveryStatus, IncomingMessage, OutgoingMessage, PlivoConfig

logger = logging.getLogger(__name__)

PLIVO_API_BASE = "https://api.plivo.com/v1/Account"


class PlivoSMS:
    """Sends SMS and MMS through the Plivo Message API.

    Plivo accepts every recipient in one request, joined with ``<``.
    """

    def __init__(self, client: httpx.Client, config: PlivoConfig) -> None:
        self._client = client
        self._auth = (config.auth_id, config.auth_token)
        self._requests = RequestBuilder(f"{PLIVO_API_BASE}/{config.auth_id}")

    def send(self, message: OutgoingMessage) -> DeliveryResult:
        data: dict[str, Any] = {
            "src": message.from_,
            "dst": "<".join(message.to),
            "text": message.compose_message(),
        }
        if message.media_urls:
            data["type"] = "mms"
            data["media_urls"] = list(message.media_urls)

        request = self._requests.copy().build_call("/Message/").build_body(data)
        body = self._call(request.prepare("POST", encoding=BodyEncoding.JSON, auth=self._auth))

        uuids = body.get("message_uuid") or []
        external_id = uuids[-1] if uuids else None
        logger.info("SMS queued via Plivo, message_uuid=%s", external_id)
        return DeliveryResult.ok(status=DeliveryStatus.QUEUED, external_id=external_id, raw=body)

    def receive(self, raw: Mapping[str, Any]) -> IncomingMessage:
        """Parse the parameters Plivo posts to a message URL."""
        return IncomingMessage(
            raw=dict(raw),
            id=raw.get("MessageUUID"),
            from_=raw.get("From"),
            to=raw.get("To"),
            message=raw.get("Text"),
        )

    def check_messages(self, options: Mapping[str, Any] | None = None) -> list[IncomingMessage]:
        request = self._requests.copy().build_call("/Message/").build_body(options or {})
        body = self._call(request.prepare("GET", encoding=BodyEncoding.QUERY, auth=self._auth))
        return [_process_receive(item) for item in body.get("objects", [])]

    def get_message(self, message_id: str) -> IncomingMessage:
        request = self._requests.copy().build_call(f"/Message/{message_id}/")
        return _process_receive(self._call(request.prepare("GET", encoding=BodyEncoding.QUERY, auth=self._auth)))

    def _call(self, request: PreparedRequest) -> dict[str, Any]:
        response = dispatch(self._client, request, vendor="Plivo")
        body = parse_json(response, vendor="Plivo")
        if not isinstance(body, dict):
            return {}
        if body.get("error"):
            error = body["error"]
            logger.error("Plivo API error: %s", error)
            raise VendorRejectedError("Plivo", str(error))
        return body


def _process_receive(raw: Mapping[str, Any]) -> IncomingMessage:
    return IncomingMessage(
        raw=dict(raw),
        id=raw.get("message_uuid"),
        from_=raw.get("from_number"),
        to=raw.get("to_number"),
        message=raw.get("message_text") or raw.get("text"),
    )
