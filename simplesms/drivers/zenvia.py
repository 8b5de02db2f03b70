"""Zenvia SMS driver."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from simplesms.errors import VendorRejectedError
from simplesms.request import BodyEncoding, PreparedRequest, RequestBuilder, dispatch, parse_json
from simplesms.types import DeliveryResult, DeliveryStatus, IncomingMessage, OutgoingMessage, ZenviaConfig

logger = logging.getLogger(__name__)

ZENVIA_API_BASE = "https://api-rest.zenvia360.com.br/services"

_HEADERS = {"Accept": "application/json"}

# Ok, scheduled, sent, delivered. Everything from 04 up is a blocked or failed message.
_ACCEPTED_STATUSES = {"00", "01", "02", "03"}


class ZenviaSMS:
    """Sends SMS through Zenvia.

    A single recipient goes to ``/send-sms``; several go in one
    ``/send-sms-multiple`` request.
    """

    def __init__(self, client: httpx.Client, config: ZenviaConfig) -> None:
        self._client = client
        self._auth = (config.account_key, config.passcode)
        self._callback_option = config.callback_option or "NONE"
        self._requests = RequestBuilder(ZENVIA_API_BASE)

    def send(self, message: OutgoingMessage) -> DeliveryResult:
        text = message.compose_message()
        entries = [
            {
                "from": message.from_,
                "to": to,
                "msg": text,
                "callbackOption": self._callback_option,
            }
            for to in message.to
        ]

        request = self._requests.copy()
        if len(entries) == 1:
            request.build_call("/send-sms").build_body({"sendSmsRequest": entries[0]})
        else:
            request.build_call("/send-sms-multiple").build_body(
                {"sendSmsMultiRequest": {"sendSmsRequestList": entries}}
            )

        body = self._call(request.prepare("POST", encoding=BodyEncoding.JSON, headers=_HEADERS, auth=self._auth))
        if "sendSmsMultiResponse" in body:
            responses = body["sendSmsMultiResponse"].get("sendSmsResponseList") or []
        else:
            responses = [body.get("sendSmsResponse") or {}]
        for item in responses:
            _raise_for_status(item)

        logger.info("SMS sent via Zenvia to %d recipient(s)", len(entries))
        return DeliveryResult.ok(status=DeliveryStatus.SENT, raw=body)

    def receive(self, raw: Mapping[str, Any]) -> IncomingMessage:
        """Parse a ``callbackMoRequest`` pushed by Zenvia."""
        return _process_receive(raw.get("callbackMoRequest", raw), raw)

    def check_messages(self, options: Mapping[str, Any] | None = None) -> list[IncomingMessage]:
        """Fetch messages received since the last call to ``/received/list``."""
        request = self._requests.copy().build_call("/received/list").build_body(options or {})
        body = self._call(request.prepare("POST", encoding=BodyEncoding.JSON, headers=_HEADERS, auth=self._auth))
        received = body.get("receivedResponse") or {}
        _raise_for_status(received)
        return [_process_receive(item, item) for item in received.get("receivedMessages") or []]

    def _call(self, request: PreparedRequest) -> dict[str, Any]:
        body = parse_json(dispatch(self._client, request, vendor="Zenvia"), vendor="Zenvia")
        return body if isinstance(body, dict) else {}


def _raise_for_status(response: Mapping[str, Any]) -> None:
    if response.get("statusCode") is None:
        logger.error("Zenvia API error: reply carried no statusCode")
        raise VendorRejectedError("Zenvia", "Zenvia returned no message status")
    status = str(response["statusCode"])
    if status in _ACCEPTED_STATUSES:
        return
    error = response.get("detailDescription") or response.get("statusDescription") or "Unknown Zenvia error"
    code = str(response.get("detailCode") or status)
    logger.error("Zenvia API error: [%s] %s", code, error)
    raise VendorRejectedError("Zenvia", error, code=code)


def _process_receive(item: Mapping[str, Any], raw: Mapping[str, Any]) -> IncomingMessage:
    return IncomingMessage(
        raw=dict(raw),
        id=str(item["id"]) if item.get("id") is not None else None,
        from_=item.get("mobile"),
        to=item.get("shortCode") or item.get("shortcode"),
        message=item.get("body"),
    )
