"""Nexmo (Vonage SMS API) driver."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from simplesms.errors import MisconfiguredDriverError, VendorRejectedError
from simplesms.request import BodyEncoding, RequestBuilder, dispatch, parse_json
from simplesms.types import DeliveryResult, DeliveryStatus, IncomingMessage, NexmoConfig, OutgoingMessage

logger = logging.getLogger(__name__)

NEXMO_API_BASE = "https://rest.nexmo.com"

# Status 2 is "missing parameters", 4 is "invalid credentials".
_AUTH_ERROR_STATUSES = {"2", "4"}

_GSM_CHARSET = frozenset(
    "@£$¥èéùìòÇ\nØø\rÅåΔ_ΦΓΛΩΠΨΣΘΞÆæßÉ !\"#¤%&'()*+,-./0123456789:;<=>?"
    "¡ABCDEFGHIJKLMNOPQRSTUVWXYZÄÖÑÜ§¿abcdefghijklmnopqrstuvwxyzäöñüà"
    "^{}\\[~]|€\f"
)


class NexmoSMS:
    """Sends SMS through the Nexmo REST API, one request per recipient."""

    def __init__(self, client: httpx.Client, config: NexmoConfig) -> None:
        self._client = client
        self._requests = RequestBuilder(
            NEXMO_API_BASE,
            {"api_key": config.api_key, "api_secret": config.api_secret},
        )

    def send(self, message: OutgoingMessage) -> DeliveryResult:
        text = message.compose_message()
        result: DeliveryResult | None = None

        for to in message.to:
            data: dict[str, Any] = {"from": message.from_, "to": to, "text": text}
            if not is_gsm(text):
                data["type"] = "unicode"

            request = self._requests.copy().build_call("/sms/json").build_body(data)
            response = dispatch(self._client, request.prepare("POST", encoding=BodyEncoding.FORM), vendor="Nexmo")
            body = parse_json(response, vendor="Nexmo")
            if _has_error(body):
                _handle_error(body)

            messages = body.get("messages") if isinstance(body, Mapping) else None
            if not messages:
                logger.error("Nexmo API error: no message status in reply for %s", to)
                raise VendorRejectedError("Nexmo", "Nexmo returned no message status")

            external_id = messages[0].get("message-id")
            logger.info("SMS sent via Nexmo to %s, message-id=%s", to, external_id)
            result = DeliveryResult.ok(status=DeliveryStatus.SENT, external_id=external_id, raw=body)

        assert result is not None  # guaranteed by non-empty message.to
        return result

    def receive(self, raw: Mapping[str, Any]) -> IncomingMessage:
        """Parse an inbound-message webhook."""
        return IncomingMessage(
            raw=dict(raw),
            id=raw.get("messageId"),
            from_=raw.get("msisdn"),
            to=raw.get("to"),
            message=raw.get("text"),
        )

    def check_messages(self, options: Mapping[str, Any] | None = None) -> list[IncomingMessage]:
        """Search messages; ``options`` are passed to ``/search/messages``."""
        request = self._requests.copy().build_call("/search/messages").build_body(options or {})
        body = self._get(request)
        return [_process_receive(item) for item in body.get("items", [])]

    def get_message(self, message_id: str) -> IncomingMessage:
        request = self._requests.copy().build_call("/search/message").build_body({"id": message_id})
        return _process_receive(self._get(request))

    def _get(self, request: RequestBuilder) -> dict[str, Any]:
        response = dispatch(self._client, request.prepare("GET", encoding=BodyEncoding.QUERY), vendor="Nexmo")
        body = parse_json(response, vendor="Nexmo")
        if isinstance(body, Mapping) and body.get("error-code") not in (None, "200"):
            code = str(body["error-code"])
            error = body.get("error-code-label") or f"Nexmo search failed with code {code}"
            logger.error("Nexmo API error: [%s] %s", code, error)
            raise VendorRejectedError("Nexmo", error, code=code)
        return body if isinstance(body, dict) else {}


def is_gsm(text: str) -> bool:
    """True if ``text`` fits the GSM 03.38 alphabet."""
    return all(char in _GSM_CHARSET for char in text)


def _has_error(body: Any) -> bool:
    if not isinstance(body, Mapping):
        return False
    messages = body.get("messages")
    if not messages:
        return False
    return str(messages[0].get("status")) != "0"


def _handle_error(body: Mapping[str, Any]) -> None:
    first = body["messages"][0]
    status = str(first.get("status"))
    error = first.get("error-text") or f"An error occurred. Nexmo status code: {status}"
    logger.error("Nexmo API error: [%s] %s", status, error)
    if status in _AUTH_ERROR_STATUSES:
        raise MisconfiguredDriverError("Nexmo", error, code=status)
    raise VendorRejectedError("Nexmo", error, code=status)


def _process_receive(raw: Mapping[str, Any]) -> IncomingMessage:
    return IncomingMessage(
        raw=dict(raw),
        id=raw.get("message-id"),
        from_=raw.get("from"),
        to=raw.get("to"),
        message=raw.get("body"),
    )
