"""IPPanel SMS driver."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

import httpx

from simplesms.errors import MisconfiguredDriverError, VendorRejectedError
from simplesms.request import BodyEncoding, RequestBuilder, dispatch, parse_json
from simplesms.types import DeliveryResult, DeliveryStatus, IncomingMessage, IPPanelConfig, OutgoingMessage

logger = logging.getLogger(__name__)

IPPANEL_API_BASE = "https://api2.ippanel.com/api/v1"
SEND_PATH = "/sms/send/webservice/single"
PATTERN_PATH = "/sms/pattern/normal/send"
PATTERN_PREFIX = "pid="

_AUTH_ERROR_CODES = {"401", "403"}


class IPPanelSMS:
    """Sends SMS through the IPPanel REST API.

    A body starting with ``pid=`` is sent as a pattern message: each line is
    read as ``name=value``, ``pid`` selects the pattern and the other pairs
    fill its variables::

        OutgoingMessage(to="+989121234567", body="pid=abc123\\nname=Sara\\ncode=4411")
    """

    def __init__(self, client: httpx.Client, config: IPPanelConfig) -> None:
        self._client = client
        self._config = config
        self._requests = RequestBuilder(IPPANEL_API_BASE)

    # ── Public API ────────────────────────────────────────────────

    def send(self, message: OutgoingMessage) -> DeliveryResult:
        data: dict[str, Any] = {
            "sender": message.from_,
            # IPPanel takes the whole recipient list as one comma-joined entry.
            "recipient": [",".join(message.to)],
            "message": message.compose_message(),
        }
        data = parse_pattern(data)
        path = PATTERN_PATH if "code" in data else SEND_PATH

        request = self._requests.copy().build_call(path).build_body(data)
        response = dispatch(
            self._client,
            request.prepare("POST", encoding=BodyEncoding.JSON, headers=self._headers()),
            vendor="IPPanel",
        )
        body = parse_json(response, vendor="IPPanel")
        if _has_error(body):
            _handle_error(body)

        external_id = _extract_message_id(body)
        logger.info("SMS sent via IPPanel, message_id=%s", external_id)
        return DeliveryResult.ok(status=DeliveryStatus.QUEUED, external_id=external_id, raw=body)

    def receive(self, raw: Mapping[str, Any]) -> IncomingMessage:
        """Parse an inbound message pushed by IPPanel."""
        return IncomingMessage(
            raw=dict(raw),
            id=_str_or_none(raw.get("messageId")),
            from_=raw.get("msisdn"),
            to=raw.get("to"),
            message=raw.get("text"),
        )

    def check_messages(self, options: Mapping[str, Any] | None = None) -> list[IncomingMessage]:
        """List messages on the account; ``options`` become query parameters."""
        request = self._requests.copy().build_call("/sms/message/all").build_body(options or {})
        body = self._get(request)
        items = body.get("items")
        if items is None and isinstance(body.get("data"), Mapping):
            items = body["data"].get("items")
        return [_process_receive(item) for item in items or []]

    def get_message(self, message_id: str) -> IncomingMessage:
        request = self._requests.copy().build_call(f"/sms/message/show-recipient/message-id/{message_id}")
        body = self._get(request)
        data = body.get("data")
        return _process_receive(data if isinstance(data, Mapping) else body)

    # ── HTTP helpers ──────────────────────────────────────────────

    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self._config.api_key,
            "accept": "application/json",
            "Content-type": "application/json",
        }

    def _get(self, request: RequestBuilder) -> dict[str, Any]:
        response = dispatch(
            self._client,
            request.prepare("GET", encoding=BodyEncoding.QUERY, headers=self._headers()),
            vendor="IPPanel",
        )
        body = parse_json(response, vendor="IPPanel")
        if _has_error(body):
            _handle_error(body)
        return body if isinstance(body, dict) else {}


# ── Helpers ───────────────────────────────────────────────────────


def parse_pattern(data: dict[str, Any]) -> dict[str, Any]:
    """Rewrite a ``pid=`` body into IPPanel's pattern request shape.

    Returns ``data`` unchanged when the message is free text.
    """
    message = data.get("message") or ""
    if message[:4].lower() != PATTERN_PREFIX:
        return data

    variables: dict[str, str] = {}
    for line in re.split(r"\r\n|\n|\r", message):
        key, sep, value = line.partition("=")
        if sep:
            variables[key.strip()] = value

    code_key = next(key for key in variables if key.lower() == "pid")
    recipients = data.get("recipient") or []

    parsed = {key: value for key, value in data.items() if key not in ("message", "recipient")}
    parsed["code"] = variables.pop(code_key)
    parsed["recipient"] = recipients[0] if recipients else ""
    parsed["variable"] = variables
    return parsed


def _has_error(body: Any) -> bool:
    if not isinstance(body, Mapping) or "status" not in body:
        return False
    return str(body["status"]).upper() != "OK"


def _handle_error(body: Mapping[str, Any]) -> None:
    code = _str_or_none(body.get("code"))
    error = body.get("error_message") or body.get("message")
    if not error:
        error = f"An error occurred. IPPanel status code: {code}"
    logger.error("IPPanel API error: [%s] %s", code, error)
    if code in _AUTH_ERROR_CODES:
        raise MisconfiguredDriverError("IPPanel", str(error), code=code)
    raise VendorRejectedError("IPPanel", str(error), code=code)


def _extract_message_id(body: Any) -> str | None:
    if not isinstance(body, Mapping):
        return None
    data = body.get("data")
    if isinstance(data, Mapping):
        return _str_or_none(data.get("message_id") or data.get("bulk_id"))
    return None


def _process_receive(item: Mapping[str, Any]) -> IncomingMessage:
    # Listing entries only reliably carry an id and the text; the rest stays in raw.
    return IncomingMessage(
        raw=dict(item),
        id=_str_or_none(item.get("message_id")),
        message=item.get("message"),
    )


def _str_or_none(value: Any) -> str | None:
    return str(value) if value is not None and value != "" else None
