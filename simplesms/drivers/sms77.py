"""SMS77 driver."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from simplesms.errors import MisconfiguredDriverError, VendorRejectedError
from simplesms.request import BodyEncoding, RequestBuilder, dispatch
from simplesms.types import DeliveryResult, DeliveryStatus, OutgoingMessage, SMS77Config

logger = logging.getLogger(__name__)

SMS77_API_BASE = "https://gateway.sms77.io/api"

SUCCESS_CODE = "100"

ERROR_MESSAGES: dict[str, str] = {
    "101": "Sending to at least one recipient failed",
    "201": "Sender is invalid",
    "202": "Recipient number is invalid",
    "301": "Parameter 'to' is not set",
    "305": "Parameter 'text' is invalid",
    "401": "Parameter 'text' is too long",
    "402": "Reload lock: this SMS has already been sent within the last 180 seconds",
    "403": "Daily limit for this recipient reached",
    "500": "Account has too little credit",
    "600": "Carrier delivery failed",
    "700": "Unknown error",
    "900": "Authentication failed, check user and api key",
    "902": "HTTP API disabled for this account",
    "903": "Server IP is wrong",
}

_AUTH_ERROR_CODES = {"900", "902", "903"}


class SMS77:
    """Sends SMS through the SMS77 HTTP API with a single GET request."""

    def __init__(self, client: httpx.Client, config: SMS77Config) -> None:
        self._client = client
        self._requests = RequestBuilder(
            SMS77_API_BASE,
            {"u": config.user, "p": config.api_key},
        ).build_call("/sms")
        self._debug = bool(config.debug)

    def send(self, message: OutgoingMessage) -> DeliveryResult:
        data: dict[str, Any] = {
            "to": ",".join(message.to),
            "text": message.compose_message(),
            "json": 1,
        }
        if message.from_:
            data["from"] = message.from_
        if self._debug:
            data["debug"] = 1

        request = self._requests.copy().build_body(data)
        response = dispatch(self._client, request.prepare("GET", encoding=BodyEncoding.QUERY), vendor="SMS77")

        body = _parse_body(response)
        code = str(body.get("success", "")) if isinstance(body, dict) else str(body)
        if code != SUCCESS_CODE:
            error = ERROR_MESSAGES.get(code, f"An error occurred. SMS77 status code: {code}")
            logger.error("SMS77 API error: [%s] %s", code, error)
            if code in _AUTH_ERROR_CODES:
                raise MisconfiguredDriverError("SMS77", error, code=code)
            raise VendorRejectedError("SMS77", error, code=code)

        external_id = None
        if isinstance(body, dict) and body.get("messages"):
            first_id = body["messages"][0].get("id")
            external_id = str(first_id) if first_id is not None else None
        logger.info("SMS sent via SMS77, id=%s", external_id)
        return DeliveryResult.ok(status=DeliveryStatus.SENT, external_id=external_id, raw=body)


def _parse_body(response: httpx.Response) -> Any:
    """SMS77 answers JSON when asked, a bare status code otherwise."""
    try:
        body = response.json()
    except ValueError:
        return response.text.strip()
    # A bare "100" is valid JSON too; keep it as the status string.
    return body if isinstance(body, dict) else response.text.strip()
