"""JustSend SMS driver."""

from __future__ import annotations

import logging

import httpx

from simplesms.errors import MisconfiguredDriverError, VendorRejectedError
from simplesms.request import BodyEncoding, RequestBuilder, dispatch, parse_json
from simplesms.types import DeliveryResult, DeliveryStatus, JustSendConfig, OutgoingMessage

logger = logging.getLogger(__name__)

JUSTSEND_API_BASE = "https://justsend.pl/api/rest"

# ECO messages go out from a shared number; PRO carries the configured sender name.
ECO_VARIANT = "ECO"
PRO_VARIANT = "PRO"

_AUTH_ERROR_CODES = {"BAD_CREDENTIALS", "UNAUTHORIZED", "APP_KEY_INVALID"}


class JustSendSMS:
    """Sends SMS through JustSend, one request per recipient."""

    def __init__(self, client: httpx.Client, config: JustSendConfig) -> None:
        self._client = client
        self._headers = {"App-Key": config.api_key}
        self._requests = RequestBuilder(JUSTSEND_API_BASE).build_call("/message/send")

    def send(self, message: OutgoingMessage) -> DeliveryResult:
        text = message.compose_message()
        variant = PRO_VARIANT if message.from_ else ECO_VARIANT
        result: DeliveryResult | None = None

        for to in message.to:
            data = {
                "sender": message.from_,
                "msisdn": to,
                "content": text,
                "bulkVariant": variant,
            }
            request = self._requests.copy().build_body(data)
            response = dispatch(
                self._client,
                request.prepare("POST", encoding=BodyEncoding.JSON, headers=self._headers),
                vendor="JustSend",
            )
            body = parse_json(response, vendor="JustSend")
            code = str(body.get("responseCode", "")) if isinstance(body, dict) else ""
            if code != "OK":
                error = (body.get("message") if isinstance(body, dict) else None) or "Unknown JustSend error"
                logger.error("JustSend API error: [%s] %s", code, error)
                if code in _AUTH_ERROR_CODES:
                    raise MisconfiguredDriverError("JustSend", error, code=code)
                raise VendorRejectedError("JustSend", error, code=code or None)

            logger.info("SMS sent via JustSend to %s", to)
            data_field = body.get("data")
            external_id = str(data_field) if isinstance(data_field, (str, int)) else None
            result = DeliveryResult.ok(status=DeliveryStatus.SENT, external_id=external_id, raw=body)

        assert result is not None  # guaranteed by non-empty message.to
        return result
