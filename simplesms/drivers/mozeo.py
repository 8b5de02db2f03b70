"""Mozeo SMS driver."""

from __future__ import annotations

import logging

import httpx

from simplesms.request import BodyEncoding, RequestBuilder, dispatch
from simplesms.types import DeliveryResult, DeliveryStatus, MozeoConfig, OutgoingMessage

logger = logging.getLogger(__name__)

MOZEO_API_BASE = "https://www.mozeo.com"
SEND_PATH = "/mozeo/customer/sendtxt.php"


class MozeoSMS:
    """Sends SMS through Mozeo, one form post per recipient.

    Mozeo answers with plain text and no machine-readable status, so only
    transport failures are detected.
    """

    def __init__(self, client: httpx.Client, config: MozeoConfig) -> None:
        self._client = client
        self._requests = RequestBuilder(
            MOZEO_API_BASE,
            {
                "companykey": config.company_key,
                "username": config.username,
                "password": config.password,
            },
        ).build_call(SEND_PATH)

    def send(self, message: OutgoingMessage) -> DeliveryResult:
        text = message.compose_message()
        response: httpx.Response | None = None

        for to in message.to:
            request = self._requests.copy().build_body({"to": to, "messagebody": text})
            response = dispatch(self._client, request.prepare("POST", encoding=BodyEncoding.FORM), vendor="Mozeo")
            logger.info("SMS sent via Mozeo to %s", to)

        assert response is not None  # guaranteed by non-empty message.to
        return DeliveryResult.ok(status=DeliveryStatus.SENT, raw=response.text)
