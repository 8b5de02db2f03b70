"""Twilio SMS driver."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from functools import lru_cache
from typing import Any, NoReturn

import requests
from twilio.base.exceptions import TwilioRestException  # type: ignore[import-untyped]
from twilio.http.http_client import TwilioHttpClient  # type: ignore[import-untyped]
from twilio.request_validator import RequestValidator  # type: ignore[import-untyped]
from twilio.rest import Client  # type: ignore[import-untyped]
from twilio.twiml.messaging_response import MessagingResponse  # type: ignore[import-untyped]

from simplesms.errors import InvalidRequestError, MisconfiguredDriverError, TransportError, VendorRejectedError
from simplesms.types import DeliveryResult, DeliveryStatus, IncomingMessage, OutgoingMessage, TwilioSMSConfig

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_PAGE_SIZE = 50

# 20003: authentication failed.
_AUTH_ERROR_CODES = {20003}


@lru_cache(maxsize=1)
def empty_messaging_response_xml() -> str:
    """Return the canonical empty Twilio MessagingResponse payload as XML.

    Used by webhook handlers to acknowledge receipt without sending a reply.
    """
    return str(MessagingResponse())


class TwilioSMS:
    """Sends SMS and MMS via the Twilio REST API, one message per recipient.

    With ``verify`` enabled, :meth:`receive` checks the ``X-Twilio-Signature``
    of inbound webhooks against the URL returned by ``request_url``.
    """

    def __init__(
        self,
        config: TwilioSMSConfig,
        *,
        request_url: Callable[[], str] | None = None,
    ) -> None:
        self._config = config
        self._request_url = request_url
        http_client = TwilioHttpClient(timeout=DEFAULT_TIMEOUT_SECONDS)
        self._client = Client(config.account_sid, config.auth_token, http_client=http_client)
        self._validator = RequestValidator(config.auth_token)

    # ── Public API ────────────────────────────────────────────────

    def send(self, message: OutgoingMessage) -> DeliveryResult:
        body = message.compose_message()
        result: DeliveryResult | None = None

        for to in message.to:
            params: dict[str, Any] = {"to": to, "from_": message.from_, "body": body}
            if message.media_urls:
                params["media_url"] = list(message.media_urls)
            result = self._create_message(params)

        assert result is not None  # guaranteed by non-empty message.to
        return result

    def receive(
        self,
        raw: Mapping[str, Any],
        *,
        signature: str | None = None,
        url: str | None = None,
    ) -> IncomingMessage:
        """Parse an inbound-message webhook.

        Raises:
            InvalidRequestError: If verification is enabled and the signature
                does not match.
        """
        if self._config.verify:
            self._validate(raw, signature=signature, url=url)

        media_count = int(raw.get("NumMedia") or 0)
        media_urls = tuple(raw[f"MediaUrl{i}"] for i in range(media_count) if f"MediaUrl{i}" in raw)
        return IncomingMessage(
            raw=dict(raw),
            id=raw.get("MessageSid"),
            from_=raw.get("From"),
            to=raw.get("To"),
            message=raw.get("Body"),
            media_urls=media_urls,
        )

    def check_messages(self, options: Mapping[str, Any] | None = None) -> list[IncomingMessage]:
        """List messages; ``options`` are passed to ``messages.list`` (``to``, ``from_``, ``date_sent``...)."""
        params = dict(options or {})
        params.setdefault("limit", DEFAULT_PAGE_SIZE)
        try:
            messages = self._client.messages.list(**params)
        except TwilioRestException as exc:
            _raise_rest_error(exc)
        except requests.RequestException as exc:
            raise TransportError(f"Unable to reach Twilio API: {exc}") from exc
        return [_process_receive(msg) for msg in messages]

    def get_message(self, message_id: str) -> IncomingMessage:
        try:
            msg = self._client.messages(message_id).fetch()
        except TwilioRestException as exc:
            _raise_rest_error(exc)
        except requests.RequestException as exc:
            raise TransportError(f"Unable to reach Twilio API: {exc}") from exc
        return _process_receive(msg)

    # ── Private helpers ───────────────────────────────────────────

    def _validate(self, raw: Mapping[str, Any], *, signature: str | None, url: str | None) -> None:
        if url is None and self._request_url is not None:
            url = self._request_url()
        if not url or not signature or not self._validator.validate(url, dict(raw), signature):
            logger.warning("Rejected Twilio webhook with invalid signature for %s", url)
            raise InvalidRequestError("Twilio request signature is invalid")

    def _create_message(self, params: dict[str, Any]) -> DeliveryResult:
        try:
            msg = self._client.messages.create(**params)
        except TwilioRestException as exc:
            _raise_rest_error(exc)
        except requests.RequestException as exc:
            logger.error("Twilio SMS send failed: %s", exc)
            raise TransportError(f"Unable to reach Twilio API: {exc}") from exc

        status = _map_twilio_status(getattr(msg, "status", None))
        error_code = getattr(msg, "error_code", None)
        if status == DeliveryStatus.FAILED:
            error = getattr(msg, "error_message", None) or "Twilio reported the message as failed"
            logger.error("Twilio SMS API error: code=%s msg=%s", error_code, error)
            raise VendorRejectedError("Twilio", error, code=str(error_code) if error_code else None)

        logger.info("SMS sent via Twilio to %s, sid=%s", params["to"], getattr(msg, "sid", None))
        return DeliveryResult(status=status, external_id=getattr(msg, "sid", None), raw=msg)


def _raise_rest_error(exc: TwilioRestException) -> NoReturn:
    logger.error("Twilio SMS API error: status=%s code=%s msg=%s", exc.status, exc.code, exc.msg)
    if exc.status is not None and exc.status >= 500:
        raise TransportError(
            f"Unable to request from Twilio API. HTTP Error: {exc.status}",
            status_code=exc.status,
        ) from exc
    code = str(exc.code) if exc.code else None
    if exc.code in _AUTH_ERROR_CODES:
        raise MisconfiguredDriverError("Twilio", str(exc.msg), code=code) from exc
    raise VendorRejectedError("Twilio", str(exc.msg), code=code) from exc


def _process_receive(msg: Any) -> IncomingMessage:
    return IncomingMessage(
        raw=msg,
        id=getattr(msg, "sid", None),
        from_=getattr(msg, "from_", None),
        to=getattr(msg, "to", None),
        message=getattr(msg, "body", None),
    )


def _map_twilio_status(twilio_status: str | None) -> DeliveryStatus:
    """Map a Twilio message status string to our DeliveryStatus enum."""
    mapping: dict[str, DeliveryStatus] = {
        "queued": DeliveryStatus.QUEUED,
        "sent": DeliveryStatus.SENT,
        "delivered": DeliveryStatus.DELIVERED,
        "read": DeliveryStatus.DELIVERED,
        "failed": DeliveryStatus.FAILED,
        "undelivered": DeliveryStatus.UNDELIVERED,
        "accepted": DeliveryStatus.QUEUED,
        "sending": DeliveryStatus.QUEUED,
        "receiving": DeliveryStatus.QUEUED,
        "received": DeliveryStatus.DELIVERED,
        "scheduled": DeliveryStatus.QUEUED,
        "canceled": DeliveryStatus.FAILED,
    }
    if not twilio_status:
        # Default: if we got a SID back but no status, treat as queued.
        return DeliveryStatus.QUEUED

    normalized_status = twilio_status.lower()
    if normalized_status in mapping:
        return mapping[normalized_status]

    logger.warning("Unknown Twilio message status received: %s", twilio_status)
    return DeliveryStatus.QUEUED
