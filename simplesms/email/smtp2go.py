"""SMTP2GO mail provider."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from simplesms.types import DeliveryResult, DeliveryStatus, EmailMessage, Smtp2GoConfig

logger = logging.getLogger(__name__)

SMTP2GO_API_URL = "https://api.smtp2go.com/v3/email/send"
DEFAULT_TIMEOUT_SECONDS = 10.0


class Smtp2GoProvider:
    """Delivers gateway mail through the SMTP2GO REST API.

    Pass ``client`` to share an ``httpx.Client``; otherwise the provider
    opens its own and :meth:`close` releases it.
    """

    def __init__(self, config: Smtp2GoConfig, client: httpx.Client | None = None) -> None:
        self._api_key = config.api_key
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(timeout=DEFAULT_TIMEOUT_SECONDS)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> Smtp2GoProvider:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def send(self, message: EmailMessage) -> DeliveryResult:
        try:
            response = self._client.post(
                SMTP2GO_API_URL,
                json=_build_payload(message),
                headers={"X-Smtp2go-Api-Key": self._api_key},
            )
        except httpx.HTTPError as exc:
            logger.error("SMTP2GO request to %s failed: %s", SMTP2GO_API_URL, exc)
            return DeliveryResult.fail(str(exc))

        if not 200 <= response.status_code < 300:
            logger.error("SMTP2GO send failed. Status: %s, Body: %s", response.status_code, response.text)
            return DeliveryResult.fail(
                f"SMTP2GO returned status {response.status_code}",
                error_code=str(response.status_code),
            )

        data = _response_data(response)
        if data.get("failed"):
            failures = data.get("failures") or []
            error = ", ".join(str(f) for f in failures) or "SMTP2GO reported a failed recipient"
            logger.error("SMTP2GO refused mail to %s: %s", message.to, error)
            return DeliveryResult.fail(error)

        logger.info("Mail sent via SMTP2GO to %s, email_id=%s", message.to, data.get("email_id"))
        return DeliveryResult.ok(status=DeliveryStatus.SENT, external_id=data.get("email_id"))


def _build_payload(message: EmailMessage) -> dict[str, Any]:
    sender = f"{message.from_name} <{message.from_email}>" if message.from_name else message.from_email
    payload: dict[str, Any] = {
        "sender": sender,
        "to": [message.to],
        "subject": message.subject,
    }
    if message.text_content is not None:
        payload["text_body"] = message.text_content
    if message.html_content is not None:
        payload["html_body"] = message.html_content
    return payload


def _response_data(response: httpx.Response) -> dict[str, Any]:
    # SMTP2GO wraps the outcome in {"request_id": ..., "data": {...}}.
    try:
        body = response.json()
    except ValueError:
        return {}
    data = body.get("data") if isinstance(body, dict) else None
    return data if isinstance(data, dict) else {}
