"""SendGrid mail provider."""

from __future__ import annotations

import logging

from python_http_client.exceptions import HTTPError  # type: ignore[import-untyped]
from sendgrid import SendGridAPIClient  # type: ignore[import-untyped]
from sendgrid.helpers.mail import Mail  # type: ignore[import-untyped]

from simplesms.types import DeliveryResult, DeliveryStatus, EmailMessage, SendGridConfig

logger = logging.getLogger(__name__)


class SendGridProvider:
    """Delivers gateway mail through the SendGrid v3 Mail Send API.

    The SendGrid client raises on 4xx/5xx answers; those come back as a
    failed result carrying the HTTP status as ``error_code``.
    """

    def __init__(self, config: SendGridConfig) -> None:
        self._client = SendGridAPIClient(config.api_key)

    def send(self, message: EmailMessage) -> DeliveryResult:
        try:
            response = self._client.send(_build_mail(message))
        except HTTPError as exc:
            logger.error("SendGrid rejected mail to %s. Status: %s, Body: %s", message.to, exc.status_code, exc.body)
            return DeliveryResult.fail(
                f"SendGrid returned status {exc.status_code}",
                error_code=str(exc.status_code),
            )
        except Exception as exc:
            logger.exception("Unexpected error sending mail via SendGrid")
            return DeliveryResult.fail(str(exc))

        if not 200 <= response.status_code < 300:
            logger.error("SendGrid send failed. Status: %s, Body: %s", response.status_code, response.body)
            return DeliveryResult.fail(
                f"SendGrid returned status {response.status_code}",
                error_code=str(response.status_code),
            )

        message_id = (response.headers or {}).get("X-Message-Id")
        logger.info("Mail sent via SendGrid to %s, id=%s", message.to, message_id)
        return DeliveryResult.ok(status=DeliveryStatus.SENT, external_id=message_id)


def _build_mail(message: EmailMessage) -> Mail:
    sender = (message.from_email, message.from_name) if message.from_name else message.from_email
    return Mail(
        from_email=sender,
        to_emails=message.to,
        subject=message.subject,
        plain_text_content=message.text_content,
        html_content=message.html_content,
    )
