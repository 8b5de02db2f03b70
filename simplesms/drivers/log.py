"""Log driver: records outgoing messages through a logger instead of sending them."""

from __future__ import annotations

import logging

from simplesms.types import DeliveryResult, DeliveryStatus, OutgoingMessage


class LogSMS:
    """Writes each recipient and the composed body to ``logger``. No HTTP call is made."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(__name__)

    def send(self, message: OutgoingMessage) -> DeliveryResult:
        text = message.compose_message()
        for number in message.to:
            self._logger.info("Sending SMS message to: %s", number)
        self._logger.info("SMS message body: %s", text)
        return DeliveryResult.ok(status=DeliveryStatus.SENT)
