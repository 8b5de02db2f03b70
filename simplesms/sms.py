"""SMS facade: the main entry point for sending and receiving messages.

The facade resolves the active driver from a :class:`DriverManager` and
adds the cross-cutting behaviour every driver shares: a default sender
and a pretend mode that routes sends to the log driver.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .errors import UnsupportedOperationError

if TYPE_CHECKING:
    from .drivers.base import Driver
    from .manager import DriverManager
    from .types import DeliveryResult, IncomingMessage, OutgoingMessage

logger = logging.getLogger(__name__)

PRETEND_DRIVER = "log"


class SMS:
    """Sends messages through the manager's active driver.

    Usage::

        from simplesms import SMS, DriverManager, OutgoingMessage

        sms = SMS(DriverManager({"driver": "twilio", "from": "+15550001111", "twilio": {...}}))
        result = sms.send(OutgoingMessage(to=["+15551234567"], body="Hello"))
        print(result.external_id)
    """

    def __init__(self, manager: DriverManager, *, driver: str | None = None) -> None:
        self.manager = manager
        self._driver_name = driver
        self._from = manager.config.from_
        self._pretending = manager.config.pretend

    @property
    def driver_name(self) -> str:
        if self._pretending:
            return PRETEND_DRIVER
        return self._driver_name or self.manager.get_default_driver()

    def driver(self, name: str) -> SMS:
        """Switch the driver this facade sends through."""
        self.manager.driver(name)
        self._driver_name = name
        return self

    def always_from(self, number: str | None) -> None:
        """Use ``number`` as the sender of messages that do not set one."""
        self._from = number

    def pretend(self, value: bool = True) -> None:
        """While pretending, every send goes to the log driver."""
        self._pretending = value

    def is_pretending(self) -> bool:
        return self._pretending

    # ── Outgoing ──────────────────────────────────────────────────

    def send(self, message: OutgoingMessage) -> DeliveryResult:
        """Send ``message`` through the active driver.

        Raises:
            TransportError: The HTTP call failed.
            VendorRejectedError: The vendor refused the message.
        """
        driver, message = self._prepare(message)
        return driver.send(message)

    async def send_async(self, message: OutgoingMessage) -> DeliveryResult:
        """Send a message asynchronously (runs the blocking send in a thread)."""
        driver, message = self._prepare(message)
        return await asyncio.to_thread(driver.send, message)

    # ── Inbound ───────────────────────────────────────────────────

    def receive(self, raw: Mapping[str, Any], **kwargs: Any) -> IncomingMessage:
        """Parse an inbound webhook payload. Extra keyword arguments go to the driver."""
        return self._inbound("receive")(raw, **kwargs)

    def check_messages(self, options: Mapping[str, Any] | None = None) -> list[IncomingMessage]:
        return self._inbound("check_messages")(options)

    def get_message(self, message_id: str) -> IncomingMessage:
        return self._inbound("get_message")(message_id)

    # ── Private helpers ───────────────────────────────────────────

    def _prepare(self, message: OutgoingMessage) -> tuple[Driver, OutgoingMessage]:
        if message.from_ is None and self._from:
            message = message.with_from(self._from)
        driver = self.manager.driver(self.driver_name)
        logger.debug("Sending SMS to %d recipient(s) via %s", len(message.to), self.driver_name)
        return driver, message

    def _inbound(self, operation: str) -> Any:
        # Pretend mode only diverts sends; inbound calls reach the configured driver.
        driver = self.manager.driver(self._driver_name or self.manager.get_default_driver())
        method = getattr(driver, operation, None)
        if method is None:
            raise UnsupportedOperationError(f"{type(driver).__name__} does not support {operation}")
        return method
