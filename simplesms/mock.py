"""Mock SMS driver for testing.

Records every sent message and can be told to fail. Useful for unit
testing code that sends SMS without hitting a real vendor.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from .errors import SMSError, VendorRejectedError
from .types import DeliveryResult, DeliveryStatus, IncomingMessage, OutgoingMessage


@dataclass
class SentMessage:
    """Record of a message sent through the MockSMS driver."""

    message: OutgoingMessage
    result: DeliveryResult


class MockSMS:
    """Test driver that records messages in memory.

    Usage::

        driver = MockSMS()
        driver.send(OutgoingMessage(to="+15551234567", body="hi"))
        assert driver.sent[0].message.compose_message() == "hi"

    Make every send fail::

        driver = MockSMS(error=VendorRejectedError("Mock", "quota exceeded", code="29"))
    """

    def __init__(self, *, error: SMSError | None = None) -> None:
        self.error = error
        self.sent: list[SentMessage] = []

    def send(self, message: OutgoingMessage) -> DeliveryResult:
        if self.error is not None:
            raise self.error
        result = DeliveryResult.ok(
            status=DeliveryStatus.SENT,
            external_id=f"mock_{uuid.uuid4().hex[:12]}",
        )
        self.sent.append(SentMessage(message=message, result=result))
        return result

    def get_message(self, message_id: str) -> IncomingMessage:
        for record in self.sent:
            if record.result.external_id == message_id:
                return IncomingMessage(
                    raw=record.message,
                    id=message_id,
                    from_=record.message.from_,
                    to=",".join(record.message.to),
                    message=record.message.compose_message(),
                )
        raise VendorRejectedError("Mock", f"Message {message_id} not found", code="404")

    def reset(self) -> None:
        """Clear all recorded messages."""
        self.sent.clear()
