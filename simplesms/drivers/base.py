"""Base protocols for SMS drivers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from simplesms.types import DeliveryResult, IncomingMessage, OutgoingMessage


@runtime_checkable
class Driver(Protocol):
    """Interface that all SMS drivers must implement."""

    def send(self, message: OutgoingMessage) -> DeliveryResult:
        """Send a message and return the delivery result.

        Raises ``TransportError`` or ``VendorRejectedError`` on failure.
        """
        ...


@runtime_checkable
class ReceivingDriver(Driver, Protocol):
    """A driver that can parse inbound webhook payloads."""

    def receive(self, raw: Mapping[str, Any]) -> IncomingMessage:
        ...


@runtime_checkable
class PollingDriver(Driver, Protocol):
    """A driver that can fetch received messages from the vendor."""

    def check_messages(self, options: Mapping[str, Any] | None = None) -> list[IncomingMessage]:
        ...

    def get_message(self, message_id: str) -> IncomingMessage:
        ...
