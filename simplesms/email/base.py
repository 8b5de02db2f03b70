"""Base protocol for mail providers."""

from __future__ import annotations

from typing import Protocol

from simplesms.types import DeliveryResult, EmailMessage


class EmailProvider(Protocol):
    """Interface that the email driver's mail providers implement.

    Providers report failures through ``DeliveryResult.fail`` instead of
    raising; the email driver turns a failed result into an exception.
    """

    def send(self, message: EmailMessage) -> DeliveryResult:
        """Send an email and return the delivery result."""
        ...
