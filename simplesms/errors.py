"""Exceptions raised by drivers, the request layer and the driver manager."""

from __future__ import annotations


class SMSError(Exception):
    """Base class for every error raised by this library."""


class TransportError(SMSError):
    """The HTTP call failed: network error or non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class VendorRejectedError(SMSError):
    """The vendor answered successfully at the HTTP level but refused the message."""

    def __init__(self, vendor: str, message: str, code: str | None = None) -> None:
        super().__init__(f"{vendor}: {message}" if code is None else f"{vendor} [{code}]: {message}")
        self.vendor = vendor
        self.code = code
        self.message = message


class MisconfiguredDriverError(VendorRejectedError):
    """The vendor rejected the configured credentials."""


class UnknownDriverError(SMSError, LookupError):
    """No driver factory is registered under the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Driver [{name}] not supported.")
        self.name = name


class UnsupportedOperationError(SMSError, NotImplementedError):
    """The driver does not implement an inbound operation."""


class InvalidRequestError(SMSError):
    """An inbound webhook request failed signature validation."""
