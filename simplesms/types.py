"""Core types for the SMS gateway library."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar, Union

Composer = Callable[[Mapping[str, Any]], str]

_C = TypeVar("_C", bound="_DriverConfig")


class DeliveryStatus(str, Enum):
    """Status of a message delivery attempt."""

    QUEUED = "queued"
    SENT = "sent"
    DELIVERED = "delivered"
    FAILED = "failed"
    UNDELIVERED = "undelivered"


@dataclass(frozen=True, slots=True)
class DeliveryResult:
    """Result of a send accepted by a driver.

    ``raw`` holds the parsed vendor payload. Drivers that issue one request
    per recipient report the last request issued.
    """

    status: DeliveryStatus
    external_id: str | None = None
    raw: Any = None
    error_code: str | None = None
    error_message: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status not in {DeliveryStatus.FAILED, DeliveryStatus.UNDELIVERED}

    @classmethod
    def ok(
        cls,
        *,
        status: DeliveryStatus = DeliveryStatus.SENT,
        external_id: str | None = None,
        raw: Any = None,
    ) -> DeliveryResult:
        return cls(status=status, external_id=external_id, raw=raw)

    @classmethod
    def fail(
        cls,
        error_message: str,
        *,
        error_code: str | None = None,
    ) -> DeliveryResult:
        return cls(
            status=DeliveryStatus.FAILED,
            error_message=error_message,
            error_code=error_code,
        )


# ── Message types ─────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class OutgoingMessage:
    """A message to send to one or more recipients.

    ``body`` is either the final text or a composer called with ``data``
    when the message is sent. ``carriers`` maps a recipient number to a
    carrier key and is only consulted by the email driver.
    """

    to: tuple[str, ...]
    body: Union[str, Composer] = ""
    from_: str | None = None
    data: Mapping[str, Any] = field(default_factory=dict)
    media_urls: tuple[str, ...] = ()
    carriers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        to = (self.to,) if isinstance(self.to, str) else tuple(self.to)
        if not to:
            raise ValueError("OutgoingMessage requires at least one recipient")
        media = (self.media_urls,) if isinstance(self.media_urls, str) else tuple(self.media_urls)
        object.__setattr__(self, "to", to)
        object.__setattr__(self, "media_urls", media)

    def compose_message(self) -> str:
        """Render the final message text."""
        if callable(self.body):
            return self.body(self.data)
        return self.body

    def carrier_for(self, number: str) -> str | None:
        return self.carriers.get(number)

    def with_from(self, number: str) -> OutgoingMessage:
        """Copy of this message sent from ``number``."""
        return dataclasses.replace(self, from_=number)


@dataclass(frozen=True, slots=True)
class IncomingMessage:
    """A message received from a provider's inbound API or webhook."""

    raw: Any
    id: str | None = None
    from_: str | None = None
    to: str | None = None
    message: str | None = None
    media_urls: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class EmailMessage:
    """An email, used by the email driver's mail provider."""

    to: str
    subject: str
    from_email: str
    text_content: str | None = None
    html_content: str | None = None
    from_name: str | None = None


# ── Configuration ─────────────────────────────────────────────────────


@dataclass(slots=True)
class SMSConfig:
    """Library configuration: default driver, default sender and per-driver settings."""

    driver: str = "log"
    from_: str | None = None
    drivers: dict[str, dict[str, Any]] = field(default_factory=dict)
    pretend: bool = False

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> SMSConfig:
        """Build from the flat host layout ``{"driver": ..., "from": ..., "<name>": {...}}``."""
        drivers = {
            str(key).lower(): dict(value)
            for key, value in values.items()
            if key not in {"driver", "from", "pretend"} and isinstance(value, Mapping)
        }
        return cls(
            driver=str(values.get("driver") or "log").lower(),
            from_=values.get("from"),
            drivers=drivers,
            pretend=bool(values.get("pretend", False)),
        )

    def for_driver(self, name: str) -> Mapping[str, Any]:
        return self.drivers.get(name.lower(), {})


class _DriverConfig:
    __slots__ = ()

    @classmethod
    def from_mapping(cls: type[_C], values: Mapping[str, Any]) -> _C:
        """Build from a config sub-map. Missing credentials become empty strings."""
        kwargs: dict[str, Any] = {}
        for f in dataclasses.fields(cls):  # type: ignore[arg-type]
            if f.name in values:
                kwargs[f.name] = values[f.name]
            elif f.default is dataclasses.MISSING:
                kwargs[f.name] = ""
        return cls(**kwargs)


@dataclass(frozen=True, slots=True)
class TwilioSMSConfig(_DriverConfig):
    account_sid: str
    auth_token: str = field(repr=False)
    verify: bool = False


@dataclass(frozen=True, slots=True)
class NexmoConfig(_DriverConfig):
    api_key: str
    api_secret: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class PlivoConfig(_DriverConfig):
    auth_id: str
    auth_token: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class CallFireConfig(_DriverConfig):
    app_login: str
    app_password: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class EZTextingConfig(_DriverConfig):
    username: str
    password: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class LabsMobileConfig(_DriverConfig):
    username: str
    password: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class MozeoConfig(_DriverConfig):
    company_key: str = field(repr=False)
    username: str
    password: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class FlowrouteConfig(_DriverConfig):
    access_key: str
    secret_key: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class SMS77Config(_DriverConfig):
    user: str
    api_key: str = field(repr=False)
    debug: bool = False


@dataclass(frozen=True, slots=True)
class JustSendConfig(_DriverConfig):
    api_key: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class IPPanelConfig(_DriverConfig):
    api_key: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class ZenviaConfig(_DriverConfig):
    account_key: str
    passcode: str = field(repr=False)
    callback_option: str = "NONE"


@dataclass(frozen=True, slots=True)
class SendGridConfig:
    api_key: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class Smtp2GoConfig:
    api_key: str = field(repr=False)
