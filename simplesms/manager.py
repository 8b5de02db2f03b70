"""Driver manager: builds SMS drivers by name and caches them.

Every built-in driver has a factory that reads the driver's configuration
sub-map and constructs it with the shared ``httpx.Client``. Applications add
their own drivers with :meth:`DriverManager.extend`::

    manager = DriverManager(SMSConfig.from_mapping({
        "driver": "nexmo",
        "nexmo": {"api_key": "...", "api_secret": "..."},
    }))
    manager.extend("acme", lambda client, config: AcmeSMS(client, config["token"]))
    manager.driver().send(OutgoingMessage(to="+15551234567", body="Hello"))
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

import httpx

from .drivers.base import Driver
from .drivers.callfire import CallFireSMS
from .drivers.email import EmailSMS
from .drivers.eztexting import EZTextingSMS
from .drivers.flowroute import FlowrouteSMS
from .drivers.ippanel import IPPanelSMS
from .drivers.justsend import JustSendSMS
from .drivers.labsmobile import LabsMobileSMS
from .drivers.log import LogSMS
from .drivers.mozeo import MozeoSMS
from .drivers.nexmo import NexmoSMS
from .drivers.plivo import PlivoSMS
from .drivers.sms77 import SMS77
from .drivers.twilio import TwilioSMS
from .drivers.zenvia import ZenviaSMS
from .email.base import EmailProvider
from .email.sendgrid import SendGridProvider
from .email.smtp2go import Smtp2GoProvider
from .errors import UnknownDriverError
from .mock import MockSMS
from .types import (
    CallFireConfig,
    EZTextingConfig,
    FlowrouteConfig,
    IPPanelConfig,
    JustSendConfig,
    LabsMobileConfig,
    MozeoConfig,
    NexmoConfig,
    PlivoConfig,
    SendGridConfig,
    SMS77Config,
    SMSConfig,
    Smtp2GoConfig,
    TwilioSMSConfig,
    ZenviaConfig,
)

logger = logging.getLogger(__name__)

DriverFactory = Callable[[httpx.Client, Mapping[str, Any]], Driver]

DEFAULT_TIMEOUT_SECONDS = 10.0


class DriverManager:
    """Resolves drivers by name, building each one once.

    Args:
        config: An :class:`SMSConfig` or the flat mapping accepted by
            :meth:`SMSConfig.from_mapping`.
        http_client: Client handed to every HTTP driver. When omitted the
            manager opens one on first use and :meth:`close` releases it.
        logger: Logger the ``log`` driver writes to.
        mailer: Mail provider for the ``email`` driver. When omitted it is
            built from the ``email`` configuration sub-map.
        request_url: Returns the URL of the request being handled, used by
            the ``twilio`` driver to verify webhook signatures.
    """

    def __init__(
        self,
        config: SMSConfig | Mapping[str, Any] | None = None,
        *,
        http_client: httpx.Client | None = None,
        logger: logging.Logger | None = None,
        mailer: EmailProvider | None = None,
        request_url: Callable[[], str] | None = None,
    ) -> None:
        if config is None:
            config = SMSConfig()
        elif not isinstance(config, SMSConfig):
            config = SMSConfig.from_mapping(config)
        self.config = config
        self._http_client = http_client
        self._owns_client = http_client is None
        self._logger = logger
        self._mailer = mailer
        self._request_url = request_url
        self._drivers: dict[str, Driver] = {}
        self._factories: dict[str, DriverFactory] = {
            "callfire": self._create_callfire_driver,
            "email": self._create_email_driver,
            "eztexting": self._create_eztexting_driver,
            "flowroute": self._create_flowroute_driver,
            "ippanel": self._create_ippanel_driver,
            "justsend": self._create_justsend_driver,
            "labsmobile": self._create_labsmobile_driver,
            "log": self._create_log_driver,
            "mock": self._create_mock_driver,
            "mozeo": self._create_mozeo_driver,
            "nexmo": self._create_nexmo_driver,
            "plivo": self._create_plivo_driver,
            "sms77": self._create_sms77_driver,
            "twilio": self._create_twilio_driver,
            "zenvia": self._create_zenvia_driver,
        }

    # ── Public API ────────────────────────────────────────────────

    @property
    def http_client(self) -> httpx.Client:
        if self._http_client is None:
            self._http_client = httpx.Client(timeout=DEFAULT_TIMEOUT_SECONDS)
        return self._http_client

    @property
    def drivers(self) -> list[str]:
        """Names of all registered drivers."""
        return sorted(self._factories)

    def driver(self, name: str | None = None) -> Driver:
        """Return the driver registered as ``name``, or the default driver.

        Raises:
            UnknownDriverError: If no factory is registered for the name.
        """
        key = (name or self.get_default_driver()).lower()
        if key not in self._drivers:
            factory = self._factories.get(key)
            if factory is None:
                raise UnknownDriverError(key)
            self._drivers[key] = factory(self.http_client, self.config.for_driver(key))
            logger.debug("Created SMS driver %s", key)
        return self._drivers[key]

    def get_default_driver(self) -> str:
        return self.config.driver

    def set_default_driver(self, name: str) -> None:
        self.config.driver = name.lower()

    def extend(self, name: str, factory: DriverFactory) -> None:
        """Register ``factory`` under ``name``, replacing any existing factory.

        A driver already built under that name stays cached until
        :meth:`forget_drivers` is called.
        """
        if not name or not name.strip():
            raise ValueError("Driver name must not be empty")
        if not callable(factory):
            raise TypeError(f"Factory for driver [{name}] must be callable")
        self._factories[name.strip().lower()] = factory

    def forget_drivers(self) -> None:
        """Drop every cached driver instance."""
        self._drivers.clear()

    def close(self) -> None:
        """Close the HTTP client if this manager opened it.

        Cached drivers hold that client, so they are dropped with it.
        """
        if self._owns_client and self._http_client is not None:
            self._http_client.close()
            self._http_client = None
            self._drivers.clear()

    def __enter__(self) -> DriverManager:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    # ── Built-in factories ────────────────────────────────────────

    def _create_log_driver(self, client: httpx.Client, config: Mapping[str, Any]) -> LogSMS:
        return LogSMS(self._logger)

    def _create_mock_driver(self, client: httpx.Client, config: Mapping[str, Any]) -> MockSMS:
        return MockSMS()

    def _create_email_driver(self, client: httpx.Client, config: Mapping[str, Any]) -> EmailSMS:
        mailer = self._mailer
        if mailer is None:
            provider = str(config.get("provider") or "smtp2go").lower()
            if provider == "sendgrid":
                mailer = SendGridProvider(SendGridConfig(api_key=config.get("api_key", "")))
            elif provider == "smtp2go":
                mailer = Smtp2GoProvider(Smtp2GoConfig(api_key=config.get("api_key", "")), client=client)
            else:
                raise ValueError(f"Unsupported mail provider for the email driver: {provider}")
        return EmailSMS(
            mailer,
            from_email=config.get("from_email", ""),
            from_name=config.get("from_name"),
            subject=config.get("subject", ""),
        )

    def _create_twilio_driver(self, client: httpx.Client, config: Mapping[str, Any]) -> TwilioSMS:
        return TwilioSMS(TwilioSMSConfig.from_mapping(config), request_url=self._request_url)

    def _create_nexmo_driver(self, client: httpx.Client, config: Mapping[str, Any]) -> NexmoSMS:
        return NexmoSMS(client, NexmoConfig.from_mapping(config))

    def _create_plivo_driver(self, client: httpx.Client, config: Mapping[str, Any]) -> PlivoSMS:
        return PlivoSMS(client, PlivoConfig.from_mapping(config))

    def _create_callfire_driver(self, client: httpx.Client, config: Mapping[str, Any]) -> CallFireSMS:
        return CallFireSMS(client, CallFireConfig.from_mapping(config))

    def _create_eztexting_driver(self, client: httpx.Client, config: Mapping[str, Any]) -> EZTextingSMS:
        return EZTextingSMS(client, EZTextingConfig.from_mapping(config))

    def _create_labsmobile_driver(self, client: httpx.Client, config: Mapping[str, Any]) -> LabsMobileSMS:
        return LabsMobileSMS(client, LabsMobileConfig.from_mapping(config))

    def _create_mozeo_driver(self, client: httpx.Client, config: Mapping[str, Any]) -> MozeoSMS:
        return MozeoSMS(client, MozeoConfig.from_mapping(config))

    def _create_flowroute_driver(self, client: httpx.Client, config: Mapping[str, Any]) -> FlowrouteSMS:
        return FlowrouteSMS(client, FlowrouteConfig.from_mapping(config))

    def _create_sms77_driver(self, client: httpx.Client, config: Mapping[str, Any]) -> SMS77:
        return SMS77(client, SMS77Config.from_mapping(config))

    def _create_justsend_driver(self, client: httpx.Client, config: Mapping[str, Any]) -> JustSendSMS:
        return JustSendSMS(client, JustSendConfig.from_mapping(config))

    def _create_ippanel_driver(self, client: httpx.Client, config: Mapping[str, Any]) -> IPPanelSMS:
        return IPPanelSMS(client, IPPanelConfig.from_mapping(config))

    def _create_zenvia_driver(self, client: httpx.Client, config: Mapping[str, Any]) -> ZenviaSMS:
        return ZenviaSMS(client, ZenviaConfig.from_mapping(config))
