"""
simple-sms: multi-provider SMS gateway library.

Compose a message once and send it through whichever vendor the
configuration selects. Each driver translates the common
``OutgoingMessage`` into one vendor's HTTP request and the vendor's answer
back into a ``DeliveryResult`` or an exception.

Quick start::

    from simplesms import SMS, DriverManager, OutgoingMessage

    manager = DriverManager({
        "driver": "nexmo",
        "from": "+15550001111",
        "nexmo": {"api_key": "...", "api_secret": "..."},
    })
    sms = SMS(manager)
    result = sms.send(OutgoingMessage(to=["+15551234567"], body="Hello!"))
    print(f"Message id: {result.external_id}")

Composing the body from data::

    message = OutgoingMessage(
        to="+15551234567",
        body=lambda data: f"Your code is {data['code']}",
        data={"code": "123456"},
    )

Switching drivers at runtime::

    sms.driver("twilio").send(message)

Inbound messages::

    incoming = sms.receive(request.form, signature=request.headers["X-Twilio-Signature"])
    print(incoming.from_, incoming.message)

Custom drivers::

    manager.extend("acme", lambda client, config: AcmeSMS(client, config["token"]))

For testing, point the facade at the ``log`` or ``mock`` driver::

    sms = SMS(DriverManager({"driver": "mock"}))
    sms.send(message)
    assert len(sms.manager.driver().sent) == 1

Failures raise:

- ``TransportError``: network failure or non-2xx HTTP status
- ``VendorRejectedError``: the vendor answered but refused the message
- ``MisconfiguredDriverError``: the vendor refused the credentials
- ``UnknownDriverError``: no driver registered under that name

Module overview
---------------
- ``types``: OutgoingMessage, IncomingMessage, DeliveryResult, configs
- ``request``: RequestBuilder, PreparedRequest and HTTP dispatch
- ``manager``: DriverManager: driver factories and the instance cache
- ``sms``: SMS facade
- ``drivers/``: One driver per vendor plus the log and email drivers
- ``email/``: SendGrid and SMTP2GO mail providers for the email driver
- ``mock``: MockSMS test driver
- ``errors``: Exception hierarchy
"""

from .drivers import (
    CallFireSMS,
    Driver,
    EmailSMS,
    EZTextingSMS,
    FlowrouteSMS,
    IPPanelSMS,
    JustSendSMS,
    LabsMobileSMS,
    LogSMS,
    MozeoSMS,
    NexmoSMS,
    PlivoSMS,
    PollingDriver,
    ReceivingDriver,
    SMS77,
    TwilioSMS,
    ZenviaSMS,
    empty_messaging_response_xml,
)
from .email import EmailProvider, SendGridProvider, Smtp2GoProvider
from .errors import (
    InvalidRequestError,
    MisconfiguredDriverError,
    SMSError,
    TransportError,
    UnknownDriverError,
    UnsupportedOperationError,
    VendorRejectedError,
)
from .manager import DriverManager
from .mock import MockSMS
from .request import BodyEncoding, PreparedRequest, RequestBuilder
from .sms import SMS
from .types import (
    CallFireConfig,
    DeliveryResult,
    DeliveryStatus,
    EmailMessage,
    EZTextingConfig,
    FlowrouteConfig,
    IncomingMessage,
    IPPanelConfig,
    JustSendConfig,
    LabsMobileConfig,
    MozeoConfig,
    NexmoConfig,
    OutgoingMessage,
    PlivoConfig,
    SendGridConfig,
    SMS77Config,
    SMSConfig,
    Smtp2GoConfig,
    TwilioSMSConfig,
    ZenviaConfig,
)

__all__ = [
    # Facade and manager
    "SMS",
    "DriverManager",
    # Drivers
    "Driver",
    "ReceivingDriver",
    "PollingDriver",
    "CallFireSMS",
    "EmailSMS",
    "EZTextingSMS",
    "FlowrouteSMS",
    "IPPanelSMS",
    "JustSendSMS",
    "LabsMobileSMS",
    "LogSMS",
    "MockSMS",
    "MozeoSMS",
    "NexmoSMS",
    "PlivoSMS",
    "SMS77",
    "TwilioSMS",
    "ZenviaSMS",
    "empty_messaging_response_xml",
    # Mail providers
    "EmailProvider",
    "SendGridProvider",
    "Smtp2GoProvider",
    # Requests
    "BodyEncoding",
    "PreparedRequest",
    "RequestBuilder",
    # Types
    "DeliveryResult",
    "DeliveryStatus",
    "EmailMessage",
    "IncomingMessage",
    "OutgoingMessage",
    # Configuration
    "SMSConfig",
    "CallFireConfig",
    "EZTextingConfig",
    "FlowrouteConfig",
    "IPPanelConfig",
    "JustSendConfig",
    "LabsMobileConfig",
    "MozeoConfig",
    "NexmoConfig",
    "PlivoConfig",
    "SendGridConfig",
    "SMS77Config",
    "Smtp2GoConfig",
    "TwilioSMSConfig",
    "ZenviaConfig",
    # Errors
    "SMSError",
    "TransportError",
    "VendorRejectedError",
    "MisconfiguredDriverError",
    "UnknownDriverError",
    "UnsupportedOperationError",
    "InvalidRequestError",
]
