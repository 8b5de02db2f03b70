"""SMS drivers, one per vendor."""

from .base import Driver, PollingDriver, ReceivingDriver
from .callfire import CallFireSMS
from .email import EmailSMS
from .eztexting import EZTextingSMS
from .flowroute import FlowrouteSMS
from .ippanel import IPPanelSMS
from .justsend import JustSendSMS
from .labsmobile import LabsMobileSMS
from .log import LogSMS
from .mozeo import MozeoSMS
from .nexmo import NexmoSMS
from .plivo import PlivoSMS
from .sms77 import SMS77
from .twilio import TwilioSMS, empty_messaging_response_xml
from .zenvia import ZenviaSMS

__all__ = [
    "Driver",
    "PollingDriver",
    "ReceivingDriver",
    "CallFireSMS",
    "EmailSMS",
    "EZTextingSMS",
    "FlowrouteSMS",
    "IPPanelSMS",
    "JustSendSMS",
    "LabsMobileSMS",
    "LogSMS",
    "MozeoSMS",
    "NexmoSMS",
    "PlivoSMS",
    "SMS77",
    "TwilioSMS",
    "ZenviaSMS",
    "empty_messaging_response_xml",
]
