"""Email driver: delivers SMS through carrier email-to-SMS gateways."""

from __future__ import annotations

import logging
import re

from simplesms.email.base import EmailProvider
from simplesms.errors import VendorRejectedError
from simplesms.types import DeliveryResult, DeliveryStatus, EmailMessage, OutgoingMessage

logger = logging.getLogger(__name__)

CARRIER_GATEWAYS: dict[str, str] = {
    "att": "txt.att.net",
    "airfiremobile": "sms.airfiremobile.com",
    "alaskacommunicates": "msg.acsalaska.com",
    "ameritech": "paging.acswireless.com",
    "assurancewireless": "vmobl.com",
    "boostmobile": "sms.myboostmobile.com",
    "cleartalk": "sms.cleartalk.us",
    "cricket": "sms.mycricket.com",
    "metropcs": "mymetropcs.com",
    "nextech": "sms.ntwls.net",
    "rogerswireless": "sms.rogers.com",
    "sprint": "messaging.sprintpcs.com",
    "tmobile": "tmomail.net",
    "unicel": "utext.com",
    "uscellular": "email.uscc.net",
    "verizonwireless": "vtext.com",
    "virginmobileusa": "vmobl.com",
}


class EmailSMS:
    """Sends each recipient an email addressed to ``<number>@<carrier gateway>``.

    Every recipient needs a carrier in ``OutgoingMessage.carriers``.
    """

    def __init__(
        self,
        mailer: EmailProvider,
        *,
        from_email: str,
        from_name: str | None = None,
        subject: str = "",
    ) -> None:
        self._mailer = mailer
        self._from_email = from_email
        self._from_name = from_name
        self._subject = subject

    def send(self, message: OutgoingMessage) -> DeliveryResult:
        text = message.compose_message()
        addresses = [gateway_address(number, message.carrier_for(number)) for number in message.to]

        for address in addresses:
            result = self._mailer.send(
                EmailMessage(
                    to=address,
                    subject=self._subject,
                    from_email=self._from_email,
                    text_content=text,
                    from_name=self._from_name,
                )
            )
            if not result.succeeded:
                error = result.error_message or "Mail provider refused the message"
                logger.error("Email gateway send to %s failed: %s", address, error)
                raise VendorRejectedError("Email", error, code=result.error_code)
            logger.info("SMS sent via email gateway %s", address)

        return DeliveryResult.ok(status=DeliveryStatus.SENT)


def gateway_address(number: str, carrier: str | None) -> str:
    """Build the gateway email address for ``number`` on ``carrier``.

    Raises:
        ValueError: If the carrier is missing or unknown.
    """
    gateway = CARRIER_GATEWAYS.get((carrier or "").lower().replace(" ", "").replace("-", ""))
    if gateway is None:
        raise ValueError(f"Carrier specified is not found: {carrier!r}")
    digits = re.sub(r"\D", "", number)
    return f"{digits}@{gateway}"
