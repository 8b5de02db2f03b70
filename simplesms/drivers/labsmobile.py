"""LabsMobile SMS driver (HTTP POST XML API)."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET

import httpx

from simplesms.errors import MisconfiguredDriverError, TransportError, VendorRejectedError
from simplesms.request import BodyEncoding, RequestBuilder, dispatch
from simplesms.types import DeliveryResult, DeliveryStatus, LabsMobileConfig, OutgoingMessage

logger = logging.getLogger(__name__)

LABSMOBILE_API_BASE = "https://api.labsmobile.com"

_AUTH_ERROR_CODES = {"401", "403"}


class LabsMobileSMS:
    """Sends SMS through LabsMobile. The message travels as an XML document in ``XmlData``."""

    def __init__(self, client: httpx.Client, config: LabsMobileConfig) -> None:
        self._client = client
        self._requests = RequestBuilder(
            LABSMOBILE_API_BASE,
            {"username": config.username, "password": config.password},
        )

    def send(self, message: OutgoingMessage) -> DeliveryResult:
        xml_data = build_xml(message.to, message.compose_message(), message.from_)
        request = self._requests.copy().build_call("/clients/").build_body({"XmlData": xml_data})
        response = dispatch(self._client, request.prepare("POST", encoding=BodyEncoding.FORM), vendor="LabsMobile")

        try:
            root = ET.fromstring(response.text)
        except ET.ParseError as exc:
            raise TransportError("LabsMobile returned invalid XML", status_code=response.status_code) from exc

        code = (root.findtext("code") or "").strip()
        if code != "0":
            error = (root.findtext("message") or "").strip() or f"LabsMobile error code {code}"
            logger.error("LabsMobile API error: [%s] %s", code, error)
            if code in _AUTH_ERROR_CODES:
                raise MisconfiguredDriverError("LabsMobile", error, code=code)
            raise VendorRejectedError("LabsMobile", error, code=code or None)

        external_id = (root.findtext("subid") or "").strip() or None
        logger.info("SMS sent via LabsMobile, subid=%s", external_id)
        return DeliveryResult.ok(status=DeliveryStatus.SENT, external_id=external_id, raw=response.text)


def build_xml(numbers: tuple[str, ...], text: str, sender: str | None = None) -> str:
    """Render the ``<sms>`` document LabsMobile expects."""
    sms = ET.Element("sms")
    for number in numbers:
        recipient = ET.SubElement(sms, "recipient")
        ET.SubElement(recipient, "msisdn").text = number
    ET.SubElement(sms, "message").text = text
    if sender:
        ET.SubElement(sms, "tpoa").text = sender
    return ET.tostring(sms, encoding="unicode")
