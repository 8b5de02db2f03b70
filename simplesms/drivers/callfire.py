"""CallFire SMS driver (REST API 1.1)."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from typing import Any

import httpx

from simplesms.errors import TransportError
from simplesms.request import BodyEncoding, RequestBuilder, dispatch
from simplesms.types import CallFireConfig, DeliveryResult, DeliveryStatus, IncomingMessage, OutgoingMessage

logger = logging.getLogger(__name__)

CALLFIRE_API_BASE = "https://www.callfire.com/api/1.1/rest"


class CallFireSMS:
    """Sends SMS through CallFire. Responses are XML.

    CallFire does not push inbound messages; use :meth:`check_messages`.
    """

    def __init__(self, client: httpx.Client, config: CallFireConfig) -> None:
        self._client = client
        self._auth = (config.app_login, config.app_password)
        self._requests = RequestBuilder(CALLFIRE_API_BASE)

    def send(self, message: OutgoingMessage) -> DeliveryResult:
        data = {
            "To": ",".join(message.to),
            "Message": message.compose_message(),
        }
        request = self._requests.copy().build_call("/text").build_body(data)
        response = dispatch(
            self._client,
            request.prepare("POST", encoding=BodyEncoding.FORM, auth=self._auth),
            vendor="CallFire",
        )

        external_id = None
        try:
            external_id = _child_text(ET.fromstring(response.text), "Id")
        except ET.ParseError:
            logger.warning("CallFire send response was not XML; no resource id recorded")
        logger.info("SMS sent via CallFire, id=%s", external_id)
        return DeliveryResult.ok(status=DeliveryStatus.SENT, external_id=external_id, raw=response.text)

    def check_messages(self, options: Mapping[str, Any] | None = None) -> list[IncomingMessage]:
        """Query texts on the account; ``options`` become query parameters."""
        request = self._requests.copy().build_call("/text").build_body(options or {})
        root = self._get_xml(request)
        return [_process_receive(el) for el in root.iter() if _local(el.tag) == "Text"]

    def get_message(self, message_id: str) -> IncomingMessage:
        root = self._get_xml(self._requests.copy().build_call(f"/text/{message_id}"))
        text = root if _local(root.tag) == "Text" else next(
            (el for el in root.iter() if _local(el.tag) == "Text"), root
        )
        return _process_receive(text)

    def _get_xml(self, request: RequestBuilder) -> ET.Element:
        response = dispatch(
            self._client,
            request.prepare("GET", encoding=BodyEncoding.QUERY, auth=self._auth),
            vendor="CallFire",
        )
        try:
            return ET.fromstring(response.text)
        except ET.ParseError as exc:
            raise TransportError("CallFire returned invalid XML", status_code=response.status_code) from exc


def _local(tag: str) -> str:
    """Strip the ``{namespace}`` prefix ElementTree puts on tags."""
    return tag.rsplit("}", 1)[-1]


def _child_text(element: ET.Element, name: str) -> str | None:
    for child in element.iter():
        if _local(child.tag) == name:
            return (child.text or "").strip() or None
    return None


def _process_receive(element: ET.Element) -> IncomingMessage:
    return IncomingMessage(
        raw=ET.tostring(element, encoding="unicode"),
        id=element.get("id"),
        from_=_child_text(element, "FromNumber"),
        to=_child_text(element, "ToNumber"),
        message=_child_text(element, "Message"),
    )
