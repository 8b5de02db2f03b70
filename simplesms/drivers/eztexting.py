"""EZTexting SMS driver."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from simplesms.errors import MisconfiguredDriverError, VendorRejectedError
from simplesms.request import BodyEncoding, PreparedRequest, RequestBuilder, dispatch, parse_json
from simplesms.types import DeliveryResult, DeliveryStatus, EZTextingConfig, IncomingMessage, OutgoingMessage

logger = logging.getLogger(__name__)

EZTEXTING_API_BASE = "https://app.eztexting.com"


class EZTextingSMS:
    """Sends SMS through the EZTexting REST API.

    Credentials travel in the request body on every call.
    """

    def __init__(self, client: httpx.Client, config: EZTextingConfig) -> None:
        self._client = client
        self._requests = RequestBuilder(
            EZTEXTING_API_BASE,
            {"User": config.username, "Password": config.password},
        )

    def send(self, message: OutgoingMessage) -> DeliveryResult:
        data = {
            "PhoneNumbers[]": list(message.to),
            "Message": message.compose_message(),
        }
        request = self._requests.copy().build_call("/sending/messages?format=json").build_body(data)
        response = self._call(request.prepare("POST", encoding=BodyEncoding.FORM))

        entry = response.get("Entry") or {}
        external_id = str(entry["ID"]) if entry.get("ID") is not None else None
        logger.info("SMS sent via EZTexting, id=%s", external_id)
        return DeliveryResult.ok(status=DeliveryStatus.SENT, external_id=external_id, raw=response)

    def receive(self, raw: Mapping[str, Any]) -> IncomingMessage:
        """Parse an inbound-message forward from EZTexting."""
        return IncomingMessage(
            raw=dict(raw),
            from_=raw.get("PhoneNumber"),
            message=raw.get("Message"),
        )

    def check_messages(self, options: Mapping[str, Any] | None = None) -> list[IncomingMessage]:
        request = self._requests.copy().build_call("/incoming-messages?format=json").build_body(options or {})
        response = self._call(request.prepare("GET", encoding=BodyEncoding.QUERY))
        return [_process_receive(entry) for entry in response.get("Entries") or []]

    def get_message(self, message_id: str) -> IncomingMessage:
        request = self._requests.copy().build_call(f"/incoming-messages/{message_id}?format=json")
        response = self._call(request.prepare("GET", encoding=BodyEncoding.QUERY))
        return _process_receive(response.get("Entry") or {})

    def _call(self, request: PreparedRequest) -> dict[str, Any]:
        """Dispatch and return the ``Response`` envelope, raising on failure status."""
        body = parse_json(dispatch(self._client, request, vendor="EZTexting"), vendor="EZTexting")
        envelope = body.get("Response", {}) if isinstance(body, Mapping) else {}
        if envelope.get("Status") != "Success":
            _handle_error(envelope)
        return envelope


def _handle_error(envelope: Mapping[str, Any]) -> None:
    code = str(envelope["Code"]) if envelope.get("Code") is not None else None
    errors = envelope.get("Errors") or []
    if isinstance(errors, str):
        errors = [errors]
    error = ",".join(str(e) for e in errors) or "Unknown EZTexting error"
    logger.error("EZTexting API error: [%s] %s", code, error)
    if code == "401":
        raise MisconfiguredDriverError("EZTexting", error, code=code)
    raise VendorRejectedError("EZTexting", error, code=code)


def _process_receive(entry: Mapping[str, Any]) -> IncomingMessage:
    return IncomingMessage(
        raw=dict(entry),
        id=str(entry["ID"]) if entry.get("ID") is not None else None,
        from_=entry.get("PhoneNumber"),
        message=entry.get("Message"),
    )
