"""Tests for the JustSend driver."""

from unittest.mock import MagicMock

import httpx
import pytest

from simplesms import (
    JustSendConfig,
    JustSendSMS,
    MisconfiguredDriverError,
    OutgoingMessage,
    TransportError,
    VendorRejectedError,
)


def _response(status_code: int = 200, **kwargs) -> httpx.Response:
    return httpx.Response(status_code, request=httpx.Request("POST", "https://justsend.pl"), **kwargs)


def _make_driver(*responses: httpx.Response) -> tuple[JustSendSMS, MagicMock]:
    client = MagicMock()
    client.request.side_effect = list(responses)
    return JustSendSMS(client, JustSendConfig(api_key="app-key")), client


_OK = {"responseCode": "OK", "message": "Message sent", "data": 1001}


class TestSend:
    def test_one_request_per_recipient(self, message):
        driver, client = _make_driver(_response(json=_OK), _response(json={**_OK, "data": 1002}))

        result = driver.send(message)

        first, second = client.request.call_args_list
        assert first.args == ("POST", "https://justsend.pl/api/rest/message/send")
        assert first.kwargs["headers"] == {"App-Key": "app-key"}
        assert first.kwargs["json"] == {
            "sender": "+15550001111",
            "msisdn": "+15551234567",
            "content": "Hello",
            "bulkVariant": "PRO",
        }
        assert second.kwargs["json"]["msisdn"] == "+15557654321"
        assert result.external_id == "1002"

    def test_eco_variant_without_sender(self):
        driver, client = _make_driver(_response(json=_OK))

        driver.send(OutgoingMessage(to="+48500100200", body="Hi"))

        assert client.request.call_args.kwargs["json"]["bulkVariant"] == "ECO"

    def test_vendor_error(self, message):
        driver, _ = _make_driver(_response(json={"responseCode": "NO_FUNDS", "message": "Not enough points"}))

        with pytest.raises(VendorRejectedError, match="Not enough points") as exc_info:
            driver.send(message)

        assert exc_info.value.code == "NO_FUNDS"

    def test_bad_key(self, message):
        driver, _ = _make_driver(_response(json={"responseCode": "APP_KEY_INVALID", "message": "Bad key"}))

        with pytest.raises(MisconfiguredDriverError):
            driver.send(message)

    def test_http_error(self, message):
        driver, _ = _make_driver(_response(500, text="err"))

        with pytest.raises(TransportError):
            driver.send(message)
