"""Tests for the SMS77 driver."""

from unittest.mock import MagicMock

import httpx
import pytest

from simplesms import SMS77, MisconfiguredDriverError, OutgoingMessage, SMS77Config, TransportError, VendorRejectedError


def _response(status_code: int = 200, **kwargs) -> httpx.Response:
    return httpx.Response(status_code, request=httpx.Request("GET", "https://gateway.sms77.io"), **kwargs)


def _make_driver(response: httpx.Response, *, debug: bool = False) -> tuple[SMS77, MagicMock]:
    client = MagicMock()
    client.request.return_value = response
    return SMS77(client, SMS77Config(user="user", api_key="key", debug=debug)), client


_OK = {"success": "100", "total_price": 0.15, "messages": [{"id": "77123", "recipient": "15551234567"}]}


class TestSend:
    def test_send_single_get(self, message):
        driver, client = _make_driver(_response(json=_OK))

        result = driver.send(message)

        client.request.assert_called_once()
        assert client.request.call_args.args == ("GET", "https://gateway.sms77.io/api/sms")
        assert client.request.call_args.kwargs["params"] == {
            "u": "user",
            "p": "key",
            "to": "+15551234567,+15557654321",
            "text": "Hello",
            "json": 1,
            "from": "+15550001111",
        }
        assert result.external_id == "77123"

    def test_without_sender_and_with_debug(self):
        driver, client = _make_driver(_response(json=_OK), debug=True)

        driver.send(OutgoingMessage(to="+1", body="Hi"))

        params = client.request.call_args.kwargs["params"]
        assert "from" not in params
        assert params["debug"] == 1

    def test_plain_text_success_code(self, message):
        driver, _ = _make_driver(_response(text="100"))

        result = driver.send(message)

        assert result.succeeded
        assert result.raw == "100"

    def test_vendor_error(self, message):
        driver, _ = _make_driver(_response(json={"success": "202", "messages": []}))

        with pytest.raises(VendorRejectedError, match="Recipient number is invalid") as exc_info:
            driver.send(message)

        assert exc_info.value.code == "202"

    def test_unknown_code(self, message):
        driver, _ = _make_driver(_response(text="999"))

        with pytest.raises(VendorRejectedError, match="SMS77 status code: 999"):
            driver.send(message)

    def test_auth_error(self, message):
        driver, _ = _make_driver(_response(text="900"))

        with pytest.raises(MisconfiguredDriverError):
            driver.send(message)

    def test_http_error(self, message):
        driver, _ = _make_driver(_response(500, text="err"))

        with pytest.raises(TransportError):
            driver.send(message)
