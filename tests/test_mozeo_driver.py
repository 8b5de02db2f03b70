"""Tests for the Mozeo driver."""

from unittest.mock import MagicMock

import httpx
import pytest

from simplesms import MozeoConfig, MozeoSMS, TransportError


def _response(status_code: int = 200, text: str = "Report: SENT") -> httpx.Response:
    return httpx.Response(status_code, text=text, request=httpx.Request("POST", "https://www.mozeo.com"))


def _make_driver(*responses: httpx.Response) -> tuple[MozeoSMS, MagicMock]:
    client = MagicMock()
    client.request.side_effect = list(responses)
    config = MozeoConfig(company_key="ck", username="user", password="pw")
    return MozeoSMS(client, config), client


class TestSend:
    def test_one_post_per_recipient(self, message):
        driver, client = _make_driver(_response(), _response(text="Report: SENT 2"))

        result = driver.send(message)

        assert client.request.call_count == 2
        first, second = client.request.call_args_list
        assert first.args == ("POST", "https://www.mozeo.com/mozeo/customer/sendtxt.php")
        assert first.kwargs["data"] == {
            "companykey": "ck",
            "username": "user",
            "password": "pw",
            "to": "+15551234567",
            "messagebody": "Hello",
        }
        assert second.kwargs["data"]["to"] == "+15557654321"
        assert result.succeeded
        assert result.raw == "Report: SENT 2"

    def test_http_error_stops_sending(self, message):
        driver, client = _make_driver(_response(500, "error"), _response())

        with pytest.raises(TransportError):
            driver.send(message)

        assert client.request.call_count == 1
