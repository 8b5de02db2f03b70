"""Integration tests: full flow from configuration to delivery result.

These tests wire the facade, the manager and real drivers together and
only mock the external transport boundary (the httpx client or the Twilio
SDK client). They verify that configuration reaches the driver, the
message reaches the vendor API with the right payload, and the vendor's
answer comes back as a result or the right exception.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import httpx
import pytest

from simplesms import (
    SMS,
    DeliveryStatus,
    DriverManager,
    MisconfiguredDriverError,
    OutgoingMessage,
    TransportError,
)


def _response(status_code: int = 200, **kwargs) -> httpx.Response:
    return httpx.Response(status_code, request=httpx.Request("POST", "https://vendor.example"), **kwargs)


@pytest.fixture
def http_client() -> MagicMock:
    return MagicMock()


def _sms(http_client: MagicMock, **config) -> SMS:
    return SMS(DriverManager(config, http_client=http_client))


class TestConfigToWire:
    def test_nexmo_credentials_and_default_sender_reach_api(self, http_client):
        http_client.request.return_value = _response(json={"messages": [{"status": "0", "message-id": "m1"}]})
        sms = _sms(
            http_client,
            driver="nexmo",
            **{"from": "Acme", "nexmo": {"api_key": "key", "api_secret": "secret"}},
        )

        result = sms.send(OutgoingMessage(to="+447700900001", body="Hi"))

        data = http_client.request.call_args.kwargs["data"]
        assert data["api_key"] == "key"
        assert data["api_secret"] == "secret"
        assert data["from"] == "Acme"
        assert result.external_id == "m1"

    def test_templated_body_is_composed_before_the_api_call(self, http_client):
        http_client.request.return_value = _response(json={"status": "OK", "data": {"message_id": 5}})
        sms = _sms(http_client, driver="ippanel", ippanel={"api_key": "k"})

        sms.send(OutgoingMessage(
            to=["+989121234567", "+989127654321"],
            body=lambda data: f"Your code is {data['code']}",
            data={"code": "4411"},
            from_="+983000505",
        ))

        body = http_client.request.call_args.kwargs["json"]
        assert body["message"] == "Your code is 4411"
        assert body["recipient"] == ["+989121234567,+989127654321"]

    def test_switching_drivers_uses_each_drivers_config(self, http_client):
        http_client.request.side_effect = [
            _response(json={"messages": [{"status": "0", "message-id": "m1"}]}),
            _response(json={"success": "100", "messages": [{"id": 7}]}),
        ]
        sms = _sms(
            http_client,
            driver="nexmo",
            nexmo={"api_key": "k", "api_secret": "s"},
            sms77={"user": "u", "api_key": "p"},
        )
        message = OutgoingMessage(to="+491701234567", body="Hallo", from_="Acme")

        first = sms.send(message)
        second = sms.driver("SMS77").send(message)

        assert first.external_id == "m1"
        assert second.external_id == "7"
        assert http_client.request.call_args.kwargs["params"]["u"] == "u"

    def test_twilio_flow(self, http_client):
        with patch("simplesms.drivers.twilio.Client") as mock_client_cls, \
             patch("simplesms.drivers.twilio.TwilioHttpClient"):
            mock_client_cls.return_value.messages.create.return_value = MagicMock(
                sid="SM1", status="delivered", error_code=None, error_message=None
            )
            sms = _sms(
                http_client,
                driver="twilio",
                **{"from": "+15550001111", "twilio": {"account_sid": "AC1", "auth_token": "t"}},
            )

            result = sms.send(OutgoingMessage(to="+15551234567", body="Hi"))

        mock_client_cls.assert_called_once()
        assert mock_client_cls.call_args.args[:2] == ("AC1", "t")
        assert mock_client_cls.return_value.messages.create.call_args.kwargs["from_"] == "+15550001111"
        assert result.status == DeliveryStatus.DELIVERED
        http_client.request.assert_not_called()


class TestFailures:
    def test_missing_credentials_surface_as_vendor_auth_error(self, http_client):
        http_client.request.return_value = _response(
            json={"messages": [{"status": "2", "error-text": "Missing api_key"}]}
        )
        sms = _sms(http_client, driver="nexmo")

        with pytest.raises(MisconfiguredDriverError, match="Missing api_key"):
            sms.send(OutgoingMessage(to="+1", body="Hi", from_="Acme"))

        assert http_client.request.call_args.kwargs["data"]["api_key"] == ""

    def test_network_failure(self, http_client):
        http_client.request.side_effect = httpx.ReadTimeout("timed out")
        sms = _sms(http_client, driver="plivo", plivo={"auth_id": "MA1", "auth_token": "t"})

        with pytest.raises(TransportError, match="Unable to reach Plivo API"):
            sms.send(OutgoingMessage(to="+1", body="Hi", from_="+2"))

    def test_pretend_mode_never_reaches_vendor(self, http_client):
        sms = _sms(http_client, driver="nexmo", pretend=True, nexmo={"api_key": "k", "api_secret": "s"})

        result = sms.send(OutgoingMessage(to="+1", body="Hi"))

        assert result.succeeded
        http_client.request.assert_not_called()
