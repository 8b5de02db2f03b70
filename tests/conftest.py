"""Shared test fixtures for the SMS library."""

from unittest.mock import MagicMock

import pytest

from simplesms import (
    DriverManager,
    IPPanelConfig,
    NexmoConfig,
    OutgoingMessage,
    SMSConfig,
    TwilioSMSConfig,
)


@pytest.fixture
def http_client() -> MagicMock:
    """Stand-in for httpx.Client; tests set ``request.return_value``."""
    return MagicMock()


@pytest.fixture
def message() -> OutgoingMessage:
    return OutgoingMessage(
        to=["+15551234567", "+15557654321"],
        body="Hello",
        from_="+15550001111",
    )


@pytest.fixture
def nexmo_config() -> NexmoConfig:
    return NexmoConfig(api_key="nexmo_key", api_secret="nexmo_secret")


@pytest.fixture
def ippanel_config() -> IPPanelConfig:
    return IPPanelConfig(api_key="ippanel_key")


@pytest.fixture
def twilio_sms_config() -> TwilioSMSConfig:
    return TwilioSMSConfig(account_sid="ACtest123", auth_token="test_token_456")


@pytest.fixture
def sms_config() -> SMSConfig:
    return SMSConfig.from_mapping(
        {
            "driver": "log",
            "from": "+15550001111",
            "nexmo": {"api_key": "nexmo_key", "api_secret": "nexmo_secret"},
            "ippanel": {"api_key": "ippanel_key"},
        }
    )


@pytest.fixture
def manager(sms_config: SMSConfig, http_client: MagicMock) -> DriverManager:
    return DriverManager(sms_config, http_client=http_client)
