"""Tests for MockSMS and LogSMS."""

import pytest

from simplesms import DeliveryStatus, LogSMS, MockSMS, OutgoingMessage, TransportError, VendorRejectedError


class TestMockSMS:
    def test_records_messages(self):
        driver = MockSMS()
        message = OutgoingMessage(to="+15551234567", body="Hello")

        result = driver.send(message)

        assert result.succeeded
        assert result.external_id.startswith("mock_")
        assert len(driver.sent) == 1
        assert driver.sent[0].message is message
        assert driver.sent[0].result is result

    def test_unique_ids(self):
        driver = MockSMS()
        ids = {driver.send(OutgoingMessage(to="+1", body="Hi")).external_id for _ in range(5)}
        assert len(ids) == 5

    def test_configured_error_is_raised(self):
        driver = MockSMS(error=TransportError("down", status_code=503))

        with pytest.raises(TransportError):
            driver.send(OutgoingMessage(to="+1", body="Hi"))

        assert driver.sent == []

    def test_get_message(self):
        driver = MockSMS()
        result = driver.send(OutgoingMessage(to=["+1", "+2"], body="Hi", from_="+3"))

        incoming = driver.get_message(result.external_id)

        assert incoming.id == result.external_id
        assert incoming.from_ == "+3"
        assert incoming.to == "+1,+2"
        assert incoming.message == "Hi"

    def test_get_unknown_message(self):
        with pytest.raises(VendorRejectedError) as exc_info:
            MockSMS().get_message("nope")
        assert exc_info.value.code == "404"

    def test_reset(self):
        driver = MockSMS()
        driver.send(OutgoingMessage(to="+1", body="Hi"))
        driver.reset()
        assert driver.sent == []


class TestLogSMS:
    def test_send_composes_body(self, caplog):
        driver = LogSMS()
        message = OutgoingMessage(to="+1", body=lambda data: f"Code {data['code']}", data={"code": "42"})

        with caplog.at_level("INFO", logger="simplesms.drivers.log"):
            result = driver.send(message)

        assert result.status == DeliveryStatus.SENT
        assert "SMS message body: Code 42" in caplog.text
