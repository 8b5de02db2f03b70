"""Tests for the SendGrid mail provider."""

from unittest.mock import MagicMock, patch

from python_http_client.exceptions import HTTPError

from simplesms import DeliveryStatus, EmailMessage, SendGridConfig
from simplesms.email.sendgrid import SendGridProvider


def _make_provider() -> SendGridProvider:
    """Create a SendGridProvider with a mocked client."""
    with patch("simplesms.email.sendgrid.SendGridAPIClient"):
        return SendGridProvider(SendGridConfig(api_key="SG.test_key"))


def _accepted(status_code: int = 202) -> MagicMock:
    return MagicMock(status_code=status_code, body=b"", headers={"X-Message-Id": "sg-123"})


def _gateway_mail(**overrides) -> EmailMessage:
    fields = {
        "to": "5551234567@txt.att.net",
        "subject": "SMS",
        "from_email": "sms@example.com",
        "text_content": "Hello",
    }
    fields.update(overrides)
    return EmailMessage(**fields)


class TestSendGridSend:
    def test_send_success(self):
        provider = _make_provider()
        provider._client.send = MagicMock(return_value=_accepted())

        result = provider.send(_gateway_mail(from_name="Acme Alerts"))

        assert result.succeeded
        assert result.status == DeliveryStatus.SENT
        assert result.external_id == "sg-123"
        provider._client.send.assert_called_once()

    def test_rejected_by_sendgrid(self):
        provider = _make_provider()
        provider._client.send = MagicMock(side_effect=HTTPError(400, "Bad Request", b'{"errors": []}', {}))

        result = provider.send(_gateway_mail())

        assert not result.succeeded
        assert result.status == DeliveryStatus.FAILED
        assert result.error_code == "400"

    def test_unexpected_status(self):
        provider = _make_provider()
        provider._client.send = MagicMock(return_value=MagicMock(status_code=302, body=b"", headers={}))

        result = provider.send(_gateway_mail())

        assert not result.succeeded
        assert result.error_code == "302"

    def test_send_exception(self):
        provider = _make_provider()
        provider._client.send = MagicMock(side_effect=ConnectionError("network error"))

        result = provider.send(_gateway_mail())

        assert not result.succeeded
        assert "network error" in result.error_message

    def test_send_constructs_mail_correctly(self):
        provider = _make_provider()
        provider._client.send = MagicMock(return_value=_accepted(200))

        provider.send(_gateway_mail(subject="Alert"))

        mail = provider._client.send.call_args[0][0]
        assert mail.subject.get() == "Alert"
        assert mail.from_email.email == "sms@example.com"

    def test_send_html_only(self):
        provider = _make_provider()
        provider._client.send = MagicMock(return_value=_accepted(200))

        result = provider.send(_gateway_mail(text_content=None, html_content="<p>Hello</p>"))

        assert result.succeeded
