"""Benchmark tests for the SMS drivers.

Measures the overhead of the library's send path with mocked external
boundaries. Useful for catching regressions in hot paths (request
building, body encoding, response parsing, error mapping).

Run with:
    pytest tests/test_benchmarks.py --benchmark-only -v
"""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock, patch

import httpx
import pytest

from simplesms import (
    SMS,
    DriverManager,
    IPPanelConfig,
    IPPanelSMS,
    LabsMobileConfig,
    LabsMobileSMS,
    NexmoConfig,
    NexmoSMS,
    OutgoingMessage,
    RequestBuilder,
    TwilioSMSConfig,
)
from simplesms.drivers.ippanel import parse_pattern


# ── Helpers ────────────────────────────────────────────────────────────


def _client_returning(**kwargs) -> MagicMock:
    client = MagicMock()
    client.request.return_value = httpx.Response(200, request=httpx.Request("POST", "https://bench"), **kwargs)
    return client


def _recipients(count: int) -> list[str]:
    return [f"+1555{i:07d}" for i in range(count)]


# ── RequestBuilder benchmarks ─────────────────────────────────────────


class TestRequestBuilderBenchmarks:
    def test_copy_build_prepare(self, benchmark):
        base = RequestBuilder("https://rest.nexmo.com", {"api_key": "k", "api_secret": "s"})

        def run():
            return base.copy().build_call("/sms/json").build_body({"to": "+1", "text": "Hi"}).prepare()

        request = benchmark(run)
        assert request.url == "https://rest.nexmo.com/sms/json"

    def test_parse_pattern(self, benchmark):
        body = "pid=abc123\n" + "\n".join(f"var{i}=value{i}" for i in range(20))
        data = {"sender": "+1", "recipient": ["+2"], "message": body}

        parsed = benchmark(parse_pattern, data)
        assert parsed["code"] == "abc123"


# ── HTTP driver benchmarks ────────────────────────────────────────────


class TestNexmoBenchmarks:
    @pytest.fixture(autouse=True)
    def _setup(self):
        client = _client_returning(json={"messages": [{"status": "0", "message-id": "bench"}]})
        self.driver = NexmoSMS(client, NexmoConfig(api_key="k", api_secret="s"))
        yield

    def test_send_single(self, benchmark):
        msg = OutgoingMessage(to="+15551234567", body="Benchmark text", from_="Acme")
        result = benchmark(self.driver.send, msg)
        assert result.succeeded

    def test_send_fan_out(self, benchmark):
        msg = OutgoingMessage(to=_recipients(50), body="Benchmark text", from_="Acme")
        result = benchmark(self.driver.send, msg)
        assert result.succeeded


class TestIPPanelBenchmarks:
    @pytest.fixture(autouse=True)
    def _setup(self):
        client = _client_returning(json={"status": "OK", "data": {"message_id": 1}})
        self.driver = IPPanelSMS(client, IPPanelConfig(api_key="k"))
        yield

    def test_send_bulk(self, benchmark):
        msg = OutgoingMessage(to=_recipients(200), body="Benchmark text", from_="+983000505")
        result = benchmark(self.driver.send, msg)
        assert result.succeeded


class TestLabsMobileBenchmarks:
    @pytest.fixture(autouse=True)
    def _setup(self):
        client = _client_returning(text="<response><code>0</code><subid>bench</subid></response>")
        self.driver = LabsMobileSMS(client, LabsMobileConfig(username="u", password="p"))
        yield

    def test_send_bulk_xml(self, benchmark):
        msg = OutgoingMessage(to=_recipients(200), body="Benchmark text", from_="Acme")
        result = benchmark(self.driver.send, msg)
        assert result.external_id == "bench"


# ── Twilio benchmarks ─────────────────────────────────────────────────


class TestTwilioBenchmarks:
    @pytest.fixture(autouse=True)
    def _setup(self):
        with patch("simplesms.drivers.twilio.Client"), \
             patch("simplesms.drivers.twilio.TwilioHttpClient"):
            from simplesms.drivers.twilio import TwilioSMS

            self.driver = TwilioSMS(TwilioSMSConfig(account_sid="AC_bench", auth_token="token_bench"))
            self.driver._client.messages.create.return_value = MagicMock(
                sid="SM1234", status="queued", error_code=None, error_message=None
            )
            yield

    def test_send(self, benchmark):
        msg = OutgoingMessage(to="+15551234567", body="Benchmark text", from_="+15550001111")
        result = benchmark(self.driver.send, msg)
        assert result.succeeded


# ── Facade benchmarks ─────────────────────────────────────────────────


class TestFacadeBenchmarks:
    @pytest.fixture(autouse=True)
    def _setup(self):
        self.sms = SMS(DriverManager({"driver": "mock", "from": "+15550001111"}, http_client=MagicMock()))
        yield

    def test_send_mock(self, benchmark):
        msg = OutgoingMessage(to="+15551234567", body=lambda data: f"Code {data['code']}", data={"code": "1"})
        result = benchmark(self.sms.send, msg)
        assert result.succeeded

    def test_send_async_mock(self, benchmark):
        msg = OutgoingMessage(to="+15551234567", body="Async bench")

        def run():
            return asyncio.run(self.sms.send_async(msg))

        result = benchmark(run)
        assert result.succeeded
