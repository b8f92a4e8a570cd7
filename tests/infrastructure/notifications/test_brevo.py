"""Tests for the notification transports."""

import json

import httpx
import pytest

from entityhub.config import reset_settings
from entityhub.config.settings import NotificationSettings
from entityhub.core.entities.reminder import DigestMessage
from entityhub.core.exceptions import ConfigurationError, TransportError
from entityhub.infrastructure.notifications import (
    BrevoEmailTransport,
    LogTransport,
    close_notification_transport,
    create_transport,
    get_notification_transport,
)


def _make_message() -> DigestMessage:
    return DigestMessage(
        recipient_id="u1",
        to_email="ada@example.com",
        to_name="Ada",
        subject="📋 2 upcoming tasks due soon",
        html_body="<p>tasks</p>",
        text_body="tasks",
        task_ids=[1, 2],
    )


def _make_transport(handler, **overrides) -> BrevoEmailTransport:
    settings = NotificationSettings(
        provider="brevo",
        api_key="test-key",
        api_url="https://api.example.test/v3/smtp/email",
        max_retries=overrides.pop("max_retries", 2),
        retry_delay=0,
        **overrides,
    )
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return BrevoEmailTransport(settings, client=client)


class TestBrevoEmailTransport:
    async def test_send_success(self):
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(201, json={"messageId": "<abc@smtp-relay>"})

        transport = _make_transport(handler)
        result = await transport.send(_make_message())
        await transport.close()

        assert result.success is True
        assert result.message_id == "<abc@smtp-relay>"
        assert result.task_count == 2
        assert result.provider == "brevo"

        request = requests[0]
        assert request.headers["api-key"] == "test-key"
        body = json.loads(request.content)
        assert body["to"] == [{"email": "ada@example.com", "name": "Ada"}]
        assert body["sender"]["name"] == "Entity Hub"
        assert body["htmlContent"] == "<p>tasks</p>"
        assert body["textContent"] == "tasks"

    async def test_http_error_is_failed_delivery(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(401, text="Key not found")

        transport = _make_transport(handler)
        result = await transport.send(_make_message())

        assert result.success is False
        assert result.error == "HTTP 401: Key not found"
        assert len(calls) == 1

    async def test_connection_error_is_retried(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) == 1:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(201, json={"messageId": "m-2"})

        transport = _make_transport(handler)
        result = await transport.send(_make_message())

        assert result.success is True
        assert len(calls) == 2

    async def test_retries_exhausted_raise_transport_error(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            raise httpx.ConnectTimeout("timed out", request=request)

        transport = _make_transport(handler, max_retries=3)

        with pytest.raises(TransportError) as exc_info:
            await transport.send(_make_message())

        assert len(calls) == 3
        assert exc_info.value.code == "TRANSPORT_ERROR"

    def test_missing_api_key(self):
        with pytest.raises(ConfigurationError) as exc_info:
            BrevoEmailTransport(NotificationSettings(provider="brevo", api_key=None))

        assert exc_info.value.code == "MISSING_API_KEY"


class TestLogTransport:
    async def test_records_message(self):
        transport = LogTransport()

        result = await transport.send(_make_message())

        assert result.success is True
        assert result.provider == "log"
        assert result.message_id.startswith("log-")
        assert transport.sent[0].task_ids == [1, 2]


class TestTransportFactory:
    def test_default_provider_is_log(self):
        assert isinstance(create_transport(), LogTransport)

    def test_brevo_requires_key(self):
        with pytest.raises(ConfigurationError):
            create_transport("brevo")

    def test_brevo_from_environment(self, monkeypatch):
        monkeypatch.setenv("NOTIFY_PROVIDER", "brevo")
        monkeypatch.setenv("NOTIFY_API_KEY", "env-key")
        reset_settings()

        transport = create_transport()

        assert isinstance(transport, BrevoEmailTransport)
        assert transport.settings.api_key == "env-key"

    async def test_singleton(self):
        first = get_notification_transport()
        assert get_notification_transport() is first

        await close_notification_transport()

        assert get_notification_transport() is not first
        await close_notification_transport()
