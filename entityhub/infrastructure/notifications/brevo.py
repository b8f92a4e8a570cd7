"""
Brevo transactional email transport.

Posts one digest per call to the Brevo SMTP API. Connection errors and
timeouts are retried with exponential backoff; an HTTP error response is
reported as an unsuccessful delivery.
"""

from typing import Any

import httpx
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from entityhub.config import get_logger, get_settings
from entityhub.config.settings import NotificationSettings
from entityhub.core.entities.reminder import DeliveryResult, DigestMessage
from entityhub.core.exceptions import ConfigurationError, TransportError
from entityhub.core.interfaces.notification import INotificationTransport

logger = get_logger(__name__)

RETRYABLE_ERRORS = (httpx.TransportError, ConnectionError, TimeoutError)


class BrevoEmailTransport(INotificationTransport):
    """Send digests through the Brevo v3 SMTP endpoint."""

    name = "brevo"

    def __init__(
        self,
        settings: NotificationSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        settings = settings or get_settings().notify
        if not settings.api_key:
            raise ConfigurationError(
                "NOTIFY_API_KEY is required for the brevo provider",
                code="MISSING_API_KEY",
                details={"provider": self.name},
            )
        self.settings = settings
        self._client = client

    def _build_payload(self, message: DigestMessage) -> dict[str, Any]:
        return {
            "sender": {
                "name": self.settings.sender_name,
                "email": self.settings.sender_email,
            },
            "to": [{"email": message.to_email, "name": message.to_name}],
            "subject": message.subject,
            "htmlContent": message.html_body,
            "textContent": message.text_body,
        }

    def _get_retry_decorator(self) -> Any:
        delay = self.settings.retry_delay
        return retry(
            stop=stop_after_attempt(max(1, self.settings.max_retries)),
            wait=wait_exponential(multiplier=delay, min=delay, max=delay * 8),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            before_sleep=self._log_retry,
            reraise=True,
        )

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        logger.warning(
            "brevo_send_retry",
            attempt=retry_state.attempt_number,
            error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    async def _post(self, payload: dict[str, Any]) -> httpx.Response:
        headers = {
            "accept": "application/json",
            "content-type": "application/json",
            "api-key": self.settings.api_key or "",
        }
        if self._client is not None:
            return await self._client.post(
                self.settings.api_url, json=payload, headers=headers
            )
        async with httpx.AsyncClient(timeout=self.settings.timeout) as client:
            return await client.post(self.settings.api_url, json=payload, headers=headers)

    async def send(self, message: DigestMessage) -> DeliveryResult:
        """Send one digest, retrying connection failures."""
        payload = self._build_payload(message)

        try:
            response = await self._get_retry_decorator()(self._post)(payload)
        except RETRYABLE_ERRORS as e:
            raise TransportError(self.name, str(e) or type(e).__name__) from e

        if not response.is_success:
            error_text = response.text[:200]
            logger.error(
                "brevo_send_rejected",
                recipient_id=message.recipient_id,
                status_code=response.status_code,
                error=error_text,
            )
            return DeliveryResult(
                recipient_id=message.recipient_id,
                email=message.to_email,
                success=False,
                task_count=len(message.task_ids),
                provider=self.name,
                error=f"HTTP {response.status_code}: {error_text}",
            )

        message_id = None
        try:
            message_id = response.json().get("messageId")
        except ValueError:
            pass

        return DeliveryResult(
            recipient_id=message.recipient_id,
            email=message.to_email,
            success=True,
            task_count=len(message.task_ids),
            provider=self.name,
            message_id=message_id,
        )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
