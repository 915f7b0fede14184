"""SMS notifier backed by the invite edge function.

The edge function wraps the SMS gateway and expects:
    POST {sms_invite_url}
    Authorization: Bearer <sms_api_key>
    { "phone": "+15551234567", "message": "..." }

and answers ``{"success": true, "messageId": "SM..."}``.
"""

from typing import Any

import httpx
import structlog

from core.config import settings
from infrastructure.sms.provider import SmsResult

logger = structlog.get_logger()


class EdgeFunctionSmsNotifier:
    """Send SMS invitations through an HTTP edge function."""

    def __init__(
        self,
        url: str = settings.sms_invite_url,
        api_key: str = settings.sms_api_key,
        timeout: float = settings.sms_timeout_seconds,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    async def send(self, phone: str, template: str, args: dict[str, Any]) -> SmsResult:
        """Render the template and post it to the edge function."""
        if not self._url:
            logger.warning("sms_not_configured", phone=phone)
            return SmsResult(success=False, error="SMS delivery is not configured")

        try:
            body = template.format(**args)
        except (KeyError, IndexError) as e:
            logger.error("sms_template_invalid", error=str(e))
            return SmsResult(success=False, error=f"Invalid SMS template: {e}")

        headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else {}
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                response = await client.post(
                    self._url,
                    json={"phone": phone, "message": body},
                    headers=headers,
                )
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("sms_send_failed", phone=phone, error=str(e))
            return SmsResult(success=False, error=str(e))

        if not data.get("success", False):
            error = str(data.get("error") or "SMS gateway rejected the message")
            logger.warning("sms_send_rejected", phone=phone, error=error)
            return SmsResult(success=False, error=error)

        return SmsResult(success=True, message_id=data.get("messageId"))
