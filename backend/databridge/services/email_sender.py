"""Email sender service - sends alerts through a transactional email HTTP API."""
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from ..config import settings

logger = logging.getLogger(__name__)


@dataclass
class EmailConfig:
    """Transactional email provider configuration."""
    api_url: str
    api_key: str
    from_address: str
    reply_to: str = ""
    timeout: float = 10.0


def email_config_from_settings() -> EmailConfig:
    """Build the provider config from application settings."""
    return EmailConfig(
        api_url=settings.email_api_url,
        api_key=settings.resend_api_key or "",
        from_address=settings.alert_email_from,
        reply_to=settings.alert_reply_to,
        timeout=settings.email_timeout_seconds,
    )


class EmailSenderService:
    """Service for sending HTML email via the provider API, one recipient per call."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        # Tests inject an httpx.MockTransport
        self._transport = transport

    async def send_email(
        self,
        config: EmailConfig,
        to_address: str,
        subject: str,
        html: str,
    ) -> bool:
        """Send one email.

        Returns True when the provider accepts the message, False on a
        rejection, a timeout or a transport error.
        """
        if not config.api_key or not to_address:
            logger.warning("Email not configured - missing API key or recipient")
            return False

        payload = {
            "from": config.from_address,
            "to": [to_address],
            "subject": subject,
            "html": html,
        }
        if config.reply_to:
            payload["reply_to"] = config.reply_to

        headers = {
            "Authorization": f"Bearer {config.api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=config.timeout, transport=self._transport) as client:
                response = await client.post(config.api_url, json=payload, headers=headers)
            if response.status_code < 400:
                logger.info(f"Email sent to {to_address}: {subject}")
                return True
            logger.warning(f"Email API returned {response.status_code} for {to_address}: {response.text}")
            return False
        except httpx.TimeoutException as e:
            logger.error(f"Timeout sending email to {to_address}: {e}")
            return False
        except httpx.HTTPError as e:
            logger.error(f"Failed to send email to {to_address}: {type(e).__name__}: {e}")
            return False


# Global instance
email_sender_service = EmailSenderService()
