"""SendGrid v3 mail client used as the alert transport."""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

import httpx

from config.monitor_config import split_list
from domain.exceptions import ConfigurationError, NotificationError
from domain.interfaces import INotifier

logger = logging.getLogger(__name__)

SENDGRID_API_URL = "https://api.sendgrid.com/v3"


@dataclass(frozen=True)
class SendGridConfig:
    api_key: str
    from_email: str
    recipients: Tuple[str, ...]
    from_name: str = "Host Monitor"
    timeout_s: float = 30.0

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str], *, timeout_s: float = 30.0) -> "SendGridConfig":
        api_key = (mapping.get("sendgrid.api.key") or "").strip()
        from_email = (mapping.get("email.from") or "").strip()
        recipients = split_list(mapping.get("email.to"))
        if not api_key:
            raise ConfigurationError("SendGrid API key not configured", key="sendgrid.api.key")
        if not from_email:
            raise ConfigurationError("email.from not configured", key="email.from")
        if not recipients:
            raise ConfigurationError("email.to not configured", key="email.to")
        return cls(
            api_key=api_key,
            from_email=from_email,
            recipients=recipients,
            from_name=(mapping.get("email.from.name") or "Host Monitor").strip(),
            timeout_s=timeout_s,
        )


class SendGridNotifier(INotifier):
    """Asynchronous SendGrid client; one personalization per recipient."""

    def __init__(self, config: SendGridConfig, *, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self.session: Optional[httpx.AsyncClient] = None
        self.last_status_code: Optional[int] = None
        self._transport = transport

    async def __aenter__(self):
        self.session = httpx.AsyncClient(
            base_url=SENDGRID_API_URL,
            timeout=self.config.timeout_s,
            headers={"Authorization": f"Bearer {self.config.api_key}"},
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *_):
        if self.session:
            await self.session.aclose()
            self.session = None

    def build_payload(self, subject: str, body: str, recipients: Sequence[str]) -> Dict[str, Any]:
        return {
            "personalizations": [{"to": [{"email": r}]} for r in recipients],
            "from": {"email": self.config.from_email, "name": self.config.from_name},
            "subject": subject,
            "content": [{"type": "text/plain", "value": body}],
        }

    async def send(self, subject: str, body: str, recipients: Sequence[str]) -> bool:
        if self.session is None:
            raise NotificationError("SendGrid client is not open")
        recipients = [r for r in recipients if r.strip()]
        if not recipients:
            logger.warning("No recipients for '%s'", subject)
            return False
        try:
            resp = await self.session.post("/mail/send", json=self.build_payload(subject, body, recipients))
        except httpx.HTTPError as e:
            raise NotificationError(f"SendGrid request failed: {e}") from e

        self.last_status_code = resp.status_code
        if 200 <= resp.status_code < 300:
            logger.info("Email sent. Status code: %s", resp.status_code)
            return True
        logger.warning("Failed to send email. Status code: %s, Body: %s", resp.status_code, resp.text)
        return False
