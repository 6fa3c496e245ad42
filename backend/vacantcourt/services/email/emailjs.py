"""EmailJS REST client: sends one templated email per call. Credentials from settings (EMAILJS_*)."""
import logging
from typing import Any

import httpx

from vacantcourt.core.constants import EMAIL_SEND_TIMEOUT_SECONDS
from vacantcourt.core.errors import EmailDispatchError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.emailjs.com/api/v1.0/email/send"


class EmailJSClient:
    """EmailJS template send. The template itself (subject/body) lives in the EmailJS dashboard."""

    provider_id = "emailjs"

    def __init__(
        self,
        *,
        service_id: str,
        template_id: str,
        public_key: str,
        private_key: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = EMAIL_SEND_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.service_id = service_id
        self.template_id = template_id
        self.public_key = public_key
        self.private_key = private_key
        self.api_url = api_url
        self._timeout = timeout
        self._transport = transport

    def is_configured(self) -> bool:
        return bool(self.service_id and self.template_id and self.public_key and self.private_key)

    def _payload(self, template_params: dict[str, str]) -> dict[str, Any]:
        return {
            "service_id": self.service_id,
            "template_id": self.template_id,
            "user_id": self.public_key,
            "accessToken": self.private_key,
            "template_params": template_params,
        }

    def send(self, to_email: str, template_params: dict[str, str]) -> None:
        if not self.is_configured():
            raise EmailDispatchError("EmailJS credentials not configured. Set EMAILJS_* in .env.")
        params = {**template_params, "to_email": to_email}
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as c:
                r = c.post(self.api_url, json=self._payload(params))
        except httpx.HTTPError as e:
            raise EmailDispatchError(f"EmailJS request failed: {e}") from e
        if not r.is_success:
            raise EmailDispatchError(
                f"EmailJS API error: {r.status_code} {(r.text or '')[:500]}".strip()
            )
        logger.info("EmailJS email sent to %s for %s", to_email, template_params.get("court_name"))
