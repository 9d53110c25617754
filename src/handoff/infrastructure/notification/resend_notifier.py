"""Delivery-ready email through the Resend HTTP API."""

import logging
from html import escape

import httpx

from handoff.application.ports.notifier import DeliveryNotification

logger = logging.getLogger(__name__)


def build_subject(notification: DeliveryNotification) -> str:
    subject = "Your signed document is ready"
    if notification.doc_number:
        subject += f" - {notification.doc_number}"
    return subject


def build_html(notification: DeliveryNotification) -> str:
    """Minimal HTML body with the download link."""
    expires = notification.expires_at.strftime("%Y-%m-%d %H:%M UTC")
    doc = escape(notification.doc_number) if notification.doc_number else "your delivery"
    return (
        "<!DOCTYPE html><html><body>"
        f"<p>Hello {escape(notification.signer_name)},</p>"
        f"<p>{escape(notification.business_name)} has certified the signed receipt of {doc}.</p>"
        f'<p><a href="{escape(notification.download_url, quote=True)}">Download the document</a></p>'
        f"<p>The link is valid until {expires}.</p>"
        "</body></html>"
    )


class ResendNotifier:
    """Notifier posting to Resend. Never raises: returns False on any failure."""

    def __init__(
        self,
        api_key: str,
        sender: str,
        base_url: str = "https://api.resend.com",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._sender = sender
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def send_delivery_ready(self, notification: DeliveryNotification) -> bool:
        """Send the email; False when disabled or when delivery failed."""
        if not self._api_key:
            logger.warning("Resend API key not configured, skipping email to %s", notification.to)
            return False
        payload = {
            "from": f"{notification.business_name} <{self._sender}>",
            "to": [notification.to],
            "subject": build_subject(notification),
            "html": build_html(notification),
        }
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    "/emails",
                    json=payload,
                    headers={"Authorization": f"Bearer {self._api_key}"},
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Failed to send delivery email to %s: %s", notification.to, e)
            return False
        return True
