"""Notifier port for delivery-ready messages."""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


@dataclass(frozen=True)
class DeliveryNotification:
    """Message telling the recipient the signed document is available."""

    to: str
    signer_name: str
    business_name: str
    doc_number: str | None
    download_url: str
    expires_at: datetime


class Notifier(Protocol):
    """Best-effort outbound notification."""

    async def send_delivery_ready(self, notification: DeliveryNotification) -> bool: ...
