"""Access token DTOs."""

from dataclasses import dataclass
from datetime import datetime

from handoff.domain.entities import AccessToken, Delivery
from handoff.domain.value_objects import TokenStatus


@dataclass(frozen=True)
class TokenValidation:
    """Validation code plus the token when it exists."""

    status: TokenStatus
    access_token: AccessToken | None = None

    @property
    def ok(self) -> bool:
        return self.status == TokenStatus.OK


@dataclass(frozen=True)
class DownloadOutput:
    """Final document ready to be served."""

    filename: str
    content: bytes
    content_type: str = "application/pdf"


@dataclass(frozen=True)
class DownloadInfo:
    """Public facts about a downloadable document."""

    delivery: Delivery
    expires_at: datetime
