"""Delivery lifecycle status."""

from enum import StrEnum


class DeliveryStatus(StrEnum):
    """Lifecycle of a delivery record."""

    CREATED = "CREATED"
    SIGNED = "SIGNED"
    DOC_UPLOADED = "DOC_UPLOADED"
    FINALIZED = "FINALIZED"
    CLOSED = "CLOSED"
    EXPIRED = "EXPIRED"

    @property
    def is_terminal(self) -> bool:
        """CLOSED and EXPIRED records are never processed again."""
        return self in (DeliveryStatus.CLOSED, DeliveryStatus.EXPIRED)

    @property
    def accepts_artifacts(self) -> bool:
        return self in (
            DeliveryStatus.CREATED,
            DeliveryStatus.SIGNED,
            DeliveryStatus.DOC_UPLOADED,
        )
