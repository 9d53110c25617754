"""Storage paths for delivery artifacts."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class ArtifactPath:
    """Path of one artifact, partitioned by tenant and delivery."""

    tenant_id: UUID
    delivery_id: UUID
    filename: str

    def __post_init__(self) -> None:
        if not self.filename or "/" in self.filename or self.filename in (".", ".."):
            raise ValueError(f"Invalid artifact filename: {self.filename!r}")

    def __str__(self) -> str:
        return f"{self.tenant_id}/{self.delivery_id}/{self.filename}"
