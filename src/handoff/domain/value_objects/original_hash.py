"""Integrity hash of the original document."""

import hashlib
import re
from dataclasses import dataclass

_HEX_DIGEST = re.compile(r"^[0-9a-f]{64}$")


@dataclass(frozen=True)
class OriginalHash:
    """SHA-256 of the original document bytes, hex-encoded."""

    value: str

    def __post_init__(self) -> None:
        if not _HEX_DIGEST.match(self.value):
            raise ValueError("SHA-256 hash must be 64 lowercase hex characters")

    @classmethod
    def of(cls, data: bytes) -> "OriginalHash":
        """Hash exactly the given bytes."""
        return cls(hashlib.sha256(data).hexdigest())

    def __str__(self) -> str:
        return self.value
