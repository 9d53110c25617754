"""Finalization outcome DTO."""

from dataclasses import dataclass
from enum import StrEnum


class FinalizeOutcome(StrEnum):
    """Possible results of a finalization attempt."""

    FINALIZED = "finalized"
    ALREADY_FINALIZED = "already_finalized"
    NOT_READY = "not_ready"
    LOCK_HELD = "lock_held"
    FAILED = "failed"


@dataclass(frozen=True)
class FinalizeResult:
    """Outcome of ``FinalizationCoordinator.try_finalize``."""

    outcome: FinalizeOutcome
    reason: str | None = None

    @property
    def finalized(self) -> bool:
        """The delivery has a final document after this call."""
        return self.outcome in (FinalizeOutcome.FINALIZED, FinalizeOutcome.ALREADY_FINALIZED)

    @classmethod
    def failed(cls, reason: str) -> "FinalizeResult":
        return cls(FinalizeOutcome.FAILED, reason)
