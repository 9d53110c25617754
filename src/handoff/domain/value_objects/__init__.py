"""Domain value objects."""

from handoff.domain.value_objects.actor_kind import ActorKind
from handoff.domain.value_objects.artifact_namespace import ArtifactNamespace
from handoff.domain.value_objects.artifact_path import ArtifactPath
from handoff.domain.value_objects.delivery_status import DeliveryStatus
from handoff.domain.value_objects.original_hash import OriginalHash
from handoff.domain.value_objects.token_status import TokenStatus
from handoff.domain.value_objects.token_type import TokenType

__all__ = [
    "ActorKind",
    "ArtifactNamespace",
    "ArtifactPath",
    "DeliveryStatus",
    "OriginalHash",
    "TokenStatus",
    "TokenType",
]
