"""Artifact store port."""

from typing import Protocol

from handoff.domain.value_objects import ArtifactNamespace


class ArtifactStore(Protocol):
    """Blob storage with create-if-absent writes.

    ``put`` raises ArtifactAlreadyExists when the path is taken;
    ``get`` raises ArtifactNotFound when nothing is stored there.
    """

    async def put(self, namespace: ArtifactNamespace, path: str, data: bytes) -> None: ...

    async def get(self, namespace: ArtifactNamespace, path: str) -> bytes: ...

    async def exists(self, namespace: ArtifactNamespace, path: str) -> bool: ...
