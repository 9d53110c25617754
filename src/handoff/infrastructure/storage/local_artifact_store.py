"""Filesystem artifact store.

Layout: ``<root>/<namespace>/<tenant_id>/<delivery_id>/<file>``. Writes use
exclusive-create opens, so a second put to the same path fails atomically.
"""

import asyncio
import os
from pathlib import Path, PurePosixPath

from handoff.domain.exceptions import ArtifactAlreadyExists, ArtifactNotFound, ValidationError
from handoff.domain.value_objects import ArtifactNamespace


class LocalArtifactStore:
    """ArtifactStore on a local (or mounted) directory."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    def _resolve(self, namespace: ArtifactNamespace, path: str) -> Path:
        rel = PurePosixPath(path)
        if rel.is_absolute() or not rel.parts or ".." in rel.parts:
            raise ValidationError(f"Invalid artifact path: {path!r}")
        return self._root / ArtifactNamespace(namespace).value / Path(*rel.parts)

    async def put(self, namespace: ArtifactNamespace, path: str, data: bytes) -> None:
        """Store data at path; raise ArtifactAlreadyExists if it is taken."""
        target = self._resolve(namespace, path)
        await asyncio.to_thread(self._write_new, target, data, namespace, path)

    async def get(self, namespace: ArtifactNamespace, path: str) -> bytes:
        """Read artifact bytes."""
        target = self._resolve(namespace, path)
        try:
            return await asyncio.to_thread(target.read_bytes)
        except FileNotFoundError as e:
            raise ArtifactNotFound(str(namespace), path) from e

    async def exists(self, namespace: ArtifactNamespace, path: str) -> bool:
        target = self._resolve(namespace, path)
        return await asyncio.to_thread(target.is_file)

    @staticmethod
    def _write_new(target: Path, data: bytes, namespace: ArtifactNamespace, path: str) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            fh = target.open("xb")
        except FileExistsError as e:
            raise ArtifactAlreadyExists(str(namespace), path) from e
        try:
            with fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
        except BaseException:
            target.unlink(missing_ok=True)
            raise
