"""Artifact storage namespaces."""

from enum import StrEnum


class ArtifactNamespace(StrEnum):
    """Namespaces of the artifact store."""

    SIGNATURE = "signature"
    ORIGINAL = "original"
    FINAL = "final"
