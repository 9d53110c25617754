"""Document composer port."""

from typing import Protocol

from handoff.application.dto.composition import CertificationMetadata, ComposedDocument


class DocumentComposer(Protocol):
    """Merges an original document and a signature into a certified document."""

    def compose(
        self,
        original: bytes,
        signature_image: bytes,
        metadata: CertificationMetadata,
    ) -> ComposedDocument:
        """Raises CompositionError on unreadable input."""
        ...

    def certifies(self, final: bytes, original: bytes) -> bool:
        """True if final holds every page of original plus a certification page for it."""
        ...
