"""PDF document composer: original pages followed by one certification page."""

import io
from collections.abc import Callable
from datetime import UTC, datetime

from pypdf import PdfReader, PdfWriter

from handoff.application.dto.composition import CertificationMetadata, ComposedDocument
from handoff.domain.exceptions import CompositionError
from handoff.domain.value_objects import OriginalHash
from handoff.infrastructure.composition.certification_page import (
    BANNER,
    load_signature_image,
    render_certification_page,
)


def _read_pdf(data: bytes) -> PdfReader:
    """Parse PDF bytes; raise CompositionError for anything unusable."""
    try:
        reader = PdfReader(io.BytesIO(data))
        page_count = len(reader.pages)
    except Exception as e:
        raise CompositionError(f"Invalid or corrupted PDF: {e}") from e
    if reader.is_encrypted:
        raise CompositionError("Encrypted PDFs are not supported")
    if page_count == 0:
        raise CompositionError("PDF has no pages")
    return reader


def count_pages(data: bytes) -> int:
    """Number of pages in a PDF."""
    return len(_read_pdf(data).pages)


def compose_certified_document(
    original: bytes,
    signature_image: bytes,
    metadata: CertificationMetadata,
    generated_at: datetime,
) -> ComposedDocument:
    """Copy every original page unmodified and append the certification page.

    The hash covers the received bytes, computed before parsing.
    """
    original_hash = OriginalHash.of(original)
    reader = _read_pdf(original)
    signature = load_signature_image(signature_image)
    certification = PdfReader(
        io.BytesIO(
            render_certification_page(signature, metadata, original_hash.value, generated_at)
        )
    )

    writer = PdfWriter()
    for page in reader.pages:
        writer.add_page(page)
    writer.add_page(certification.pages[0])

    buf = io.BytesIO()
    try:
        writer.write(buf)
    except Exception as e:
        raise CompositionError(f"Failed to write final PDF: {e}") from e
    return ComposedDocument(final_bytes=buf.getvalue(), original_hash=original_hash.value)


def certifies(final: bytes, original: bytes) -> bool:
    """Whether final is original plus one certification page carrying its hash."""
    try:
        expected_pages = count_pages(original) + 1
        reader = _read_pdf(final)
        if len(reader.pages) != expected_pages:
            return False
        last = reader.pages[-1].extract_text()
    except CompositionError:
        return False
    return BANNER in last and OriginalHash.of(original).value in last


class PdfDocumentComposer:
    """DocumentComposer backed by pypdf and reportlab."""

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(UTC))

    def compose(
        self,
        original: bytes,
        signature_image: bytes,
        metadata: CertificationMetadata,
    ) -> ComposedDocument:
        return compose_certified_document(
            original, signature_image, metadata, generated_at=self._clock()
        )

    def certifies(self, final: bytes, original: bytes) -> bool:
        return certifies(final, original)
