"""Unit tests for the PDF composer and certification page."""

import hashlib
import io
import re
from datetime import UTC, datetime
from uuid import uuid4

import pytest
from pypdf import PdfReader
from reportlab.pdfbase.pdfmetrics import stringWidth

from handoff.application.dto.composition import CertificationMetadata
from handoff.domain.exceptions import CompositionError
from handoff.infrastructure.composition.certification_page import (
    BANNER,
    NO_DOC_NUMBER,
    fit_signature,
    format_timestamp,
    load_signature_image,
    wrap_value,
)
from handoff.infrastructure.composition.pdf_composer import (
    PdfDocumentComposer,
    certifies,
    compose_certified_document,
    count_pages,
)

from tests.conftest import make_pdf, make_signature

GENERATED_AT = datetime(2026, 3, 1, 12, 30, tzinfo=UTC)


def _metadata(doc_number: str | None = "ALB-2026-001") -> CertificationMetadata:
    return CertificationMetadata(
        business_name="Acme Supplies",
        signer_name="Jordan Reyes",
        delivery_id=uuid4(),
        signed_at=datetime(2026, 3, 1, 12, 0, tzinfo=UTC),
        doc_number=doc_number,
    )


def _compose(original: bytes, doc_number: str | None = "ALB-2026-001"):
    return compose_certified_document(
        original, make_signature(), _metadata(doc_number), generated_at=GENERATED_AT
    )


class TestComposeCertifiedDocument:
    def test_three_page_original_gets_certification_as_page_four(self) -> None:
        original = make_pdf(pages=3)
        result = _compose(original)

        reader = PdfReader(io.BytesIO(result.final_bytes))
        assert len(reader.pages) == 4
        last = reader.pages[3].extract_text()
        assert BANNER in last
        assert result.original_hash in last
        assert "ALB-2026-001" in last

    @pytest.mark.parametrize("pages", [1, 2, 7])
    def test_page_count_is_original_plus_one(self, pages: int) -> None:
        result = _compose(make_pdf(pages=pages))
        assert count_pages(result.final_bytes) == pages + 1

    def test_hash_is_sha256_of_received_bytes(self) -> None:
        original = make_pdf(pages=2)
        result = _compose(original)
        assert result.original_hash == hashlib.sha256(original).hexdigest()

    def test_original_pages_are_copied_unmodified_and_in_order(self) -> None:
        original = make_pdf(pages=3)
        result = _compose(original)

        source = PdfReader(io.BytesIO(original))
        final = PdfReader(io.BytesIO(result.final_bytes))
        for i in range(3):
            assert (
                final.pages[i].get_contents().get_data()
                == source.pages[i].get_contents().get_data()
            )
            assert f"Original page {i + 1}" in final.pages[i].extract_text()
        assert BANNER not in final.pages[0].extract_text()

    def test_original_page_size_preserved(self) -> None:
        letter = (612.0, 792.0)
        result = _compose(make_pdf(pages=1, size=letter))
        final = PdfReader(io.BytesIO(result.final_bytes))
        assert float(final.pages[0].mediabox.width) == pytest.approx(612.0)
        assert float(final.pages[0].mediabox.height) == pytest.approx(792.0)

    def test_missing_doc_number_prints_placeholder(self) -> None:
        result = _compose(make_pdf(pages=1), doc_number=None)
        final = PdfReader(io.BytesIO(result.final_bytes))
        assert re.search(rf"Document:\s*{NO_DOC_NUMBER}", final.pages[-1].extract_text())

    def test_recomposition_yields_same_hash_and_page_count(self) -> None:
        original = make_pdf(pages=2)
        first = _compose(original)
        second = _compose(original)
        assert first.original_hash == second.original_hash
        assert count_pages(first.final_bytes) == count_pages(second.final_bytes) == 3

    def test_jpeg_signature_is_accepted(self) -> None:
        result = compose_certified_document(
            make_pdf(pages=1),
            make_signature(fmt="JPEG"),
            _metadata(),
            generated_at=GENERATED_AT,
        )
        assert count_pages(result.final_bytes) == 2

    def test_invalid_pdf_raises_composition_error(self) -> None:
        with pytest.raises(CompositionError, match="Invalid or corrupted PDF"):
            _compose(b"not a pdf at all")

    def test_empty_pdf_bytes_raise_composition_error(self) -> None:
        with pytest.raises(CompositionError):
            _compose(b"")

    def test_invalid_signature_raises_composition_error(self) -> None:
        with pytest.raises(CompositionError, match="Invalid signature image"):
            compose_certified_document(
                make_pdf(pages=1), b"\x89PNG broken", _metadata(), generated_at=GENERATED_AT
            )


class TestPdfDocumentComposer:
    def test_compose_uses_clock_for_footer(self) -> None:
        composer = PdfDocumentComposer(clock=lambda: GENERATED_AT)
        result = composer.compose(make_pdf(pages=1), make_signature(), _metadata())
        text = PdfReader(io.BytesIO(result.final_bytes)).pages[-1].extract_text()
        assert format_timestamp(GENERATED_AT) in text


class TestCertifies:
    def test_composed_document_certifies_its_original(self) -> None:
        original = make_pdf(pages=3)
        assert certifies(_compose(original).final_bytes, original)

    def test_other_original_is_not_certified(self) -> None:
        final = _compose(make_pdf(pages=3)).final_bytes
        assert not certifies(final, make_pdf(pages=3, size=(612, 792)))

    def test_plain_pdf_is_not_a_certified_document(self) -> None:
        original = make_pdf(pages=2)
        assert not certifies(make_pdf(pages=3), original)

    def test_unreadable_final_is_rejected(self) -> None:
        assert not certifies(b"not a pdf", make_pdf())


class TestFitSignature:
    def test_wide_image_limited_by_width(self) -> None:
        assert fit_signature(600, 100) == pytest.approx((300.0, 50.0))

    def test_tall_image_limited_by_height(self) -> None:
        assert fit_signature(200, 240) == pytest.approx((100.0, 120.0))

    def test_small_image_is_not_upscaled(self) -> None:
        assert fit_signature(150, 60) == (150, 60)

    def test_zero_area_rejected(self) -> None:
        with pytest.raises(CompositionError):
            fit_signature(0, 10)


def test_load_signature_image_converts_to_rgba() -> None:
    image = load_signature_image(make_signature(fmt="JPEG"))
    assert image.mode == "RGBA"
    assert image.size == (600, 200)


def test_format_timestamp_treats_naive_as_utc() -> None:
    assert format_timestamp(datetime(2026, 1, 2, 3, 4, 5)) == "2026-01-02 03:04:05 UTC"


class TestWrapValue:
    def test_short_value_is_one_line(self) -> None:
        assert wrap_value("Acme Supplies", 200) == ["Acme Supplies"]

    def test_long_value_lines_fit_width(self) -> None:
        lines = wrap_value("Northwind Regional Logistics and Warehousing Cooperative", 150)
        assert len(lines) > 1
        assert all(stringWidth(line, "Helvetica", 10) <= 150 for line in lines)
        assert " ".join(lines) == "Northwind Regional Logistics and Warehousing Cooperative"

    def test_unbroken_word_is_split_by_character(self) -> None:
        lines = wrap_value("X" * 60, 100)
        assert "".join(lines) == "X" * 60
        assert all(stringWidth(line, "Helvetica", 10) <= 100 for line in lines)

    def test_overflow_is_cut_with_ellipsis(self) -> None:
        lines = wrap_value("word " * 200, 150, max_lines=3)
        assert len(lines) == 3
        assert lines[-1].endswith("...")
        assert stringWidth(lines[-1], "Helvetica", 10) <= 150


def test_long_names_stay_on_one_certification_page() -> None:
    metadata = CertificationMetadata(
        business_name="Northwind Regional Logistics " * 10,
        signer_name="Maximiliana Alexandra Konstantinopoulou-Vanderbilt " * 3,
        delivery_id=uuid4(),
        signed_at=datetime(2026, 3, 1, 12, 0, tzinfo=UTC),
    )
    original = make_pdf(pages=2)

    result = compose_certified_document(original, make_signature(), metadata, GENERATED_AT)

    reader = PdfReader(io.BytesIO(result.final_bytes))
    assert len(reader.pages) == 3
    last = reader.pages[-1].extract_text()
    assert "Northwind Regional Logistics" in last
    assert result.original_hash in last
