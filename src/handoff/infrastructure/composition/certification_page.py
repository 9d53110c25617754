"""Certification page rendering.

Draws the single page appended to every final document: banner, delivery
facts, the framed signature image, the SHA-256 of the original and a short
disclaimer. Uses reportlab for drawing and Pillow to decode the signature.
"""

from datetime import UTC, datetime
from io import BytesIO

from PIL import Image, UnidentifiedImageError
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from handoff.application.dto.composition import CertificationMetadata
from handoff.domain.exceptions import CompositionError

BANNER = "CERTIFICATE OF SIGNED DELIVERY"
DISCLAIMER = (
    "This page certifies that the recipient signed for the material described",
    "on the preceding pages. The signature was captured electronically.",
)
NO_DOC_NUMBER = "None"

MARGIN = 50.0
LABEL_COLUMN = 120.0
SIGNATURE_MAX_WIDTH = 300.0
SIGNATURE_MAX_HEIGHT = 120.0
SIGNATURE_PADDING = 10.0
VALUE_FONT = "Helvetica"
VALUE_FONT_SIZE = 10
VALUE_LINE_HEIGHT = 13.0
VALUE_MAX_LINES = 3
ELLIPSIS = "..."


def format_timestamp(value: datetime) -> str:
    """Human-readable UTC timestamp printed on the page."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime("%Y-%m-%d %H:%M:%S UTC")


def fit_signature(
    width: float,
    height: float,
    max_width: float = SIGNATURE_MAX_WIDTH,
    max_height: float = SIGNATURE_MAX_HEIGHT,
) -> tuple[float, float]:
    """Scale (width, height) into the box, keeping aspect ratio, never upscaling."""
    if width <= 0 or height <= 0:
        raise CompositionError("Signature image has no area")
    scale = min(max_width / width, max_height / height, 1.0)
    return width * scale, height * scale


def wrap_value(
    value: str,
    max_width: float,
    font: str = VALUE_FONT,
    size: float = VALUE_FONT_SIZE,
    max_lines: int = VALUE_MAX_LINES,
) -> list[str]:
    """Split value into lines that fit max_width.

    Words wider than a line are broken by character. Anything past max_lines
    is cut and the last line ends with an ellipsis.
    """
    lines: list[str] = []
    for line in simpleSplit(value, font, size, max_width) or [""]:
        while stringWidth(line, font, size) > max_width:
            cut = len(line) - 1
            while cut > 1 and stringWidth(line[:cut], font, size) > max_width:
                cut -= 1
            lines.append(line[:cut])
            line = line[cut:]
        lines.append(line)
    if len(lines) > max_lines:
        last = lines[max_lines - 1]
        while last and stringWidth(last + ELLIPSIS, font, size) > max_width:
            last = last[:-1]
        lines = lines[: max_lines - 1] + [last + ELLIPSIS]
    return lines


def load_signature_image(data: bytes) -> Image.Image:
    """Decode signature bytes (PNG, JPEG, ...) into an RGBA image."""
    try:
        image = Image.open(BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise CompositionError(f"Invalid signature image: {e}") from e
    return image.convert("RGBA")


def render_certification_page(
    signature: Image.Image,
    metadata: CertificationMetadata,
    original_hash: str,
    generated_at: datetime,
) -> bytes:
    """Render the certification page as a one-page PDF."""
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=A4, invariant=1)
    width, height = A4
    y = height - MARGIN

    # Banner
    c.setFillColorRGB(0.1, 0.1, 0.1)
    c.setFont("Helvetica-Bold", 18)
    c.drawString(MARGIN, y, BANNER)
    y -= 35

    c.setStrokeColorRGB(0.7, 0.7, 0.7)
    c.setLineWidth(1)
    c.line(MARGIN, y, width - MARGIN, y)
    y -= 30

    # Delivery facts
    value_width = width - 2 * MARGIN - LABEL_COLUMN
    fields = [
        ("Business", metadata.business_name),
        ("Document", metadata.doc_number or NO_DOC_NUMBER),
        ("Signer", metadata.signer_name),
        ("Signed at", format_timestamp(metadata.signed_at)),
        ("Delivery ID", str(metadata.delivery_id)),
    ]
    for label, value in fields:
        c.setFillColorRGB(0.3, 0.3, 0.3)
        c.setFont("Helvetica-Bold", 10)
        c.drawString(MARGIN, y, f"{label}:")
        c.setFillColorRGB(0.1, 0.1, 0.1)
        c.setFont(VALUE_FONT, VALUE_FONT_SIZE)
        for line in wrap_value(value, value_width):
            c.drawString(MARGIN + LABEL_COLUMN, y, line)
            y -= VALUE_LINE_HEIGHT
        y -= 20 - VALUE_LINE_HEIGHT
    y -= 15

    # Signature, framed
    c.setFillColorRGB(0.3, 0.3, 0.3)
    c.setFont("Helvetica-Bold", 10)
    c.drawString(MARGIN, y, "Recipient signature:")
    y -= 15

    sig_w, sig_h = fit_signature(*signature.size)
    c.setStrokeColorRGB(0.8, 0.8, 0.8)
    c.setLineWidth(0.5)
    c.setFillColorRGB(1, 1, 1)
    c.rect(
        MARGIN,
        y - sig_h - SIGNATURE_PADDING,
        sig_w + 2 * SIGNATURE_PADDING,
        sig_h + 2 * SIGNATURE_PADDING,
        stroke=1,
        fill=1,
    )
    c.drawImage(
        ImageReader(signature),
        MARGIN + SIGNATURE_PADDING,
        y - sig_h,
        width=sig_w,
        height=sig_h,
        mask="auto",
    )
    y -= sig_h + 40

    # Integrity hash
    c.setStrokeColorRGB(0.8, 0.8, 0.8)
    c.line(MARGIN, y, width - MARGIN, y)
    y -= 20
    c.setFillColorRGB(0.4, 0.4, 0.4)
    c.setFont("Helvetica-Bold", 9)
    c.drawString(MARGIN, y, "Integrity verification of the original document:")
    y -= 15
    c.setFillColorRGB(0.5, 0.5, 0.5)
    c.setFont("Helvetica", 8)
    c.drawString(MARGIN, y, f"SHA-256: {original_hash}")
    y -= 25

    for line in DISCLAIMER:
        c.drawString(MARGIN, y, line)
        y -= 12
    y -= 8

    c.setFillColorRGB(0.6, 0.6, 0.6)
    c.setFont("Helvetica", 7)
    c.drawString(MARGIN, y, f"Generated by Handoff - {format_timestamp(generated_at)}")

    c.showPage()
    c.save()
    return buf.getvalue()
