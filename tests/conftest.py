"""Pytest fixtures for Handoff tests."""

from __future__ import annotations

import asyncio
import io
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from handoff.application.use_cases.audit.audit_log import AuditLog
from handoff.application.use_cases.finalization.try_finalize import FinalizationCoordinator
from handoff.application.use_cases.tokens.access_token_issuer import AccessTokenIssuer
from handoff.domain.entities import AccessToken, AuditEvent, Delivery
from handoff.domain.exceptions import ArtifactAlreadyExists, ArtifactNotFound
from handoff.domain.value_objects import ArtifactNamespace, ArtifactPath, DeliveryStatus
from handoff.infrastructure.composition.pdf_composer import PdfDocumentComposer

_OPEN = (DeliveryStatus.CREATED, DeliveryStatus.SIGNED, DeliveryStatus.DOC_UPLOADED)


# --- Test data builders ---


def make_pdf(pages: int = 3, size: tuple[float, float] = (595.27, 841.89)) -> bytes:
    """PDF with one line of text per page: 'Original page N'."""
    from reportlab.pdfgen import canvas

    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=size)
    for i in range(1, pages + 1):
        c.setFont("Helvetica", 14)
        c.drawString(72, size[1] - 72, f"Original page {i}")
        c.showPage()
    c.save()
    return buf.getvalue()


def make_signature(width: int = 600, height: int = 200, fmt: str = "PNG") -> bytes:
    """Signature-like image: white background with a dark stroke."""
    from PIL import Image, ImageDraw

    mode = "RGBA" if fmt == "PNG" else "RGB"
    image = Image.new(mode, (width, height), "white")
    draw = ImageDraw.Draw(image)
    draw.line((10, height - 10, width - 10, 10), fill="black", width=3)
    buf = io.BytesIO()
    image.save(buf, format=fmt)
    return buf.getvalue()


class FakeClock:
    """Controllable clock callable."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


# --- Fake repositories ---


class FakeDeliveryRepository:
    """In-memory delivery repository.

    Conditional updates never await between check and write, so they are
    atomic with respect to other coroutines on the loop.
    """

    def __init__(self) -> None:
        self._by_id: dict[UUID, Delivery] = {}
        self.lock_attempts = 0

    def add(self, delivery: Delivery) -> Delivery:
        """Helper to seed a delivery (for tests)."""
        self._by_id[delivery.id] = replace(delivery)
        return delivery

    def peek(self, delivery_id: UUID) -> Delivery:
        """Helper returning the stored record itself (for tests)."""
        return self._by_id[delivery_id]

    async def get_by_id(self, delivery_id: UUID) -> Delivery | None:
        d = self._by_id.get(delivery_id)
        return replace(d) if d else None

    async def create(self, delivery: Delivery) -> Delivery:
        self._by_id[delivery.id] = replace(delivery)
        return delivery

    async def attach_signature(self, delivery_id: UUID, ref: str, signed_at: datetime) -> bool:
        d = self._by_id.get(delivery_id)
        if not d or d.signature_ref is not None or d.status not in _OPEN:
            return False
        d.signature_ref = ref
        d.signed_at = signed_at
        d.status = DeliveryStatus.SIGNED
        return True

    async def attach_original(self, delivery_id: UUID, ref: str) -> bool:
        d = self._by_id.get(delivery_id)
        if not d or d.original_doc_ref is not None or d.status not in _OPEN:
            return False
        d.original_doc_ref = ref
        d.status = DeliveryStatus.DOC_UPLOADED
        return True

    async def acquire_finalize_lock(
        self,
        delivery_id: UUID,
        stamp: datetime,
        stale_before: datetime | None = None,
    ) -> bool:
        self.lock_attempts += 1
        d = self._by_id.get(delivery_id)
        if not d or d.final_doc_ref is not None:
            return False
        if d.finalizing_at is not None and (
            stale_before is None or d.finalizing_at >= stale_before
        ):
            return False
        d.finalizing_at = stamp
        return True

    async def mark_finalized(
        self,
        delivery_id: UUID,
        stamp: datetime,
        final_doc_ref: str,
        original_hash: str,
        finalized_at: datetime,
    ) -> bool:
        d = self._by_id.get(delivery_id)
        if not d or d.finalizing_at != stamp or d.final_doc_ref is not None:
            return False
        d.status = DeliveryStatus.FINALIZED
        d.final_doc_ref = final_doc_ref
        d.original_hash = original_hash
        d.finalized_at = finalized_at
        d.finalizing_at = None
        return True

    async def release_finalize_lock(self, delivery_id: UUID, stamp: datetime) -> bool:
        d = self._by_id.get(delivery_id)
        if not d or d.finalizing_at != stamp:
            return False
        d.finalizing_at = None
        return True


class FakeAccessTokenRepository:
    """In-memory access token repository."""

    def __init__(self) -> None:
        self._by_token: dict[str, AccessToken] = {}

    @property
    def all(self) -> list[AccessToken]:
        return list(self._by_token.values())

    async def get_by_token(self, token: str) -> AccessToken | None:
        t = self._by_token.get(token)
        return replace(t) if t else None

    async def list_by_delivery(self, delivery_id: UUID) -> list[AccessToken]:
        return [replace(t) for t in self._by_token.values() if t.delivery_id == delivery_id]

    async def create(self, access_token: AccessToken) -> AccessToken:
        if access_token.token in self._by_token:
            raise ValueError("duplicate token")
        self._by_token[access_token.token] = replace(access_token)
        return access_token

    async def mark_used(self, token_id: UUID, used_at: datetime) -> None:
        for t in self._by_token.values():
            if t.id == token_id and t.used_at is None:
                t.used_at = used_at

    async def revoke(self, token_id: UUID, revoked_at: datetime) -> None:
        for t in self._by_token.values():
            if t.id == token_id and t.revoked_at is None:
                t.revoked_at = revoked_at


class FakeAuditEventRepository:
    """In-memory append-only audit trail."""

    def __init__(self) -> None:
        self.events: list[AuditEvent] = []

    async def append(self, event: AuditEvent) -> AuditEvent:
        self.events.append(event)
        return event

    async def list_by_delivery(self, delivery_id: UUID) -> list[AuditEvent]:
        return [e for e in self.events if e.delivery_id == delivery_id]

    def types(self) -> list[str]:
        """Helper listing event types in order (for tests)."""
        return [e.event_type for e in self.events]


# --- Fake UnitOfWork ---


class FakeUnitOfWork:
    """In-memory Unit of Work with fake repositories."""

    def __init__(self) -> None:
        self.deliveries = FakeDeliveryRepository()
        self.access_tokens = FakeAccessTokenRepository()
        self.audit_events = FakeAuditEventRepository()

    async def commit(self) -> None:
        pass

    async def rollback(self) -> None:
        pass


# --- Fake artifact store ---


class InMemoryArtifactStore:
    """ArtifactStore keeping blobs in a dict.

    Each call yields to the loop once before touching state, so concurrent
    callers interleave the way they would against real storage.
    """

    def __init__(self) -> None:
        self.blobs: dict[tuple[str, str], bytes] = {}
        self.fail_get: dict[ArtifactNamespace, Exception] = {}
        self.fail_put: dict[ArtifactNamespace, Exception] = {}
        self.puts = 0

    def seed(self, namespace: ArtifactNamespace, path: str, data: bytes) -> None:
        """Helper to store without going through put (for tests)."""
        self.blobs[(namespace.value, path)] = data

    def keys(self, namespace: ArtifactNamespace) -> list[str]:
        return [p for (ns, p) in self.blobs if ns == namespace.value]

    async def put(self, namespace: ArtifactNamespace, path: str, data: bytes) -> None:
        await asyncio.sleep(0)
        if namespace in self.fail_put:
            raise self.fail_put[namespace]
        key = (ArtifactNamespace(namespace).value, path)
        if key in self.blobs:
            raise ArtifactAlreadyExists(key[0], path)
        self.blobs[key] = bytes(data)
        self.puts += 1

    async def get(self, namespace: ArtifactNamespace, path: str) -> bytes:
        await asyncio.sleep(0)
        if namespace in self.fail_get:
            raise self.fail_get[namespace]
        key = (ArtifactNamespace(namespace).value, path)
        if key not in self.blobs:
            raise ArtifactNotFound(key[0], path)
        return self.blobs[key]

    async def exists(self, namespace: ArtifactNamespace, path: str) -> bool:
        return (ArtifactNamespace(namespace).value, path) in self.blobs


# --- Seeding helpers ---


def seed_delivery(
    uow: FakeUnitOfWork,
    store: InMemoryArtifactStore,
    *,
    signature: bytes | None = None,
    original: bytes | None = None,
    status: DeliveryStatus | None = None,
    doc_number: str | None = "ALB-2026-001",
    recipient_email: str | None = None,
    created_at: datetime | None = None,
) -> Delivery:
    """Store a delivery and, if given, its artifacts; returns the seeded record."""
    tenant_id = uuid4()
    delivery_id = uuid4()
    now = created_at or datetime(2026, 3, 1, 9, 0, tzinfo=UTC)
    delivery = Delivery(
        id=delivery_id,
        tenant_id=tenant_id,
        status=status or DeliveryStatus.CREATED,
        business_name="Acme Supplies",
        signer_name="Jordan Reyes",
        created_at=now,
        doc_number=doc_number,
        recipient_email=recipient_email,
    )
    if signature is not None:
        path = str(ArtifactPath(tenant_id, delivery_id, "signature.png"))
        store.seed(ArtifactNamespace.SIGNATURE, path, signature)
        delivery.signature_ref = path
        delivery.signed_at = now
    if original is not None:
        path = str(ArtifactPath(tenant_id, delivery_id, "original.pdf"))
        store.seed(ArtifactNamespace.ORIGINAL, path, original)
        delivery.original_doc_ref = path
    if status is None:
        if signature is not None:
            delivery.status = DeliveryStatus.SIGNED
        elif original is not None:
            delivery.status = DeliveryStatus.DOC_UPLOADED
    return uow.deliveries.add(delivery)


# --- Fixtures ---


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 3, 1, 12, 0, tzinfo=UTC))


@pytest.fixture
def fake_uow() -> FakeUnitOfWork:
    """In-memory UnitOfWork shared by every factory call in a test."""
    return FakeUnitOfWork()


@pytest.fixture
def uow_factory(fake_uow: FakeUnitOfWork):
    """Factory returning async context manager with the shared FakeUnitOfWork."""

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUnitOfWork]:
        yield fake_uow

    return _factory


@pytest.fixture
def artifact_store() -> InMemoryArtifactStore:
    return InMemoryArtifactStore()


@pytest.fixture
def audit_log(uow_factory, clock) -> AuditLog:
    return AuditLog(unit_of_work_factory=uow_factory, clock=clock)


@pytest.fixture
def token_issuer(uow_factory, audit_log, clock) -> AccessTokenIssuer:
    return AccessTokenIssuer(unit_of_work_factory=uow_factory, audit_log=audit_log, clock=clock)


@pytest.fixture
def mock_notifier():
    """AsyncMock Notifier - reports every message as sent."""
    from unittest.mock import AsyncMock

    mock = AsyncMock()
    mock.send_delivery_ready.return_value = True
    return mock


@pytest.fixture
def coordinator(
    uow_factory, artifact_store, token_issuer, audit_log, clock, mock_notifier
) -> FinalizationCoordinator:
    return FinalizationCoordinator(
        unit_of_work_factory=uow_factory,
        artifact_store=artifact_store,
        composer=PdfDocumentComposer(clock=clock),
        token_issuer=token_issuer,
        audit_log=audit_log,
        notifier=mock_notifier,
        public_base_url="https://handoff.example",
        clock=clock,
    )
