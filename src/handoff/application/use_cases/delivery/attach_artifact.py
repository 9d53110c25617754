"""Signature and original document upload use cases.

Each stores its artifact (create-if-absent), sets the matching reference
exactly once, audits the upload and then triggers finalization. The upload
succeeds whatever the finalization outcome is.
"""

from collections.abc import Callable
from datetime import UTC, datetime
from uuid import UUID

from handoff.application.dto.delivery_dto import AttachResult
from handoff.application.ports import ArtifactStore
from handoff.application.use_cases.audit.audit_log import AuditLog
from handoff.application.use_cases.finalization.try_finalize import FinalizationCoordinator
from handoff.domain.entities import Delivery, OriginalAttached, SignatureAttached
from handoff.domain.exceptions import InvalidState, NotFound, ValidationError
from handoff.domain.value_objects import ActorKind, ArtifactNamespace, ArtifactPath

SIGNATURE_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
}
PDF_CONTENT_TYPE = "application/pdf"
ORIGINAL_FILENAME = "original.pdf"


def _check_size(data: bytes, max_bytes: int, what: str) -> None:
    if not data:
        raise ValidationError(f"{what} is empty")
    if len(data) > max_bytes:
        raise ValidationError(f"{what} exceeds {max_bytes} bytes")


async def _load_delivery(uow: object, delivery_id: UUID) -> Delivery:
    delivery = await uow.deliveries.get_by_id(delivery_id)
    if not delivery:
        raise NotFound("Delivery", delivery_id)
    return delivery


class AttachSignatureUseCase:
    """Signature received: store image, set signature_ref, try to finalize."""

    def __init__(
        self,
        unit_of_work_factory: type,
        artifact_store: ArtifactStore,
        coordinator: FinalizationCoordinator,
        audit_log: AuditLog,
        max_bytes: int = 2 * 1024 * 1024,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._artifacts = artifact_store
        self._coordinator = coordinator
        self._audit_log = audit_log
        self._max_bytes = max_bytes
        self._clock = clock or (lambda: datetime.now(UTC))

    @property
    def max_bytes(self) -> int:
        return self._max_bytes

    async def execute(self, delivery_id: UUID, data: bytes, content_type: str) -> AttachResult:
        async with self._uow_factory() as uow:
            delivery = await _load_delivery(uow, delivery_id)
        if delivery.signature_ref:
            return AttachResult(delivery=delivery, already_attached=True)
        if not delivery.status.accepts_artifacts:
            raise InvalidState(f"Delivery in status {delivery.status} does not accept signatures")

        content_type = (content_type or "").split(";")[0].strip().lower()
        ext = SIGNATURE_EXTENSIONS.get(content_type)
        if not ext:
            raise ValidationError("Only PNG or JPEG signature images are allowed")
        _check_size(data, self._max_bytes, "Signature")

        path = str(ArtifactPath(delivery.tenant_id, delivery.id, f"signature.{ext}"))
        await self._artifacts.put(ArtifactNamespace.SIGNATURE, path, data)

        async with self._uow_factory() as uow:
            if not await uow.deliveries.attach_signature(delivery.id, path, self._clock()):
                raise InvalidState("Delivery no longer accepts a signature")
            await uow.audit_events.append(
                self._audit_log.record(
                    delivery,
                    SignatureAttached(size=len(data), content_type=content_type),
                    ActorKind.CLIENT,
                )
            )

        finalize = await self._coordinator.try_finalize(delivery.id)
        async with self._uow_factory() as uow:
            delivery = await _load_delivery(uow, delivery.id)
        return AttachResult(delivery=delivery, already_attached=False, finalize=finalize)


class AttachOriginalUseCase:
    """Original document received: store PDF, set original_doc_ref, try to finalize."""

    def __init__(
        self,
        unit_of_work_factory: type,
        artifact_store: ArtifactStore,
        coordinator: FinalizationCoordinator,
        audit_log: AuditLog,
        max_bytes: int = 20 * 1024 * 1024,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._artifacts = artifact_store
        self._coordinator = coordinator
        self._audit_log = audit_log
        self._max_bytes = max_bytes

    @property
    def max_bytes(self) -> int:
        return self._max_bytes

    async def execute(self, delivery_id: UUID, data: bytes, content_type: str) -> AttachResult:
        async with self._uow_factory() as uow:
            delivery = await _load_delivery(uow, delivery_id)
        if delivery.original_doc_ref:
            return AttachResult(delivery=delivery, already_attached=True)
        if not delivery.status.accepts_artifacts:
            raise InvalidState(f"Delivery in status {delivery.status} does not accept documents")

        if (content_type or "").split(";")[0].strip().lower() != PDF_CONTENT_TYPE:
            raise ValidationError("Only PDF documents are allowed")
        _check_size(data, self._max_bytes, "Document")

        path = str(ArtifactPath(delivery.tenant_id, delivery.id, ORIGINAL_FILENAME))
        await self._artifacts.put(ArtifactNamespace.ORIGINAL, path, data)

        async with self._uow_factory() as uow:
            if not await uow.deliveries.attach_original(delivery.id, path):
                raise InvalidState("Delivery no longer accepts a document")
            await uow.audit_events.append(
                self._audit_log.record(
                    delivery, OriginalAttached(size=len(data)), ActorKind.EMPLOYEE
                )
            )

        finalize = await self._coordinator.try_finalize(delivery.id)
        async with self._uow_factory() as uow:
            delivery = await _load_delivery(uow, delivery.id)
        return AttachResult(delivery=delivery, already_attached=False, finalize=finalize)
