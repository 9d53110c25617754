"""Finalization coordinator: compose the final document exactly once per delivery.

Both upload paths call ``try_finalize`` after persisting their artifact. The
only mutual exclusion is the persisted ``finalizing_at`` compare-and-set, so
callers may live in different processes. The lock stamp is also the fencing
token: the FINALIZED transition and the release only apply while the record
still carries this attempt's stamp.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from uuid import UUID

from handoff.application.dto.composition import CertificationMetadata, ComposedDocument
from handoff.application.dto.finalize_result import FinalizeOutcome, FinalizeResult
from handoff.application.ports import ArtifactStore, DeliveryNotification, DocumentComposer, Notifier
from handoff.application.use_cases.audit.audit_log import AuditLog
from handoff.application.use_cases.tokens.access_token_issuer import AccessTokenIssuer
from handoff.domain.entities import AccessToken, Delivery, Finalized, FinalizeFailed
from handoff.domain.exceptions import ArtifactAlreadyExists, LockLost
from handoff.domain.value_objects import ArtifactNamespace, ArtifactPath, TokenType

logger = logging.getLogger(__name__)

FINAL_FILENAME = "final.pdf"


class FinalizationCoordinator:
    """Readiness check, lock, composition, persistence and token issuance."""

    def __init__(
        self,
        unit_of_work_factory: type,
        artifact_store: ArtifactStore,
        composer: DocumentComposer,
        token_issuer: AccessTokenIssuer,
        audit_log: AuditLog,
        notifier: Notifier | None = None,
        *,
        pickup_ttl: timedelta = timedelta(hours=24),
        email_ttl: timedelta = timedelta(days=7),
        lock_ttl: timedelta | None = None,
        public_base_url: str = "",
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._artifacts = artifact_store
        self._composer = composer
        self._issuer = token_issuer
        self._audit_log = audit_log
        self._notifier = notifier
        self._pickup_ttl = pickup_ttl
        self._email_ttl = email_ttl
        self._lock_ttl = lock_ttl
        self._public_base_url = public_base_url.rstrip("/")
        self._clock = clock or (lambda: datetime.now(UTC))
        self._background: set[asyncio.Task] = set()

    async def try_finalize(self, delivery_id: UUID) -> FinalizeResult:
        """Finalize the delivery if both artifacts exist and nobody else is doing it.

        Safe to call any number of times, concurrently, in any order.
        """
        async with self._uow_factory() as uow:
            delivery = await uow.deliveries.get_by_id(delivery_id)
            if delivery is None:
                logger.info("Finalize %s: delivery not found", delivery_id)
                return FinalizeResult.failed("not_found")
            if delivery.is_finalized:
                logger.debug("Finalize %s: already finalized", delivery_id)
                return FinalizeResult(FinalizeOutcome.ALREADY_FINALIZED)
            if delivery.status.is_terminal:
                logger.info("Finalize %s: terminal status %s", delivery_id, delivery.status)
                return FinalizeResult.failed("terminal_state")
            if not delivery.is_ready:
                logger.debug("Finalize %s: waiting for artifacts", delivery_id)
                return FinalizeResult(FinalizeOutcome.NOT_READY)

            stamp = self._clock()
            stale_before = stamp - self._lock_ttl if self._lock_ttl is not None else None
            acquired = await uow.deliveries.acquire_finalize_lock(
                delivery_id, stamp, stale_before
            )

        if not acquired:
            logger.info("Finalize %s: lock held by another attempt", delivery_id)
            return FinalizeResult(FinalizeOutcome.LOCK_HELD)

        try:
            email_token = await self._finalize_locked(delivery, stamp)
        except asyncio.CancelledError:
            logger.warning("Finalize %s cancelled, releasing lock", delivery_id)
            await asyncio.shield(self._release(delivery, stamp, "cancelled"))
            raise
        except Exception as exc:
            logger.exception("Finalize %s failed", delivery_id)
            reason = str(exc) or type(exc).__name__
            await self._release(delivery, stamp, reason)
            return FinalizeResult.failed(reason)

        logger.info("Finalize %s: finalized", delivery_id)
        self._schedule_notification(delivery, email_token)
        return FinalizeResult(FinalizeOutcome.FINALIZED)

    async def _finalize_locked(self, delivery: Delivery, stamp: datetime) -> AccessToken:
        """Compose, upload and commit the FINALIZED transition. Returns the email token."""
        signature = await self._artifacts.get(ArtifactNamespace.SIGNATURE, delivery.signature_ref)
        original = await self._artifacts.get(ArtifactNamespace.ORIGINAL, delivery.original_doc_ref)

        metadata = CertificationMetadata(
            business_name=delivery.business_name,
            signer_name=delivery.signer_name,
            delivery_id=delivery.id,
            signed_at=delivery.signed_at or stamp,
            doc_number=delivery.doc_number,
        )
        composed: ComposedDocument = await asyncio.to_thread(
            self._composer.compose, original, signature, metadata
        )

        final_ref = str(ArtifactPath(delivery.tenant_id, delivery.id, FINAL_FILENAME))
        final_bytes = composed.final_bytes
        try:
            await self._artifacts.put(ArtifactNamespace.FINAL, final_ref, final_bytes)
        except ArtifactAlreadyExists:
            # Left by an attempt that stored it but never committed.
            final_bytes = await self._artifacts.get(ArtifactNamespace.FINAL, final_ref)
            if not await asyncio.to_thread(self._composer.certifies, final_bytes, original):
                raise
            logger.warning("Finalize %s: reusing uncommitted %s", delivery.id, final_ref)

        async with self._uow_factory() as uow:
            transitioned = await uow.deliveries.mark_finalized(
                delivery.id,
                stamp,
                final_ref,
                composed.original_hash,
                self._clock(),
            )
            if not transitioned:
                raise LockLost(f"Finalization lock for {delivery.id} was taken over")

            pickup_token = self._issuer.mint(delivery, TokenType.PICKUP, self._pickup_ttl)
            email_token = self._issuer.mint(delivery, TokenType.EMAIL, self._email_ttl)
            await uow.access_tokens.create(pickup_token)
            await uow.access_tokens.create(email_token)
            await uow.audit_events.append(
                self._audit_log.record(
                    delivery,
                    Finalized(
                        original_hash=composed.original_hash,
                        final_size=len(final_bytes),
                    ),
                )
            )
        return email_token

    async def _release(self, delivery: Delivery, stamp: datetime, reason: str) -> None:
        """Free the lock and audit the failure so a later trigger can retry."""
        try:
            async with self._uow_factory() as uow:
                released = await uow.deliveries.release_finalize_lock(delivery.id, stamp)
                await uow.audit_events.append(
                    self._audit_log.record(delivery, FinalizeFailed(error=reason))
                )
        except Exception:
            logger.exception("Finalize %s: could not release lock", delivery.id)
            return
        if not released:
            logger.warning("Finalize %s: lock was no longer held by this attempt", delivery.id)

    def _schedule_notification(self, delivery: Delivery, email_token: AccessToken) -> None:
        """Fire and forget; finalization never waits for or depends on it."""
        if self._notifier is None or not delivery.recipient_email:
            return
        notification = DeliveryNotification(
            to=delivery.recipient_email,
            signer_name=delivery.signer_name,
            business_name=delivery.business_name,
            doc_number=delivery.doc_number,
            download_url=f"{self._public_base_url}/v1/downloads/{email_token.token}",
            expires_at=email_token.expires_at,
        )
        task = asyncio.create_task(self._notify(delivery.id, notification))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _notify(self, delivery_id: UUID, notification: DeliveryNotification) -> None:
        try:
            sent = await self._notifier.send_delivery_ready(notification)
        except Exception:
            logger.exception("Delivery notification for %s failed", delivery_id)
            return
        if not sent:
            logger.warning("Delivery notification for %s was not sent", delivery_id)

    async def wait_for_notifications(self) -> None:
        """Wait for pending notification tasks (shutdown and tests)."""
        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)
