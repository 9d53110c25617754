"""Application entry point and composition root."""

import logging
from datetime import timedelta
from pathlib import Path

from handoff import __version__
from handoff.application.use_cases.audit.audit_log import AuditLog
from handoff.application.use_cases.delivery.attach_artifact import (
    AttachOriginalUseCase,
    AttachSignatureUseCase,
)
from handoff.application.use_cases.delivery.create_delivery import CreateDeliveryUseCase
from handoff.application.use_cases.delivery.download_document import DownloadDocumentUseCase
from handoff.application.use_cases.delivery.get_delivery import GetDeliveryUseCase
from handoff.application.use_cases.finalization.try_finalize import FinalizationCoordinator
from handoff.application.use_cases.tokens.access_token_issuer import AccessTokenIssuer
from handoff.config import get_settings
from handoff.infrastructure.composition.pdf_composer import PdfDocumentComposer
from handoff.infrastructure.notification.resend_notifier import ResendNotifier
from handoff.infrastructure.persistence.postgres.connection import create_pool
from handoff.infrastructure.persistence.postgres.unit_of_work import create_uow_factory
from handoff.infrastructure.storage.local_artifact_store import LocalArtifactStore
from handoff.interfaces.api.app import create_app
from handoff.interfaces.api.middleware.lifespan import LifespanMiddleware
from handoff.interfaces.api.resources.artifacts import OriginalResource, SignatureResource
from handoff.interfaces.api.resources.deliveries import (
    DeliveriesResource,
    DeliveryResource,
    FinalizeResource,
)
from handoff.interfaces.api.resources.downloads import DownloadResource
from handoff.interfaces.api.resources.health import HealthResource

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    """Root logging configuration."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def main() -> None:
    """CLI entry point."""
    print(f"Handoff v{__version__}")


def create_handoff_app():
    """Composition root - build Falcon app with all dependencies."""
    settings = get_settings()
    configure_logging(settings.log_level)

    pool = create_pool(
        settings.database_url,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
    )
    uow_factory = create_uow_factory(pool)
    artifact_store = LocalArtifactStore(settings.storage_root)

    audit_log = AuditLog(unit_of_work_factory=uow_factory)
    token_issuer = AccessTokenIssuer(unit_of_work_factory=uow_factory, audit_log=audit_log)
    notifier = ResendNotifier(
        api_key=settings.resend_api_key,
        sender=settings.email_from,
        base_url=settings.resend_api_url,
    )
    coordinator = FinalizationCoordinator(
        unit_of_work_factory=uow_factory,
        artifact_store=artifact_store,
        composer=PdfDocumentComposer(),
        token_issuer=token_issuer,
        audit_log=audit_log,
        notifier=notifier,
        pickup_ttl=timedelta(hours=settings.pickup_token_ttl_hours),
        email_ttl=timedelta(days=settings.email_token_ttl_days),
        lock_ttl=(
            timedelta(seconds=settings.finalize_lock_ttl_seconds)
            if settings.finalize_lock_ttl_seconds
            else None
        ),
        public_base_url=settings.public_base_url,
    )

    create_delivery = CreateDeliveryUseCase(unit_of_work_factory=uow_factory)
    get_delivery = GetDeliveryUseCase(unit_of_work_factory=uow_factory)
    attach_signature = AttachSignatureUseCase(
        unit_of_work_factory=uow_factory,
        artifact_store=artifact_store,
        coordinator=coordinator,
        audit_log=audit_log,
        max_bytes=settings.max_signature_bytes,
    )
    attach_original = AttachOriginalUseCase(
        unit_of_work_factory=uow_factory,
        artifact_store=artifact_store,
        coordinator=coordinator,
        audit_log=audit_log,
        max_bytes=settings.max_original_bytes,
    )
    download_document = DownloadDocumentUseCase(
        unit_of_work_factory=uow_factory,
        artifact_store=artifact_store,
        token_issuer=token_issuer,
        audit_log=audit_log,
    )

    async def check_database() -> None:
        async with pool.connection() as conn:
            await conn.execute("SELECT 1")

    async def check_storage() -> None:
        if not Path(settings.storage_root).is_dir():
            raise FileNotFoundError(settings.storage_root)

    return create_app(
        deliveries_resource=DeliveriesResource(create_delivery),
        delivery_resource=DeliveryResource(get_delivery),
        finalize_resource=FinalizeResource(coordinator),
        signature_resource=SignatureResource(attach_signature),
        original_resource=OriginalResource(attach_original),
        download_resource=DownloadResource(download_document, token_issuer),
        health_resource=HealthResource(
            {"database": check_database, "storage": check_storage}
        ),
        middleware=[LifespanMiddleware(pool, coordinator)],
    )


def run_server() -> None:
    """Run uvicorn server."""
    import uvicorn

    app = create_handoff_app()
    uvicorn.run(app, host="0.0.0.0", port=8000)
