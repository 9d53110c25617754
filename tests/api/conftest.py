"""Fixtures for API tests."""

import pytest

from handoff.application.use_cases.delivery.attach_artifact import (
    AttachOriginalUseCase,
    AttachSignatureUseCase,
)
from handoff.application.use_cases.delivery.create_delivery import CreateDeliveryUseCase
from handoff.application.use_cases.delivery.download_document import DownloadDocumentUseCase
from handoff.application.use_cases.delivery.get_delivery import GetDeliveryUseCase
from handoff.application.use_cases.finalization.try_finalize import FinalizationCoordinator
from handoff.infrastructure.composition.pdf_composer import PdfDocumentComposer
from handoff.interfaces.api.app import create_app
from handoff.interfaces.api.resources.artifacts import OriginalResource, SignatureResource
from handoff.interfaces.api.resources.deliveries import (
    DeliveriesResource,
    DeliveryResource,
    FinalizeResource,
)
from handoff.interfaces.api.resources.downloads import DownloadResource
from handoff.interfaces.api.resources.health import HealthResource


@pytest.fixture
def coordinator(uow_factory, artifact_store, token_issuer, audit_log, clock):
    """Coordinator without notifier: no background tasks outlive a request."""
    return FinalizationCoordinator(
        unit_of_work_factory=uow_factory,
        artifact_store=artifact_store,
        composer=PdfDocumentComposer(clock=clock),
        token_issuer=token_issuer,
        audit_log=audit_log,
        clock=clock,
    )


@pytest.fixture
def app(uow_factory, artifact_store, token_issuer, audit_log, coordinator, clock):
    """Falcon ASGI app wired to in-memory fakes."""
    attach_signature = AttachSignatureUseCase(
        unit_of_work_factory=uow_factory,
        artifact_store=artifact_store,
        coordinator=coordinator,
        audit_log=audit_log,
        clock=clock,
    )
    attach_original = AttachOriginalUseCase(
        unit_of_work_factory=uow_factory,
        artifact_store=artifact_store,
        coordinator=coordinator,
        audit_log=audit_log,
    )
    download_document = DownloadDocumentUseCase(
        unit_of_work_factory=uow_factory,
        artifact_store=artifact_store,
        token_issuer=token_issuer,
        audit_log=audit_log,
    )
    return create_app(
        deliveries_resource=DeliveriesResource(
            CreateDeliveryUseCase(unit_of_work_factory=uow_factory, clock=clock)
        ),
        delivery_resource=DeliveryResource(GetDeliveryUseCase(unit_of_work_factory=uow_factory)),
        finalize_resource=FinalizeResource(coordinator),
        signature_resource=SignatureResource(attach_signature),
        original_resource=OriginalResource(attach_original),
        download_resource=DownloadResource(download_document, token_issuer),
        health_resource=HealthResource(),
    )


@pytest.fixture
def client(app):
    """Falcon ASGI test client."""
    from falcon.testing import TestClient
    return TestClient(app)
