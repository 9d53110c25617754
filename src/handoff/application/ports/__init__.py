"""Application ports - interfaces for external adapters."""

from handoff.application.ports.artifact_store import ArtifactStore
from handoff.application.ports.document_composer import DocumentComposer
from handoff.application.ports.notifier import DeliveryNotification, Notifier
from handoff.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "ArtifactStore",
    "DeliveryNotification",
    "DocumentComposer",
    "Notifier",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
