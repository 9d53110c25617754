"""Token-based download of the final document."""

from handoff.application.dto.token_dto import DownloadInfo, DownloadOutput
from handoff.application.ports import ArtifactStore
from handoff.application.use_cases.audit.audit_log import AuditLog
from handoff.application.use_cases.tokens.access_token_issuer import AccessTokenIssuer
from handoff.domain.entities import AccessToken, Delivery, DocumentDownloaded
from handoff.domain.exceptions import NotFound, TokenRejected
from handoff.domain.value_objects import ActorKind, ArtifactNamespace


class DownloadDocumentUseCase:
    """Serve the final PDF to whoever holds a valid access token."""

    def __init__(
        self,
        unit_of_work_factory: type,
        artifact_store: ArtifactStore,
        token_issuer: AccessTokenIssuer,
        audit_log: AuditLog,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._artifacts = artifact_store
        self._issuer = token_issuer
        self._audit_log = audit_log

    async def _resolve(self, token: str) -> tuple[AccessToken, Delivery]:
        validation = await self._issuer.validate(token)
        if not validation.ok:
            raise TokenRejected(validation.status)
        access_token = validation.access_token
        async with self._uow_factory() as uow:
            delivery = await uow.deliveries.get_by_id(access_token.delivery_id)
        if not delivery or not delivery.final_doc_ref:
            raise NotFound("Document", access_token.delivery_id)
        return access_token, delivery

    async def info(self, token: str) -> DownloadInfo:
        """Public facts shown before downloading."""
        access_token, delivery = await self._resolve(token)
        return DownloadInfo(delivery=delivery, expires_at=access_token.expires_at)

    async def execute(self, token: str) -> DownloadOutput:
        access_token, delivery = await self._resolve(token)
        content = await self._artifacts.get(ArtifactNamespace.FINAL, delivery.final_doc_ref)
        await self._issuer.mark_used(access_token)
        await self._audit_log.append(
            self._audit_log.record(
                delivery, DocumentDownloaded(token_id=str(access_token.id)), ActorKind.CLIENT
            )
        )
        return DownloadOutput(filename=delivery.download_name, content=content)
