"""Public token-based download resources."""

import re

import falcon.asgi

from handoff.application.use_cases.delivery.download_document import DownloadDocumentUseCase
from handoff.application.use_cases.tokens.access_token_issuer import AccessTokenIssuer
from handoff.domain.exceptions import ArtifactNotFound, NotFound, TokenRejected
from handoff.domain.value_objects import TokenStatus

_UNSAFE_FILENAME_CHARS = re.compile(r'[^A-Za-z0-9._\- ]')

_TOKEN_ERRORS = {
    TokenStatus.NOT_FOUND: (falcon.HTTP_404, "Token not found"),
    TokenStatus.REVOKED: (falcon.HTTP_410, "Token revoked"),
    TokenStatus.EXPIRED: (falcon.HTTP_410, "Token expired"),
}


def _safe_filename(name: str) -> str:
    """Strip characters that would break a quoted Content-Disposition value."""
    return _UNSAFE_FILENAME_CHARS.sub("_", name) or "document.pdf"


def _reject(resp: falcon.asgi.Response, status: str) -> None:
    http_status, message = _TOKEN_ERRORS[TokenStatus(status)]
    resp.status = http_status
    resp.media = {"error": message, "code": str(status)}


class DownloadResource:
    """GET /v1/downloads/{token}, GET .../info, POST .../revoke."""

    def __init__(
        self,
        download_document: DownloadDocumentUseCase,
        token_issuer: AccessTokenIssuer,
    ) -> None:
        self._download = download_document
        self._issuer = token_issuer

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response, token: str) -> None:
        """Stream the final PDF as an attachment."""
        try:
            output = await self._download.execute(token)
        except TokenRejected as e:
            _reject(resp, e.status)
            return
        except (NotFound, ArtifactNotFound):
            resp.status = falcon.HTTP_404
            resp.media = {"error": "Document not available", "code": TokenStatus.NOT_FOUND.value}
            return
        resp.status = falcon.HTTP_200
        resp.content_type = output.content_type
        resp.set_header(
            "Content-Disposition", f'attachment; filename="{_safe_filename(output.filename)}"'
        )
        resp.data = output.content

    async def on_get_info(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, token: str
    ) -> None:
        """Public metadata shown before download."""
        try:
            info = await self._download.info(token)
        except TokenRejected as e:
            _reject(resp, e.status)
            return
        except NotFound:
            resp.status = falcon.HTTP_404
            resp.media = {"error": "Document not available", "code": TokenStatus.NOT_FOUND.value}
            return
        d = info.delivery
        resp.media = {
            "code": TokenStatus.OK.value,
            "doc_number": d.doc_number,
            "business_name": d.business_name,
            "signer_name": d.signer_name,
            "finalized_at": d.finalized_at.isoformat() if d.finalized_at else None,
            "expires_at": info.expires_at.isoformat(),
        }
        resp.status = falcon.HTTP_200

    async def on_post_revoke(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, token: str
    ) -> None:
        """Revoke the token; later downloads answer REVOKED."""
        try:
            access_token = await self._issuer.revoke(token)
        except NotFound:
            _reject(resp, TokenStatus.NOT_FOUND)
            return
        resp.media = {
            "id": str(access_token.id),
            "revoked_at": access_token.revoked_at.isoformat() if access_token.revoked_at else None,
        }
        resp.status = falcon.HTTP_200
