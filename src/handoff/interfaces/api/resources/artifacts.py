"""Artifact upload resources (signature image, original PDF).

Bodies are raw bytes with the artifact's Content-Type. A finalization that
does not happen never fails the upload; the response reports it.
"""

from uuid import UUID

import falcon.asgi

from handoff.application.use_cases.delivery.attach_artifact import (
    AttachOriginalUseCase,
    AttachSignatureUseCase,
)
from handoff.domain.exceptions import (
    ArtifactAlreadyExists,
    InvalidState,
    NotFound,
    ValidationError,
)
from handoff.interfaces.api.resources.serializers import delivery_to_dict, finalize_to_dict


class _UploadResource:
    """Shared POST handling for both upload paths."""

    def __init__(self, attach: AttachSignatureUseCase | AttachOriginalUseCase) -> None:
        self._attach = attach

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, delivery_id: str
    ) -> None:
        try:
            delivery_uuid = UUID(delivery_id)
        except ValueError:
            resp.status = falcon.HTTP_400
            resp.media = {"error": "Invalid UUID"}
            return

        limit = self._attach.max_bytes
        if req.content_length is not None and req.content_length > limit:
            resp.status = falcon.HTTP_413
            resp.media = {"error": f"Body exceeds {limit} bytes"}
            return
        # One byte over the limit is enough for the size check to reject it.
        data = await req.stream.read(limit + 1)
        try:
            result = await self._attach.execute(delivery_uuid, data, req.content_type or "")
        except NotFound:
            resp.status = falcon.HTTP_404
            resp.media = {"error": "Delivery not found"}
            return
        except ValidationError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return
        except (InvalidState, ArtifactAlreadyExists) as e:
            resp.status = falcon.HTTP_409
            resp.media = {"error": str(e)}
            return

        resp.media = {
            "delivery": delivery_to_dict(result.delivery),
            "already_attached": result.already_attached,
            **finalize_to_dict(result.finalize),
        }
        resp.status = falcon.HTTP_200 if result.already_attached else falcon.HTTP_201


class SignatureResource(_UploadResource):
    """POST /v1/deliveries/{id}/signature - image/png or image/jpeg body."""


class OriginalResource(_UploadResource):
    """POST /v1/deliveries/{id}/original - application/pdf body."""
