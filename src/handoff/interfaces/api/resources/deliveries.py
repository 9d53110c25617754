"""Delivery API resources."""

from uuid import UUID

import falcon.asgi

from handoff.application.dto.delivery_dto import DeliveryCreateInput
from handoff.application.dto.finalize_result import FinalizeOutcome
from handoff.application.use_cases.delivery.create_delivery import CreateDeliveryUseCase
from handoff.application.use_cases.delivery.get_delivery import GetDeliveryUseCase
from handoff.application.use_cases.finalization.try_finalize import FinalizationCoordinator
from handoff.domain.exceptions import NotFound, ValidationError
from handoff.interfaces.api.resources.serializers import delivery_to_dict, finalize_to_dict


class DeliveriesResource:
    """POST /v1/deliveries - open a delivery."""

    def __init__(self, create_delivery: CreateDeliveryUseCase) -> None:
        self._create_delivery = create_delivery

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        try:
            body = await req.get_media()
            input_data = DeliveryCreateInput(
                tenant_id=UUID(body["tenant_id"]),
                business_name=body["business_name"],
                signer_name=body["signer_name"],
                doc_number=body.get("doc_number"),
                recipient_email=body.get("recipient_email"),
            )
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Invalid request: {e}"}
            return

        try:
            delivery = await self._create_delivery.execute(input_data)
        except ValidationError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return
        resp.media = delivery_to_dict(delivery)
        resp.status = falcon.HTTP_201


class DeliveryResource:
    """GET /v1/deliveries/{id} - delivery status."""

    def __init__(self, get_delivery: GetDeliveryUseCase) -> None:
        self._get_delivery = get_delivery

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, delivery_id: str
    ) -> None:
        try:
            delivery_uuid = UUID(delivery_id)
        except ValueError:
            resp.status = falcon.HTTP_400
            resp.media = {"error": "Invalid UUID"}
            return
        try:
            delivery = await self._get_delivery.execute(delivery_uuid)
        except NotFound:
            resp.status = falcon.HTTP_404
            resp.media = {"error": "Delivery not found"}
            return
        resp.media = delivery_to_dict(delivery)
        resp.status = falcon.HTTP_200


class FinalizeResource:
    """POST /v1/deliveries/{id}/finalize - retry finalization by hand."""

    def __init__(self, coordinator: FinalizationCoordinator) -> None:
        self._coordinator = coordinator

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, delivery_id: str
    ) -> None:
        try:
            delivery_uuid = UUID(delivery_id)
        except ValueError:
            resp.status = falcon.HTTP_400
            resp.media = {"error": "Invalid UUID"}
            return
        result = await self._coordinator.try_finalize(delivery_uuid)
        if result.outcome == FinalizeOutcome.FAILED and result.reason == "not_found":
            resp.status = falcon.HTTP_404
        elif result.outcome == FinalizeOutcome.FAILED and result.reason == "terminal_state":
            resp.status = falcon.HTTP_409
        else:
            resp.status = falcon.HTTP_200
        resp.media = finalize_to_dict(result)
