"""Get delivery use case."""

from uuid import UUID

from handoff.domain.entities import Delivery
from handoff.domain.exceptions import NotFound


class GetDeliveryUseCase:
    """Read the current state of a delivery."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, delivery_id: UUID) -> Delivery:
        async with self._uow_factory() as uow:
            delivery = await uow.deliveries.get_by_id(delivery_id)
        if not delivery:
            raise NotFound("Delivery", delivery_id)
        return delivery
