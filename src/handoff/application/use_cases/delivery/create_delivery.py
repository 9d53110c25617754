"""Create delivery use case."""

from collections.abc import Callable
from datetime import UTC, datetime
from uuid import uuid4

from handoff.application.dto.delivery_dto import DeliveryCreateInput
from handoff.domain.entities import Delivery
from handoff.domain.exceptions import ValidationError
from handoff.domain.value_objects import DeliveryStatus


class CreateDeliveryUseCase:
    """Open a delivery record waiting for its signature and original document."""

    def __init__(
        self,
        unit_of_work_factory: type,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock or (lambda: datetime.now(UTC))

    async def execute(self, input_data: DeliveryCreateInput) -> Delivery:
        business_name = input_data.business_name.strip()
        signer_name = input_data.signer_name.strip()
        if not business_name:
            raise ValidationError("business_name is required")
        if not signer_name:
            raise ValidationError("signer_name is required")
        doc_number = (input_data.doc_number or "").strip() or None
        recipient_email = (input_data.recipient_email or "").strip().lower() or None

        delivery = Delivery(
            id=uuid4(),
            tenant_id=input_data.tenant_id,
            status=DeliveryStatus.CREATED,
            business_name=business_name,
            signer_name=signer_name,
            created_at=self._clock(),
            doc_number=doc_number,
            recipient_email=recipient_email,
        )
        async with self._uow_factory() as uow:
            await uow.deliveries.create(delivery)
        return delivery
