from typing import Optional

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.gala.app.command.add_purchase_use_case import AddPurchaseUseCase
from src.service.gala.app.command.delete_purchase_use_case import DeletePurchaseUseCase
from src.service.gala.app.command.pickup_purchase_use_case import PickupPurchaseUseCase
from src.service.gala.driving_adapter.http_controller.actor import current_actor
from src.service.gala.driving_adapter.schema.gala_schema import (
    PurchaseCreateRequest,
    SequenceResponse,
)


router = APIRouter()


@router.post('/purchases', status_code=status.HTTP_200_OK)
@Logger.io
async def add_purchase(
    request: PurchaseCreateRequest,
    actor: Optional[str] = Depends(current_actor),
    use_case: AddPurchaseUseCase = Depends(AddPurchaseUseCase.depends),
) -> SequenceResponse:
    entry = await use_case.execute(actor=actor, purchase=request.to_purchase())
    return SequenceResponse(sequence=entry.sequence)


@router.delete('/purchase/{purchase_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def delete_purchase(
    purchase_id: int,
    actor: Optional[str] = Depends(current_actor),
    use_case: DeletePurchaseUseCase = Depends(DeletePurchaseUseCase.depends),
) -> SequenceResponse:
    entry = await use_case.execute(actor=actor, purchase_id=purchase_id)
    return SequenceResponse(sequence=entry.sequence)


@router.post('/purchase/{purchase_id}/pickup', status_code=status.HTTP_200_OK)
@Logger.io
async def pickup_purchase(
    purchase_id: int,
    actor: Optional[str] = Depends(current_actor),
    use_case: PickupPurchaseUseCase = Depends(PickupPurchaseUseCase.depends),
) -> SequenceResponse:
    entry = await use_case.execute(actor=actor, purchase_id=purchase_id)
    return SequenceResponse(sequence=entry.sequence)
