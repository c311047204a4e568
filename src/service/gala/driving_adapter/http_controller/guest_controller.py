from typing import Optional

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.gala.app.command.add_guest_use_case import AddGuestUseCase
from src.service.gala.app.command.delete_guest_use_case import DeleteGuestUseCase
from src.service.gala.app.command.save_guest_use_case import SaveGuestUseCase
from src.service.gala.driving_adapter.http_controller.actor import current_actor
from src.service.gala.driving_adapter.schema.gala_schema import (
    GuestCreateRequest,
    GuestSaveRequest,
    SequenceResponse,
)


router = APIRouter()


@router.post('/guests', status_code=status.HTTP_200_OK)
@Logger.io
async def add_guest(
    request: GuestCreateRequest,
    actor: Optional[str] = Depends(current_actor),
    use_case: AddGuestUseCase = Depends(AddGuestUseCase.depends),
) -> SequenceResponse:
    entry = await use_case.execute(
        actor=actor,
        guest=request.to_guest(),
        ticket=request.ticket,
        num_guests=request.num_guests,
        paying_for=request.paying_for,
    )
    return SequenceResponse(sequence=entry.sequence)


@router.put('/guest/{guest_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def save_guest(
    guest_id: int,
    request: GuestSaveRequest,
    actor: Optional[str] = Depends(current_actor),
    use_case: SaveGuestUseCase = Depends(SaveGuestUseCase.depends),
) -> SequenceResponse:
    if request.paying_for_purchases_add is not None:
        entry = await use_case.add_paying_for_purchases(
            actor=actor, guest_id=guest_id, purchase_ids=request.paying_for_purchases_add
        )
    else:
        entry = await use_case.execute(
            actor=actor,
            guest_id=guest_id,
            changes=request.to_guest(),
            paying_for=request.paying_for,
            table_id=request.table,
            x=request.x,
            y=request.y,
        )
    return SequenceResponse(sequence=entry.sequence)


@router.delete('/guest/{guest_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def delete_guest(
    guest_id: int,
    actor: Optional[str] = Depends(current_actor),
    use_case: DeleteGuestUseCase = Depends(DeleteGuestUseCase.depends),
) -> SequenceResponse:
    entry = await use_case.execute(actor=actor, guest_id=guest_id)
    return SequenceResponse(sequence=entry.sequence)
