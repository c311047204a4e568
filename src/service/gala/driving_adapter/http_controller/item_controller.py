from typing import Optional

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.gala.app.command.create_item_use_case import CreateItemUseCase
from src.service.gala.app.command.delete_item_use_case import DeleteItemUseCase
from src.service.gala.app.command.save_item_use_case import SaveItemUseCase
from src.service.gala.driving_adapter.http_controller.actor import current_actor
from src.service.gala.driving_adapter.schema.gala_schema import ItemRequest, SequenceResponse


router = APIRouter()


@router.post('/items', status_code=status.HTTP_200_OK)
@Logger.io
async def create_item(
    request: ItemRequest,
    actor: Optional[str] = Depends(current_actor),
    use_case: CreateItemUseCase = Depends(CreateItemUseCase.depends),
) -> SequenceResponse:
    entry = await use_case.execute(
        actor=actor, name=request.name.strip(), amount=request.amount, value=request.value
    )
    return SequenceResponse(sequence=entry.sequence)


@router.put('/item/{item_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def save_item(
    item_id: int,
    request: ItemRequest,
    actor: Optional[str] = Depends(current_actor),
    use_case: SaveItemUseCase = Depends(SaveItemUseCase.depends),
) -> SequenceResponse:
    entry = await use_case.execute(
        actor=actor,
        item_id=item_id,
        name=request.name.strip(),
        amount=request.amount,
        value=request.value,
    )
    return SequenceResponse(sequence=entry.sequence)


@router.delete('/item/{item_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def delete_item(
    item_id: int,
    actor: Optional[str] = Depends(current_actor),
    use_case: DeleteItemUseCase = Depends(DeleteItemUseCase.depends),
) -> SequenceResponse:
    entry = await use_case.execute(actor=actor, item_id=item_id)
    return SequenceResponse(sequence=entry.sequence)
