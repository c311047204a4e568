from typing import List, Optional

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.gala.app.command.reposition_tables_use_case import RepositionTablesUseCase
from src.service.gala.app.command.save_party_use_case import SavePartyUseCase
from src.service.gala.app.command.save_table_use_case import SaveTableUseCase
from src.service.gala.driving_adapter.http_controller.actor import current_actor
from src.service.gala.driving_adapter.schema.gala_schema import (
    PartySaveRequest,
    SequenceResponse,
    TablePosition,
    TableSaveRequest,
)


router = APIRouter()


@router.put('/party/{party_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def save_party(
    party_id: int,
    request: PartySaveRequest,
    actor: Optional[str] = Depends(current_actor),
    use_case: SavePartyUseCase = Depends(SavePartyUseCase.depends),
) -> SequenceResponse:
    entry = await use_case.execute(
        actor=actor, party_id=party_id, table_id=request.table, x=request.x, y=request.y
    )
    return SequenceResponse(sequence=entry.sequence)


# Declared before /table/{table_id} so "reposition" is never read as an id
@router.post('/table/reposition', status_code=status.HTTP_200_OK)
@Logger.io
async def reposition_tables(
    request: List[TablePosition],
    actor: Optional[str] = Depends(current_actor),
    use_case: RepositionTablesUseCase = Depends(RepositionTablesUseCase.depends),
) -> SequenceResponse:
    entry = await use_case.execute(
        actor=actor, positions=[(position.id, position.x, position.y) for position in request]
    )
    return SequenceResponse(sequence=entry.sequence)


@router.put('/table/{table_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def save_table(
    table_id: int,
    request: TableSaveRequest,
    actor: Optional[str] = Depends(current_actor),
    use_case: SaveTableUseCase = Depends(SaveTableUseCase.depends),
) -> SequenceResponse:
    entry = await use_case.execute(
        actor=actor, table_id=table_id, x=request.x, y=request.y, number=request.number
    )
    return SequenceResponse(sequence=entry.sequence)
