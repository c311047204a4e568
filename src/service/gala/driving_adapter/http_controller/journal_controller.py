from fastapi import APIRouter, Depends, Response, WebSocket, status

from src.platform.logging.loguru_io import Logger
from src.service.gala.app.query.get_snapshot_use_case import GetSnapshotUseCase
from src.service.gala.driving_adapter.websocket.journal_websocket_handler import (
    JournalWebSocketHandler,
)


router = APIRouter()


@router.get('/all', status_code=status.HTTP_200_OK)
@Logger.io
async def get_snapshot(
    use_case: GetSnapshotUseCase = Depends(GetSnapshotUseCase.depends),
) -> Response:
    """Every live entity plus the current journal sequence, shaped like a live frame."""
    entry = await use_case.execute()
    return Response(content=entry.to_message(), media_type='application/json')


@router.websocket('/ws')
async def subscribe_journal(
    websocket: WebSocket,
    handler: JournalWebSocketHandler = Depends(JournalWebSocketHandler.depends),
) -> None:
    await handler.serve(websocket)
