"""
Journal WebSocket Handler

One handler per live connection:
- Writer loop: drains the subscriber stream to the socket, sends {"type": "ping"} when
  idle for JOURNAL_PING_PERIOD; every send has a JOURNAL_WRITE_WAIT deadline
- Reader loop: accepts no application input, only watches for close; any client frame
  refreshes the JOURNAL_PONG_WAIT read deadline

Whichever loop ends first cancels the other. The connection then unsubscribes and closes.
The handler never touches the serial transaction gate.
"""

from typing import List, Optional, Self

import anyio
import orjson
from anyio.streams.memory import MemoryObjectReceiveStream
from dependency_injector.wiring import Provide, inject
from fastapi import Depends, WebSocket, WebSocketDisconnect, status
from starlette.websockets import WebSocketState

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.gala.app.interface.i_journal_broadcaster import IJournalBroadcaster


PING_FRAME = orjson.dumps({'type': 'ping'}).decode()


class JournalWebSocketHandler:
    def __init__(
        self,
        *,
        broadcaster: IJournalBroadcaster,
        pong_wait: Optional[float] = None,
        ping_period: Optional[float] = None,
        write_wait: Optional[float] = None,
        allowed_origins: Optional[List[str]] = None,
    ) -> None:
        self.broadcaster = broadcaster
        self.pong_wait = pong_wait or settings.JOURNAL_PONG_WAIT
        self.ping_period = ping_period or settings.JOURNAL_PING_PERIOD
        self.write_wait = write_wait or settings.JOURNAL_WRITE_WAIT
        self.allowed_origins = (
            allowed_origins if allowed_origins is not None else settings.WEBSOCKET_ALLOWED_ORIGINS
        )

    @classmethod
    @inject
    def depends(
        cls,
        broadcaster: IJournalBroadcaster = Depends(Provide[Container.journal_broadcaster]),
    ) -> Self:
        return cls(broadcaster=broadcaster)

    def origin_allowed(self, origin: Optional[str]) -> bool:
        # Non-browser clients send no Origin header
        if not self.allowed_origins or origin is None:
            return True
        return origin in self.allowed_origins

    async def serve(self, websocket: WebSocket) -> None:
        origin = websocket.headers.get('origin')
        if not self.origin_allowed(origin):
            Logger.base.warning(f'🚫 [WS] Rejected connection from origin {origin}')
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return

        # Registered before the handshake completes: every frame committed after
        # the client sees the connection open reaches it
        stream = await self.broadcaster.subscribe()
        client = f'{websocket.client.host}:{websocket.client.port}' if websocket.client else '-'

        try:
            await websocket.accept()
            Logger.base.info(f'🔌 [WS] Subscriber connected: {client}')
            async with anyio.create_task_group() as tg:
                tg.start_soon(self._write_loop, websocket, stream, tg.cancel_scope)
                tg.start_soon(self._read_loop, websocket, tg.cancel_scope)
        finally:
            with anyio.CancelScope(shield=True):
                await self.broadcaster.unsubscribe(stream)
                await self._close(websocket)
            Logger.base.info(f'🔌 [WS] Subscriber disconnected: {client}')

    async def _write_loop(
        self,
        websocket: WebSocket,
        stream: MemoryObjectReceiveStream[bytes],
        cancel_scope: anyio.CancelScope,
    ) -> None:
        try:
            while True:
                frame: Optional[str] = None
                with anyio.move_on_after(self.ping_period):
                    frame = (await stream.receive()).decode()
                with anyio.fail_after(self.write_wait):
                    await websocket.send_text(frame if frame is not None else PING_FRAME)
        except (anyio.EndOfStream, anyio.ClosedResourceError):
            # Evicted as a slow consumer, or the broadcaster shut down
            Logger.base.info('🔌 [WS] Subscriber stream closed by broadcaster')
        except TimeoutError:
            Logger.base.warning(f'⏱️ [WS] Write deadline of {self.write_wait}s exceeded')
        except (WebSocketDisconnect, RuntimeError, OSError) as e:
            Logger.base.debug(f'🔌 [WS] Write failed: {e!r}')
        finally:
            cancel_scope.cancel()

    async def _read_loop(self, websocket: WebSocket, cancel_scope: anyio.CancelScope) -> None:
        try:
            while True:
                with anyio.fail_after(self.pong_wait):
                    message = await websocket.receive()
                if message['type'] == 'websocket.disconnect':
                    return
        except TimeoutError:
            Logger.base.warning(f'⏱️ [WS] No frame from peer within {self.pong_wait}s')
        except (WebSocketDisconnect, RuntimeError, OSError) as e:
            Logger.base.debug(f'🔌 [WS] Read failed: {e!r}')
        finally:
            cancel_scope.cancel()

    async def _close(self, websocket: WebSocket) -> None:
        if websocket.application_state != WebSocketState.CONNECTED:
            return
        if websocket.client_state == WebSocketState.DISCONNECTED:
            return
        with anyio.move_on_after(self.write_wait):
            try:
                await websocket.close(code=status.WS_1000_NORMAL_CLOSURE)
            except (RuntimeError, OSError) as e:
                Logger.base.debug(f'🔌 [WS] Close failed: {e!r}')
