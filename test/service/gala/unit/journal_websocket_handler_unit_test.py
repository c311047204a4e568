"""
Unit tests for JournalWebSocketHandler

Test Coverage:
1. Frames are forwarded in order; an idle connection gets pings
2. Peer close, eviction and read/write deadlines all end the connection
3. The subscriber is always unsubscribed
4. Origin check
"""

from typing import List, Optional

import anyio
from anyio import create_memory_object_stream
from fastapi import status
import pytest
from starlette.websockets import WebSocketState

from src.service.gala.app.interface.i_journal_broadcaster import IJournalBroadcaster
from src.service.gala.driving_adapter.websocket.journal_websocket_handler import (
    PING_FRAME,
    JournalWebSocketHandler,
)


pytestmark = pytest.mark.unit


class MockWebSocket:
    def __init__(self, *, origin: Optional[str] = None) -> None:
        self.headers = {'origin': origin} if origin else {}
        self.client = None
        self.application_state = WebSocketState.CONNECTING
        self.client_state = WebSocketState.CONNECTED
        self.sent: List[str] = []
        self.close_codes: List[int] = []
        self.send_delay = 0.0
        self._inbound_send, self._inbound_receive = create_memory_object_stream[dict](16)

    async def accept(self) -> None:
        self.application_state = WebSocketState.CONNECTED

    async def send_text(self, data: str) -> None:
        if self.send_delay:
            await anyio.sleep(self.send_delay)
        self.sent.append(data)

    async def receive(self) -> dict:
        return await self._inbound_receive.receive()

    async def close(self, code: int = status.WS_1000_NORMAL_CLOSURE) -> None:
        self.close_codes.append(code)
        self.application_state = WebSocketState.DISCONNECTED

    async def peer_sends(self, text: str) -> None:
        await self._inbound_send.send({'type': 'websocket.receive', 'text': text})

    async def peer_disconnects(self) -> None:
        self.client_state = WebSocketState.DISCONNECTED
        await self._inbound_send.send({'type': 'websocket.disconnect', 'code': 1000})


class FakeBroadcaster(IJournalBroadcaster):
    def __init__(self) -> None:
        self.send_stream, self.receive_stream = create_memory_object_stream[bytes](16)
        self.subscribed = 0
        self.unsubscribed = 0

    async def subscribe(self):
        self.subscribed += 1
        return self.receive_stream

    async def unsubscribe(self, stream) -> None:
        self.unsubscribed += 1
        await stream.aclose()

    async def broadcast(self, message: bytes) -> None:
        await self.send_stream.send(message)


def _handler(broadcaster, **overrides) -> JournalWebSocketHandler:
    timings = {'pong_wait': 5.0, 'ping_period': 5.0, 'write_wait': 1.0, 'allowed_origins': []}
    timings.update(overrides)
    return JournalWebSocketHandler(broadcaster=broadcaster, **timings)


class TestDelivery:
    @pytest.mark.asyncio
    async def test_frames_forwarded_in_order_then_ping_when_idle(self):
        broadcaster = FakeBroadcaster()
        handler = _handler(broadcaster, ping_period=0.05)
        websocket = MockWebSocket()

        with anyio.fail_after(2):
            async with anyio.create_task_group() as tg:
                tg.start_soon(handler.serve, websocket)
                await broadcaster.broadcast(b'{"sequence":1}')
                await broadcaster.broadcast(b'{"sequence":2}')
                await anyio.sleep(0.2)
                await websocket.peer_disconnects()

        assert websocket.sent[:2] == ['{"sequence":1}', '{"sequence":2}']
        assert PING_FRAME in websocket.sent[2:]
        assert broadcaster.unsubscribed == 1
        # Peer already closed; nothing left to close
        assert websocket.close_codes == []


class TestTeardown:
    @pytest.mark.asyncio
    async def test_eviction_closes_socket(self):
        broadcaster = FakeBroadcaster()
        websocket = MockWebSocket()

        with anyio.fail_after(2):
            async with anyio.create_task_group() as tg:
                tg.start_soon(_handler(broadcaster).serve, websocket)
                await broadcaster.broadcast(b'{"sequence":1}')
                # Broadcaster evicts: the subscriber stream ends
                await broadcaster.send_stream.aclose()

        assert websocket.sent == ['{"sequence":1}']
        assert websocket.close_codes == [status.WS_1000_NORMAL_CLOSURE]
        assert broadcaster.unsubscribed == 1

    @pytest.mark.asyncio
    async def test_client_frames_refresh_read_deadline(self):
        broadcaster = FakeBroadcaster()
        websocket = MockWebSocket()
        finished = anyio.Event()

        async def serve() -> None:
            await _handler(broadcaster, pong_wait=0.15).serve(websocket)
            finished.set()

        with anyio.fail_after(2):
            async with anyio.create_task_group() as tg:
                tg.start_soon(serve)
                # Keep answering for longer than one read deadline
                for _ in range(6):
                    await anyio.sleep(0.05)
                    await websocket.peer_sends('{"type":"pong"}')
                assert not finished.is_set()

                # Then go silent
                await finished.wait()

        assert websocket.close_codes == [status.WS_1000_NORMAL_CLOSURE]
        assert broadcaster.unsubscribed == 1

    @pytest.mark.asyncio
    async def test_write_deadline_tears_down_stuck_peer(self):
        broadcaster = FakeBroadcaster()
        websocket = MockWebSocket()
        websocket.send_delay = 10

        with anyio.fail_after(2):
            async with anyio.create_task_group() as tg:
                tg.start_soon(_handler(broadcaster, write_wait=0.1).serve, websocket)
                await broadcaster.broadcast(b'{"sequence":1}')

        assert websocket.sent == []
        assert broadcaster.unsubscribed == 1


class TestOrigin:
    @pytest.mark.asyncio
    async def test_foreign_origin_is_rejected_before_subscribing(self):
        broadcaster = FakeBroadcaster()
        handler = _handler(broadcaster, allowed_origins=['https://admin.example.org'])
        websocket = MockWebSocket(origin='https://elsewhere.example.com')

        await handler.serve(websocket)

        assert websocket.close_codes == [status.WS_1008_POLICY_VIOLATION]
        assert broadcaster.subscribed == 0

    @pytest.mark.parametrize(
        'allowed,origin,expected',
        [
            ([], 'https://anywhere.example.com', True),
            (['https://admin.example.org'], 'https://admin.example.org', True),
            (['https://admin.example.org'], None, True),
            (['https://admin.example.org'], 'https://elsewhere.example.com', False),
        ],
    )
    def test_origin_allowed(self, allowed, origin, expected):
        handler = _handler(FakeBroadcaster(), allowed_origins=allowed)

        assert handler.origin_allowed(origin) is expected
