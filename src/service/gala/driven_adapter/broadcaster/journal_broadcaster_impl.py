"""
Journal Broadcaster Implementation

One coordinator task owns the subscriber set. Every other task talks to it only through
the command inbox, so register, unregister and broadcast are applied strictly one at a
time and broadcasts leave in the order they were logged.

Memory Management:
- Subscriber buffer: JOURNAL_SUBSCRIBER_BUFFER frames (256)
- Slow consumer policy: a full buffer evicts the subscriber and closes its stream;
  the coordinator never waits on a subscriber
"""

import math
from typing import Dict, Optional, Union

import attrs
from anyio import BrokenResourceError, ClosedResourceError, WouldBlock, create_memory_object_stream
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.gala_metrics import metrics
from src.service.gala.app.interface.i_journal_broadcaster import IJournalBroadcaster


@attrs.frozen
class _Register:
    key: int
    send_stream: MemoryObjectSendStream[bytes]


@attrs.frozen
class _Unregister:
    key: int


@attrs.frozen
class _Broadcast:
    message: bytes


_Command = Union[_Register, _Unregister, _Broadcast]


class JournalBroadcasterImpl(IJournalBroadcaster):
    def __init__(self, *, buffer_size: Optional[int] = None) -> None:
        self._buffer_size = buffer_size or settings.JOURNAL_SUBSCRIBER_BUFFER
        self._inbox_send, self._inbox_receive = create_memory_object_stream[_Command](
            max_buffer_size=math.inf
        )
        # Owned by the coordinator task (run); never touched elsewhere
        self._subscribers: Dict[int, MemoryObjectSendStream[bytes]] = {}

    async def run(self) -> None:
        """Coordinator loop; returns after aclose() once pending commands are drained."""
        Logger.base.info('📡 [BROADCASTER] Fan-out loop started')
        try:
            async with self._inbox_receive:
                async for command in self._inbox_receive:
                    match command:
                        case _Register(key=key, send_stream=send_stream):
                            self._subscribers[key] = send_stream
                            metrics.live_subscribers.set(len(self._subscribers))
                            Logger.base.debug(
                                f'📡 [BROADCASTER] Subscriber {key:#x} registered '
                                f'(total: {len(self._subscribers)})'
                            )
                        case _Unregister(key=key):
                            await self._drop(key)
                        case _Broadcast(message=message):
                            await self._fan_out(message)
        finally:
            for key in list(self._subscribers):
                await self._drop(key)
            Logger.base.info('📡 [BROADCASTER] Fan-out loop stopped')

    async def subscribe(self) -> MemoryObjectReceiveStream[bytes]:
        send_stream, receive_stream = create_memory_object_stream[bytes](
            max_buffer_size=self._buffer_size
        )
        await self._inbox_send.send(_Register(key=id(receive_stream), send_stream=send_stream))
        return receive_stream

    async def unsubscribe(self, stream: MemoryObjectReceiveStream[bytes]) -> None:
        try:
            await self._inbox_send.send(_Unregister(key=id(stream)))
        except (ClosedResourceError, BrokenResourceError):
            # Coordinator already stopped and closed every subscriber
            pass
        await stream.aclose()

    async def broadcast(self, message: bytes) -> None:
        try:
            await self._inbox_send.send(_Broadcast(message=message))
        except (ClosedResourceError, BrokenResourceError):
            Logger.base.warning('⚠️ [BROADCASTER] Shutting down, frame not delivered')

    async def aclose(self) -> None:
        """Stop accepting commands; the coordinator closes every subscriber stream."""
        await self._inbox_send.aclose()

    async def _fan_out(self, message: bytes) -> None:
        delivered = 0
        for key, send_stream in list(self._subscribers.items()):
            try:
                send_stream.send_nowait(message)
                delivered += 1
            except WouldBlock:
                metrics.subscriber_evictions.inc()
                Logger.base.warning(
                    f'⚠️ [BROADCASTER] Subscriber {key:#x} buffer full, disconnecting slow consumer'
                )
                await self._drop(key)
            except (BrokenResourceError, ClosedResourceError):
                await self._drop(key)
        Logger.base.debug(f'📡 [BROADCASTER] Broadcast delivered={delivered}')

    async def _drop(self, key: int) -> None:
        send_stream = self._subscribers.pop(key, None)
        if send_stream is None:
            return
        await send_stream.aclose()
        metrics.live_subscribers.set(len(self._subscribers))
        Logger.base.debug(
            f'📡 [BROADCASTER] Subscriber {key:#x} unregistered (remaining: {len(self._subscribers)})'
        )
