"""
Unit tests for JournalBroadcasterImpl

Test Coverage:
1. Every subscriber receives every frame, in broadcast order
2. A full subscriber buffer evicts only that subscriber
3. Unsubscribe is idempotent
4. Shutdown ends every subscriber stream
"""

import anyio
import pytest

from src.service.gala.driven_adapter.broadcaster.journal_broadcaster_impl import (
    JournalBroadcasterImpl,
)


pytestmark = pytest.mark.unit


async def _drain(stream) -> list[bytes]:
    received = []
    try:
        while True:
            received.append(await stream.receive())
    except anyio.EndOfStream:
        return received


class TestFanOut:
    @pytest.mark.asyncio
    async def test_frames_arrive_in_broadcast_order(self):
        broadcaster = JournalBroadcasterImpl(buffer_size=16)

        with anyio.fail_after(2):
            async with anyio.create_task_group() as tg:
                tg.start_soon(broadcaster.run)
                first = await broadcaster.subscribe()
                second = await broadcaster.subscribe()

                for seq in range(1, 6):
                    await broadcaster.broadcast(f'{seq}'.encode())
                await broadcaster.aclose()

        expected = [b'1', b'2', b'3', b'4', b'5']
        assert await _drain(first) == expected
        assert await _drain(second) == expected

    @pytest.mark.asyncio
    async def test_slow_consumer_is_evicted_without_blocking_others(self):
        # Given: A subscriber that never reads, with room for two frames
        broadcaster = JournalBroadcasterImpl(buffer_size=2)

        with anyio.fail_after(2):
            async with anyio.create_task_group() as tg:
                tg.start_soon(broadcaster.run)
                slow = await broadcaster.subscribe()
                fast = await broadcaster.subscribe()

                # When: Five frames go out and the fast subscriber keeps up
                fast_received = []
                for seq in range(1, 6):
                    await broadcaster.broadcast(f'{seq}'.encode())
                    fast_received.append(await fast.receive())

                # Then: The slow subscriber's stream ends after what fit in its buffer
                assert await _drain(slow) == [b'1', b'2']
                assert fast_received == [b'1', b'2', b'3', b'4', b'5']

                await broadcaster.aclose()

    @pytest.mark.asyncio
    async def test_unsubscribe_is_idempotent(self):
        broadcaster = JournalBroadcasterImpl(buffer_size=4)

        with anyio.fail_after(2):
            async with anyio.create_task_group() as tg:
                tg.start_soon(broadcaster.run)
                stream = await broadcaster.subscribe()
                other = await broadcaster.subscribe()

                await broadcaster.unsubscribe(stream)
                await broadcaster.unsubscribe(stream)
                await broadcaster.broadcast(b'after')

                assert await other.receive() == b'after'
                await broadcaster.aclose()

    @pytest.mark.asyncio
    async def test_shutdown_ends_subscriber_streams(self):
        broadcaster = JournalBroadcasterImpl(buffer_size=4)

        with anyio.fail_after(2):
            async with anyio.create_task_group() as tg:
                tg.start_soon(broadcaster.run)
                stream = await broadcaster.subscribe()
                await broadcaster.aclose()

            assert await _drain(stream) == []
            # Late callers neither raise nor block
            await broadcaster.broadcast(b'late')
            await broadcaster.unsubscribe(stream)
