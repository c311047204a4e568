import anyio
import pytest

from src.platform.database.serial_gate import SerialTransactionGate


pytestmark = pytest.mark.unit


class TestSerialTransactionGate:
    @pytest.mark.asyncio
    async def test_holders_run_one_at_a_time_in_arrival_order(self):
        gate = SerialTransactionGate()
        trace: list[str] = []

        async def writer(name: str) -> None:
            async with gate.hold():
                trace.append(f'{name}:start')
                await anyio.sleep(0.02)
                trace.append(f'{name}:end')

        with anyio.fail_after(2):
            async with anyio.create_task_group() as tg:
                for name in ('a', 'b', 'c'):
                    tg.start_soon(writer, name)
                    await anyio.sleep(0)

        assert trace == ['a:start', 'a:end', 'b:start', 'b:end', 'c:start', 'c:end']

    @pytest.mark.asyncio
    async def test_released_when_holder_raises(self):
        gate = SerialTransactionGate()

        with pytest.raises(ValueError):
            async with gate.hold():
                assert gate.locked
                raise ValueError('boom')

        assert not gate.locked
        with anyio.fail_after(1):
            async with gate.hold():
                pass
