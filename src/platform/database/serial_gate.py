from contextlib import asynccontextmanager
from typing import AsyncIterator

import anyio

from src.platform.logging.loguru_io import Logger


class SerialTransactionGate:
    """
    Process-wide critical section around store transactions.

    SQLite admits one writer at a time. Holding this gate before BEGIN IMMEDIATE keeps
    concurrent requests queued in the application instead of spinning on the busy
    timeout. There is no timeout on acquisition; a stuck writer stalls every other writer.
    """

    def __init__(self) -> None:
        self._lock = anyio.Lock()

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    @asynccontextmanager
    async def hold(self) -> AsyncIterator[None]:
        if self._lock.locked():
            Logger.base.debug('⏳ [GATE] Waiting for the current writer')
        async with self._lock:
            yield
