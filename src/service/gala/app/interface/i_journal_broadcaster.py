from abc import ABC, abstractmethod

from anyio.streams.memory import MemoryObjectReceiveStream


class IJournalBroadcaster(ABC):
    """Fan-out of logged journal frames to live subscribers"""

    @abstractmethod
    async def subscribe(self) -> MemoryObjectReceiveStream[bytes]:
        """Register a subscriber; the stream ends when the subscriber is evicted or closed"""
        pass

    @abstractmethod
    async def unsubscribe(self, stream: MemoryObjectReceiveStream[bytes]) -> None:
        """Idempotent"""
        pass

    @abstractmethod
    async def broadcast(self, message: bytes) -> None:
        pass
