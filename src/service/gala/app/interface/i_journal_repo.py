from abc import ABC, abstractmethod
from typing import Optional


class IJournalRepo(ABC):
    @abstractmethod
    async def append(self, *, user: Optional[str], timestamp: str, change: str) -> int:
        """Insert one audit row and return its id, which is the sequence number"""
        pass

    @abstractmethod
    async def max_sequence(self) -> int:
        """Highest journal id, 0 when the journal is empty"""
        pass
