from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.gala.domain.entity.party_entity import Party


class IPartyRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, party_id: int) -> Optional[Party]:
        pass

    @abstractmethod
    async def list_all(self) -> List[Party]:
        pass

    @abstractmethod
    async def list_at_table(self, *, table_id: int) -> List[Party]:
        """Parties in seating order (by place)"""
        pass

    @abstractmethod
    async def save(self, *, party: Party) -> Party:
        pass

    @abstractmethod
    async def delete(self, *, party_id: int) -> None:
        pass
