from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.gala.domain.entity.guest_entity import Guest


class IGuestRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, guest_id: int) -> Optional[Guest]:
        pass

    @abstractmethod
    async def list_all(self) -> List[Guest]:
        pass

    @abstractmethod
    async def list_in_party(self, *, party_id: int) -> List[Guest]:
        """Guests in creation order (by id)"""
        pass

    @abstractmethod
    async def list_paid_by(self, *, payer_id: int) -> List[Guest]:
        """Guests whose payer is `payer_id`, by id"""
        pass

    @abstractmethod
    async def list_with_bidder(self) -> List[Guest]:
        """Guests holding a nonzero bidder number, by id"""
        pass

    @abstractmethod
    async def save(self, *, guest: Guest) -> Guest:
        pass

    @abstractmethod
    async def delete(self, *, guest_id: int) -> None:
        pass
