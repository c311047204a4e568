from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.gala.domain.entity.purchase_entity import Purchase


class IPurchaseRepo(ABC):
    """Listings are in creation order (by id)"""

    @abstractmethod
    async def get_by_id(self, *, purchase_id: int) -> Optional[Purchase]:
        pass

    @abstractmethod
    async def list_all(self) -> List[Purchase]:
        pass

    @abstractmethod
    async def list_for_guest(self, *, guest_id: int) -> List[Purchase]:
        pass

    @abstractmethod
    async def list_paid_by(self, *, payer_id: int) -> List[Purchase]:
        pass

    @abstractmethod
    async def list_for_item(self, *, item_id: int) -> List[Purchase]:
        pass

    @abstractmethod
    async def involves_guest(self, *, guest_id: int) -> bool:
        """True when the guest is the beneficiary or the payer of any purchase"""
        pass

    @abstractmethod
    async def save(self, *, purchase: Purchase) -> Purchase:
        pass

    @abstractmethod
    async def delete(self, *, purchase_id: int) -> None:
        pass
