from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.gala.domain.entity.item_entity import Item


class IItemRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, item_id: int) -> Optional[Item]:
        pass

    @abstractmethod
    async def list_all(self) -> List[Item]:
        pass

    @abstractmethod
    async def save(self, *, item: Item) -> Item:
        pass

    @abstractmethod
    async def delete(self, *, item_id: int) -> None:
        pass
