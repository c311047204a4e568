from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.gala.domain.entity.table_entity import Table


class ITableRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, table_id: int) -> Optional[Table]:
        pass

    @abstractmethod
    async def list_all(self) -> List[Table]:
        pass

    @abstractmethod
    async def find_by_number(self, *, number: int) -> Optional[Table]:
        """Table currently holding a nonzero number, if any"""
        pass

    @abstractmethod
    async def save(self, *, table: Table) -> Table:
        """Insert when id is 0, otherwise update; returns the table with its id"""
        pass

    @abstractmethod
    async def delete(self, *, table_id: int) -> None:
        pass

    @abstractmethod
    async def next_place(self, *, table_id: int) -> int:
        """One past the highest party place at the table"""
        pass
