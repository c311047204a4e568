"""
Unit of Work - owns one session and one store transaction

- The transaction starts on entry (BEGIN IMMEDIATE takes the SQLite writer lock)
- Repositories share the session
- Leaving the block rolls back whatever was not committed
"""

from __future__ import annotations

import abc
from types import TracebackType
from typing import TYPE_CHECKING, AsyncContextManager, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession


if TYPE_CHECKING:
    from src.service.gala.app.interface.i_guest_repo import IGuestRepo
    from src.service.gala.app.interface.i_item_repo import IItemRepo
    from src.service.gala.app.interface.i_journal_repo import IJournalRepo
    from src.service.gala.app.interface.i_party_repo import IPartyRepo
    from src.service.gala.app.interface.i_purchase_repo import IPurchaseRepo
    from src.service.gala.app.interface.i_table_repo import ITableRepo


class AbstractUnitOfWork(abc.ABC):
    """
    Usage:
        async with uow:
            guest = await uow.guest_repo.get_by_id(guest_id=...)
            await uow.commit()
    """

    table_repo: ITableRepo
    party_repo: IPartyRepo
    guest_repo: IGuestRepo
    item_repo: IItemRepo
    purchase_repo: IPurchaseRepo
    journal_repo: IJournalRepo

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        await self.rollback()

    async def commit(self) -> None:
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    def __init__(self, session_factory: Callable[[], AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory
        self._session_cm: Optional[AsyncContextManager[AsyncSession]] = None
        self.session: Optional[AsyncSession] = None

    async def __aenter__(self) -> AbstractUnitOfWork:
        from src.service.gala.driven_adapter.repo.guest_repo_impl import GuestRepoImpl
        from src.service.gala.driven_adapter.repo.item_repo_impl import ItemRepoImpl
        from src.service.gala.driven_adapter.repo.journal_repo_impl import JournalRepoImpl
        from src.service.gala.driven_adapter.repo.party_repo_impl import PartyRepoImpl
        from src.service.gala.driven_adapter.repo.purchase_repo_impl import PurchaseRepoImpl
        from src.service.gala.driven_adapter.repo.table_repo_impl import TableRepoImpl

        self._session_cm = self.session_factory()
        self.session = await self._session_cm.__aenter__()
        try:
            # Begin now so the writer lock is held before any business logic runs
            await self.session.connection()
        except BaseException:
            session_cm, self._session_cm, self.session = self._session_cm, None, None
            await session_cm.__aexit__(None, None, None)
            raise

        self.table_repo = TableRepoImpl(self.session)
        self.party_repo = PartyRepoImpl(self.session)
        self.guest_repo = GuestRepoImpl(self.session)
        self.item_repo = ItemRepoImpl(self.session)
        self.purchase_repo = PurchaseRepoImpl(self.session)
        self.journal_repo = JournalRepoImpl(self.session)

        return await super().__aenter__()

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        try:
            await super().__aexit__(exc_type, exc, tb)
        finally:
            session_cm, self._session_cm, self.session = self._session_cm, None, None
            if session_cm is not None:
                await session_cm.__aexit__(exc_type, exc, tb)

    async def _commit(self) -> None:
        assert self.session is not None
        await self.session.commit()

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()
