from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.gala.app.interface.i_journal_repo import IJournalRepo
from src.service.gala.driven_adapter.model.journal_model import JournalModel


class JournalRepoImpl(IJournalRepo):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def append(self, *, user: Optional[str], timestamp: str, change: str) -> int:
        model = JournalModel(user=user, timestamp=timestamp, change=change)
        self.session.add(model)
        await self.session.flush()
        return model.id

    async def max_sequence(self) -> int:
        return int(await self.session.scalar(select(func.coalesce(func.max(JournalModel.id), 0))) or 0)
