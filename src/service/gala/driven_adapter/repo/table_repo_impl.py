from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.gala.app.interface.i_table_repo import ITableRepo
from src.service.gala.domain.entity.table_entity import Table
from src.service.gala.driven_adapter.model.party_model import PartyModel
from src.service.gala.driven_adapter.model.table_model import TableModel


class TableRepoImpl(ITableRepo):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def get_by_id(self, *, table_id: int) -> Optional[Table]:
        model = await self.session.get(TableModel, table_id)
        return self._model_to_entity(model) if model else None

    async def list_all(self) -> List[Table]:
        result = await self.session.scalars(select(TableModel).order_by(TableModel.id))
        return [self._model_to_entity(m) for m in result]

    @Logger.io
    async def find_by_number(self, *, number: int) -> Optional[Table]:
        result = await self.session.scalars(
            select(TableModel).where(TableModel.num == number).order_by(TableModel.id).limit(1)
        )
        model = result.first()
        return self._model_to_entity(model) if model else None

    @Logger.io
    async def save(self, *, table: Table) -> Table:
        model = await self.session.get(TableModel, table.id) if table.id else None
        if model is None:
            model = TableModel()
            self.session.add(model)
        model.x = table.x
        model.y = table.y
        model.num = table.number
        await self.session.flush()
        table.id = model.id
        return table

    @Logger.io
    async def delete(self, *, table_id: int) -> None:
        if model := await self.session.get(TableModel, table_id):
            await self.session.delete(model)
            await self.session.flush()

    async def next_place(self, *, table_id: int) -> int:
        highest = await self.session.scalar(
            select(func.coalesce(func.max(PartyModel.place), 0)).where(
                PartyModel.gtable == table_id
            )
        )
        return int(highest or 0) + 1

    def _model_to_entity(self, model: TableModel) -> Table:
        return Table(id=model.id, x=model.x, y=model.y, number=model.num)
