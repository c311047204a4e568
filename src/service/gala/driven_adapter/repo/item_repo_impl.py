from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.gala.app.interface.i_item_repo import IItemRepo
from src.service.gala.domain.entity.item_entity import Item
from src.service.gala.driven_adapter.model.item_model import ItemModel


class ItemRepoImpl(IItemRepo):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def get_by_id(self, *, item_id: int) -> Optional[Item]:
        model = await self.session.get(ItemModel, item_id)
        return self._model_to_entity(model) if model else None

    async def list_all(self) -> List[Item]:
        result = await self.session.scalars(select(ItemModel).order_by(ItemModel.id))
        return [self._model_to_entity(m) for m in result]

    @Logger.io
    async def save(self, *, item: Item) -> Item:
        model = await self.session.get(ItemModel, item.id) if item.id else None
        if model is None:
            model = ItemModel()
            self.session.add(model)
        model.name = item.name
        model.amount = item.amount
        model.value = item.value
        await self.session.flush()
        item.id = model.id
        return item

    @Logger.io
    async def delete(self, *, item_id: int) -> None:
        if model := await self.session.get(ItemModel, item_id):
            await self.session.delete(model)
            await self.session.flush()

    def _model_to_entity(self, model: ItemModel) -> Item:
        return Item(id=model.id, name=model.name, amount=model.amount, value=model.value)
