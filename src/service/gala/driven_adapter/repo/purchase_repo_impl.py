from typing import List, Optional

from sqlalchemy import exists, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.gala.app.interface.i_purchase_repo import IPurchaseRepo
from src.service.gala.domain.entity.purchase_entity import Purchase
from src.service.gala.driven_adapter.model.purchase_model import PurchaseModel


class PurchaseRepoImpl(IPurchaseRepo):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def get_by_id(self, *, purchase_id: int) -> Optional[Purchase]:
        model = await self.session.get(PurchaseModel, purchase_id)
        return self._model_to_entity(model) if model else None

    async def list_all(self) -> List[Purchase]:
        return await self._list(select(PurchaseModel))

    async def list_for_guest(self, *, guest_id: int) -> List[Purchase]:
        return await self._list(select(PurchaseModel).where(PurchaseModel.guest == guest_id))

    async def list_paid_by(self, *, payer_id: int) -> List[Purchase]:
        return await self._list(select(PurchaseModel).where(PurchaseModel.payer == payer_id))

    async def list_for_item(self, *, item_id: int) -> List[Purchase]:
        return await self._list(select(PurchaseModel).where(PurchaseModel.item == item_id))

    async def involves_guest(self, *, guest_id: int) -> bool:
        stmt = select(
            exists().where(or_(PurchaseModel.guest == guest_id, PurchaseModel.payer == guest_id))
        )
        return bool(await self.session.scalar(stmt))

    @Logger.io
    async def save(self, *, purchase: Purchase) -> Purchase:
        model = await self.session.get(PurchaseModel, purchase.id) if purchase.id else None
        if model is None:
            model = PurchaseModel()
            self.session.add(model)
        model.guest = purchase.guest_id
        model.payer = purchase.payer_id
        model.item = purchase.item_id
        model.amount = purchase.amount
        model.payment_timestamp = purchase.payment_timestamp
        model.payment_description = purchase.payment_description
        model.schola_order = purchase.schola_order
        model.picked_up = purchase.picked_up
        await self.session.flush()
        purchase.id = model.id
        return purchase

    @Logger.io
    async def delete(self, *, purchase_id: int) -> None:
        if model := await self.session.get(PurchaseModel, purchase_id):
            await self.session.delete(model)
            await self.session.flush()

    async def _list(self, stmt) -> List[Purchase]:
        result = await self.session.scalars(stmt.order_by(PurchaseModel.id))
        return [self._model_to_entity(m) for m in result]

    def _model_to_entity(self, model: PurchaseModel) -> Purchase:
        return Purchase(
            id=model.id,
            guest_id=model.guest,
            payer_id=model.payer,
            item_id=model.item,
            amount=model.amount,
            payment_timestamp=model.payment_timestamp,
            payment_description=model.payment_description,
            schola_order=model.schola_order,
            picked_up=model.picked_up,
        )
