from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.gala.app.interface.i_guest_repo import IGuestRepo
from src.service.gala.domain.entity.guest_entity import Guest
from src.service.gala.driven_adapter.model.guest_model import GuestModel


class GuestRepoImpl(IGuestRepo):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def get_by_id(self, *, guest_id: int) -> Optional[Guest]:
        model = await self.session.get(GuestModel, guest_id)
        return self._model_to_entity(model) if model else None

    async def list_all(self) -> List[Guest]:
        return await self._list(select(GuestModel))

    async def list_in_party(self, *, party_id: int) -> List[Guest]:
        return await self._list(select(GuestModel).where(GuestModel.party == party_id))

    async def list_paid_by(self, *, payer_id: int) -> List[Guest]:
        return await self._list(select(GuestModel).where(GuestModel.payer == payer_id))

    async def list_with_bidder(self) -> List[Guest]:
        return await self._list(select(GuestModel).where(GuestModel.bidder != 0))

    @Logger.io
    async def save(self, *, guest: Guest) -> Guest:
        model = await self.session.get(GuestModel, guest.id) if guest.id else None
        if model is None:
            model = GuestModel()
            self.session.add(model)
        model.name = guest.name
        model.sortname = guest.sortname
        model.email = guest.email
        model.address = guest.address
        model.city = guest.city
        model.state = guest.state
        model.zip = guest.zip
        model.phone = guest.phone
        model.requests = guest.requests
        model.party = guest.party_id
        model.bidder = guest.bidder
        model.stripe_customer = guest.stripe_customer
        model.stripe_source = guest.stripe_source
        model.stripe_description = guest.stripe_description
        model.use_card = guest.use_card
        model.payer = guest.payer_id or None
        await self.session.flush()
        guest.id = model.id
        return guest

    @Logger.io
    async def delete(self, *, guest_id: int) -> None:
        if model := await self.session.get(GuestModel, guest_id):
            await self.session.delete(model)
            await self.session.flush()

    async def _list(self, stmt) -> List[Guest]:
        result = await self.session.scalars(stmt.order_by(GuestModel.id))
        return [self._model_to_entity(m) for m in result]

    def _model_to_entity(self, model: GuestModel) -> Guest:
        return Guest(
            id=model.id,
            name=model.name,
            sortname=model.sortname,
            email=model.email,
            address=model.address,
            city=model.city,
            state=model.state,
            zip=model.zip,
            phone=model.phone,
            requests=model.requests,
            party_id=model.party,
            bidder=model.bidder,
            stripe_customer=model.stripe_customer,
            stripe_source=model.stripe_source,
            stripe_description=model.stripe_description,
            use_card=model.use_card,
            payer_id=model.payer or 0,
        )
