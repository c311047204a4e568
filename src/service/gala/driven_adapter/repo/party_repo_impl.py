from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.gala.app.interface.i_party_repo import IPartyRepo
from src.service.gala.domain.entity.party_entity import Party
from src.service.gala.driven_adapter.model.party_model import PartyModel


class PartyRepoImpl(IPartyRepo):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def get_by_id(self, *, party_id: int) -> Optional[Party]:
        model = await self.session.get(PartyModel, party_id)
        return self._model_to_entity(model) if model else None

    async def list_all(self) -> List[Party]:
        result = await self.session.scalars(select(PartyModel).order_by(PartyModel.id))
        return [self._model_to_entity(m) for m in result]

    async def list_at_table(self, *, table_id: int) -> List[Party]:
        result = await self.session.scalars(
            select(PartyModel)
            .where(PartyModel.gtable == table_id)
            .order_by(PartyModel.place, PartyModel.id)
        )
        return [self._model_to_entity(m) for m in result]

    @Logger.io
    async def save(self, *, party: Party) -> Party:
        model = await self.session.get(PartyModel, party.id) if party.id else None
        if model is None:
            model = PartyModel()
            self.session.add(model)
        model.gtable = party.table_id
        model.place = party.place
        await self.session.flush()
        party.id = model.id
        return party

    @Logger.io
    async def delete(self, *, party_id: int) -> None:
        if model := await self.session.get(PartyModel, party_id):
            await self.session.delete(model)
            await self.session.flush()

    def _model_to_entity(self, model: PartyModel) -> Party:
        return Party(id=model.id, table_id=model.gtable, place=model.place)
