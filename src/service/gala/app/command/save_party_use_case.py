from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.gala.app.service.entity_lifecycle import EntityLifecycle
from src.service.gala.app.service.mutation_runner import MutationRunner
from src.service.gala.domain.journal_entry import JournalEntry


class SavePartyUseCase:
    def __init__(self, *, mutation_runner: MutationRunner) -> None:
        self.mutation_runner = mutation_runner

    @classmethod
    @inject
    def depends(
        cls,
        mutation_runner: MutationRunner = Depends(Provide[Container.mutation_runner]),
    ) -> Self:
        return cls(mutation_runner=mutation_runner)

    @Logger.io
    async def execute(
        self, *, actor: Optional[str], party_id: int, table_id: int, x: int = 0, y: int = 0
    ) -> JournalEntry:
        """
        Seat a party at a table. Table id 0 seats it at a new placeholder table;
        a nonzero x/y then positions that table.
        """

        async def mutation(lifecycle: EntityLifecycle) -> None:
            uow = lifecycle.uow
            party = await uow.party_repo.get_by_id(party_id=party_id)
            if party is None:
                raise NotFoundError(f'Party {party_id} not found')
            if table_id and table_id != party.table_id:
                if await uow.table_repo.get_by_id(table_id=table_id) is None:
                    raise DomainError(f'Table {table_id} does not exist')

            party.table_id = table_id
            party = await lifecycle.save_party(party=party)
            if x or y:
                await lifecycle.move_table(table_id=party.table_id, x=x, y=y)

        return await self.mutation_runner.run(
            operation='save_party', actor=actor, mutation=mutation
        )
