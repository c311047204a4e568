from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.gala.app.service.entity_lifecycle import EntityLifecycle
from src.service.gala.app.service.mutation_runner import MutationRunner
from src.service.gala.domain.journal_entry import JournalEntry


class SaveTableUseCase:
    """
    Position and number a table

    Taking a number another table holds demotes that table to number 0 first. Any number
    change renumbers the bidders seated at the affected tables.
    """

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
        self, *, actor: Optional[str], table_id: int, x: int, y: int, number: int
    ) -> JournalEntry:
        if number < 0:
            raise DomainError('Table number cannot be negative')

        async def mutation(lifecycle: EntityLifecycle) -> None:
            table = await lifecycle.uow.table_repo.get_by_id(table_id=table_id)
            if table is None:
                raise NotFoundError(f'Table {table_id} not found')
            table.x, table.y, table.number = x, y, number
            await lifecycle.save_table(table=table)

        return await self.mutation_runner.run(
            operation='save_table', actor=actor, mutation=mutation
        )
