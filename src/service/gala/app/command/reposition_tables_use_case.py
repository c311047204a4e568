from typing import Iterable, Optional, Self, Tuple

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.gala.app.service.entity_lifecycle import EntityLifecycle
from src.service.gala.app.service.mutation_runner import MutationRunner
from src.service.gala.domain.journal_entry import JournalEntry


class RepositionTablesUseCase:
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
        self, *, actor: Optional[str], positions: Iterable[Tuple[int, int, int]]
    ) -> JournalEntry:
        """Move many tables at once; positions are (table_id, x, y)."""
        positions = list(positions)

        async def mutation(lifecycle: EntityLifecycle) -> None:
            for table_id, x, y in positions:
                if await lifecycle.uow.table_repo.get_by_id(table_id=table_id) is None:
                    raise DomainError(f'Table {table_id} does not exist')
                await lifecycle.move_table(table_id=table_id, x=x, y=y)

        return await self.mutation_runner.run(
            operation='reposition_tables', actor=actor, mutation=mutation
        )
