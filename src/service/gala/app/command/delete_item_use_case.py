from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.gala.app.service.entity_lifecycle import EntityLifecycle
from src.service.gala.app.service.mutation_runner import MutationRunner
from src.service.gala.domain.journal_entry import JournalEntry


class DeleteItemUseCase:
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
    async def execute(self, *, actor: Optional[str], item_id: int) -> JournalEntry:
        async def mutation(lifecycle: EntityLifecycle) -> None:
            uow = lifecycle.uow
            if await uow.item_repo.get_by_id(item_id=item_id) is None:
                raise NotFoundError(f'Item {item_id} not found')
            if await uow.purchase_repo.list_for_item(item_id=item_id):
                raise DomainError(f'Item {item_id} still has purchases')
            await lifecycle.delete_item(item_id=item_id)

        return await self.mutation_runner.run(
            operation='delete_item', actor=actor, mutation=mutation
        )
