from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.gala.app.command.create_item_use_case import validate_item
from src.service.gala.app.service.entity_lifecycle import EntityLifecycle
from src.service.gala.app.service.mutation_runner import MutationRunner
from src.service.gala.domain.journal_entry import JournalEntry


class SaveItemUseCase:
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
        self, *, actor: Optional[str], item_id: int, name: str, amount: int, value: int
    ) -> JournalEntry:
        validate_item(name=name, amount=amount, value=value)

        async def mutation(lifecycle: EntityLifecycle) -> None:
            item = await lifecycle.uow.item_repo.get_by_id(item_id=item_id)
            if item is None:
                raise NotFoundError(f'Item {item_id} not found')
            item.name, item.amount, item.value = name, amount, value
            await lifecycle.save_item(item=item)

        return await self.mutation_runner.run(
            operation='save_item', actor=actor, mutation=mutation
        )
