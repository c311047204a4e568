from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.gala.app.service.entity_lifecycle import EntityLifecycle
from src.service.gala.app.service.mutation_runner import MutationRunner
from src.service.gala.domain.entity.item_entity import Item
from src.service.gala.domain.journal_entry import JournalEntry


def validate_item(*, name: str, amount: int, value: int) -> None:
    if not name.strip():
        raise DomainError('Item name is required')
    if amount < 0 or value < 0:
        raise DomainError('Item amount and value cannot be negative')


class CreateItemUseCase:
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
        self, *, actor: Optional[str], name: str, amount: int, value: int
    ) -> JournalEntry:
        validate_item(name=name, amount=amount, value=value)

        async def mutation(lifecycle: EntityLifecycle) -> None:
            await lifecycle.save_item(item=Item(name=name, amount=amount, value=value))

        return await self.mutation_runner.run(
            operation='create_item', actor=actor, mutation=mutation
        )
