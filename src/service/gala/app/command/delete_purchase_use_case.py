from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.gala.app.service.entity_lifecycle import EntityLifecycle
from src.service.gala.app.service.mutation_runner import MutationRunner
from src.service.gala.domain.journal_entry import JournalEntry


class DeletePurchaseUseCase:
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
    async def execute(self, *, actor: Optional[str], purchase_id: int) -> JournalEntry:
        async def mutation(lifecycle: EntityLifecycle) -> None:
            purchase = await lifecycle.uow.purchase_repo.get_by_id(purchase_id=purchase_id)
            if purchase is None:
                raise NotFoundError(f'Purchase {purchase_id} not found')
            if purchase.is_paid:
                raise ConflictError(f'Purchase {purchase_id} is paid and cannot be deleted')
            await lifecycle.delete_purchase(purchase=purchase)

        return await self.mutation_runner.run(
            operation='delete_purchase', actor=actor, mutation=mutation
        )
