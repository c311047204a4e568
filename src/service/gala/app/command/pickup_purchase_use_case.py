from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.gala.app.service.entity_lifecycle import EntityLifecycle
from src.service.gala.app.service.mutation_runner import MutationRunner
from src.service.gala.domain.journal_entry import JournalEntry


class PickupPurchaseUseCase:
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
        """Hand a paid purchase to the guest."""

        async def mutation(lifecycle: EntityLifecycle) -> None:
            purchase = await lifecycle.uow.purchase_repo.get_by_id(purchase_id=purchase_id)
            if purchase is None:
                raise NotFoundError(f'Purchase {purchase_id} not found')
            if not purchase.is_paid:
                raise ConflictError(f'Purchase {purchase_id} is not paid yet')
            if purchase.picked_up:
                raise ConflictError(f'Purchase {purchase_id} was already picked up')
            purchase.picked_up = True
            await lifecycle.save_purchase(purchase=purchase)

        return await self.mutation_runner.run(
            operation='pickup_purchase', actor=actor, mutation=mutation
        )
