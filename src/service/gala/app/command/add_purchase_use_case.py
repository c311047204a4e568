from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.gala.app.service.entity_lifecycle import EntityLifecycle
from src.service.gala.app.service.mutation_runner import MutationRunner
from src.service.gala.domain.entity.purchase_entity import Purchase
from src.service.gala.domain.journal_entry import JournalEntry


class AddPurchaseUseCase:
    """
    Record an unpaid pledge

    The guest's payer, when they have one, pays. A Fund-a-Need level (an item with zero
    value) can be pledged once per guest.
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
    async def execute(self, *, actor: Optional[str], purchase: Purchase) -> JournalEntry:
        if purchase.amount <= 0:
            raise DomainError('Purchase amount must be positive')
        if purchase.id or purchase.payer_id:
            raise DomainError('A new purchase cannot have an id or a payer')
        if purchase.payment_timestamp or purchase.payment_description:
            raise DomainError('A new purchase cannot already be paid')

        async def mutation(lifecycle: EntityLifecycle) -> None:
            uow = lifecycle.uow
            guest = await uow.guest_repo.get_by_id(guest_id=purchase.guest_id)
            if guest is None:
                raise DomainError(f'Guest {purchase.guest_id} does not exist')
            item = await uow.item_repo.get_by_id(item_id=purchase.item_id)
            if item is None:
                raise DomainError(f'Item {purchase.item_id} does not exist')
            if item.is_fund_a_need:
                for existing in await uow.purchase_repo.list_for_guest(guest_id=guest.id):
                    if existing.item_id == item.id:
                        raise DomainError(f'Guest {guest.id} already pledged to {item.name}')

            payer = None
            if guest.payer_id:
                payer = await uow.guest_repo.get_by_id(guest_id=guest.payer_id)
            purchase.payer_id = payer.id if payer else guest.id
            await lifecycle.save_purchase(purchase=purchase)

        return await self.mutation_runner.run(
            operation='add_purchase', actor=actor, mutation=mutation
        )
