from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.gala.app.service.entity_lifecycle import EntityLifecycle
from src.service.gala.app.service.mutation_runner import MutationRunner
from src.service.gala.domain.journal_entry import JournalEntry


class DeleteGuestUseCase:
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
    async def execute(self, *, actor: Optional[str], guest_id: int) -> JournalEntry:
        """Guests who have or pay for purchases cannot be deleted."""

        async def mutation(lifecycle: EntityLifecycle) -> None:
            uow = lifecycle.uow
            if await uow.guest_repo.get_by_id(guest_id=guest_id) is None:
                raise NotFoundError(f'Guest {guest_id} not found')
            if await uow.purchase_repo.involves_guest(guest_id=guest_id):
                raise DomainError(f'Guest {guest_id} has or pays for purchases')

            for payee in await uow.guest_repo.list_paid_by(payer_id=guest_id):
                payee.payer_id = 0
                await lifecycle.save_guest(guest=payee)
            await lifecycle.delete_guest(guest_id=guest_id)

        return await self.mutation_runner.run(
            operation='delete_guest', actor=actor, mutation=mutation
        )
