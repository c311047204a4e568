from datetime import datetime, timezone
from typing import List, Optional, Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.gala.app.service.entity_lifecycle import EntityLifecycle
from src.service.gala.app.service.guest_rules import ensure_payees_available, ensure_payer_available
from src.service.gala.app.service.mutation_runner import MutationRunner
from src.service.gala.domain.entity.guest_entity import Guest, build_sortname
from src.service.gala.domain.entity.purchase_entity import Purchase
from src.service.gala.domain.journal_entry import JournalEntry


class AddGuestUseCase:
    """
    Register a guest

    Flow:
    1. Save the guest in a new party at a new placeholder table
    2. Point every paying-for guest at the new guest as payer
    3. Record the registration purchase (paid when a ticket description is given)
    4. Register "<name> Guest #i" companions in the same party, each with a
       registration purchase paid by the host
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
        self,
        *,
        actor: Optional[str],
        guest: Guest,
        ticket: str = '',
        num_guests: int = 0,
        paying_for: Optional[List[int]] = None,
    ) -> JournalEntry:
        paying_for = list(dict.fromkeys(paying_for or []))
        if not guest.name.strip():
            raise DomainError('Guest name is required')
        if guest.id or guest.party_id:
            raise DomainError('A new guest cannot have an id or a party')
        if guest.payer_id and paying_for:
            raise DomainError('A guest cannot both have a payer and pay for others')
        if num_guests < 0:
            raise DomainError('Number of companions cannot be negative')

        guest.sortname = build_sortname(guest.name)
        guest.clear_address_unless_complete()
        guest.bidder = 0

        async def mutation(lifecycle: EntityLifecycle) -> None:
            uow = lifecycle.uow
            if guest.payer_id:
                await ensure_payer_available(uow=uow, payer_id=guest.payer_id)
            await ensure_payees_available(uow=uow, payee_ids=paying_for)

            host = await lifecycle.save_guest(guest=guest)
            for payee_id in paying_for:
                payee = await uow.guest_repo.get_by_id(guest_id=payee_id)
                if payee is None:
                    raise NotFoundError(f'Guest {payee_id} not found')
                payee.payer_id = host.id
                payee.use_card = False
                await lifecycle.save_guest(guest=payee)

            item = await uow.item_repo.get_by_id(item_id=settings.REGISTRATION_ITEM_ID)
            if item is None:
                raise DomainError(f'Registration item {settings.REGISTRATION_ITEM_ID} does not exist')
            registration = Purchase(
                guest_id=host.id, payer_id=host.id, item_id=item.id, amount=item.amount
            )
            if ticket:
                registration.payment_timestamp = datetime.now(timezone.utc).isoformat(
                    timespec='seconds'
                )
                registration.payment_description = ticket
            await lifecycle.save_purchase(purchase=attrs.evolve(registration))

            for i in range(1, num_guests + 1):
                companion = await lifecycle.save_guest(
                    guest=Guest(
                        name=f'{host.name} Guest #{i}',
                        sortname=f'{host.sortname} Guest #{i}',
                        requests=host.requests,
                        party_id=host.party_id,
                    )
                )
                await lifecycle.save_purchase(
                    purchase=attrs.evolve(registration, guest_id=companion.id)
                )

        return await self.mutation_runner.run(
            operation='add_guest', actor=actor, mutation=mutation
        )
