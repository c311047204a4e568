from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import ConflictError, DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.gala.app.service.entity_lifecycle import EntityLifecycle
from src.service.gala.app.service.guest_rules import ensure_payees_available, ensure_payer_available
from src.service.gala.app.service.mutation_runner import MutationRunner
from src.service.gala.domain.entity.guest_entity import Guest, build_sortname
from src.service.gala.domain.journal_entry import JournalEntry


class SaveGuestUseCase:
    """
    Update a guest

    Besides the guest's own fields, one save can:
    - reconcile who the guest pays for (guests dropped from the list pay their own way)
    - move the guest's party to another table
    - move the table the guest's party sits at
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
        guest_id: int,
        changes: Guest,
        paying_for: Optional[List[int]] = None,
        table_id: int = 0,
        x: int = 0,
        y: int = 0,
    ) -> JournalEntry:
        wanted_payees = list(dict.fromkeys(paying_for or []))
        if not changes.name.strip():
            raise DomainError('Guest name is required')
        if changes.payer_id and wanted_payees:
            raise DomainError('A guest cannot both have a payer and pay for others')
        if changes.payer_id and changes.use_card:
            raise DomainError('A guest with a payer cannot use a card on file')
        changes.clear_address_unless_complete()

        async def mutation(lifecycle: EntityLifecycle) -> None:
            uow = lifecycle.uow
            guest = await uow.guest_repo.get_by_id(guest_id=guest_id)
            if guest is None:
                raise NotFoundError(f'Guest {guest_id} not found')
            if changes.payer_id:
                await ensure_payer_available(uow=uow, payer_id=changes.payer_id, guest_id=guest.id)
            await ensure_payees_available(uow=uow, payee_ids=wanted_payees, guest_id=guest.id)
            if changes.party_id and changes.party_id != guest.party_id:
                if await uow.party_repo.get_by_id(party_id=changes.party_id) is None:
                    raise DomainError(f'Party {changes.party_id} does not exist')

            if changes.name != guest.name:
                # Keeps an unusual sortname such as "Doe, John Guest #1" until renamed
                guest.sortname = build_sortname(changes.name)
            guest.name = changes.name
            guest.email = changes.email
            guest.address = changes.address
            guest.city = changes.city
            guest.state = changes.state
            guest.zip = changes.zip
            guest.phone = changes.phone
            guest.requests = changes.requests
            guest.party_id = changes.party_id
            guest.bidder = changes.bidder
            guest.payer_id = changes.payer_id
            guest.use_card = changes.use_card and bool(guest.stripe_customer)
            guest = await lifecycle.save_guest(guest=guest)

            for payee in await uow.guest_repo.list_paid_by(payer_id=guest.id):
                if payee.id not in wanted_payees:
                    payee.payer_id = 0
                    await lifecycle.save_guest(guest=payee)
            for payee_id in wanted_payees:
                payee = await uow.guest_repo.get_by_id(guest_id=payee_id)
                if payee is None:
                    raise NotFoundError(f'Guest {payee_id} not found')
                if payee.payer_id != guest.id:
                    payee.payer_id = guest.id
                    payee.use_card = False
                    await lifecycle.save_guest(guest=payee)

            if table_id:
                party = await self._current_party(lifecycle, guest_id=guest.id)
                party.table_id = table_id
                await lifecycle.save_party(party=party)
            if x or y:
                party = await self._current_party(lifecycle, guest_id=guest.id)
                await lifecycle.move_table(table_id=party.table_id, x=x, y=y)

        return await self.mutation_runner.run(
            operation='save_guest', actor=actor, mutation=mutation
        )

    @Logger.io
    async def add_paying_for_purchases(
        self, *, actor: Optional[str], guest_id: int, purchase_ids: List[int]
    ) -> JournalEntry:
        """Make the guest the payer of each listed unpaid purchase."""

        async def mutation(lifecycle: EntityLifecycle) -> None:
            uow = lifecycle.uow
            payer = await uow.guest_repo.get_by_id(guest_id=guest_id)
            if payer is None:
                raise NotFoundError(f'Guest {guest_id} not found')
            for purchase_id in purchase_ids:
                purchase = await uow.purchase_repo.get_by_id(purchase_id=purchase_id)
                if purchase is None:
                    raise DomainError(f'Purchase {purchase_id} does not exist')
                if purchase.is_paid:
                    raise ConflictError(f'Purchase {purchase_id} is already paid')
                purchase.payer_id = payer.id
                await lifecycle.save_purchase(purchase=purchase)

        return await self.mutation_runner.run(
            operation='add_paying_for_purchases', actor=actor, mutation=mutation
        )

    @staticmethod
    async def _current_party(lifecycle: EntityLifecycle, *, guest_id: int):
        guest = await lifecycle.uow.guest_repo.get_by_id(guest_id=guest_id)
        if guest is None:
            raise NotFoundError(f'Guest {guest_id} not found')
        party = await lifecycle.uow.party_repo.get_by_id(party_id=guest.party_id)
        if party is None:
            raise NotFoundError(f'Party {guest.party_id} not found')
        return party
