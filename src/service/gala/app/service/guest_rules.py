"""
Payer rules shared by guest commands.

A payer never has a payer of their own, and a guest paid for by someone pays for no one.
"""

from typing import Iterable

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import DomainError


async def ensure_payer_available(*, uow: AbstractUnitOfWork, payer_id: int, guest_id: int = 0) -> None:
    if payer_id == guest_id:
        raise DomainError('A guest cannot pay for themselves through a payer')
    payer = await uow.guest_repo.get_by_id(guest_id=payer_id)
    if payer is None:
        raise DomainError(f'Payer {payer_id} does not exist')
    if payer.payer_id:
        raise DomainError(f'Payer {payer_id} is paid for by someone else')


async def ensure_payees_available(
    *, uow: AbstractUnitOfWork, payee_ids: Iterable[int], guest_id: int = 0
) -> None:
    for payee_id in payee_ids:
        if payee_id == guest_id:
            raise DomainError('A guest cannot pay for themselves through a payer')
        if await uow.guest_repo.get_by_id(guest_id=payee_id) is None:
            raise DomainError(f'Guest {payee_id} does not exist')
        # Paying for this same guest is fine; that arrangement is being reversed
        for dependent in await uow.guest_repo.list_paid_by(payer_id=payee_id):
            if dependent.id != guest_id:
                raise DomainError(f'Guest {payee_id} already pays for someone else')
