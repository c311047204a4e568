"""
Unit tests for gala commands with a mocked mutation runner

Test Coverage:
1. Request-level validation rejects before the runner (and the gate) is reached
2. The purchase mutation resolves its payer and enforces the Fund-a-Need limit
3. Guest mutations report a payee that disappears mid-mutation as not found
"""

from typing import Any, Dict
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.platform.exception.exceptions import DomainError, NotFoundError
from src.service.gala.app.command.add_guest_use_case import AddGuestUseCase
from src.service.gala.app.command.add_purchase_use_case import AddPurchaseUseCase
from src.service.gala.app.command.create_item_use_case import CreateItemUseCase
from src.service.gala.app.command.save_guest_use_case import SaveGuestUseCase
from src.service.gala.app.command.save_table_use_case import SaveTableUseCase
from src.service.gala.domain.entity.guest_entity import Guest
from src.service.gala.domain.entity.item_entity import Item
from src.service.gala.domain.entity.purchase_entity import Purchase
from src.service.gala.domain.journal_entry import JournalEntry


pytestmark = pytest.mark.unit


@pytest.fixture
def mock_mutation_runner() -> AsyncMock:
    runner = AsyncMock()
    runner.run = AsyncMock(return_value=JournalEntry(sequence=1))
    return runner


class TestRejectedBeforeMutation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'guest,kwargs',
        [
            (Guest(name='   '), {}),
            (Guest(name='Ann Lee', id=4), {}),
            (Guest(name='Ann Lee', party_id=2), {}),
            (Guest(name='Ann Lee', payer_id=3), {'paying_for': [5]}),
            (Guest(name='Ann Lee'), {'num_guests': -1}),
        ],
        ids=['blank_name', 'has_id', 'has_party', 'payer_and_payees', 'negative_companions'],
    )
    async def test_add_guest(self, mock_mutation_runner, guest, kwargs):
        use_case = AddGuestUseCase(mutation_runner=mock_mutation_runner)

        with pytest.raises(DomainError):
            await use_case.execute(actor=None, guest=guest, **kwargs)

        mock_mutation_runner.run.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_save_guest_with_payer_cannot_use_card(self, mock_mutation_runner):
        use_case = SaveGuestUseCase(mutation_runner=mock_mutation_runner)

        with pytest.raises(DomainError):
            await use_case.execute(
                actor=None, guest_id=1, changes=Guest(name='Ann Lee', payer_id=2, use_card=True)
            )

        mock_mutation_runner.run.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_negative_table_number(self, mock_mutation_runner):
        use_case = SaveTableUseCase(mutation_runner=mock_mutation_runner)

        with pytest.raises(DomainError):
            await use_case.execute(actor=None, table_id=1, x=0, y=0, number=-3)

        mock_mutation_runner.run.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'name,amount,value', [('', 10, 0), ('Napa Weekend', -1, 0), ('Napa Weekend', 10, -5)]
    )
    async def test_create_item(self, mock_mutation_runner, name, amount, value):
        use_case = CreateItemUseCase(mutation_runner=mock_mutation_runner)

        with pytest.raises(DomainError):
            await use_case.execute(actor=None, name=name, amount=amount, value=value)

        mock_mutation_runner.run.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'purchase',
        [
            Purchase(guest_id=1, item_id=1, amount=0),
            Purchase(guest_id=1, item_id=1, amount=10, payer_id=2),
            Purchase(guest_id=1, item_id=1, amount=10, payment_timestamp='2024-05-04T19:00:00+00:00'),
        ],
        ids=['zero_amount', 'preset_payer', 'already_paid'],
    )
    async def test_add_purchase(self, mock_mutation_runner, purchase):
        use_case = AddPurchaseUseCase(mutation_runner=mock_mutation_runner)

        with pytest.raises(DomainError):
            await use_case.execute(actor=None, purchase=purchase)

        mock_mutation_runner.run.assert_not_awaited()


class TestAddPurchaseMutation:
    """Runs the closure handed to the runner against a mocked lifecycle."""

    @staticmethod
    def _lifecycle(guests: Dict[int, Guest], item: Item, existing: list) -> MagicMock:
        lifecycle = MagicMock()
        lifecycle.uow.guest_repo.get_by_id = AsyncMock(
            side_effect=lambda *, guest_id: guests.get(guest_id)
        )
        lifecycle.uow.item_repo.get_by_id = AsyncMock(
            side_effect=lambda *, item_id: item if item_id == item.id else None
        )
        lifecycle.uow.purchase_repo.list_for_guest = AsyncMock(return_value=existing)
        lifecycle.save_purchase = AsyncMock(side_effect=lambda *, purchase: purchase)
        return lifecycle

    @staticmethod
    async def _captured_mutation(runner: AsyncMock, purchase: Purchase) -> Any:
        await AddPurchaseUseCase(mutation_runner=runner).execute(actor='alice', purchase=purchase)
        runner.run.assert_awaited_once()
        assert runner.run.await_args.kwargs['actor'] == 'alice'
        return runner.run.await_args.kwargs['mutation']

    @pytest.mark.asyncio
    async def test_payee_purchase_is_paid_by_payer(self, mock_mutation_runner):
        # Given: Bo is paid for by Ann
        guests = {1: Guest(id=1, name='Ann Lee'), 2: Guest(id=2, name='Bo Ray', payer_id=1)}
        item = Item(id=7, name='Napa Weekend', amount=500, value=400)
        lifecycle = self._lifecycle(guests, item, existing=[])
        mutation = await self._captured_mutation(
            mock_mutation_runner, Purchase(guest_id=2, item_id=7, amount=600)
        )

        # When
        await mutation(lifecycle)

        # Then
        saved = lifecycle.save_purchase.await_args.kwargs['purchase']
        assert (saved.guest_id, saved.payer_id, saved.amount) == (2, 1, 600)

    @pytest.mark.asyncio
    async def test_self_payer_pays_own_purchase(self, mock_mutation_runner):
        guests = {1: Guest(id=1, name='Ann Lee')}
        item = Item(id=7, name='Napa Weekend', amount=500, value=400)
        lifecycle = self._lifecycle(guests, item, existing=[])
        mutation = await self._captured_mutation(
            mock_mutation_runner, Purchase(guest_id=1, item_id=7, amount=500)
        )

        await mutation(lifecycle)

        assert lifecycle.save_purchase.await_args.kwargs['purchase'].payer_id == 1

    @pytest.mark.asyncio
    async def test_second_fund_a_need_pledge_is_rejected(self, mock_mutation_runner):
        guests = {1: Guest(id=1, name='Ann Lee')}
        item = Item(id=9, name='Fund a Classroom', amount=1000, value=0)
        previous = Purchase(id=3, guest_id=1, payer_id=1, item_id=9, amount=1000)
        lifecycle = self._lifecycle(guests, item, existing=[previous])
        mutation = await self._captured_mutation(
            mock_mutation_runner, Purchase(guest_id=1, item_id=9, amount=1000)
        )

        with pytest.raises(DomainError):
            await mutation(lifecycle)

        lifecycle.save_purchase.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_item_is_rejected(self, mock_mutation_runner):
        guests = {1: Guest(id=1, name='Ann Lee')}
        lifecycle = self._lifecycle(guests, Item(id=7, name='Napa Weekend', amount=500), existing=[])
        mutation = await self._captured_mutation(
            mock_mutation_runner, Purchase(guest_id=1, item_id=99, amount=10)
        )

        with pytest.raises(DomainError):
            await mutation(lifecycle)


class TestPayeeVanishesMidMutation:
    @staticmethod
    def _lifecycle(payee: Guest) -> MagicMock:
        lifecycle = MagicMock()
        # Present for the availability check, gone by the time it is re-read
        lifecycle.uow.guest_repo.get_by_id = AsyncMock(side_effect=[payee, None])
        lifecycle.uow.guest_repo.list_paid_by = AsyncMock(return_value=[])
        lifecycle.save_guest = AsyncMock(return_value=Guest(id=1, name='Ann Lee'))
        return lifecycle

    @pytest.mark.asyncio
    async def test_add_guest_raises_not_found(self, mock_mutation_runner):
        # Given
        lifecycle = self._lifecycle(Guest(id=5, name='Bo Ray'))
        await AddGuestUseCase(mutation_runner=mock_mutation_runner).execute(
            actor=None, guest=Guest(name='Ann Lee'), paying_for=[5]
        )
        mutation = mock_mutation_runner.run.await_args.kwargs['mutation']

        # When/Then
        with pytest.raises(NotFoundError):
            await mutation(lifecycle)

        lifecycle.save_guest.assert_awaited_once()
        lifecycle.uow.item_repo.get_by_id.assert_not_called()

    @pytest.mark.asyncio
    async def test_save_guest_raises_not_found(self, mock_mutation_runner):
        ann = Guest(id=1, name='Ann Lee', party_id=3)
        lifecycle = MagicMock()
        lifecycle.uow.guest_repo.get_by_id = AsyncMock(
            side_effect=[ann, Guest(id=5, name='Bo Ray'), None]
        )
        lifecycle.uow.guest_repo.list_paid_by = AsyncMock(return_value=[])
        lifecycle.save_guest = AsyncMock(return_value=ann)
        await SaveGuestUseCase(mutation_runner=mock_mutation_runner).execute(
            actor=None, guest_id=1, changes=Guest(name='Ann Lee', party_id=3), paying_for=[5]
        )
        mutation = mock_mutation_runner.run.await_args.kwargs['mutation']

        with pytest.raises(NotFoundError):
            await mutation(lifecycle)
