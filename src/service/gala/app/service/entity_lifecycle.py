"""
Entity lifecycle inside one store transaction.

Every save and delete marks the touched entity, and whatever else it transitively
affects, in the transaction's JournalEntry:

- old and new parent (party of a guest, table of a party)
- old and new payer of a guest or purchase
- the bidder index, whenever a bidder number changes

Empty containers are removed explicitly after the triggering write: a party without
guests is deleted, then a table without parties. Bidder numbers are recomputed for a
table whenever its number or its membership changes.
"""

from typing import Optional

import attrs

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.gala.domain.bidder_numbering import SeatedGuest, plan_bidder_numbers
from src.service.gala.domain.entity.guest_entity import Guest
from src.service.gala.domain.entity.item_entity import Item
from src.service.gala.domain.entity.party_entity import Party
from src.service.gala.domain.entity.purchase_entity import Purchase
from src.service.gala.domain.entity.table_entity import Table
from src.service.gala.domain.journal_entry import JournalEntry


class EntityLifecycle:
    def __init__(self, *, uow: AbstractUnitOfWork, entry: JournalEntry) -> None:
        self.uow = uow
        self.entry = entry

    # ------------------------------------------------------------------ tables

    @Logger.io
    async def save_table(self, *, table: Table) -> Table:
        old_number = 0
        if table.id:
            existing = await self._require_table(table.id)
            old_number = existing.number

        if table.number != 0 and table.number != old_number:
            holder = await self.uow.table_repo.find_by_number(number=table.number)
            if holder is not None and holder.id != table.id:
                Logger.base.info(
                    f'🔀 [TABLE] Number {table.number} moves from table {holder.id}; demoting it to 0'
                )
                holder.number = 0
                await self.uow.table_repo.save(table=holder)
                self.entry.mark_table(holder.id)
                await self.refresh_bidders(table_id=holder.id)

        table = await self.uow.table_repo.save(table=table)
        self.entry.mark_table(table.id)
        if table.number != old_number:
            await self.refresh_bidders(table_id=table.id)
        return table

    async def move_table(self, *, table_id: int, x: int, y: int) -> Table:
        table = await self._require_table(table_id)
        table.x, table.y = x, y
        return await self.save_table(table=table)

    # ----------------------------------------------------------------- parties

    @Logger.io
    async def save_party(self, *, party: Party) -> Party:
        """Table id 0 seats the party at a new placeholder table."""
        old_table_id = 0
        if party.id:
            existing = await self.uow.party_repo.get_by_id(party_id=party.id)
            if existing is None:
                raise NotFoundError(f'Party {party.id} not found')
            old_table_id = existing.table_id

        if party.table_id == 0:
            new_table = await self.save_table(table=Table())
            party.table_id = new_table.id
            party.place = 1
        elif party.table_id != old_table_id:
            await self._require_table(party.table_id)
            party.place = await self.uow.table_repo.next_place(table_id=party.table_id)

        party = await self.uow.party_repo.save(party=party)
        self.entry.mark_party(party.id)

        if party.table_id != old_table_id:
            self.entry.mark_table(party.table_id)
            if old_table_id:
                self.entry.mark_table(old_table_id)
                await self._collapse_table(old_table_id)
            await self.refresh_bidders(table_id=party.table_id)
        return party

    # ------------------------------------------------------------------ guests

    @Logger.io
    async def save_guest(self, *, guest: Guest) -> Guest:
        """Party id 0 gives the guest a new party of their own."""
        old: Optional[Guest] = None
        if guest.id:
            old = await self.uow.guest_repo.get_by_id(guest_id=guest.id)
            if old is None:
                raise NotFoundError(f'Guest {guest.id} not found')

        if guest.party_id == 0:
            party = await self.save_party(party=Party())
            guest.party_id = party.id

        if (
            old is not None
            and old.payer_id
            and guest.payer_id != old.payer_id
            and guest.bidder
            and guest.bidder == old.bidder
        ):
            # A payee leaving its payer hands the shared paddle back
            former_payer = await self.uow.guest_repo.get_by_id(guest_id=old.payer_id)
            if former_payer is not None and former_payer.bidder == guest.bidder:
                guest.bidder = 0

        guest = await self._write_guest(guest=guest, old=old)

        if old is not None and old.party_id != guest.party_id:
            await self._collapse_party(old.party_id)

        if (
            old is None
            or old.party_id != guest.party_id
            or old.payer_id != guest.payer_id
            or old.bidder != guest.bidder
        ):
            await self.refresh_bidders_for_party(party_id=guest.party_id)
        return guest

    @Logger.io
    async def delete_guest(self, *, guest_id: int) -> None:
        guest = await self.uow.guest_repo.get_by_id(guest_id=guest_id)
        if guest is None:
            raise NotFoundError(f'Guest {guest_id} not found')

        await self.uow.guest_repo.delete(guest_id=guest.id)
        self.entry.mark_guest(guest.id)
        if guest.payer_id:
            self.entry.mark_guest(guest.payer_id)
        if guest.bidder:
            self.entry.mark_bidder_remap()
        self.entry.mark_party(guest.party_id)
        await self._collapse_party(guest.party_id)

    async def _write_guest(self, *, guest: Guest, old: Optional[Guest]) -> Guest:
        guest = await self.uow.guest_repo.save(guest=guest)
        self.entry.mark_guest(guest.id)

        old_payer = old.payer_id if old else 0
        old_bidder = old.bidder if old else 0
        old_party = old.party_id if old else 0
        if old_payer != guest.payer_id:
            self.entry.mark_guest(old_payer)
            self.entry.mark_guest(guest.payer_id)
        if old_bidder != guest.bidder:
            self.entry.mark_bidder_remap()
        if old_party != guest.party_id:
            self.entry.mark_party(old_party)
            self.entry.mark_party(guest.party_id)
        return guest

    # ---------------------------------------------------------- bidder numbers

    async def refresh_bidders_for_party(self, *, party_id: int) -> None:
        party = await self.uow.party_repo.get_by_id(party_id=party_id)
        if party is not None:
            await self.refresh_bidders(table_id=party.table_id)

    @Logger.io
    async def refresh_bidders(self, *, table_id: int) -> None:
        table = await self.uow.table_repo.get_by_id(table_id=table_id)
        if table is None:
            return

        seated: list[Guest] = []
        for party in await self.uow.party_repo.list_at_table(table_id=table.id):
            seated.extend(await self.uow.guest_repo.list_in_party(party_id=party.id))

        plan = plan_bidder_numbers(
            table.number,
            (SeatedGuest(id=g.id, bidder=g.bidder, payer_id=g.payer_id) for g in seated),
        )
        if not plan:
            return

        Logger.base.info(f'🎫 [BIDDER] Table {table.number} (id {table.id}): {plan}')
        for guest in seated:
            if guest.id in plan:
                before = attrs.evolve(guest)
                guest.bidder = plan[guest.id]
                await self._write_guest(guest=guest, old=before)

    # ------------------------------------------------------------------- items

    @Logger.io
    async def save_item(self, *, item: Item) -> Item:
        item = await self.uow.item_repo.save(item=item)
        self.entry.mark_item(item.id)
        return item

    @Logger.io
    async def delete_item(self, *, item_id: int) -> None:
        await self.uow.item_repo.delete(item_id=item_id)
        self.entry.mark_item(item_id)

    # --------------------------------------------------------------- purchases

    @Logger.io
    async def save_purchase(self, *, purchase: Purchase) -> Purchase:
        old: Optional[Purchase] = None
        if purchase.id:
            old = await self.uow.purchase_repo.get_by_id(purchase_id=purchase.id)
            if old is None:
                raise NotFoundError(f'Purchase {purchase.id} not found')

        purchase = await self.uow.purchase_repo.save(purchase=purchase)
        self.entry.mark_purchase(purchase.id)
        self._mark_if_changed(self.entry.mark_guest, old.guest_id if old else 0, purchase.guest_id)
        self._mark_if_changed(self.entry.mark_guest, old.payer_id if old else 0, purchase.payer_id)
        self._mark_if_changed(self.entry.mark_item, old.item_id if old else 0, purchase.item_id)
        return purchase

    @Logger.io
    async def delete_purchase(self, *, purchase: Purchase) -> None:
        await self.uow.purchase_repo.delete(purchase_id=purchase.id)
        self.entry.mark_purchase(purchase.id)
        self.entry.mark_guest(purchase.guest_id)
        self.entry.mark_guest(purchase.payer_id)
        self.entry.mark_item(purchase.item_id)

    # ----------------------------------------------------------------- cascade

    async def _collapse_party(self, party_id: int) -> None:
        party = await self.uow.party_repo.get_by_id(party_id=party_id)
        if party is None or await self.uow.guest_repo.list_in_party(party_id=party.id):
            return
        Logger.base.debug(f'🧹 [CASCADE] Party {party.id} is empty, deleting')
        await self.uow.party_repo.delete(party_id=party.id)
        self.entry.mark_party(party.id)
        self.entry.mark_table(party.table_id)
        await self._collapse_table(party.table_id)

    async def _collapse_table(self, table_id: int) -> None:
        table = await self.uow.table_repo.get_by_id(table_id=table_id)
        if table is None or await self.uow.party_repo.list_at_table(table_id=table.id):
            return
        Logger.base.debug(f'🧹 [CASCADE] Table {table.id} is empty, deleting')
        await self.uow.table_repo.delete(table_id=table.id)
        self.entry.mark_table(table.id)

    # ----------------------------------------------------------------- helpers

    async def _require_table(self, table_id: int) -> Table:
        table = await self.uow.table_repo.get_by_id(table_id=table_id)
        if table is None:
            raise NotFoundError(f'Table {table_id} not found')
        return table

    @staticmethod
    def _mark_if_changed(mark, old_id: int, new_id: int) -> None:
        if old_id != new_id:
            mark(old_id)
            mark(new_id)
