from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.gala.domain.bidder_numbering import SeatedGuest, build_bidder_index
from src.service.gala.domain.journal_entry import JournalEntry


class ChangePopulator:
    """
    Replace every mark in a JournalEntry with the entity's current state.

    Entities that no longer exist stay None, which tells subscribers to drop them.
    Store errors propagate: a partial delta is never produced.
    """

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @Logger.io
    async def populate(self, *, entry: JournalEntry) -> JournalEntry:
        if entry.populated:
            return entry

        for table_id in entry.tables.ids():
            table = await self.uow.table_repo.get_by_id(table_id=table_id)
            if table is not None:
                parties = await self.uow.party_repo.list_at_table(table_id=table.id)
                table.parties = [p.id for p in parties]
            entry.tables.put(table_id, table)

        for party_id in entry.parties.ids():
            party = await self.uow.party_repo.get_by_id(party_id=party_id)
            if party is not None:
                guests = await self.uow.guest_repo.list_in_party(party_id=party.id)
                party.guests = [g.id for g in guests]
            entry.parties.put(party_id, party)

        for guest_id in entry.guests.ids():
            guest = await self.uow.guest_repo.get_by_id(guest_id=guest_id)
            if guest is not None:
                payees = await self.uow.guest_repo.list_paid_by(payer_id=guest.id)
                purchases = await self.uow.purchase_repo.list_for_guest(guest_id=guest.id)
                paying_for = await self.uow.purchase_repo.list_paid_by(payer_id=guest.id)
                guest.paying_for = [g.id for g in payees]
                guest.purchases = [p.id for p in purchases]
                guest.paying_for_purchases = [p.id for p in paying_for]
                guest.all_paid = all(p.is_paid for p in paying_for)
            entry.guests.put(guest_id, guest)

        for item_id in entry.items.ids():
            item = await self.uow.item_repo.get_by_id(item_id=item_id)
            if item is not None:
                purchases = await self.uow.purchase_repo.list_for_item(item_id=item.id)
                item.purchases = [p.id for p in purchases]
            entry.items.put(item_id, item)

        for purchase_id in entry.purchases.ids():
            purchase = await self.uow.purchase_repo.get_by_id(purchase_id=purchase_id)
            if purchase is not None:
                payer = await self.uow.guest_repo.get_by_id(guest_id=purchase.payer_id)
                purchase.have_card = bool(payer and payer.use_card)
            entry.purchases.put(purchase_id, purchase)

        if entry.bidder_remap_marked:
            guests = await self.uow.guest_repo.list_with_bidder()
            entry.bidder_to_guest = build_bidder_index(
                SeatedGuest(id=g.id, bidder=g.bidder, payer_id=g.payer_id) for g in guests
            )

        entry.populated = True
        return entry

    async def mark_everything(self, *, entry: JournalEntry) -> JournalEntry:
        """Seed an entry with every live entity, for a full snapshot."""
        for table in await self.uow.table_repo.list_all():
            entry.mark_table(table.id)
        for party in await self.uow.party_repo.list_all():
            entry.mark_party(party.id)
        for guest in await self.uow.guest_repo.list_all():
            entry.mark_guest(guest.id)
        for item in await self.uow.item_repo.list_all():
            entry.mark_item(item.id)
        for purchase in await self.uow.purchase_repo.list_all():
            entry.mark_purchase(purchase.id)
        entry.mark_bidder_remap()
        return entry
