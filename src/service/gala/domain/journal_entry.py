"""
Dirty set for one transaction.

Business logic marks every entity it touches, by kind and id, without holding new
values. After the mutation has run, the change populator replaces each mark with the
entity's current state, or None when the entity no longer exists.
"""

from typing import Any, Dict, Generic, Optional, TypeVar

import attrs
import orjson

from src.service.gala.domain.entity.guest_entity import Guest
from src.service.gala.domain.entity.item_entity import Item
from src.service.gala.domain.entity.party_entity import Party
from src.service.gala.domain.entity.purchase_entity import Purchase
from src.service.gala.domain.entity.table_entity import Table


_E = TypeVar('_E', Table, Party, Guest, Item, Purchase)


@attrs.define
class Changes(Generic[_E]):
    """Marked ids of one kind; a None value is either not yet populated or deleted."""

    entries: Dict[int, Optional[_E]] = attrs.field(factory=dict)

    def mark(self, entity_id: int) -> None:
        if entity_id:
            self.entries.setdefault(entity_id, None)

    def ids(self) -> list[int]:
        return sorted(self.entries)

    def put(self, entity_id: int, entity: Optional[_E]) -> None:
        self.entries[entity_id] = entity

    def __bool__(self) -> bool:
        return bool(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def to_wire(self) -> dict[int, Optional[dict[str, Any]]]:
        return {
            entity_id: None if entity is None else entity.to_wire()
            for entity_id, entity in sorted(self.entries.items())
        }


@attrs.define
class JournalEntry:
    tables: Changes[Table] = attrs.field(factory=Changes)
    parties: Changes[Party] = attrs.field(factory=Changes)
    guests: Changes[Guest] = attrs.field(factory=Changes)
    items: Changes[Item] = attrs.field(factory=Changes)
    purchases: Changes[Purchase] = attrs.field(factory=Changes)
    # None: index unchanged; a dict: full replacement of the bidder -> guest index
    bidder_to_guest: Optional[Dict[int, int]] = None
    populated: bool = False
    sequence: int = 0

    def mark_table(self, table_id: int) -> None:
        self.tables.mark(table_id)

    def mark_party(self, party_id: int) -> None:
        self.parties.mark(party_id)

    def mark_guest(self, guest_id: int) -> None:
        self.guests.mark(guest_id)

    def mark_item(self, item_id: int) -> None:
        self.items.mark(item_id)

    def mark_purchase(self, purchase_id: int) -> None:
        self.purchases.mark(purchase_id)

    def mark_bidder_remap(self) -> None:
        if self.bidder_to_guest is None:
            self.bidder_to_guest = {}

    @property
    def bidder_remap_marked(self) -> bool:
        return self.bidder_to_guest is not None

    def is_empty(self) -> bool:
        return not (
            self.tables
            or self.parties
            or self.guests
            or self.items
            or self.purchases
            or self.bidder_remap_marked
        )

    def payload(self) -> dict[str, Any]:
        """Delta keyed by kind; kinds without changes are left out."""
        data: dict[str, Any] = {}
        for key, changes in (
            ('tables', self.tables),
            ('parties', self.parties),
            ('guests', self.guests),
            ('items', self.items),
            ('purchases', self.purchases),
        ):
            if changes:
                data[key] = changes.to_wire()
        if self.bidder_to_guest is not None:
            data['bidderToGuest'] = dict(sorted(self.bidder_to_guest.items()))
        return data

    def serialize(self) -> bytes:
        """Payload as stored in the audit table (JSON object keys must be strings)."""
        return orjson.dumps(self.payload(), option=orjson.OPT_NON_STR_KEYS)

    def to_message(self) -> bytes:
        """Frame pushed to live subscribers and returned by the snapshot endpoint."""
        return orjson.dumps(
            {'sequence': self.sequence, **self.payload()}, option=orjson.OPT_NON_STR_KEYS
        )
