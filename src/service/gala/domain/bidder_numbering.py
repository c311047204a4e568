"""
Bidder (auction paddle) numbering.

Paddles print the bidder number in hexadecimal: the high digits are the table number
read as decimal digits, the low digit is the seat slot. Table 12 therefore owns bidder
numbers 0x120..0x12F (288..303).
"""

from typing import Dict, Iterable, Mapping, Set

import attrs

from src.platform.exception.exceptions import ConflictError


SLOTS_PER_TABLE = 16


def table_number_to_bidder_base(table_number: int) -> int:
    return (table_number // 10) * 16 + (table_number % 10)


def bidder_range(table_number: int) -> range:
    base = table_number_to_bidder_base(table_number) * SLOTS_PER_TABLE
    return range(base, base + SLOTS_PER_TABLE)


@attrs.frozen
class SeatedGuest:
    id: int
    bidder: int
    payer_id: int


def plan_bidder_numbers(table_number: int, seated: Iterable[SeatedGuest]) -> Dict[int, int]:
    """
    Bidder number every guest at the table should hold.

    `seated` is in seating order (parties by place, guests by id). Only guests whose
    number changes appear in the result.

    - Table 0 strips every bidder number.
    - A valid, unclaimed number in the table's range is kept, except by a guest whose
      payer sits at the same table: that guest always carries the payer's paddle.
      Self-payers claim first, so a payer whose number is in range keeps it.
    - Everyone else is renumbered, self-payers first, each taking the lowest free slot.
    """
    guests = list(seated)
    if table_number == 0:
        return {g.id: 0 for g in guests if g.bidder != 0}

    valid = bidder_range(table_number)
    at_table = {g.id for g in guests}
    used: Set[int] = set()
    assigned: Dict[int, int] = {}
    pending = []

    # Self-payers claim their valid numbers before payees do
    for g in sorted(guests, key=lambda g: g.payer_id != 0):
        follows_payer = g.payer_id != 0 and g.payer_id in at_table
        if not follows_payer and g.bidder in valid and g.bidder not in used:
            used.add(g.bidder)
            assigned[g.id] = g.bidder
        else:
            pending.append(g)

    def next_free() -> int:
        for number in valid:
            if number not in used:
                used.add(number)
                return number
        raise ConflictError(f'Table {table_number} has no free bidder numbers')

    for g in pending:
        if g.payer_id == 0:
            assigned[g.id] = next_free()
    for g in pending:
        if g.payer_id != 0:
            payer_number = assigned.get(g.payer_id)
            assigned[g.id] = payer_number if payer_number else next_free()

    current: Mapping[int, int] = {g.id: g.bidder for g in guests}
    return {gid: number for gid, number in assigned.items() if current[gid] != number}


def build_bidder_index(guests: Iterable[SeatedGuest]) -> Dict[int, int]:
    """
    bidder number -> canonical guest, over guests with a nonzero number.

    Where several guests share a number the first self-payer wins, otherwise the first
    guest encountered.
    """
    index: Dict[int, int] = {}
    self_paying: Set[int] = set()
    for g in guests:
        if g.bidder == 0:
            continue
        if g.bidder not in index:
            index[g.bidder] = g.id
            if g.payer_id == 0:
                self_paying.add(g.bidder)
        elif g.payer_id == 0 and g.bidder not in self_paying:
            index[g.bidder] = g.id
            self_paying.add(g.bidder)
    return index
