from typing import Any

import attrs


@attrs.define
class Purchase:
    id: int = 0
    guest_id: int = 0
    payer_id: int = 0
    item_id: int = 0
    amount: int = 0
    payment_timestamp: str = ''  # RFC 3339; empty while pledged but unpaid
    payment_description: str = ''
    schola_order: int = 0
    picked_up: bool = False

    # Computed: whether the payer has a card on file
    have_card: bool = False

    @property
    def is_paid(self) -> bool:
        return self.payment_timestamp != ''

    def to_wire(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'guest': self.guest_id,
            'payer': self.payer_id,
            'item': self.item_id,
            'amount': self.amount,
            'paymentTimestamp': self.payment_timestamp,
            'paymentDescription': self.payment_description,
            'scholaOrder': self.schola_order,
            'pickedUp': self.picked_up,
            'haveCard': self.have_card,
        }
