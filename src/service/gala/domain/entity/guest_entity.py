from typing import Any, List

import attrs


_KNOWN_SUFFIXES = (' jr', ' jr.', ' sr', ' sr.', ' iii', ' md', ' m.d.')


def build_sortname(name: str) -> str:
    """
    "Jane Q. Doe" -> "Doe, Jane Q."

    A trailing suffix ("Jr.", "III", anything after a comma) stays at the end:
    "John Smith, Jr." -> "Smith, John, Jr."
    """
    suffix = ''
    name = name.strip()
    if (idx := name.find(',')) >= 0:
        name, suffix = name[:idx], name[idx:]
    else:
        lower = name.lower()
        for known in _KNOWN_SUFFIXES:
            if lower.endswith(known):
                name, suffix = name[: -len(known)], name[-len(known) :]
                break
    name = name.strip()
    if (idx := name.rfind(' ')) >= 0:
        return f'{name[idx + 1 :]}, {name[:idx].rstrip()}{suffix}'
    return f'{name}{suffix}'


@attrs.define
class Guest:
    id: int = 0
    name: str = ''
    sortname: str = ''
    email: str = ''
    address: str = ''
    city: str = ''
    state: str = ''
    zip: str = ''
    phone: str = ''
    requests: str = ''
    party_id: int = 0
    bidder: int = 0
    stripe_customer: str = ''
    stripe_source: str = ''
    stripe_description: str = ''
    use_card: bool = False
    payer_id: int = 0

    # Computed when the guest is populated into a journal entry
    paying_for: List[int] = attrs.field(factory=list)
    purchases: List[int] = attrs.field(factory=list)
    paying_for_purchases: List[int] = attrs.field(factory=list)
    all_paid: bool = True

    @property
    def pays_own_way(self) -> bool:
        return self.payer_id == 0

    def clear_address_unless_complete(self) -> None:
        # Address fields are all or none
        if not (self.address and self.city and self.state and self.zip):
            self.address = self.city = self.state = self.zip = ''

    def to_wire(self) -> dict[str, Any]:
        # stripe_customer is an external reference and never leaves the server
        return {
            'id': self.id,
            'name': self.name,
            'sortname': self.sortname,
            'email': self.email,
            'address': self.address,
            'city': self.city,
            'state': self.state,
            'zip': self.zip,
            'phone': self.phone,
            'requests': self.requests,
            'party': self.party_id,
            'bidder': self.bidder,
            'stripeSource': self.stripe_source,
            'stripeDescription': self.stripe_description,
            'useCard': self.use_card,
            'payer': self.payer_id,
            'payingFor': list(self.paying_for),
            'purchases': list(self.purchases),
            'payingForPurchases': list(self.paying_for_purchases),
            'allPaid': self.all_paid,
        }
