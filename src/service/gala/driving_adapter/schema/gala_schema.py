from typing import List, Optional

from pydantic import BaseModel, Field

from src.service.gala.domain.entity.guest_entity import Guest
from src.service.gala.domain.entity.purchase_entity import Purchase


class SequenceResponse(BaseModel):
    """Sequence number of the journal frame a mutation produced."""

    sequence: int

    class Config:
        json_schema_extra = {'example': {'sequence': 42}}


# ============================ Guests ============================


class GuestFields(BaseModel):
    name: str = ''
    email: str = ''
    address: str = ''
    city: str = ''
    state: str = ''
    zip: str = ''
    phone: str = ''
    requests: str = ''
    party: int = 0
    bidder: int = 0
    use_card: bool = Field(default=False, alias='useCard')
    payer: int = 0
    paying_for: List[int] = Field(default_factory=list, alias='payingFor')

    class Config:
        populate_by_name = True

    def to_guest(self) -> Guest:
        return Guest(
            name=self.name.strip(),
            email=self.email,
            address=self.address,
            city=self.city,
            state=self.state,
            zip=self.zip,
            phone=self.phone,
            requests=self.requests,
            party_id=self.party,
            bidder=self.bidder,
            use_card=self.use_card,
            payer_id=self.payer,
        )


class GuestCreateRequest(GuestFields):
    ticket: str = ''
    num_guests: int = Field(default=0, alias='numGuests')

    class Config:
        populate_by_name = True
        json_schema_extra = {
            'example': {
                'name': 'Jane Q. Doe',
                'email': 'jane@example.com',
                'address': '1 Main St',
                'city': 'Palo Alto',
                'state': 'CA',
                'zip': '94301',
                'requests': 'vegetarian',
                'ticket': 'check #1234',
                'numGuests': 1,
                'payingFor': [],
            }
        }


class GuestSaveRequest(GuestFields):
    table: int = 0
    x: int = 0
    y: int = 0
    paying_for_purchases_add: Optional[List[int]] = Field(
        default=None, alias='payingForPurchasesAdd'
    )

    class Config:
        populate_by_name = True
        json_schema_extra = {
            'example': {
                'name': 'Jane Q. Doe',
                'email': 'jane@example.com',
                'party': 3,
                'bidder': 288,
                'payer': 0,
                'payingFor': [7, 8],
                'table': 0,
                'x': 0,
                'y': 0,
            }
        }


# ============================ Seating ============================


class PartySaveRequest(BaseModel):
    table: int = 0
    x: int = 0  # position of a newly created table
    y: int = 0

    class Config:
        json_schema_extra = {'example': {'table': 0, 'x': 120, 'y': 340}}


class TableSaveRequest(BaseModel):
    x: int = 0
    y: int = 0
    number: int = 0

    class Config:
        json_schema_extra = {'example': {'x': 120, 'y': 340, 'number': 12}}


class TablePosition(BaseModel):
    id: int
    x: int
    y: int


# ============================ Items & Purchases ============================


class ItemRequest(BaseModel):
    name: str = ''
    amount: int = 0
    value: int = 0

    class Config:
        json_schema_extra = {'example': {'name': 'Weekend in Napa', 'amount': 500, 'value': 400}}


class PurchaseCreateRequest(BaseModel):
    guest: int
    item: int
    amount: int
    payer: int = 0
    payment_timestamp: str = Field(default='', alias='paymentTimestamp')
    payment_description: str = Field(default='', alias='paymentDescription')

    class Config:
        populate_by_name = True
        json_schema_extra = {'example': {'guest': 5, 'item': 12, 'amount': 250}}

    def to_purchase(self) -> Purchase:
        return Purchase(
            guest_id=self.guest,
            item_id=self.item,
            amount=self.amount,
            payer_id=self.payer,
            payment_timestamp=self.payment_timestamp,
            payment_description=self.payment_description,
        )
