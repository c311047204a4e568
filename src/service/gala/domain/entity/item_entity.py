from typing import Any, List

import attrs


@attrs.define
class Item:
    """
    Something a guest can buy or pledge.

    `value` is the fair-market value received, used for tax-deductibility; an item with
    zero value is a Fund-a-Need donation level.
    """

    id: int = 0
    name: str = ''
    amount: int = 0
    value: int = 0
    purchases: List[int] = attrs.field(factory=list)

    @property
    def is_fund_a_need(self) -> bool:
        return self.value == 0

    def to_wire(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'amount': self.amount,
            'value': self.value,
            'purchases': list(self.purchases),
        }
