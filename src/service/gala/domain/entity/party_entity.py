from typing import Any, List

import attrs


@attrs.define
class Party:
    id: int = 0
    table_id: int = 0
    place: int = 0
    guests: List[int] = attrs.field(factory=list)

    def to_wire(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'table': self.table_id,
            'place': self.place,
            'guests': list(self.guests),
        }
