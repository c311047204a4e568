from typing import Any, List

import attrs


@attrs.define
class Table:
    """A table, or the unnumbered placeholder that holds an unseated party."""

    id: int = 0
    x: int = 0
    y: int = 0
    number: int = 0
    parties: List[int] = attrs.field(factory=list)

    @property
    def is_placeholder(self) -> bool:
        return self.number == 0

    def to_wire(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'x': self.x,
            'y': self.y,
            'number': self.number,
            'parties': list(self.parties),
        }
