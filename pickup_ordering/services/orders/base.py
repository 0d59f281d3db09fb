"""
Order Pipeline Data Types

Standardized structures passed between the validator and the order store.
Everything here is server-computed except ``RequestedLine``, which carries
the only two cart fields the server looks at: item identity and quantity.

Version: 1.0.0
"""

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class RequestedLine:
    """
    One cart entry as submitted by the client.

    Attributes:
        item_id: Raw client value; only integers can ever resolve
        quantity: Already normalized to >= 1
    """
    item_id: Any
    quantity: int


@dataclass(frozen=True)
class OrderRequest:
    """Customer identity plus the requested lines, in cart order."""
    customer_name: str
    phone: str
    lines: tuple[RequestedLine, ...]

    @property
    def item_ids(self) -> set[int]:
        """Distinct ids worth looking up in the catalog."""
        return {
            line.item_id
            for line in self.lines
            if isinstance(line.item_id, int) and not isinstance(line.item_id, bool)
        }


@dataclass(frozen=True)
class OrderLine:
    """
    Priced line item of an order.

    ``name`` and ``price_cents`` are copied from the catalog at
    validation time.
    """
    item_id: int
    name: str
    quantity: int
    price_cents: int
    line_total_cents: int

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


@dataclass(frozen=True)
class OrderDraft:
    """Validated order ready for persistence."""
    customer_name: str
    phone: str
    lines: list[OrderLine] = field(default_factory=list)
    total_cents: int = 0
