"""
Cart domain model.

Pure business rules for a customer's cart before it becomes an order:
lines for the same dish, item type and note merge, a quantity of zero
removes the line, and buffet-included lines cost nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from shared.config.constants import ItemType


@dataclass
class CartLine:
    menu_item_id: int
    name: str
    price: float
    qty: int
    item_type: str = ItemType.A_LA_CARTE
    note: Optional[str] = None

    @property
    def key(self) -> tuple[int, str, str]:
        return (self.menu_item_id, self.item_type, self.note or "")

    @property
    def unit_price(self) -> float:
        """What the customer pays per unit: nothing for buffet-included lines."""
        if self.item_type == ItemType.BUFFET_INCLUDED:
            return 0.0
        return self.price

    @property
    def line_total(self) -> float:
        return self.unit_price * self.qty


@dataclass
class Cart:
    lines: list[CartLine] = field(default_factory=list)

    def _find(self, key: tuple[int, str, str]) -> Optional[CartLine]:
        for line in self.lines:
            if line.key == key:
                return line
        return None

    def add(self, line: CartLine) -> CartLine:
        """Add a line, merging quantities into an existing identical line."""
        if line.qty <= 0:
            raise ValueError("quantity must be positive")
        existing = self._find(line.key)
        if existing is not None:
            existing.qty += line.qty
            return existing
        self.lines.append(line)
        return line

    def set_quantity(
        self,
        menu_item_id: int,
        qty: int,
        item_type: str = ItemType.A_LA_CARTE,
        note: Optional[str] = None,
    ) -> None:
        """Change a line's quantity; zero or less removes it."""
        line = self._find((menu_item_id, item_type, note or ""))
        if line is None:
            return
        if qty <= 0:
            self.lines.remove(line)
        else:
            line.qty = qty

    def remove(self, menu_item_id: int) -> None:
        """Drop every line for a dish."""
        self.lines = [line for line in self.lines if line.menu_item_id != menu_item_id]

    @property
    def total(self) -> float:
        return round(sum(line.line_total for line in self.lines), 2)

    @property
    def item_count(self) -> int:
        return sum(line.qty for line in self.lines)


def resolve_item_type(
    session_is_buffet: bool,
    item_is_free_in_buffet: bool,
    requested: Optional[str] = None,
) -> str:
    """
    Decide how an ordered dish is billed.

    Only buffet sessions can order buffet-included dishes, and only
    dishes that are free in the buffet. A client may ask for A_LA_CARTE
    explicitly (paid extra portion); asking for BUFFET_INCLUDED on a
    dish that doesn't qualify falls back to A_LA_CARTE.
    """
    qualifies = session_is_buffet and item_is_free_in_buffet
    if requested == ItemType.A_LA_CARTE:
        return ItemType.A_LA_CARTE
    if qualifies:
        return ItemType.BUFFET_INCLUDED
    return ItemType.A_LA_CARTE
