"""
Cart aggregate

Holds the line items of one persisted cart and enforces the cart rules:
one line per project id, quantities kept within ``[1, cap]`` and a
delete-on-zero policy for quantity updates.
"""

import logging
from decimal import Decimal
from enum import Enum
from typing import Iterable, List, Optional

from greyn_cart.domain.entities.cart_line_item import CartLineItem
from greyn_cart.domain.entities.project_entity import Project
from greyn_cart.domain.value_objects.cart_totals import CartTotals, calculate_totals
from greyn_cart.infrastructure.utilities.constants import CartSettings
from greyn_cart.infrastructure.utilities.exceptions import CartItemNotFoundError

logger = logging.getLogger(__name__)


class DuplicateAddPolicy(Enum):
    """What adding an already-present project does"""

    IGNORE = "ignore"
    INCREMENT = "increment"


class Cart:
    """Shopping cart aggregate"""

    def __init__(
        self,
        items: Optional[Iterable[CartLineItem]] = None,
        version: int = 0,
        max_quantity: int = CartSettings.MAX_QUANTITY_PER_ITEM,
        duplicate_policy: DuplicateAddPolicy = DuplicateAddPolicy.IGNORE,
        currency: str = CartSettings.DEFAULT_CURRENCY,
    ):
        if max_quantity < 1:
            raise ValueError("max_quantity must be at least 1")
        self.version = version
        self.max_quantity = max_quantity
        self.duplicate_policy = duplicate_policy
        self.currency = currency
        self._items: List[CartLineItem] = self._normalize(items or [])

    def _normalize(self, items: Iterable[CartLineItem]) -> List[CartLineItem]:
        """Repair stored items that break the cart invariants"""
        seen = set()
        normalized = []
        for item in items:
            if item.id in seen:
                logger.warning("Dropping duplicate cart line for project %s", item.id)
                continue
            seen.add(item.id)

            if item.unit_price.currency != self.currency:
                logger.warning(
                    "Dropping cart line %s priced in %s, cart uses %s",
                    item.id,
                    item.unit_price.currency,
                    self.currency,
                )
                continue

            cap = self.cap_for(item)
            if item.quantity < CartSettings.MIN_QUANTITY_PER_ITEM or cap < 1:
                logger.warning(
                    "Dropping cart line %s with quantity %s (cap %s)",
                    item.id,
                    item.quantity,
                    cap,
                )
                continue
            if item.quantity > cap:
                logger.warning(
                    "Clamping stored quantity of %s from %s to %s",
                    item.id,
                    item.quantity,
                    cap,
                )
                item = item.with_quantity(cap)
            normalized.append(item)
        return normalized

    @property
    def items(self) -> List[CartLineItem]:
        return list(self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return any(item.id == item_id for item in self._items)

    def __iter__(self):
        return iter(list(self._items))

    def item_ids(self) -> List[str]:
        return [item.id for item in self._items]

    def get_item(self, item_id: str) -> Optional[CartLineItem]:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def cap_for(self, item: CartLineItem) -> int:
        """Maximum quantity for a line: the global cap, bounded by known supply"""
        if item.available_supply is None:
            return self.max_quantity
        return min(self.max_quantity, item.available_supply)

    def add_item(self, project: Project) -> bool:
        """
        Add ``project`` with quantity 1.

        Returns False when the project is already in the cart. Under the
        INCREMENT policy the existing line gets one more unit (clamped).
        Projects priced in another currency are rejected with ValueError.
        """
        if project.price_per_unit.currency != self.currency:
            raise ValueError(
                f"Project {project.id} is priced in {project.price_per_unit.currency}, "
                f"cart uses {self.currency}"
            )

        existing = self.get_item(project.id.value)
        if existing is not None:
            if self.duplicate_policy is DuplicateAddPolicy.INCREMENT:
                self.update_quantity(existing.id, existing.quantity + 1)
            return False

        new_item = CartLineItem.from_project(project, quantity=1)
        if self.cap_for(new_item) < 1:
            logger.warning("Project %s has no credits left, not adding", new_item.id)
            return False
        self._items.append(new_item)
        return True

    def update_quantity(self, item_id: str, new_quantity: int) -> Optional[CartLineItem]:
        """
        Set the quantity of a line.

        Below 1 the line is removed and None is returned, which is a no-op
        for ids not in the cart. Above the cap the quantity is clamped
        silently.
        """
        if isinstance(new_quantity, bool) or not isinstance(new_quantity, int):
            raise ValueError("Quantity must be an integer")

        if new_quantity < CartSettings.MIN_QUANTITY_PER_ITEM:
            self.remove_item(item_id)
            return None

        existing = self.get_item(item_id)
        if existing is None:
            raise CartItemNotFoundError(item_id)

        actual_quantity = min(new_quantity, self.cap_for(existing))
        if actual_quantity < CartSettings.MIN_QUANTITY_PER_ITEM:
            # Sold out since it was added
            self.remove_item(item_id)
            return None
        if actual_quantity != new_quantity:
            logger.info(
                "Clamped quantity of %s from %s to %s", item_id, new_quantity, actual_quantity
            )

        updated = existing.with_quantity(actual_quantity)
        self._items = [updated if item.id == item_id else item for item in self._items]
        return updated

    def remove_item(self, item_id: str) -> bool:
        before = len(self._items)
        self._items = [item for item in self._items if item.id != item_id]
        return len(self._items) != before

    def clear(self) -> None:
        self._items = []

    def totals(self, tax_rate: Decimal = CartSettings.TAX_RATE) -> CartTotals:
        return calculate_totals(self._items, tax_rate=tax_rate, currency=self.currency)

    def __repr__(self) -> str:
        return f"Cart(items={len(self._items)}, version={self.version})"
