"""
Cart totals value object

Derived figures for a list of cart line items. Pure and order-independent.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, Union

from .money import Money

if TYPE_CHECKING:
    from greyn_cart.domain.entities.cart_line_item import CartLineItem

DEFAULT_TAX_RATE = Decimal("0.05")


@dataclass(frozen=True)
class CartTotals:
    """Subtotal, tax, total and unit counts of a cart"""

    subtotal: Money
    tax: Money
    total: Money
    total_units: int
    total_credits: int
    line_count: int

    @classmethod
    def empty(cls, currency: str = "USD") -> "CartTotals":
        zero = Money.zero(currency)
        return cls(
            subtotal=zero,
            tax=zero,
            total=zero,
            total_units=0,
            total_credits=0,
            line_count=0,
        )


def calculate_totals(
    items: Iterable["CartLineItem"],
    tax_rate: Union[Decimal, str] = DEFAULT_TAX_RATE,
    currency: str = "USD",
) -> CartTotals:
    """
    subtotal = sum(unit_price * quantity), tax = subtotal * tax_rate,
    total = subtotal + tax. Every step is rounded half-up to cents.
    """
    subtotal = Money.zero(currency)
    total_units = 0
    line_count = 0

    for item in items:
        subtotal = subtotal + item.line_total()
        total_units += item.quantity
        line_count += 1

    tax = subtotal * Decimal(str(tax_rate))

    return CartTotals(
        subtotal=subtotal,
        tax=tax,
        total=subtotal + tax,
        total_units=total_units,
        # Every unit is one credit (tonne) in the carbon marketplace
        total_credits=total_units,
        line_count=line_count,
    )
