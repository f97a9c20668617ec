"""
Cart DTOs

Data Transfer Objects for cart-related operations.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from greyn_cart.domain.entities.cart_entity import Cart
from greyn_cart.domain.entities.cart_line_item import CartLineItem
from greyn_cart.infrastructure.utilities.constants import CartSettings


@dataclass
class AddToCartRequest:
    """Request to add a project to the cart"""
    project_id: str
    storage_key: str = CartSettings.DEFAULT_STORAGE_KEY


@dataclass
class UpdateQuantityRequest:
    """Request to change the quantity of a cart line"""
    project_id: str
    quantity: int
    storage_key: str = CartSettings.DEFAULT_STORAGE_KEY


@dataclass
class CartItemInfo:
    """Cart item information"""
    project_id: str
    project_name: str
    quantity: int
    max_quantity: int
    unit_price: Decimal
    line_total: Decimal
    currency: str
    ngo_name: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None
    carbon_impact: Optional[str] = None
    featured: bool = False
    is_verified: bool = False

    @classmethod
    def from_line_item(cls, item: CartLineItem, max_quantity: int) -> "CartItemInfo":
        snapshot = item.snapshot
        return cls(
            project_id=item.id,
            project_name=snapshot.name,
            quantity=item.quantity,
            max_quantity=max_quantity,
            unit_price=item.unit_price.amount,
            line_total=item.line_total().amount,
            currency=item.unit_price.currency,
            ngo_name=snapshot.ngo_name,
            location=snapshot.location,
            category=snapshot.category,
            carbon_impact=snapshot.carbon_impact,
            featured=snapshot.featured,
            is_verified=snapshot.is_verified,
        )


@dataclass
class CartSummary:
    """Cart summary information"""
    items: List[CartItemInfo]
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    total_units: int
    total_credits: int
    currency: str
    version: int = 0

    @property
    def item_ids(self) -> List[str]:
        return [item.project_id for item in self.items]

    @classmethod
    def from_cart(cls, cart: Cart) -> "CartSummary":
        totals = cart.totals()
        return cls(
            items=[CartItemInfo.from_line_item(item, cart.cap_for(item)) for item in cart],
            subtotal=totals.subtotal.amount,
            tax=totals.tax.amount,
            total=totals.total.amount,
            total_units=totals.total_units,
            total_credits=totals.total_credits,
            currency=totals.subtotal.currency,
            version=cart.version,
        )


@dataclass
class CartOperationResponse:
    """Response for cart operations"""
    success: bool
    cart_summary: Optional[CartSummary] = None
    added: Optional[bool] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None


@dataclass
class PortfolioStats:
    """Investor dashboard figures derived from the cart"""
    total_credits: int
    active_credits: int
    retired_credits: int
    portfolio_value: Decimal
    currency: str


@dataclass
class CheckoutIssue:
    """One reason a cart line cannot be checked out as is"""
    project_id: Optional[str]
    code: str
    message: str
    cart_price: Optional[Decimal] = None
    catalog_price: Optional[Decimal] = None
    available_credits: Optional[int] = None


@dataclass
class CheckoutReview:
    """Result of comparing the cart with the live catalog"""
    ready: bool
    cart_summary: CartSummary
    issues: List[CheckoutIssue] = field(default_factory=list)
