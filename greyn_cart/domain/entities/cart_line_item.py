"""
Cart line item - one project in the cart with a purchase quantity
"""

from dataclasses import dataclass, replace
from typing import Optional

from greyn_cart.domain.entities.project_entity import Project, ProjectSnapshot
from greyn_cart.domain.value_objects.money import Money
from greyn_cart.domain.value_objects.project_id import ProjectId


@dataclass(frozen=True)
class CartLineItem:
    """
    A cart entry keyed by project id.

    ``unit_price`` and ``snapshot`` are captured when the project is added and
    are never refreshed from the catalog afterwards.
    """

    id: str
    quantity: int
    unit_price: Money
    snapshot: ProjectSnapshot
    available_supply: Optional[int] = None

    def __post_init__(self):
        # Line ids follow the catalog id rules
        ProjectId(self.id)
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValueError("Quantity must be an integer")
        if self.available_supply is not None and self.available_supply < 0:
            raise ValueError("Available supply cannot be negative")

    @classmethod
    def from_project(cls, project: Project, quantity: int = 1) -> "CartLineItem":
        return cls(
            id=project.id.value,
            quantity=quantity,
            unit_price=project.price_per_unit,
            snapshot=project.snapshot(),
            available_supply=project.available_credits,
        )

    @property
    def name(self) -> str:
        return self.snapshot.name

    def line_total(self) -> Money:
        return self.unit_price * self.quantity

    def with_quantity(self, quantity: int) -> "CartLineItem":
        return replace(self, quantity=quantity)
