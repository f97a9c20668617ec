"""
Project Entity - a fundable carbon-credit project in the marketplace catalog
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from greyn_cart.domain.value_objects.money import Money
from greyn_cart.domain.value_objects.project_id import ProjectId


@dataclass(frozen=True)
class ProjectSnapshot:
    """Display fields copied into a cart line at add time"""

    name: str
    ngo_name: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None
    carbon_impact: Optional[str] = None
    impact_type: Optional[str] = None
    funding_goal: Optional[int] = None
    featured: bool = False
    is_verified: bool = False


@dataclass
class Project:
    """Project domain entity"""

    id: ProjectId
    name: str
    price_per_unit: Money
    category: str
    location: Optional[str] = None
    ngo_name: Optional[str] = None
    carbon_impact: Optional[str] = None
    impact_type: Optional[str] = None
    funding_goal: Optional[int] = None
    available_credits: Optional[int] = None
    featured: bool = False
    is_verified: bool = False
    is_active: bool = True
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate the project after initialization"""
        if not self.name or not self.name.strip():
            raise ValueError("Project name cannot be empty")

        if not self.category:
            raise ValueError("Project category cannot be empty")

        if self.available_credits is not None and self.available_credits < 0:
            raise ValueError("Available credits cannot be negative")

    def snapshot(self) -> ProjectSnapshot:
        """Denormalized copy of the display fields"""
        return ProjectSnapshot(
            name=self.name,
            ngo_name=self.ngo_name,
            location=self.location,
            category=self.category,
            carbon_impact=self.carbon_impact,
            impact_type=self.impact_type,
            funding_goal=self.funding_goal,
            featured=self.featured,
            is_verified=self.is_verified,
        )

    def deactivate(self):
        """Withdraw the project from the marketplace"""
        self.is_active = False
        self.updated_at = datetime.now()

    def update_price(self, new_price: Money):
        """Update the price per credit"""
        if new_price.is_zero():
            raise ValueError("Price must be positive")
        self.price_per_unit = new_price
        self.updated_at = datetime.now()

