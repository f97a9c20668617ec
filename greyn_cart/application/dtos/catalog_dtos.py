"""
Catalog DTOs

Data Transfer Objects for marketplace browsing.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from greyn_cart.domain.entities.project_entity import Project


@dataclass
class ProjectCatalogRequest:
    """Marketplace filters; None or the "All ..." sentinels mean no filter"""
    country: Optional[str] = None
    category: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None


@dataclass
class ProjectInfo:
    """Project information response"""
    id: str
    name: str
    price_per_unit: Decimal
    currency: str
    category: str
    location: Optional[str] = None
    ngo_name: Optional[str] = None
    carbon_impact: Optional[str] = None
    impact_type: Optional[str] = None
    funding_goal: Optional[int] = None
    available_credits: Optional[int] = None
    featured: bool = False
    is_verified: bool = False

    @classmethod
    def from_entity(cls, project: Project) -> "ProjectInfo":
        return cls(
            id=project.id.value,
            name=project.name,
            price_per_unit=project.price_per_unit.amount,
            currency=project.price_per_unit.currency,
            category=project.category,
            location=project.location,
            ngo_name=project.ngo_name,
            carbon_impact=project.carbon_impact,
            impact_type=project.impact_type,
            funding_goal=project.funding_goal,
            available_credits=project.available_credits,
            featured=project.featured,
            is_verified=project.is_verified,
        )


@dataclass
class ProjectCatalogResponse:
    """Response for catalog operations"""
    success: bool
    projects: List[ProjectInfo] = field(default_factory=list)
    project: Optional[ProjectInfo] = None
    countries: List[str] = field(default_factory=list)
    categories: List[str] = field(default_factory=list)
    error_code: Optional[str] = None
    error_message: Optional[str] = None
