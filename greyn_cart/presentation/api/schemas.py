"""
HTTP request and response models

Money fields are Decimals, which pydantic renders as strings in JSON.
"""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, StrictInt


class AddItemBody(BaseModel):
    project_id: str = Field(min_length=1, max_length=64)


class UpdateQuantityBody(BaseModel):
    quantity: StrictInt


class CartItemModel(BaseModel):
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


class CartSummaryModel(BaseModel):
    items: List[CartItemModel]
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    total_units: int
    total_credits: int
    currency: str
    version: int


class CartOperationModel(BaseModel):
    cart: CartSummaryModel
    added: Optional[bool] = None


class PortfolioStatsModel(BaseModel):
    total_credits: int
    active_credits: int
    retired_credits: int
    portfolio_value: Decimal
    currency: str


class CheckoutIssueModel(BaseModel):
    project_id: Optional[str] = None
    code: str
    message: str
    cart_price: Optional[Decimal] = None
    catalog_price: Optional[Decimal] = None
    available_credits: Optional[int] = None


class CheckoutReviewModel(BaseModel):
    ready: bool
    cart: CartSummaryModel
    issues: List[CheckoutIssueModel]


class ProjectModel(BaseModel):
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


class ProjectListModel(BaseModel):
    projects: List[ProjectModel]
    countries: List[str]
    categories: List[str]
