"""
Domain value objects package

Contains immutable value objects that represent concepts in the business domain.
"""

from .cart_totals import CartTotals, calculate_totals
from .money import Money
from .project_id import ProjectId

__all__ = [
    "CartTotals",
    "Money",
    "ProjectId",
    "calculate_totals",
]
