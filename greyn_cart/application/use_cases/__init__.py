"""
Use Cases

Contains the business use cases of the application.
Each use case represents a single business operation.
"""

from .cart_management_use_case import CartManagementUseCase
from .checkout_review_use_case import CheckoutReviewUseCase
from .project_catalog_use_case import ProjectCatalogUseCase

__all__ = [
    "CartManagementUseCase",
    "CheckoutReviewUseCase",
    "ProjectCatalogUseCase",
]
