"""
Domain repository interfaces

Contains abstract repository interfaces that define contracts for data access.
These follow the Repository pattern and Dependency Inversion principle.
"""

from .cart_repository import CartRepository, CartSnapshot
from .project_repository import ProjectRepository

__all__ = ["CartRepository", "CartSnapshot", "ProjectRepository"]
