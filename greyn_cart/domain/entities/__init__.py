"""
Domain entities package

Contains the core business entities of the Greyn Eco marketplace cart.
"""

from .cart_entity import Cart, DuplicateAddPolicy
from .cart_line_item import CartLineItem
from .project_entity import Project, ProjectSnapshot

__all__ = ["Cart", "CartLineItem", "DuplicateAddPolicy", "Project", "ProjectSnapshot"]
