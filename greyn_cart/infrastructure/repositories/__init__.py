"""
Repository implementations

File and SQLAlchemy backed cart storage plus the SQLAlchemy catalog.
"""

from .json_file_cart_repository import JsonFileCartRepository
from .sqlalchemy_cart_repository import SQLAlchemyCartRepository
from .sqlalchemy_project_repository import SQLAlchemyProjectRepository

__all__ = [
    "JsonFileCartRepository",
    "SQLAlchemyCartRepository",
    "SQLAlchemyProjectRepository",
]
