"""
Database Infrastructure

Contains SQLAlchemy models and the database manager.
"""

from .models import Base
from .models import Cart as CartModel
from .models import Project as ProjectModel
from .operations import DatabaseManager, get_db_manager, init_db, init_default_projects

__all__ = [
    "Base",
    "CartModel",
    "ProjectModel",
    "DatabaseManager",
    "get_db_manager",
    "init_db",
    "init_default_projects",
]
