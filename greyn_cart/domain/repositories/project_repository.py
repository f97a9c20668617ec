"""
Project repository interface

Defines the contract for read access to the marketplace catalog.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from greyn_cart.domain.entities.project_entity import Project
from greyn_cart.domain.value_objects.project_id import ProjectId


class ProjectRepository(ABC):
    """Repository interface for catalog projects"""

    @abstractmethod
    async def find_by_id(self, project_id: ProjectId) -> Optional[Project]:
        """Find project by ID"""

    @abstractmethod
    async def find_all_active(self) -> List[Project]:
        """Find all projects currently offered"""

    @abstractmethod
    async def save(self, project: Project) -> Project:
        """Insert or update a project"""
