"""
SQLAlchemy implementation of ProjectRepository
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from greyn_cart.domain.entities.project_entity import Project
from greyn_cart.domain.repositories.project_repository import ProjectRepository
from greyn_cart.domain.value_objects.money import Money
from greyn_cart.domain.value_objects.project_id import ProjectId
from greyn_cart.infrastructure.database.models import Project as SQLProject
from greyn_cart.infrastructure.database.operations import DatabaseManager, get_db_manager
from greyn_cart.infrastructure.repositories.session_handler import managed_session
from greyn_cart.infrastructure.utilities.exceptions import DatabaseError


class SQLAlchemyProjectRepository(ProjectRepository):
    """SQLAlchemy implementation of project repository"""

    def __init__(self, db_manager: Optional[DatabaseManager] = None):
        self._db_manager = db_manager or get_db_manager()
        self._logger = logging.getLogger(self.__class__.__name__)

    async def find_by_id(self, project_id: ProjectId) -> Optional[Project]:
        """Find project by ID"""
        try:
            with managed_session(self._db_manager) as session:
                sql_project = session.get(SQLProject, project_id.value)
                return self._to_entity(sql_project) if sql_project else None
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to load project {project_id}: {e}", "find_by_id") from e

    async def find_all_active(self) -> List[Project]:
        """Find all active projects in insertion order"""
        try:
            with managed_session(self._db_manager) as session:
                rows = session.execute(
                    select(SQLProject)
                    .where(SQLProject.is_active.is_(True))
                    .order_by(SQLProject.created_at, SQLProject.id)
                ).scalars().all()
                return [self._to_entity(row) for row in rows]
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to list projects: {e}", "find_all_active") from e

    async def save(self, project: Project) -> Project:
        """Insert or update a project"""
        try:
            with managed_session(self._db_manager) as session:
                session.merge(
                    SQLProject(
                        id=project.id.value,
                        name=project.name,
                        ngo_name=project.ngo_name,
                        location=project.location,
                        category=project.category,
                        carbon_impact=project.carbon_impact,
                        impact_type=project.impact_type,
                        price_per_unit=project.price_per_unit.amount,
                        currency=project.price_per_unit.currency,
                        funding_goal=project.funding_goal,
                        available_credits=project.available_credits,
                        featured=project.featured,
                        is_verified=project.is_verified,
                        is_active=project.is_active,
                    )
                )
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to save project {project.id}: {e}", "save") from e

        self._logger.info("PROJECT SAVED: %s", project.id)
        return project

    @staticmethod
    def _to_entity(sql_project: SQLProject) -> Project:
        return Project(
            id=ProjectId(sql_project.id),
            name=sql_project.name,
            ngo_name=sql_project.ngo_name,
            location=sql_project.location,
            category=sql_project.category,
            carbon_impact=sql_project.carbon_impact,
            impact_type=sql_project.impact_type,
            price_per_unit=Money(sql_project.price_per_unit, sql_project.currency),
            funding_goal=sql_project.funding_goal,
            available_credits=sql_project.available_credits,
            featured=sql_project.featured,
            is_verified=sql_project.is_verified,
            is_active=sql_project.is_active,
            created_at=sql_project.created_at,
            updated_at=sql_project.updated_at,
        )
