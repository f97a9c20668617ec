"""
Project catalog use case

Handles marketplace browsing and project lookup.
"""

import logging
from typing import Iterable, List, Optional

from greyn_cart.application.dtos.catalog_dtos import (
    ProjectCatalogRequest,
    ProjectCatalogResponse,
    ProjectInfo,
)
from greyn_cart.domain.entities.project_entity import Project
from greyn_cart.domain.repositories.project_repository import ProjectRepository
from greyn_cart.domain.value_objects.project_id import ProjectId
from greyn_cart.infrastructure.utilities.constants import CatalogSettings, ErrorCodes
from greyn_cart.infrastructure.utilities.exceptions import GreynEcoError, ProjectNotFoundError


def _unique_in_order(values: Iterable[Optional[str]]) -> List[str]:
    seen = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
    return seen


class ProjectCatalogUseCase:
    """
    Use case for project catalog operations

    Handles:
    1. Project listing with location, category and price filters
    2. Filter facets for the marketplace
    3. Project details retrieval
    """

    def __init__(self, project_repository: ProjectRepository):
        self._project_repository = project_repository
        self._logger = logging.getLogger(self.__class__.__name__)

    async def list_projects(self, request: ProjectCatalogRequest) -> ProjectCatalogResponse:
        """Active projects matching every given filter, plus the filter facets"""
        if (
            request.min_price is not None
            and request.max_price is not None
            and request.min_price > request.max_price
        ):
            return ProjectCatalogResponse(
                success=False,
                error_code=ErrorCodes.VALIDATION_ERROR,
                error_message="min_price cannot be greater than max_price",
            )

        try:
            projects = await self._project_repository.find_all_active()
        except GreynEcoError as e:
            self._logger.error("Error listing projects: %s", e)
            return ProjectCatalogResponse(
                success=False, error_code=e.error_code, error_message=e.user_message
            )

        matching = [p for p in projects if self._matches(p, request)]
        self._logger.info("Catalog listing: %d of %d projects match", len(matching), len(projects))

        return ProjectCatalogResponse(
            success=True,
            projects=[ProjectInfo.from_entity(p) for p in matching],
            countries=[CatalogSettings.ALL_COUNTRIES]
            + _unique_in_order(p.location for p in projects),
            categories=[CatalogSettings.ALL_CATEGORIES]
            + _unique_in_order(p.category for p in projects),
        )

    async def get_project(self, project_id: str) -> ProjectCatalogResponse:
        """Get one project by id"""
        try:
            project = await self._project_repository.find_by_id(ProjectId(project_id))
            if project is None or not project.is_active:
                raise ProjectNotFoundError(project_id)
            return ProjectCatalogResponse(success=True, project=ProjectInfo.from_entity(project))
        except GreynEcoError as e:
            self._logger.warning("Project lookup failed: %s", e)
            return ProjectCatalogResponse(
                success=False, error_code=e.error_code, error_message=e.user_message
            )
        except ValueError as e:
            return ProjectCatalogResponse(
                success=False, error_code=ErrorCodes.VALIDATION_ERROR, error_message=str(e)
            )

    @staticmethod
    def _matches(project: Project, request: ProjectCatalogRequest) -> bool:
        if request.country not in (None, "", CatalogSettings.ALL_COUNTRIES):
            if project.location != request.country:
                return False
        if request.category not in (None, "", CatalogSettings.ALL_CATEGORIES):
            if project.category != request.category:
                return False

        price = project.price_per_unit.amount
        if request.min_price is not None and price < request.min_price:
            return False
        if request.max_price is not None and price > request.max_price:
            return False
        return True
