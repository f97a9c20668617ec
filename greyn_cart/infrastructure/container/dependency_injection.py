"""
Dependency Injection Container

Wires repositories and use cases together from the configuration.
"""

import logging
from typing import Any, Dict, Optional

from ...application.use_cases.cart_management_use_case import CartManagementUseCase
from ...application.use_cases.checkout_review_use_case import CheckoutReviewUseCase
from ...application.use_cases.project_catalog_use_case import ProjectCatalogUseCase
from ...domain.entities.cart_entity import DuplicateAddPolicy
from ...domain.repositories.cart_repository import CartRepository
from ...domain.repositories.project_repository import ProjectRepository
from ..configuration.config import Settings, get_config
from ..database.operations import DatabaseManager, get_db_manager
from ..repositories.json_file_cart_repository import JsonFileCartRepository
from ..repositories.sqlalchemy_cart_repository import SQLAlchemyCartRepository
from ..repositories.sqlalchemy_project_repository import SQLAlchemyProjectRepository

logger = logging.getLogger(__name__)


class DependencyContainer:
    """
    Dependency injection container

    Manages the instantiation of:
    - Repositories (Infrastructure layer)
    - Use Cases (Application layer)
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        db_manager: Optional[DatabaseManager] = None,
    ):
        self._instances: Dict[str, Any] = {}
        self._logger = logging.getLogger(self.__class__.__name__)
        self.config = config or get_config()
        self.db_manager = db_manager or (
            DatabaseManager(self.config) if config is not None else get_db_manager()
        )
        self._setup_dependencies()

    def _setup_dependencies(self):
        """Setup all dependencies and their relationships"""
        self._logger.info("Setting up dependency injection container...")
        self._register_repositories()
        self._register_use_cases()
        self._logger.info("Dependency injection container setup complete")

    def _register_repositories(self):
        """Register repository implementations"""
        self._instances["project_repository"] = SQLAlchemyProjectRepository(self.db_manager)

        if self.config.cart_storage_backend == "file":
            self._instances["cart_repository"] = JsonFileCartRepository(
                self.config.cart_storage_dir, currency=self.config.currency
            )
        else:
            self._instances["cart_repository"] = SQLAlchemyCartRepository(
                self.db_manager, currency=self.config.currency
            )

        self._logger.debug(
            "Repositories registered (cart storage: %s)", self.config.cart_storage_backend
        )

    def _register_use_cases(self):
        """Register use case implementations with their dependencies"""
        self._instances["project_catalog_use_case"] = ProjectCatalogUseCase(
            project_repository=self.get_project_repository()
        )

        self._instances["cart_management_use_case"] = CartManagementUseCase(
            cart_repository=self.get_cart_repository(),
            project_repository=self.get_project_repository(),
            duplicate_policy=DuplicateAddPolicy(self.config.duplicate_add_policy),
            currency=self.config.currency,
        )

        self._instances["checkout_review_use_case"] = CheckoutReviewUseCase(
            cart_repository=self.get_cart_repository(),
            project_repository=self.get_project_repository(),
            currency=self.config.currency,
        )

        self._logger.debug("Use cases registered successfully")

    # Repository getters
    def get_project_repository(self) -> ProjectRepository:
        """Get project repository instance"""
        return self._instances["project_repository"]

    def get_cart_repository(self) -> CartRepository:
        """Get cart repository instance"""
        return self._instances["cart_repository"]

    # Use Case getters
    def get_project_catalog_use_case(self) -> ProjectCatalogUseCase:
        """Get project catalog use case instance"""
        return self._instances["project_catalog_use_case"]

    def get_cart_management_use_case(self) -> CartManagementUseCase:
        """Get cart management use case instance"""
        return self._instances["cart_management_use_case"]

    def get_checkout_review_use_case(self) -> CheckoutReviewUseCase:
        """Get checkout review use case instance"""
        return self._instances["checkout_review_use_case"]

    def cleanup(self):
        """Cleanup resources when shutting down"""
        self._logger.info("Cleaning up dependency container...")
        self._instances.clear()


# Global container instance
_container: Optional[DependencyContainer] = None


def get_container() -> DependencyContainer:
    """Get the global dependency container instance"""
    global _container
    if _container is None:
        _container = DependencyContainer()
    return _container


def initialize_container(
    config: Optional[Settings] = None, db_manager: Optional[DatabaseManager] = None
) -> DependencyContainer:
    """Initialize the global dependency container"""
    global _container
    if _container:
        _container.cleanup()
    _container = DependencyContainer(config=config, db_manager=db_manager)
    return _container


def reset_container():
    """Reset the global container (useful for testing)"""
    global _container
    if _container:
        _container.cleanup()
    _container = None
